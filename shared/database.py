"""
SQLite Database Manager for the station.
Holds staff users and voice-note submissions keyed by filename.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, List, Optional

from shared.errors import PersistenceError, ValidationError
from shared.models import Submission, SubmissionStatus, User, utc_now_iso

logger = logging.getLogger(__name__)

NEEDS_REVIEWING = SubmissionStatus.NEEDS_REVIEWING.value


class DatabaseManager:
    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self):
        conn = sqlite3.connect(self.db_path)
        # Enable WAL mode for high concurrency
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self, action: str):
        """Run a block in one transaction; sqlite errors become PersistenceError."""
        conn = None
        try:
            conn = self._get_connection()
            with conn:
                yield conn
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            logger.exception("DB error while trying to %s", action)
            raise PersistenceError(f"Failed to {action}.") from e
        finally:
            if conn is not None:
                conn.close()

    def _init_db(self):
        """Initialize the database schema."""
        with self._transaction("initialise schema") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY,
                    email TEXT UNIQUE,
                    password TEXT
                )
            """)
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS submissions (
                    id INTEGER PRIMARY KEY,
                    filename TEXT UNIQUE,
                    status TEXT DEFAULT '{NEEDS_REVIEWING}',
                    approved_by TEXT,
                    assignee_email TEXT,
                    submitted_at TEXT,
                    sent_at TEXT
                )
            """)

            # Schema Migrations (Ensure columns exist)
            cursor = conn.execute("PRAGMA table_info(submissions)")
            columns = [row[1] for row in cursor.fetchall()]
            if 'assignee_email' not in columns:
                conn.execute("ALTER TABLE submissions ADD COLUMN assignee_email TEXT")
            if 'sent_at' not in columns:
                conn.execute("ALTER TABLE submissions ADD COLUMN sent_at TEXT")

    # --- Users ---

    def create_user(self, email: str, password_hash: str) -> User:
        """Insert a staff user. Raises ValidationError if the email is taken."""
        try:
            with self._transaction("register user") as conn:
                cursor = conn.execute(
                    "INSERT INTO users (email, password) VALUES (?, ?)",
                    (email, password_hash),
                )
                return User(id=cursor.lastrowid, email=email, password_hash=password_hash)
        except sqlite3.IntegrityError as e:
            raise ValidationError("This email is already registered.") from e

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._transaction("look up user") as conn:
            row = conn.execute(
                "SELECT id, email, password FROM users WHERE email = ?", (email,)
            ).fetchone()
            if row is None:
                return None
            return User(id=row["id"], email=row["email"], password_hash=row["password"])

    def list_users(self) -> List[User]:
        with self._transaction("retrieve users") as conn:
            rows = conn.execute("SELECT id, email, password FROM users ORDER BY id").fetchall()
            return [User(id=r["id"], email=r["email"], password_hash=r["password"]) for r in rows]

    # --- Submissions ---

    def insert_submission(self, filename: str, submitted_at: Optional[str] = None) -> Submission:
        """Record a freshly encoded upload as Needs Reviewing."""
        submitted_at = submitted_at or utc_now_iso()
        try:
            with self._transaction("save submission") as conn:
                cursor = conn.execute(
                    "INSERT INTO submissions (filename, status, submitted_at) VALUES (?, ?, ?)",
                    (filename, NEEDS_REVIEWING, submitted_at),
                )
                row_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            logger.error("Submission %s already exists", filename)
            raise PersistenceError("Failed to save submission.") from e
        return Submission(filename=filename, status=NEEDS_REVIEWING,
                          submitted_at=submitted_at, id=row_id)

    def get_submission(self, filename: str) -> Optional[Submission]:
        with self._transaction("retrieve submission") as conn:
            row = conn.execute(
                "SELECT * FROM submissions WHERE filename = ?", (filename,)
            ).fetchone()
            return self._row_to_submission(row) if row else None

    def list_submissions(self, assignee: Optional[str] = None) -> List[Submission]:
        """
        List submissions newest first.

        With an assignee, returns that assignee's Needs Reviewing rows followed
        by every row that is not Needs Reviewing (whoever it is assigned to).
        """
        with self._transaction("retrieve submissions") as conn:
            if not assignee:
                rows = conn.execute(
                    "SELECT * FROM submissions ORDER BY submitted_at DESC"
                ).fetchall()
                return [self._row_to_submission(r) for r in rows]

            assigned = conn.execute(
                "SELECT * FROM submissions WHERE assignee_email = ? AND status = ? "
                "ORDER BY submitted_at DESC",
                (assignee, NEEDS_REVIEWING),
            ).fetchall()
            others = conn.execute(
                "SELECT * FROM submissions WHERE status != ? ORDER BY submitted_at DESC",
                (NEEDS_REVIEWING,),
            ).fetchall()
            return [self._row_to_submission(r) for r in [*assigned, *others]]

    def update_status(self, filename: str, status: SubmissionStatus,
                      approved_by: Optional[str]) -> int:
        """Set status and approver. Returns the number of rows touched."""
        with self._transaction("update status") as conn:
            cursor = conn.execute(
                "UPDATE submissions SET status = ?, approved_by = ? WHERE filename = ?",
                (status.value, approved_by, filename),
            )
            return cursor.rowcount

    def assign(self, filenames: List[str], assignee_email: str) -> int:
        if not filenames:
            raise ValidationError("Filenames and assignee are required.")
        placeholders = ','.join(['?'] * len(filenames))
        with self._transaction("assign submissions") as conn:
            cursor = conn.execute(
                f"UPDATE submissions SET assignee_email = ? WHERE filename IN ({placeholders})",
                [assignee_email, *filenames],
            )
            return cursor.rowcount

    def mark_downloaded(self, filenames: Iterable[str], sent_at: Optional[str] = None) -> int:
        filenames = list(filenames)
        if not filenames:
            return 0
        sent_at = sent_at or utc_now_iso()
        placeholders = ','.join(['?'] * len(filenames))
        with self._transaction("mark submissions downloaded") as conn:
            cursor = conn.execute(
                f"UPDATE submissions SET status = ?, sent_at = ? WHERE filename IN ({placeholders})",
                [SubmissionStatus.DOWNLOADED.value, sent_at, *filenames],
            )
            return cursor.rowcount

    def delete_submission(self, filename: str) -> bool:
        """Delete the row. Returns False if there was nothing to delete."""
        with self._transaction("delete submission record") as conn:
            cursor = conn.execute("DELETE FROM submissions WHERE filename = ?", (filename,))
            return cursor.rowcount > 0

    def _row_to_submission(self, row: sqlite3.Row) -> Submission:
        return Submission.from_dict(dict(row))
