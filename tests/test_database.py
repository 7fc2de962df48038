import sqlite3

import pytest

from shared.database import DatabaseManager
from shared.errors import PersistenceError, ValidationError
from shared.models import SubmissionStatus


@pytest.fixture
def db(tmp_path):
    return DatabaseManager(str(tmp_path / "database.sqlite"))


def test_users_are_unique_by_email(db):
    user = db.create_user("a@example.com", "hash")
    assert user.id is not None
    with pytest.raises(ValidationError):
        db.create_user("a@example.com", "other")

    found = db.get_user_by_email("a@example.com")
    assert found.password_hash == "hash"
    assert db.get_user_by_email("nobody@example.com") is None
    assert [u.to_public_dict() for u in db.list_users()] == [{"id": user.id, "email": "a@example.com"}]


def test_new_submission_needs_reviewing(db):
    sub = db.insert_submission("sam-local.mp3")
    stored = db.get_submission("sam-local.mp3")
    assert stored.status == SubmissionStatus.NEEDS_REVIEWING.value
    assert stored.submitted_at == sub.submitted_at
    assert stored.approved_by is None
    assert stored.assignee_email is None


def test_duplicate_filename_is_a_persistence_error(db):
    db.insert_submission("x.mp3")
    with pytest.raises(PersistenceError):
        db.insert_submission("x.mp3")


def test_list_is_newest_first(db):
    db.insert_submission("old.mp3", submitted_at="2024-01-01T00:00:00.000Z")
    db.insert_submission("new.mp3", submitted_at="2024-02-01T00:00:00.000Z")
    assert [s.filename for s in db.list_submissions()] == ["new.mp3", "old.mp3"]


def test_assignee_filter_includes_every_reviewed_row(db):
    db.insert_submission("mine.mp3", submitted_at="2024-01-01T00:00:00.000Z")
    db.insert_submission("theirs.mp3", submitted_at="2024-01-02T00:00:00.000Z")
    db.insert_submission("done.mp3", submitted_at="2024-01-03T00:00:00.000Z")
    db.assign(["mine.mp3"], "alice@example.com")
    db.assign(["theirs.mp3", "done.mp3"], "bob@example.com")
    db.update_status("done.mp3", SubmissionStatus.APPROVED, "bob@example.com")

    listed = [s.filename for s in db.list_submissions(assignee="alice@example.com")]
    # Alice's pending rows first, then anything already reviewed, whoever owns it
    assert listed == ["mine.mp3", "done.mp3"]


def test_update_status_sets_and_clears_approver(db):
    db.insert_submission("x.mp3")
    assert db.update_status("x.mp3", SubmissionStatus.APPROVED, "a@example.com") == 1
    assert db.get_submission("x.mp3").approved_by == "a@example.com"

    db.update_status("x.mp3", SubmissionStatus.REJECTED, None)
    stored = db.get_submission("x.mp3")
    assert stored.status == "Rejected"
    assert stored.approved_by is None


def test_update_status_of_unknown_file_touches_nothing(db):
    assert db.update_status("ghost.mp3", SubmissionStatus.APPROVED, "a@example.com") == 0


def test_assign_requires_filenames(db):
    with pytest.raises(ValidationError):
        db.assign([], "a@example.com")


def test_mark_downloaded_sets_status_and_sent_at(db):
    db.insert_submission("a.mp3")
    db.insert_submission("b.mp3")
    assert db.mark_downloaded(["a.mp3", "b.mp3", "ghost.mp3"], sent_at="2024-03-01T00:00:00.000Z") == 2
    for name in ("a.mp3", "b.mp3"):
        stored = db.get_submission(name)
        assert stored.status == "Downloaded"
        assert stored.sent_at == "2024-03-01T00:00:00.000Z"
    assert db.mark_downloaded([]) == 0


def test_delete_submission(db):
    db.insert_submission("x.mp3")
    assert db.delete_submission("x.mp3") is True
    assert db.delete_submission("x.mp3") is False
    assert db.get_submission("x.mp3") is None


def test_missing_columns_are_added_to_an_old_schema(tmp_path):
    path = tmp_path / "old.sqlite"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE submissions (id INTEGER PRIMARY KEY, filename TEXT UNIQUE, "
                 "status TEXT, approved_by TEXT, submitted_at TEXT)")
    conn.commit()
    conn.close()

    db = DatabaseManager(str(path))
    db.insert_submission("x.mp3")
    db.assign(["x.mp3"], "a@example.com")
    db.mark_downloaded(["x.mp3"])
    stored = db.get_submission("x.mp3")
    assert stored.assignee_email == "a@example.com"
    assert stored.sent_at is not None


def _seed_for_alice(db):
    rows = [
        ("pending-old.mp3", "2024-01-01T00:00:00.000Z", "alice@example.com", None),
        ("approved-old.mp3", "2024-01-02T00:00:00.000Z", "bob@example.com", SubmissionStatus.APPROVED),
        ("pending-new.mp3", "2024-01-03T00:00:00.000Z", "alice@example.com", None),
        ("bobs-pending.mp3", "2024-01-04T00:00:00.000Z", "bob@example.com", None),
        ("rejected-new.mp3", "2024-01-05T00:00:00.000Z", None, SubmissionStatus.REJECTED),
    ]
    for name, submitted_at, assignee, status in rows:
        db.insert_submission(name, submitted_at=submitted_at)
        if assignee:
            db.assign([name], assignee)
        if status:
            db.update_status(name, status, None)


def test_assignee_listing_keeps_each_group_newest_first(db):
    _seed_for_alice(db)
    listed = [s.filename for s in db.list_submissions(assignee="alice@example.com")]
    assert listed == ["pending-new.mp3", "pending-old.mp3", "rejected-new.mp3", "approved-old.mp3"]
