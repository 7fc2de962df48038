"""
Data models for submissions, staff users and sessions.

This module defines the records stored by the station and the shapes
returned to dashboard clients.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any
from enum import Enum
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string (sorts lexically by time)."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class SubmissionStatus(Enum):
    """Review states a submission moves through."""
    NEEDS_REVIEWING = "Needs Reviewing"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    DOWNLOADED = "Downloaded"

    @classmethod
    def parse(cls, value: Any) -> Optional['SubmissionStatus']:
        """Return the status for a stored/wire value, or None if unknown."""
        for status in cls:
            if status.value == value:
                return status
        return None


@dataclass
class Submission:
    """
    One uploaded, encoded voice note.

    Attributes:
        filename: Unique name of the MP3 in the uploads directory
        status: Stored status text (see SubmissionStatus)
        submitted_at: ISO timestamp of the successful upload
        approved_by: Email of the approving staff member (only when Approved)
        assignee_email: Staff member the item is assigned to (free text)
        sent_at: ISO timestamp of the bulk download that exported it
        id: sqlite rowid, informational only
    """
    filename: str
    status: str
    submitted_at: str
    approved_by: Optional[str] = None
    assignee_email: Optional[str] = None
    sent_at: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert submission to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Submission':
        """Create Submission from dictionary, filtering unknown keys."""
        import dataclasses
        field_names = {f.name for f in dataclasses.fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in field_names}
        return cls(**filtered_data)


@dataclass
class User:
    """A staff account. The password hash never leaves the store layer."""
    id: int
    email: str
    password_hash: str

    def to_public_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}


@dataclass
class SessionData:
    """Server-side session record keyed by an opaque token."""
    token: str
    user_id: int
    user_email: str
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionData':
        return cls(
            token=str(data["token"]),
            user_id=int(data["user_id"]),
            user_email=str(data["user_email"]),
            created_at=float(data["created_at"]),
            expires_at=float(data["expires_at"]),
        )
