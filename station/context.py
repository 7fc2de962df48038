"""
Process-wide collaborators for the station, built once at startup and handed
explicitly to every blueprint.
"""
from dataclasses import dataclass, field

import requests

from shared.config import Settings
from shared.crypto import PasswordHasher
from shared.database import DatabaseManager
from shared.events import Broadcaster
from shared.sessions import SessionStore
from station.audio import Mp3Encoder


@dataclass
class StationContext:
    settings: Settings
    db: DatabaseManager
    sessions: SessionStore
    broadcaster: Broadcaster
    encoder: Mp3Encoder
    passwords: PasswordHasher = field(default_factory=PasswordHasher)
    http: requests.Session = field(default_factory=requests.Session)


def build_context(settings: Settings) -> StationContext:
    """Create directories and open the stores described by `settings`."""
    settings.ensure_directories()
    return StationContext(
        settings=settings,
        db=DatabaseManager(str(settings.database_path)),
        sessions=SessionStore(settings.sessions_dir),
        broadcaster=Broadcaster(),
        encoder=Mp3Encoder(bitrate=settings.mp3_bitrate),
    )
