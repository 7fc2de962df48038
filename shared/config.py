import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from shared.constants import (
    DATABASE_FILENAME,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_MP3_BITRATE,
    DEFAULT_PORT,
    SESSIONS_DIRNAME,
    UPLOADS_DIRNAME,
)

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECRET = "a-very-strong-secret-key"
DEFAULT_MAX_UPLOAD_MB = 50


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once from the environment at startup."""
    data_dir: Path
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    session_secret: str = DEFAULT_SESSION_SECRET
    gemini_api_key: Optional[str] = None
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    mp3_bitrate: int = DEFAULT_MP3_BITRATE
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB
    log_level: str = "INFO"

    @property
    def upload_dir(self) -> Path:
        return self.data_dir / UPLOADS_DIRNAME

    @property
    def sessions_dir(self) -> Path:
        return self.data_dir / SESSIONS_DIRNAME

    @property
    def database_path(self) -> Path:
        return self.data_dir / DATABASE_FILENAME

    def ensure_directories(self) -> None:
        for path in (self.data_dir, self.upload_dir, self.sessions_dir):
            path.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'Settings':
        """Load `.env` (if present) and build settings from the environment."""
        load_dotenv(env_file)

        # Render mounts its persistent disk here
        data_root = os.getenv("RENDER_DISK_PATH") or os.getenv("DATA_DIR") or os.getcwd()

        secret = os.getenv("SESSION_SECRET") or DEFAULT_SESSION_SECRET
        if secret == DEFAULT_SESSION_SECRET:
            logger.warning("SESSION_SECRET is not set; using the built-in development secret.")

        return cls(
            data_dir=Path(data_root).expanduser().resolve(),
            port=int(os.getenv("PORT", DEFAULT_PORT)),
            host=os.getenv("HOST", "0.0.0.0"),
            session_secret=secret,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
            mp3_bitrate=int(os.getenv("MP3_BITRATE", DEFAULT_MP3_BITRATE)),
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
