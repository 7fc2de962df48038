"""
Constants for the station service.
"""

# Storage layout (relative to the data root)
UPLOADS_DIRNAME = "uploads"
SESSIONS_DIRNAME = "sessions"
DATABASE_FILENAME = "database.sqlite"
TEMP_UPLOAD_PREFIX = "temp-"

# Audio
OUTPUT_EXTENSION = ".mp3"
DEFAULT_MP3_BITRATE = 192  # kbps
MP3_MIME_TYPE = "audio/mpeg"

# Filenames
DEFAULT_FIRST_NAME = "user"
DEFAULT_POSTCODE = "local"

# Sessions
SESSION_COOKIE_NAME = "voicenote_project.sid"
SESSION_TTL_SEC = 24 * 3600
SESSION_TOKEN_KEY = "sid"

# Password hashing
PBKDF2_ITERATIONS = 260000
PBKDF2_SALT_BYTES = 16
PASSWORD_HASH_SCHEME = "pbkdf2_sha256"

# Live updates
SUBMISSIONS_UPDATED_EVENT = "submissions_updated"

# Archive export
ARCHIVE_FILENAME = "approved-voicenotes.zip"
ARCHIVE_CHUNK_SIZE = 64 * 1024

# Network Settings
DEFAULT_NETWORK_TIMEOUT = 30  # seconds
DEFAULT_PORT = 3000
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:5500",
    "http://localhost:5500",
]

# Topic suggestion
GEMINI_ENDPOINT_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash:generateContent?key={api_key}"
)
TOPIC_PROMPT = (
    "Please suggest a short, interesting, and open-ended topic for a one-minute "
    "voice message. Reply with the topic only."
)
