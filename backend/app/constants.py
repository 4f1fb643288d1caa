from pathlib import Path

APP_DIR = Path(__file__).resolve().parent

ALLOWED_MEDIA_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/wav",
        "audio/x-wav",
        "audio/wave",
        "audio/vnd.wave",
        "video/mp4",
        "video/webm",
    }
)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
MIN_PASSWORD_LENGTH = 6

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 5
