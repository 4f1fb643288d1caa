from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.constants import APP_DIR

DATA_DIR = APP_DIR / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = f"sqlite:///{DATA_DIR.as_posix()}/sql_app.db"

    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    GLADIA_API_KEY: str = ""
    GLADIA_BASE_URL: str = "https://api.gladia.io"
    TRANSCRIPTION_LANGUAGE: str = "en"

    UPLOAD_ROOT: Path = Path("/tmp/uploads")
    PUBLIC_UPLOAD_PREFIX: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 500 * 1024 * 1024

    FRONTEND_URL: str = "http://localhost:3000"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    @property
    def recordings_dir(self) -> Path:
        return self.UPLOAD_ROOT / "recordings"


@lru_cache
def get_settings() -> Settings:
    return Settings()
