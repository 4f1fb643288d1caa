import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    pseudo = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    recordings = relationship("Recording", back_populates="user")


class Recording(Base):
    __tablename__ = "recordings"
    __table_args__ = (UniqueConstraint("name", "user_id", name="uq_recording_name_owner"),)

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    user_id = Column(String(32), ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, index=True)
    # Provider job handle, set together on submit
    job_id = Column(String, nullable=True)
    result_url = Column(String, nullable=True)
    transcription_result = Column(JSON, nullable=True)

    user = relationship("User", back_populates="recordings")
