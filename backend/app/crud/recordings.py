from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload, defer

from app.db.models import Recording


def get_owned_recording(
    db: Session, recording_id: str, user_id: str
) -> Optional[Recording]:
    """Look up a recording by id *and* owner.

    A recording owned by someone else is indistinguishable from a missing one.
    """
    stmt = (
        select(Recording)
        .options(joinedload(Recording.user))
        .where(Recording.id == recording_id, Recording.user_id == user_id)
    )
    return db.execute(stmt).scalars().first()


def get_recording_by_name(db: Session, name: str, user_id: str) -> Optional[Recording]:
    stmt = select(Recording).where(Recording.name == name, Recording.user_id == user_id)
    return db.execute(stmt).scalars().first()


def create_recording(db: Session, name: str, file_path: str, user_id: str) -> Recording:
    recording = Recording(name=name, file_path=file_path, user_id=user_id)
    db.add(recording)
    db.commit()
    db.refresh(recording)
    return recording


def count_recordings(db: Session, user_id: str) -> int:
    stmt = select(func.count()).select_from(Recording).where(Recording.user_id == user_id)
    return db.execute(stmt).scalar_one()


def list_recordings(db: Session, user_id: str, skip: int, limit: int) -> list[Recording]:
    """Newest first, id as tie-break; the transcription payload is not loaded."""
    stmt = (
        select(Recording)
        .options(joinedload(Recording.user), defer(Recording.transcription_result))
        .where(Recording.user_id == user_id)
        .order_by(Recording.created_at.desc(), Recording.id.asc())
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def delete_recording(db: Session, recording: Recording) -> None:
    db.delete(recording)
    db.commit()
