import math
from pathlib import Path

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_current_user, parse_recording_id
from app.constants import DEFAULT_LIMIT, DEFAULT_PAGE
from app.core.logger import get_logger
from app.crud import recordings as crud
from app.db.base import get_db
from app.schemas.common import Message
from app.schemas.recording import (
    Recording,
    RecordingCreated,
    RecordingData,
    RecordingPage,
    RecordingSummary,
)
from app.services.uploads import discard_file, normalize_path, store_upload

router = APIRouter(prefix="/api/recording", tags=["recording"])
logger = get_logger(__name__)


@router.post("/createRecording", response_model=RecordingCreated, status_code=201)
def create_recording(
    auth: AuthContext = Depends(get_current_user),
    stored_path: Path = Depends(store_upload),
    name: str | None = Form(None),
    db: Session = Depends(get_db),
) -> RecordingCreated:
    """Register an uploaded file as a recording of the caller.

    The file is already on disk at this point; it is removed again if the
    recording cannot be created.
    """
    file_path = normalize_path(stored_path)

    if not name or not name.strip():
        discard_file(file_path)
        raise HTTPException(status_code=400, detail="Recording name is required")

    if crud.get_recording_by_name(db, name, auth.user_id):
        discard_file(file_path)
        raise HTTPException(
            status_code=400, detail="Recording with this name already exists"
        )

    try:
        recording = crud.create_recording(db, name=name, file_path=file_path, user_id=auth.user_id)
    except IntegrityError:
        # Lost a race against a concurrent upload with the same name
        db.rollback()
        discard_file(file_path)
        raise HTTPException(
            status_code=400, detail="Recording with this name already exists"
        )

    logger.info(f"Created recording {recording.id} for user {auth.user_id}")
    return RecordingCreated(
        message="Recording saved successfully",
        recording=Recording.model_validate(recording),
    )


@router.get("/getAll", response_model=RecordingPage)
def get_all_recordings(
    request: Request,
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_LIMIT),
    auth: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RecordingPage:
    """Get one page of the caller's recordings, newest first.

    Args:
        page (int, optional): 1-based page number. Defaults to 1.
        limit (int, optional): Page size. Defaults to 5.
    Returns:
        RecordingPage: Page metadata, navigation links and the records.
    """
    if page < 1 or limit < 1:
        raise HTTPException(
            status_code=400, detail="Page and limit must be positive integers"
        )

    total_items = crud.count_recordings(db, auth.user_id)
    recordings = crud.list_recordings(
        db, auth.user_id, skip=(page - 1) * limit, limit=limit
    )

    pages = math.ceil(total_items / limit)
    base_url = str(request.url.replace(query=""))
    next_url = f"{base_url}?page={page + 1}&limit={limit}" if page < pages else None
    prev_url = f"{base_url}?page={page - 1}&limit={limit}" if page > 1 else None

    return RecordingPage(
        page=page,
        pages=pages,
        next=next_url,
        prev=prev_url,
        limit=limit,
        total_items=total_items,
        data=[RecordingSummary.model_validate(r) for r in recordings],
    )


@router.get("/getById/{recording_id}", response_model=RecordingData)
def get_recording_by_id(
    auth: AuthContext = Depends(get_current_user),
    recording_id: str = Depends(parse_recording_id),
    db: Session = Depends(get_db),
) -> RecordingData:
    recording = crud.get_owned_recording(db, recording_id, auth.user_id)
    if recording is None:
        raise HTTPException(status_code=404, detail="Recording not found")
    return RecordingData(data=Recording.model_validate(recording))


@router.delete("/deleteById/{recording_id}", response_model=Message, status_code=201)
def delete_recording_by_id(
    auth: AuthContext = Depends(get_current_user),
    recording_id: str = Depends(parse_recording_id),
    db: Session = Depends(get_db),
) -> Message:
    recording = crud.get_owned_recording(db, recording_id, auth.user_id)
    if recording is None:
        raise HTTPException(status_code=404, detail="Recording not found")

    file_path = recording.file_path
    crud.delete_recording(db, recording)
    # The record is gone either way; a leftover file is only logged
    discard_file(file_path)

    logger.info(f"Deleted recording {recording_id} for user {auth.user_id}")
    return Message(message="Recording deleted successfully")
