from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_current_user, parse_recording_id
from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.crud.recordings import get_owned_recording
from app.db.base import get_db
from app.schemas.recording import Recording, TranscriptionResponse
from app.services.transcription import (
    GladiaClient,
    TranscriptionError,
    get_transcription_client,
)
from app.services.uploads import public_file_url

router = APIRouter(prefix="/api/recording", tags=["transcription"])
logger = get_logger(__name__)


@router.post("/createTranscription/{recording_id}", response_model=TranscriptionResponse)
def create_transcription(
    request: Request,
    auth: AuthContext = Depends(get_current_user),
    recording_id: str = Depends(parse_recording_id),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    client: GladiaClient = Depends(get_transcription_client),
) -> TranscriptionResponse:
    """Submit the recording's public URL to the provider and keep the job handle."""
    recording = get_owned_recording(db, recording_id, auth.user_id)
    if recording is None:
        raise HTTPException(status_code=404, detail="Recording not found")

    audio_url = public_file_url(str(request.base_url), recording.file_path, settings)
    try:
        job = client.submit(audio_url)
    except TranscriptionError as e:
        logger.error(f"Transcription submit failed for {recording.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating transcription: {e}")

    recording.job_id = job.id
    recording.result_url = job.result_url
    db.commit()
    db.refresh(recording)

    logger.info(f"Submitted recording {recording.id} as job {job.id}")
    return TranscriptionResponse(
        message="Transcription request sent to provider",
        data=Recording.model_validate(recording),
    )


@router.get(
    "/getTranscriptionResult/{recording_id}", response_model=TranscriptionResponse
)
def get_transcription_result(
    auth: AuthContext = Depends(get_current_user),
    recording_id: str = Depends(parse_recording_id),
    db: Session = Depends(get_db),
    client: GladiaClient = Depends(get_transcription_client),
) -> TranscriptionResponse:
    """Fetch whatever the provider currently returns and store it verbatim.

    Each call overwrites the previously stored payload.
    """
    recording = get_owned_recording(db, recording_id, auth.user_id)
    if recording is None:
        raise HTTPException(status_code=404, detail="Recording not found")

    if not recording.job_id or not recording.result_url:
        raise HTTPException(
            status_code=400, detail="No transcription has been requested yet."
        )

    try:
        result = client.fetch_result(recording.result_url)
    except TranscriptionError as e:
        logger.error(f"Transcription fetch failed for {recording.id}: {e}")
        raise HTTPException(
            status_code=500, detail=f"Error retrieving transcription result: {e}"
        )

    recording.transcription_result = result
    db.commit()
    db.refresh(recording)

    return TranscriptionResponse(
        message="Transcription result retrieved",
        data=Recording.model_validate(recording),
    )
