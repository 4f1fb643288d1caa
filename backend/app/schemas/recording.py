from pydantic import Field
from typing import Optional, Any, List
from datetime import datetime

from .common import CamelModel


class RecordingOwner(CamelModel):
    id: str
    full_name: str
    email: str


class RecordingSummary(CamelModel):
    id: str
    name: str
    file_path: str
    created_at: datetime
    job_id: Optional[str] = None
    result_url: Optional[str] = None
    user: RecordingOwner


class Recording(RecordingSummary):
    transcription_result: Optional[Any] = None


class RecordingCreated(CamelModel):
    message: str
    recording: Recording


class RecordingData(CamelModel):
    data: Recording


class TranscriptionResponse(CamelModel):
    message: str
    data: Recording


class RecordingPage(CamelModel):
    page: int
    pages: int
    next: Optional[str] = None
    prev: Optional[str] = None
    limit: int
    total_items: int
    data: List[RecordingSummary] = Field(default_factory=list)
