from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Depends

from app.core.config import Settings, get_settings


class TranscriptionError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class TranscriptionJob:
    id: str
    result_url: str


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.text or f"HTTP {resp.status_code}"


class GladiaClient:
    """Thin request/response client for the Gladia pre-recorded API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.gladia.io",
        language: str = "en",
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            headers={"x-gladia-key": self.api_key}, transport=self.transport
        )

    def _send(self, method: str, url: str, **kwargs) -> Any:
        try:
            with self._client() as client:
                resp = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TranscriptionError(str(e)) from e

        if resp.status_code >= 400:
            raise TranscriptionError(_error_message(resp), status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise TranscriptionError(
                "Provider returned a non-JSON response", status_code=resp.status_code
            ) from e

    def submit(self, audio_url: str) -> TranscriptionJob:
        data = self._send(
            "POST",
            f"{self.base_url}/v2/pre-recorded",
            json={"language": self.language, "audio_url": audio_url},
        )
        if not isinstance(data, dict) or not data.get("id") or not data.get("result_url"):
            raise TranscriptionError("Provider response is missing the job handle")
        return TranscriptionJob(id=str(data["id"]), result_url=str(data["result_url"]))

    def fetch_result(self, result_url: str) -> Any:
        return self._send("GET", result_url)


def get_transcription_client(settings: Settings = Depends(get_settings)) -> GladiaClient:
    return GladiaClient(
        api_key=settings.GLADIA_API_KEY,
        base_url=settings.GLADIA_BASE_URL,
        language=settings.TRANSCRIPTION_LANGUAGE,
    )
