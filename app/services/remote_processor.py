"""
Remote Processor - Lawyer Performance Scoring
app/services/remote_processor.py

Client for the remote preprocessing endpoint. The endpoint accepts the raw
CSV as multipart field `file` and answers with a JSON list of LawyerRecords,
or a JSON object {"error": "..."} on failure.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.exceptions import RemoteProcessingError
from app.models.lawyer import LawyerRecord

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(List[LawyerRecord])


class RemoteProcessor:
    """Posts an upload to the preprocessing endpoint and validates the reply."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def process(self, content: bytes, filename: str = "upload.csv") -> List[LawyerRecord]:
        """
        Raises:
            RemoteProcessingError: transport failure, non-2xx reply, or a body
                that is not a non-empty list of valid records.
        """
        files = {"file": (filename, content, "text/csv")}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, files=files)
        except httpx.HTTPError as e:
            raise RemoteProcessingError(f"Request to preprocessing endpoint failed: {e}") from e

        logger.debug(f"Preprocessing response status: {response.status_code}")

        if response.status_code != 200:
            raise RemoteProcessingError(
                f"Preprocessing endpoint returned {response.status_code}: {self._error_text(response)}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteProcessingError("Preprocessing endpoint returned invalid JSON") from e

        if isinstance(payload, dict) and payload.get("error"):
            raise RemoteProcessingError(str(payload["error"]))

        try:
            records = _RECORDS.validate_python(payload)
        except ValidationError as e:
            raise RemoteProcessingError(
                f"Preprocessing endpoint returned {e.error_count()} invalid record fields"
            ) from e

        if not records:
            raise RemoteProcessingError("Preprocessing endpoint returned no records")
        return records

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.text[:200]
