"""Persistence collaborators that receive scraped records.

The batch runner only knows the ``RecordSink`` protocol. The HTTP sink
posts every record to the tracker API's ingest endpoint.
"""

from typing import List, Optional, Protocol

import httpx
import structlog

from pricetracker.config import settings
from pricetracker.core.exceptions import RecordSinkError
from pricetracker.schemas.source import ScrapedRecord

logger = structlog.get_logger(__name__)

INGEST_ENDPOINT = "/api/data"


class RecordSink(Protocol):
    async def save(self, record: ScrapedRecord) -> None:
        ...


class MemoryRecordSink:
    """Keeps records in a list. Used for dry runs."""

    def __init__(self):
        self.records: List[ScrapedRecord] = []

    async def save(self, record: ScrapedRecord) -> None:
        self.records.append(record)


class HttpRecordSink:
    """POST scraped records to the backend ingest endpoint.

    Args:
        base_url: Backend base URL (e.g. "http://localhost:3000")
        api_key: Sent as the ``X-API-Key`` header when set
        client: Optional shared httpx AsyncClient; one is created otherwise
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.url = base_url.rstrip("/") + INGEST_ENDPOINT
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["X-API-Key"] = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger.bind(sink="http", url=self.url)

    @classmethod
    def from_settings(cls) -> Optional["HttpRecordSink"]:
        """Sink configured from INGEST_URL, or None when posting is disabled."""
        if not settings.INGEST_URL:
            return None
        return cls(settings.INGEST_URL, settings.INGEST_API_KEY)

    async def save(self, record: ScrapedRecord) -> None:
        """Send one record.

        Raises:
            RecordSinkError: The backend rejected the record or was unreachable
        """
        payload = record.model_dump(mode="json")
        try:
            response = await self._client.post(self.url, json=payload, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:300]
            self.logger.error(
                "record_rejected",
                source_id=record.source_id,
                status_code=e.response.status_code,
            )
            raise RecordSinkError(f"HTTP {e.response.status_code}: {body}") from e
        except httpx.HTTPError as e:
            self.logger.error("record_post_failed", source_id=record.source_id, error=str(e))
            raise RecordSinkError(str(e)) from e

        self.logger.debug("record_saved", source_id=record.source_id)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpRecordSink":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
