"""Sequential batch execution over a list of sources.

The BatchRunner is the failure boundary of the scraping core: whatever
goes wrong with one source is recorded as that source's outcome and the
loop moves on. Progress is reported through a ProgressChannel as

    started -> (progress -> success|error) * N -> completed
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from pricetracker.core.exceptions import (
    BatchAlreadyRunningError,
    ExtractionError,
    NavigationError,
    RecordSinkError,
    TransientAutomationError,
    UnknownSourceType,
)
from pricetracker.schemas.progress import (
    CompletedEvent,
    ErrorEvent,
    ProgressUpdateEvent,
    StartedEvent,
    SuccessEvent,
)
from pricetracker.schemas.source import ScrapedRecord, Source
from pricetracker.scrapers.driver import SiteDriver
from pricetracker.scrapers.persistence import RecordSink
from pricetracker.scrapers.progress import ProgressChannel
from pricetracker.scrapers.registry import ScraperRegistry

logger = structlog.get_logger(__name__)

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_SKIPPED = "skipped"


@dataclass
class BatchItemResult:
    """Outcome of one source in a batch."""

    source: Source
    status: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    record: Optional[ScrapedRecord] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceId": self.source.id,
            "source": self.source.label,
            "status": self.status,
            "data": self.data,
            "error": self.error,
        }


@dataclass
class CancellationToken:
    """Cooperative stop signal checked between sources."""

    _cancelled: bool = field(default=False, init=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class BatchRunner:
    """Scrape sources one at a time and report progress.

    Args:
        registry: Maps each source's ``type`` to its extractor
        channel: Receives lifecycle events; a private channel when omitted
        record_sink: Receives a ScrapedRecord per successful extraction
        driver_factory: Builds the SiteDriver used for each source
    """

    def __init__(
        self,
        registry: ScraperRegistry,
        channel: Optional[ProgressChannel] = None,
        record_sink: Optional[RecordSink] = None,
        driver_factory: Callable[[], SiteDriver] = SiteDriver,
    ):
        self.registry = registry
        self.channel = channel or ProgressChannel()
        self.record_sink = record_sink
        self.driver_factory = driver_factory
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component="batch_runner")

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run(
        self,
        sources: Sequence[Source],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[BatchItemResult]:
        """Run one batch.

        Raises:
            BatchAlreadyRunningError: If this runner is already running a batch
        """
        if self._lock.locked():
            raise BatchAlreadyRunningError()

        async with self._lock:
            return await self._run(list(sources), cancel_token)

    async def _run(
        self,
        sources: List[Source],
        cancel_token: Optional[CancellationToken],
    ) -> List[BatchItemResult]:
        total = len(sources)
        results: List[BatchItemResult] = []
        cancelled = False

        self.logger.info("batch_started", total=total)
        self.channel.publish(
            StartedEvent(message=f"Iniciando scraping de {total} fuentes", total_count=total)
        )

        for index, source in enumerate(sources, start=1):
            if cancel_token is not None and cancel_token.cancelled:
                cancelled = True
                self.logger.info("batch_cancelled", processed=index - 1, total=total)
                break

            self.channel.publish(
                ProgressUpdateEvent(
                    message=f"Procesando {index}/{total}: {source.label}",
                    current_index=index,
                    total_count=total,
                    source=source.label,
                )
            )

            result = await self._process(source)
            results.append(result)

            if result.ok:
                self.channel.publish(
                    SuccessEvent(
                        message=f"Datos extraídos de {source.label}",
                        source=source.label,
                        data=result.data,
                    )
                )
            else:
                self.channel.publish(
                    ErrorEvent(
                        message=f"Error en {source.label}: {result.error}",
                        source=source.label,
                        error=result.error,
                    )
                )

        success_count = sum(1 for r in results if r.ok)
        error_count = len(results) - success_count
        self.channel.publish(
            CompletedEvent(
                message=(
                    f"Scraping completado: {success_count} exitosos, "
                    f"{error_count} con errores"
                ),
                results=[r.to_dict() for r in results],
                success_count=success_count,
                error_count=error_count,
                cancelled=cancelled,
            )
        )
        self.logger.info(
            "batch_completed",
            success_count=success_count,
            error_count=error_count,
            cancelled=cancelled,
        )
        return results

    async def _process(self, source: Source) -> BatchItemResult:
        """Scrape one source. Never raises."""
        log = self.logger.bind(source_id=source.id, type=source.type, url=source.url)

        try:
            extractor = self.registry.resolve(source.type)
        except UnknownSourceType as e:
            log.warning("source_skipped", reason=e.message)
            return BatchItemResult(source=source, status=STATUS_SKIPPED, error=e.message)

        try:
            extraction = await extractor.scrape(self.driver_factory(), source.url)
            record = ScrapedRecord(
                product_id=source.product_id,
                source_id=source.id,
                name=extraction.name,
                price=extraction.price,
                url=source.url,
                image=extraction.image or None,
            )
            if self.record_sink is not None:
                await self.record_sink.save(record)
        except (NavigationError, TransientAutomationError) as e:
            log.warning("source_failed", kind="navigation", error=e.message)
            return self._failure(source, f"Error de navegación: {e.message}")
        except ExtractionError as e:
            log.warning("source_failed", kind="extraction", field=e.field, error=e.message)
            return self._failure(source, f"Error de extracción ({e.field}): {e.message}")
        except RecordSinkError as e:
            log.error("source_failed", kind="persistence", error=e.message)
            return self._failure(source, f"Error al guardar: {e.message}")
        except Exception as e:
            log.error("source_failed", kind="unexpected", error=str(e), exc_info=True)
            return self._failure(source, f"Error inesperado: {e}")

        log.info("source_scraped", price=extraction.price)
        return BatchItemResult(
            source=source,
            status=STATUS_SUCCESS,
            data=extraction.to_dict(),
            record=record,
        )

    @staticmethod
    def _failure(source: Source, message: str) -> BatchItemResult:
        return BatchItemResult(source=source, status=STATUS_ERROR, error=message)
