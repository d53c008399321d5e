"""Solo Futbol (solofutbol.com) extractor.

The site's client-side router sometimes tears the page frame down while
it is still loading. That transient automation error is retried exactly
once after a fixed backoff; a second occurrence is reported as a
navigation failure.
"""

from typing import TYPE_CHECKING, List, Optional

from pricetracker.config import settings
from pricetracker.core.exceptions import NavigationError, TransientAutomationError
from pricetracker.scrapers.base import (
    BaseExtractor,
    ExtractionResult,
    SiteProfile,
    WaitSpec,
)
from pricetracker.scrapers.strategies import (
    Strategy,
    heading_scan,
    image_selectors,
    largest_image,
    meta_image,
    page_title,
    price_selectors,
    price_text_scan,
    text_selectors,
)
from pricetracker.scrapers.utils.normalizer import PricePolicy
from pricetracker.scrapers.utils.retry import call_with_retry

if TYPE_CHECKING:
    from pricetracker.scrapers.driver import SiteDriver


MAX_ATTEMPTS = 2

_GALLERY_SELECTORS = [
    ".gallery .fotorama__active img",
    ".product-main-image img",
    ".product-image img",
    ".main-product-photo img",
    ".product-image-gallery img",
    ".gallery img",
]


class SoloFutbolExtractor(BaseExtractor):
    """Solo Futbol product page extractor."""

    source_type = "solofutbol"
    site_name = "Solo Futbol"
    domains = ("solofutbol.com",)
    price_policy = PricePolicy.INTEGER
    profile = SiteProfile(
        navigation_timeout_ms=40000,
        settle_seconds=3.0,
        waits=(
            WaitSpec("body", timeout_ms=10000, required=True),
            WaitSpec("h1", timeout_ms=15000, required=True),
        ),
        screenshot_name="solofutbol",
    )

    def __init__(self, retry_backoff_seconds: Optional[float] = None):
        super().__init__()
        if retry_backoff_seconds is None:
            retry_backoff_seconds = settings.TRANSIENT_RETRY_BACKOFF_SECONDS
        self.retry_backoff_seconds = retry_backoff_seconds

    async def scrape(self, driver: "SiteDriver", url: str) -> ExtractionResult:
        """Scrape with a single retry on a detached frame."""
        try:
            return await call_with_retry(
                lambda: super(SoloFutbolExtractor, self).scrape(driver, url),
                retry_on=(TransientAutomationError,),
                max_attempts=MAX_ATTEMPTS,
                backoff_seconds=self.retry_backoff_seconds,
            )
        except TransientAutomationError as e:
            self.logger.error("frame_detached_after_retry", url=url, attempts=MAX_ATTEMPTS)
            raise NavigationError(url, f"frame detached after {MAX_ATTEMPTS} attempts") from e

    def name_strategies(self) -> List[Strategy]:
        return [
            *text_selectors(["h1"]),
            page_title(suffixes=(" - Solo Futbol", " | Solo Futbol")),
            heading_scan(),
        ]

    def price_strategies(self) -> List[Strategy]:
        return [*price_selectors(["span.price"]), price_text_scan()]

    def image_strategies(self) -> List[Strategy]:
        return [
            meta_image("og:image"),
            *image_selectors(_GALLERY_SELECTORS),
            largest_image(min_width=100, min_height=100),
        ]
