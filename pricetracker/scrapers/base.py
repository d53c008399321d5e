"""Base extractor interface.

All site-specific extractors inherit from BaseExtractor and declare
their name, price and image fallback chains plus the price policy and
page-loading profile of their site.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple
from urllib.parse import urlparse

import structlog

from pricetracker.core.exceptions import ExtractionError
from pricetracker.schemas.source import NAME_MAX_LENGTH
from pricetracker.scrapers.document import PageDocument
from pricetracker.scrapers.strategies import Strategy, first_success
from pricetracker.scrapers.utils.normalizer import PriceNormalizer, PricePolicy

_WHITESPACE = re.compile(r"\s+")

if TYPE_CHECKING:
    from pricetracker.scrapers.driver import SiteDriver


@dataclass
class ExtractionResult:
    """Name, price and image extracted from one product page."""

    name: str
    price: str  # Canonical numeric string, or the normalizer's best effort
    url: str
    image: str = ""

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.name:
            raise ValueError("name is required")
        if not self.price:
            raise ValueError("price is required")

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WaitSpec:
    """A selector to wait for after navigation."""

    selector: str
    timeout_ms: int
    # A required element that never shows up fails the scrape
    required: bool = False


@dataclass(frozen=True)
class SiteProfile:
    """How a site's pages are loaded before extraction."""

    navigation_timeout_ms: Optional[int] = None  # None -> settings default
    settle_seconds: float = 3.0
    waits: Tuple[WaitSpec, ...] = field(default_factory=tuple)
    screenshot_name: Optional[str] = None


class BaseExtractor(ABC):
    """Abstract base class for all site extractors."""

    source_type: str = ""  # Must be overridden in subclass (e.g., "dia", "coto")
    site_name: str = ""
    domains: Tuple[str, ...] = ()
    price_policy: PricePolicy = PricePolicy.INTEGER
    # Value stored when no price is found; None makes a missing price fatal
    missing_price_sentinel: Optional[str] = None
    profile: SiteProfile = SiteProfile()

    def __init__(self):
        self.logger = structlog.get_logger(__name__).bind(extractor=self.source_type)

    @abstractmethod
    def name_strategies(self) -> List[Strategy]:
        """Ordered name chain, most specific first."""

    @abstractmethod
    def price_strategies(self) -> List[Strategy]:
        """Ordered chain returning raw price text."""

    @abstractmethod
    def image_strategies(self) -> List[Strategy]:
        """Ordered chain returning an absolute image URL."""

    def is_valid_url(self, url: str) -> bool:
        """Check whether a URL belongs to this extractor's site."""
        host = urlparse(url).netloc.lower()
        return any(host == domain or host.endswith("." + domain) for domain in self.domains)

    async def scrape(self, driver: "SiteDriver", url: str) -> ExtractionResult:
        """Load ``url`` through ``driver`` and extract the product data.

        Raises:
            NavigationError: If the page could not be loaded
            ExtractionError: If a required field is missing
        """
        async with driver.open(url, self.profile) as document:
            return self.extract(document)

    def extract(self, document: PageDocument) -> ExtractionResult:
        """Run the fallback chains against a loaded page.

        Raises:
            ExtractionError: If the name, or a non-optional price, is missing
        """
        name_hit = first_success(self.name_strategies(), document, self.logger)
        if not name_hit:
            raise ExtractionError("name", "Could not extract product name")

        price = self.extract_price(document)
        if not price:
            if self.missing_price_sentinel is None:
                raise ExtractionError("price", "Could not extract product price")
            self.logger.warning(
                "price_missing_using_sentinel",
                url=document.url,
                sentinel=self.missing_price_sentinel,
            )
            price = self.missing_price_sentinel

        image_hit = first_success(self.image_strategies(), document, self.logger)
        if not image_hit:
            self.logger.info("image_not_found", url=document.url)

        result = ExtractionResult(
            name=self.tidy_name(name_hit.value),
            price=price,
            url=document.url,
            image=image_hit.value if image_hit else "",
        )
        self.logger.info(
            "extraction_completed",
            name=result.name[:60],
            price=result.price,
            has_image=bool(result.image),
        )
        return result

    def tidy_name(self, name: str) -> str:
        """Collapse whitespace and cut the name to the record's length limit."""
        tidy = _WHITESPACE.sub(" ", name).strip()
        if len(tidy) > NAME_MAX_LENGTH:
            self.logger.warning("name_truncated", length=len(tidy), limit=NAME_MAX_LENGTH)
            tidy = tidy[:NAME_MAX_LENGTH].rstrip()
        return tidy

    def extract_price(self, document: PageDocument) -> str:
        """Raw price from the chain, normalized with this site's policy."""
        hit = first_success(self.price_strategies(), document, self.logger)
        if not hit:
            return ""
        price = PriceNormalizer.normalize(hit.value, self.price_policy)
        self.logger.debug("price_normalized", raw=hit.value, price=price, policy=self.price_policy.value)
        return price
