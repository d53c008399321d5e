"""Ordered extraction strategies with a first-success-wins combinator.

Each site extractor declares its fallback chains as flat lists of
``Strategy`` objects (selectors first, then title/meta/text heuristics).
``first_success`` evaluates them in order and stops at the first
non-empty value, so every step can be tested on its own.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Pattern, Sequence

import structlog

from pricetracker.scrapers.document import ImageInfo, PageDocument

logger = structlog.get_logger(__name__)

# Images that are never the product photo
LOGO_PATTERN = re.compile(r"logo|favicon|banner", re.IGNORECASE)
# Price containers that hold shipping costs rather than the product price
SHIPPING_CLASS_PATTERN = re.compile(r"shipping|envio", re.IGNORECASE)
# First "$ 1.234,56"-like token in a block of text
CURRENCY_TOKEN_PATTERN = re.compile(r"\$\s*[\d.,]*\d")

HEADING_SELECTOR = "h1, h2, h3, .title, .product-name, .product-title"


@dataclass(frozen=True)
class Strategy:
    """A named extraction step returning a value or None."""

    name: str
    func: Callable[[PageDocument], Optional[str]]

    def __call__(self, document: PageDocument) -> Optional[str]:
        return self.func(document)


@dataclass(frozen=True)
class StrategyHit:
    strategy: str
    value: str


def first_success(
    strategies: Iterable[Strategy],
    document: PageDocument,
    log=None,
) -> Optional[StrategyHit]:
    """Run strategies in order and return the first non-empty result.

    A strategy that raises is logged and skipped; the chain carries on.
    """
    log = log or logger
    for strategy in strategies:
        try:
            value = strategy(document)
        except Exception as e:
            log.warning("strategy_failed", strategy=strategy.name, error=str(e))
            continue
        if value:
            log.debug("strategy_matched", strategy=strategy.name, value=value[:80])
            return StrategyHit(strategy=strategy.name, value=value)
    return None


# ---------------------------------------------------------------------------
# Name strategies
# ---------------------------------------------------------------------------


def text_selectors(selectors: Sequence[str]) -> List[Strategy]:
    """One strategy per selector, reading the first matching element's text."""

    def build(selector: str) -> Strategy:
        def run(document: PageDocument) -> Optional[str]:
            return document.text_of(document.select_one(selector)) or None

        return Strategy(f"selector:{selector}", run)

    return [build(selector) for selector in selectors]


def page_title(
    suffixes: Sequence[str] = (),
    reject: Sequence[str] = (),
    require: Optional[str] = None,
    split_on: Optional[str] = None,
) -> Strategy:
    """Use the page <title>, minus the site's branding.

    Args:
        suffixes: Branding suffixes removed from the title (" - Dia")
        reject: Titles that are only the site name and carry no product
        require: Substring the title must contain to be trusted
        split_on: Keep only the text before this separator
    """

    def run(document: PageDocument) -> Optional[str]:
        title = document.page_title()
        if not title or title in reject:
            return None
        if require and require not in title:
            return None
        if split_on:
            if split_on not in title:
                return None
            title = title.split(split_on)[0]
        for suffix in suffixes:
            title = title.replace(suffix, "")
        return title.strip() or None

    return Strategy("page_title", run)


def heading_scan(
    selector: str = HEADING_SELECTOR,
    min_length: int = 5,
    max_length: int = 100,
) -> Strategy:
    """First heading-like text of plausible product-name length."""

    def run(document: PageDocument) -> Optional[str]:
        for element in document.select(selector):
            text = document.text_of(element)
            if min_length < len(text) < max_length:
                return text
        return None

    return Strategy("heading_scan", run)


# ---------------------------------------------------------------------------
# Price strategies
# ---------------------------------------------------------------------------


def looks_like_price(text: str, marker: str = "$") -> bool:
    return marker in text and any(ch.isdigit() for ch in text)


def _is_shipping_container(element) -> bool:
    classes = " ".join(element.get("class") or [])
    return bool(SHIPPING_CLASS_PATTERN.search(classes))


def price_selectors(selectors: Sequence[str], marker: str = "$") -> List[Strategy]:
    """One strategy per selector, accepting only currency-marked text."""

    def build(selector: str) -> Strategy:
        def run(document: PageDocument) -> Optional[str]:
            for element in document.select(selector):
                if _is_shipping_container(element):
                    continue
                text = document.text_of(element)
                if looks_like_price(text, marker):
                    return text
            return None

        return Strategy(f"selector:{selector}", run)

    return [build(selector) for selector in selectors]


def price_text_scan(pattern: Pattern = CURRENCY_TOKEN_PATTERN) -> Strategy:
    """First currency-prefixed number in the visible page text.

    Only the first match is used: later matches usually belong to
    "related products" carousels.
    """

    def run(document: PageDocument) -> Optional[str]:
        match = pattern.search(document.visible_text())
        return match.group(0) if match else None

    return Strategy("price_text_scan", run)


# ---------------------------------------------------------------------------
# Image strategies
# ---------------------------------------------------------------------------


def _acceptable_image(
    image: ImageInfo,
    exclude: Pattern,
    require_substring: Optional[str],
) -> bool:
    if not image.src.startswith("http"):
        return False
    if exclude.search(image.src) or exclude.search(image.alt):
        return False
    if require_substring and require_substring not in image.src:
        return False
    return True


def meta_image(key: str = "og:image") -> Strategy:
    def run(document: PageDocument) -> Optional[str]:
        content = document.meta_content(key)
        if not content:
            return None
        src = document.absolute_url(content)
        return src if src.startswith("http") else None

    return Strategy(f"meta:{key}", run)


def image_selectors(
    selectors: Sequence[str],
    exclude: Pattern = LOGO_PATTERN,
    require_substring: Optional[str] = None,
) -> List[Strategy]:
    """One strategy per gallery selector, skipping logos and banners."""

    def build(selector: str) -> Strategy:
        def run(document: PageDocument) -> Optional[str]:
            for element in document.select(selector):
                image = document.image_from(element)
                if image and _acceptable_image(image, exclude, require_substring):
                    return image.src
            return None

        return Strategy(f"selector:{selector}", run)

    return [build(selector) for selector in selectors]


def largest_image(
    min_width: int = 100,
    min_height: int = 100,
    exclude: Pattern = LOGO_PATTERN,
    require_substring: Optional[str] = None,
) -> Strategy:
    """Largest image on the page above a minimum size."""

    def run(document: PageDocument) -> Optional[str]:
        candidates = [
            image
            for image in document.images()
            if image.width > min_width
            and image.height > min_height
            and _acceptable_image(image, exclude, require_substring)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda image: image.area).src

    return Strategy("largest_image", run)
