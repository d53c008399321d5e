"""Tienda River (official River Plate store) extractor.

Prices look like "$ 169.999,00" or "$ 149.999"; the cents are dropped
and the price is stored as integer pesos.
"""

from typing import List

from pricetracker.scrapers.base import BaseExtractor, SiteProfile
from pricetracker.scrapers.strategies import (
    Strategy,
    heading_scan,
    image_selectors,
    largest_image,
    page_title,
    price_selectors,
    price_text_scan,
    text_selectors,
)
from pricetracker.scrapers.utils.normalizer import PricePolicy


_NAME_SELECTORS = [
    "h1.product-name",
    ".product-info h1",
    ".product h1",
    '[data-testid="product-name"]',
    ".product-name",
    ".product-title",
    "h1",
]

_PRICE_SELECTORS = [
    ".product .price",
    ".product-price",
    ".price-current",
    ".current-price",
    '[data-testid="price"]',
    ".price-value",
    ".price",
    'span:-soup-contains("$")',
]

_IMAGE_SELECTORS = [
    "img.product-main-image",
    ".product-gallery img",
    'img[data-testid="product-image"]',
    ".product-image img",
    ".product-images img",
    'img[src*="/products/"]',
    'img[alt*="producto"]',
    ".swiper-slide-active img",
    ".slick-active img",
]


class TiendaRiverExtractor(BaseExtractor):
    """Tienda River product page extractor."""

    source_type = "tiendariver"
    site_name = "Tienda River"
    domains = ("tiendariver.com", "tiendariver.com.ar")
    price_policy = PricePolicy.INTEGER
    profile = SiteProfile(settle_seconds=3.0, screenshot_name="tiendariver")

    def name_strategies(self) -> List[Strategy]:
        return [
            *text_selectors(_NAME_SELECTORS),
            # Only titles that mention the club are product titles
            page_title(suffixes=(" - Tienda River",), require="River"),
            heading_scan(),
        ]

    def price_strategies(self) -> List[Strategy]:
        return [*price_selectors(_PRICE_SELECTORS), price_text_scan()]

    def image_strategies(self) -> List[Strategy]:
        return [
            *image_selectors(_IMAGE_SELECTORS),
            largest_image(min_width=100, min_height=100),
        ]
