"""Supermercados Dia online store extractor.

Dia prints prices as "$ 3.400" (dot as thousands separator); they are
stored as integer pesos.
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
    ".product-name h1",
    ".product-title h1",
    ".product-info h1",
    ".product-details h1",
    ".product-header h1",
    ".product h1",
    '[data-testid="product-name"]',
    '[class*="product-name"]',
    '[class*="product-title"]',
    "h1",
]

_PRICE_SELECTORS = [
    ".product-price .price",
    ".price-container .price",
    ".price-wrapper .price",
    ".product .price",
    ".product-price",
    ".price-current",
    ".current-price",
    '[data-testid="price"]',
    ".price-value",
    ".price",
    '[class*="price"]:not([class*="shipping"]):not([class*="envio"])',
    '[class*="Price"]:not([class*="shipping"]):not([class*="envio"])',
    'span:-soup-contains("$")',
]

_IMAGE_SELECTORS = [
    "img.product-main-image",
    ".product-main-image img",
    ".product-gallery img",
    'img[data-testid="product-image"]',
    ".product-image img",
    ".product-images img",
    'img[src*="/products/"]',
    'img[alt*="producto"]',
    ".swiper-slide-active img",
    ".slick-active img",
]


class DiaExtractor(BaseExtractor):
    """Dia product page extractor."""

    source_type = "dia"
    site_name = "Dia"
    domains = ("supermercadosdia.com.ar",)
    price_policy = PricePolicy.INTEGER
    profile = SiteProfile(settle_seconds=5.0, screenshot_name="dia")

    def name_strategies(self) -> List[Strategy]:
        return [
            *text_selectors(_NAME_SELECTORS),
            page_title(suffixes=(" - Dia", " | Dia"), reject=("Dia",)),
            heading_scan(),
        ]

    def price_strategies(self) -> List[Strategy]:
        return [*price_selectors(_PRICE_SELECTORS), price_text_scan()]

    def image_strategies(self) -> List[Strategy]:
        return [
            *image_selectors(_IMAGE_SELECTORS),
            largest_image(min_width=100, min_height=100),
        ]
