"""Sporting (sporting.com.ar) extractor.

Unlike the other sites, a missing price is not fatal here: the "0"
sentinel is stored instead of failing the source.
Prices are shown as "$ 179.999" and stored as integer pesos.
"""

from typing import List

from pricetracker.scrapers.base import BaseExtractor, SiteProfile, WaitSpec
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
    "h1.product-title",
    'h1[data-testid="product-title"]',
    ".product-title h1",
    ".product-details h1",
    ".product-info h1",
    ".product-header h1",
    ".product h1",
    '[data-testid="product-name"]',
    ".product-details .product-name",
    ".product-header .product-name",
    ".product-info .product-name",
    ".product-name",
    ".product-title",
    "h1",
]

_PRICE_SELECTORS = [
    ".product-price .price",
    ".product-price .price-current",
    ".product-price .current-price",
    ".price-current",
    '[data-testid="product-price"]',
    ".product-price-main",
    ".main-price",
    ".product-main-price",
    ".price-main",
    ".product-price",
    ".product-price-current",
    ".current-price",
    ".price-value",
    '[data-testid="price"]',
    ".product-details .price",
    ".product-info .price",
    ".price-container .price",
    ".price-wrapper .price",
    ".price",
    '[class*="price"]:not([class*="shipping"]):not([class*="envio"])',
    '[class*="Price"]:not([class*="shipping"]):not([class*="envio"])',
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


class SportingExtractor(BaseExtractor):
    """Sporting product page extractor."""

    source_type = "sporting"
    site_name = "Sporting"
    domains = ("sporting.com.ar",)
    price_policy = PricePolicy.INTEGER
    missing_price_sentinel = "0"
    profile = SiteProfile(
        settle_seconds=5.0,
        waits=(WaitSpec("h1, .product-name, .product-title", timeout_ms=10000),),
        screenshot_name="sporting",
    )

    def name_strategies(self) -> List[Strategy]:
        return [
            *text_selectors(_NAME_SELECTORS),
            page_title(
                suffixes=(" - Sporting.com.ar", " | Sporting.com.ar"),
                reject=("Sporting.com.ar",),
            ),
            heading_scan(),
        ]

    def price_strategies(self) -> List[Strategy]:
        return [*price_selectors(_PRICE_SELECTORS), price_text_scan()]

    def image_strategies(self) -> List[Strategy]:
        return [
            *image_selectors(_IMAGE_SELECTORS),
            largest_image(min_width=100, min_height=100),
        ]
