"""Coto Digital extractor.

Coto fills in the product title asynchronously, so the driver waits up
to 5 s for ``.title.text-dark`` before extraction. A timeout there is
not fatal: the usual fallbacks still run.

Prices look like "$4.865,00" and keep their cents (DECIMAL policy):
"$4.865,00" -> "4865", "$4.865,50" -> "4865.5".

Only images served from cotodigital hosts are considered; everything
else on the page is chrome (logos, promos, payment badges).
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


TITLE_SELECTOR = ".title.text-dark"
IMAGE_HOST_MARKER = "cotodigital"

_NAME_SELECTORS = [
    TITLE_SELECTOR,
    'h1[data-testid="product-name"]',
    "h1.product-name",
    '[data-testid="product-title"]',
    ".product-title",
    ".product-name",
    ".product-details h1",
    ".product-info h1",
    '[class*="product-name"]',
    '[class*="product-title"]',
    ".product-details .title",
    ".product-info .title",
    ".product-header h1",
    ".product-header .title",
    ".product-main h1",
    ".product-main .title",
    "h1",
]

_PRICE_SELECTORS = [
    '[data-testid="product-price"]',
    ".product-price",
    ".product-price-value",
    '[class*="price-value"]',
    ".price-value",
    ".product-details .price",
    ".product-info .price",
    ".price",
    '[class*="price"]:not([class*="shipping"]):not([class*="envio"])',
]

_IMAGE_SELECTORS = [
    ".swiper-slide-active img",
    ".product-image img",
    ".product-gallery img",
    '[data-testid="product-image"] img',
    ".product-details img",
    ".product-info img",
    'img[alt*="producto"]',
    'img[alt*="Producto"]',
    'img[src*="product"]',
    'img[src*="Product"]',
    '[class*="product-image"] img',
]


class CotoExtractor(BaseExtractor):
    """Coto Digital product page extractor."""

    source_type = "coto"
    site_name = "Coto"
    domains = ("cotodigital.com.ar", "cotodigital3.com.ar")
    price_policy = PricePolicy.DECIMAL
    profile = SiteProfile(
        settle_seconds=3.0,
        waits=(WaitSpec(TITLE_SELECTOR, timeout_ms=5000),),
        screenshot_name="coto",
    )

    def name_strategies(self) -> List[Strategy]:
        return [
            *text_selectors(_NAME_SELECTORS),
            page_title(split_on=" - "),
            heading_scan(),
        ]

    def price_strategies(self) -> List[Strategy]:
        return [*price_selectors(_PRICE_SELECTORS), price_text_scan()]

    def image_strategies(self) -> List[Strategy]:
        return [
            *image_selectors(_IMAGE_SELECTORS, require_substring=IMAGE_HOST_MARKER),
            largest_image(
                min_width=200,
                min_height=200,
                require_substring=IMAGE_HOST_MARKER,
            ),
        ]
