"""Playwright session wrapper used for a single scrape.

A SiteDriver launches Chromium with a realistic identity, loads one
product page, waits for client-rendered content and hands a
PageDocument snapshot to the caller. The browser is always torn down
when the ``open()`` block exits, whatever the outcome.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

import structlog
from playwright.async_api import (
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from pricetracker.config import settings
from pricetracker.core.exceptions import (
    ExtractionError,
    NavigationError,
    TransientAutomationError,
)
from pricetracker.scrapers.base import SiteProfile, WaitSpec
from pricetracker.scrapers.document import PageDocument
from pricetracker.scrapers.utils.user_agents import get_chrome_user_agent

logger = structlog.get_logger(__name__)

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
]

# Minimal stealth JS to mask automation signals
STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['es-AR', 'es', 'en-US', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = { runtime: {} };
"""

IMAGE_SIZES_JS = """
imgs => imgs.map(img => [img.src, img.naturalWidth || img.width, img.naturalHeight || img.height])
"""

_FRAME_DETACHED_MARKERS = ("frame was detached", "frame has been detached")


def is_frame_detached(error: BaseException) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in _FRAME_DETACHED_MARKERS)


class SiteDriver:
    """Scoped headless-browser session for one scrape call."""

    def __init__(
        self,
        headless: Optional[bool] = None,
        navigation_timeout_ms: Optional[int] = None,
        screenshot_dir: Optional[str] = None,
        playwright_factory: Callable = async_playwright,
    ):
        self._headless = settings.BROWSER_HEADLESS if headless is None else headless
        self._navigation_timeout_ms = navigation_timeout_ms or settings.NAVIGATION_TIMEOUT_MS
        self._screenshot_dir = (
            settings.SCREENSHOT_DIR if screenshot_dir is None else screenshot_dir
        )
        self._playwright_factory = playwright_factory

    @asynccontextmanager
    async def open(
        self, url: str, profile: Optional[SiteProfile] = None
    ) -> AsyncIterator[PageDocument]:
        """Load ``url`` and yield a snapshot of the rendered page.

        Raises:
            NavigationError: Navigation timed out or the transport failed
            TransientAutomationError: The page frame was detached mid-load
            ExtractionError: A required element never appeared (field "timeout")
        """
        profile = profile or SiteProfile()
        log = logger.bind(url=url)
        playwright = browser = context = None
        try:
            try:
                playwright = await self._playwright_factory().start()
                browser = await playwright.chromium.launch(
                    headless=self._headless, args=LAUNCH_ARGS
                )
                context = await browser.new_context(
                    user_agent=get_chrome_user_agent(),
                    viewport=settings.get_viewport(),
                    locale=settings.BROWSER_LOCALE,
                )
                await context.add_init_script(STEALTH_JS)
                page = await context.new_page()

                timeout_ms = profile.navigation_timeout_ms or self._navigation_timeout_ms
                log.info("navigating", timeout_ms=timeout_ms)
                await page.goto(url, wait_until="networkidle", timeout=timeout_ms)

                for wait in profile.waits:
                    await self._wait_for(page, wait, profile, log)

                if profile.settle_seconds:
                    await page.wait_for_timeout(profile.settle_seconds * 1000)

                if profile.screenshot_name:
                    await self._screenshot(page, profile.screenshot_name, log)

                document = await self._snapshot(page)
            except PlaywrightTimeoutError as e:
                raise NavigationError(url, f"timed out: {e}") from e
            except PlaywrightError as e:
                if is_frame_detached(e):
                    raise TransientAutomationError(str(e)) from e
                raise NavigationError(url, str(e)) from e

            log.info("page_loaded", title=document.title[:80])
            yield document
        finally:
            await self._teardown(playwright, browser, context, log)

    async def _wait_for(self, page: Page, wait: WaitSpec, profile: SiteProfile, log) -> None:
        try:
            await page.wait_for_selector(wait.selector, timeout=wait.timeout_ms)
        except PlaywrightTimeoutError:
            if not wait.required:
                log.info("wait_selector_missing", selector=wait.selector, timeout_ms=wait.timeout_ms)
                return
            if profile.screenshot_name:
                await self._screenshot(page, f"{profile.screenshot_name}-missing", log)
            raise ExtractionError(
                "timeout",
                f"No se encontró '{wait.selector}' tras {wait.timeout_ms} ms",
            )

    async def _screenshot(self, page: Page, name: str, log) -> None:
        if not self._screenshot_dir:
            return
        path = Path(self._screenshot_dir) / f"debug-{name}-screenshot.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path))
            log.debug("screenshot_saved", path=str(path))
        except (PlaywrightError, OSError) as e:
            log.warning("screenshot_failed", path=str(path), error=str(e))

    async def _snapshot(self, page: Page) -> PageDocument:
        html = await page.content()
        title = await page.title()
        rows = await page.eval_on_selector_all("img", IMAGE_SIZES_JS)
        image_sizes = {
            src: (int(width or 0), int(height or 0)) for src, width, height in rows if src
        }
        return PageDocument(html=html, url=page.url, title=title, image_sizes=image_sizes)

    async def _teardown(self, playwright, browser, context, log) -> None:
        for name, resource, closer in (
            ("context", context, "close"),
            ("browser", browser, "close"),
            ("playwright", playwright, "stop"),
        ):
            if resource is None:
                continue
            try:
                await getattr(resource, closer)()
            except Exception as e:
                log.warning("teardown_failed", resource=name, error=str(e))
        log.debug("session_closed")
