"""Tests for the Playwright session wrapper, using mocked Playwright objects."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pricetracker.core.exceptions import (
    ExtractionError,
    NavigationError,
    TransientAutomationError,
)
from pricetracker.scrapers.base import SiteProfile, WaitSpec
from pricetracker.scrapers.driver import SiteDriver, is_frame_detached


URL = "https://diaonline.supermercadosdia.com.ar/leche/p"
QUICK = SiteProfile(settle_seconds=0)


@pytest.fixture
def page():
    page = AsyncMock()
    page.url = URL
    page.content.return_value = "<html><body><h1>Leche</h1></body></html>"
    page.title.return_value = "Leche | Dia"
    page.eval_on_selector_all.return_value = [
        ["https://cdn.dia.com.ar/leche.jpg", 640, 480],
        ["", 0, 0],
    ]
    return page


@pytest.fixture
def playwright_mocks(page):
    """Playwright -> browser -> context -> page chain."""
    context = AsyncMock()
    context.new_page.return_value = page
    browser = AsyncMock()
    browser.new_context.return_value = context
    playwright = AsyncMock()
    playwright.chromium.launch.return_value = browser

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    factory = MagicMock(return_value=starter)

    return {
        "factory": factory,
        "playwright": playwright,
        "browser": browser,
        "context": context,
        "page": page,
    }


@pytest.fixture
def driver(playwright_mocks):
    return SiteDriver(
        headless=True,
        navigation_timeout_ms=1000,
        screenshot_dir="",
        playwright_factory=playwright_mocks["factory"],
    )


def assert_torn_down(mocks):
    mocks["context"].close.assert_awaited_once()
    mocks["browser"].close.assert_awaited_once()
    mocks["playwright"].stop.assert_awaited_once()


class TestSiteDriver:
    async def test_snapshot(self, driver, playwright_mocks):
        async with driver.open(URL, QUICK) as document:
            assert document.url == URL
            assert document.title == "Leche | Dia"
            assert document.select_one("h1").get_text() == "Leche"
            assert document.image_sizes == {"https://cdn.dia.com.ar/leche.jpg": (640, 480)}

        assert_torn_down(playwright_mocks)

    async def test_browser_identity(self, driver, playwright_mocks):
        async with driver.open(URL, QUICK):
            pass

        launch_kwargs = playwright_mocks["playwright"].chromium.launch.await_args.kwargs
        assert launch_kwargs["headless"] is True
        context_kwargs = playwright_mocks["browser"].new_context.await_args.kwargs
        assert "Chrome" in context_kwargs["user_agent"]
        assert context_kwargs["locale"] == "es-AR"
        playwright_mocks["context"].add_init_script.assert_awaited_once()

    async def test_navigation_timeout_uses_profile(self, driver, page):
        async with driver.open(URL, SiteProfile(navigation_timeout_ms=40000, settle_seconds=0)):
            pass

        page.goto.assert_awaited_once_with(URL, wait_until="networkidle", timeout=40000)

    async def test_default_navigation_timeout(self, driver, page):
        async with driver.open(URL, QUICK):
            pass

        assert page.goto.await_args.kwargs["timeout"] == 1000

    async def test_settle_wait(self, driver, page):
        async with driver.open(URL, SiteProfile(settle_seconds=3.0)):
            pass

        page.wait_for_timeout.assert_awaited_once_with(3000.0)

    async def test_timeout_is_navigation_error(self, driver, playwright_mocks, page):
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 1000ms exceeded")

        with pytest.raises(NavigationError) as exc_info:
            async with driver.open(URL, QUICK):
                pass

        assert exc_info.value.url == URL
        assert_torn_down(playwright_mocks)

    async def test_transport_failure_is_navigation_error(self, driver, page):
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(NavigationError):
            async with driver.open(URL, QUICK):
                pass

    async def test_detached_frame_is_transient(self, driver, playwright_mocks, page):
        page.goto.side_effect = PlaywrightError("Navigation failed because frame was detached")

        with pytest.raises(TransientAutomationError):
            async with driver.open(URL, QUICK):
                pass

        assert_torn_down(playwright_mocks)

    async def test_teardown_when_caller_fails(self, driver, playwright_mocks):
        with pytest.raises(ExtractionError):
            async with driver.open(URL, QUICK):
                raise ExtractionError("name")

        assert_torn_down(playwright_mocks)

    async def test_teardown_failure_does_not_mask_result(self, driver, playwright_mocks):
        playwright_mocks["context"].close.side_effect = PlaywrightError("already closed")

        async with driver.open(URL, QUICK) as document:
            assert document.title

        playwright_mocks["browser"].close.assert_awaited_once()
        playwright_mocks["playwright"].stop.assert_awaited_once()

    async def test_launch_failure_stops_playwright(self, driver, playwright_mocks):
        playwright_mocks["playwright"].chromium.launch.side_effect = PlaywrightError(
            "Executable doesn't exist"
        )

        with pytest.raises(NavigationError):
            async with driver.open(URL, QUICK):
                pass

        playwright_mocks["playwright"].stop.assert_awaited_once()
        playwright_mocks["context"].close.assert_not_awaited()


class TestWaits:
    async def test_optional_wait_timeout_continues(self, driver, page):
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")
        profile = SiteProfile(settle_seconds=0, waits=(WaitSpec(".title.text-dark", 5000),))

        async with driver.open(URL, profile) as document:
            assert document.url == URL

        page.wait_for_selector.assert_awaited_once_with(".title.text-dark", timeout=5000)

    async def test_required_wait_timeout_fails(self, driver, playwright_mocks, page):
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")
        profile = SiteProfile(
            settle_seconds=0, waits=(WaitSpec("h1", 15000, required=True),)
        )

        with pytest.raises(ExtractionError) as exc_info:
            async with driver.open(URL, profile):
                pass

        assert exc_info.value.field == "timeout"
        assert "h1" in exc_info.value.message
        assert_torn_down(playwright_mocks)


class TestScreenshots:
    async def test_written_when_directory_configured(self, playwright_mocks, page, tmp_path):
        driver = SiteDriver(
            screenshot_dir=str(tmp_path), playwright_factory=playwright_mocks["factory"]
        )

        async with driver.open(URL, SiteProfile(settle_seconds=0, screenshot_name="dia")):
            pass

        path = page.screenshot.await_args.kwargs["path"]
        assert path.endswith("debug-dia-screenshot.png")
        assert path.startswith(str(tmp_path))

    async def test_skipped_without_directory(self, driver, page):
        async with driver.open(URL, SiteProfile(settle_seconds=0, screenshot_name="dia")):
            pass

        page.screenshot.assert_not_awaited()

    async def test_screenshot_failure_is_not_fatal(self, playwright_mocks, page, tmp_path):
        page.screenshot.side_effect = PlaywrightError("Target closed")
        driver = SiteDriver(
            screenshot_dir=str(tmp_path), playwright_factory=playwright_mocks["factory"]
        )

        async with driver.open(URL, SiteProfile(settle_seconds=0, screenshot_name="dia")) as document:
            assert document.title


class TestFrameDetection:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Navigation failed because frame was detached", True),
            ("Frame has been detached.", True),
            ("net::ERR_CONNECTION_RESET", False),
        ],
    )
    def test_is_frame_detached(self, message, expected):
        assert is_frame_detached(PlaywrightError(message)) is expected
