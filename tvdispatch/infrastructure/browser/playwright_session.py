from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Tuple

from playwright.async_api import Dialog, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright_stealth import Stealth

from ...domain.errors import WebSessionError

logger = logging.getLogger(__name__)


class PlaywrightSession:
    """``WebSession`` backed by a single Playwright page."""

    def __init__(self, page: Page, timeout_ms: int) -> None:
        self._page = page
        self._timeout_ms = timeout_ms
        page.set_default_timeout(timeout_ms)
        page.set_default_navigation_timeout(timeout_ms)

    @property
    def page(self) -> Page:
        return self._page

    async def goto(self, url: str) -> None:
        try:
            await self._page.goto(url)
        except PlaywrightError as exc:
            raise WebSessionError(f"Navigation to {url} failed: {exc.message}") from exc

    async def wait_for_selector(self, selector: str) -> None:
        try:
            await self._page.wait_for_selector(selector, state="attached")
        except PlaywrightError as exc:
            raise WebSessionError(f"Waiting for {selector} failed: {exc.message}") from exc

    async def click(self, selector: str) -> None:
        try:
            await self._page.click(selector)
        except PlaywrightError as exc:
            raise WebSessionError(f"Click on {selector} failed: {exc.message}") from exc

    async def type(self, selector: str, text: str) -> None:
        try:
            await self._page.type(selector, text)
        except PlaywrightError as exc:
            raise WebSessionError(f"Typing into {selector} failed: {exc.message}") from exc

    async def evaluate(self, expression: str, arg: Optional[Any] = None) -> Any:
        try:
            return await self._page.evaluate(expression, arg)
        except PlaywrightError as exc:
            raise WebSessionError(f"Script evaluation failed: {exc.message}") from exc

    async def click_and_wait_for_navigation(self, selector: str) -> None:
        try:
            async with self._page.expect_navigation(wait_until="networkidle"):
                await self._page.click(selector)
        except PlaywrightError as exc:
            raise WebSessionError(f"Navigation after clicking {selector} failed: {exc.message}") from exc


async def _accept_dialog(dialog: Dialog) -> None:
    logger.debug("Accepting %s dialog: %s", dialog.type, dialog.message)
    await dialog.accept()


def parse_window_size(value: str) -> Tuple[int, int]:
    width, _, height = value.partition(",")
    try:
        return int(width), int(height)
    except ValueError as exc:
        raise RuntimeError(f"Window size must look like WIDTH,HEIGHT, got {value!r}") from exc


@asynccontextmanager
async def open_browser_session(
    *,
    headless: bool = True,
    timeout_ms: int = 30000,
    window_size: str = "1366,768",
) -> AsyncIterator[PlaywrightSession]:
    """Launch Chromium with stealth patches and yield a session on its first page."""
    width, height = parse_window_size(window_size)
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=headless,
            args=["--start-fullscreen", "--no-sandbox", f"--window-size={width},{height}"],
        )
        try:
            context = await browser.new_context(viewport={"width": width, "height": height})
            page = await context.new_page()
            await Stealth().apply_stealth_async(page)
            # Leave-page confirmations would otherwise block navigation.
            page.on("dialog", _accept_dialog)
            logger.info("Browser session opened (headless=%s)", headless)
            yield PlaywrightSession(page, timeout_ms)
        finally:
            await browser.close()
            logger.info("Browser session closed.")
    finally:
        await playwright.stop()
