"""Chart screenshots produced through TradingView's own snapshot button.

The acquirer walks a fixed route on every call: symbol overview page, full
chart, interval menu, snapshot. The page hands back a public
``https://www.tradingview.com/x/...`` link which is what gets sent to chat.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from ..domain.errors import ScreenshotError, WebSessionError
from ..domain.ports.automation import WebSession

logger = logging.getLogger(__name__)

TRADINGVIEW_BASE_URL = "https://www.tradingview.com"

CHART_LINK_SELECTOR = 'a[href*="/chart/?"]'
INTERVAL_MENU_SELECTOR = ".menu-1fA401bY"
INTERVAL_ITEM_SELECTOR = ".item-2xPVYue0"
LOADING_SCREEN_SELECTOR = "[class='chart-loading-screen']"
SNAPSHOT_BUTTON_SELECTOR = "#header-toolbar-screenshot"
SNAPSHOT_URL_SELECTOR = '[value*="https://www.tradingview.com/x/"]'

_READ_CHART_LINK = "(selector) => document.querySelector(selector).href"
_READ_SNAPSHOT_URL = "(selector) => document.querySelector(selector).value"
_PICK_INTERVAL = """
([selector, label]) => {
    let clicked = 0;
    document.querySelectorAll(selector).forEach((item) => {
        if (item.textContent !== label) return;
        item.click();
        clicked += 1;
    });
    return clicked;
}
"""


def build_symbol_url(symbol: str) -> str:
    # Segments past the second colon are dropped.
    exchange, ticker = (symbol.split(":") + [""])[:2]
    if exchange and ticker:
        return f"{TRADINGVIEW_BASE_URL}/symbols/{quote(ticker)}/?exchange={quote(exchange)}"
    return f"{TRADINGVIEW_BASE_URL}/symbols/{quote(symbol, safe=':')}/"


class ScreenshotAcquirer:
    """Produces a shareable chart image URL for a symbol and interval."""

    async def acquire(self, session: WebSession, symbol: str, timeframe: str) -> str:
        try:
            return await self._capture(session, symbol, timeframe)
        except WebSessionError as exc:
            raise ScreenshotError(f"Screenshot failed for {symbol}: {exc}", symbol=symbol) from exc

    async def _capture(self, session: WebSession, symbol: str, timeframe: str) -> str:
        await session.goto(build_symbol_url(symbol))
        await session.wait_for_selector(CHART_LINK_SELECTOR)
        chart_url = await session.evaluate(_READ_CHART_LINK, CHART_LINK_SELECTOR)
        if not chart_url:
            raise ScreenshotError(f"No chart link found for {symbol}", symbol=symbol)

        await session.goto(chart_url)
        await session.wait_for_selector(INTERVAL_MENU_SELECTOR)
        await session.click(INTERVAL_MENU_SELECTOR)
        await session.wait_for_selector(INTERVAL_ITEM_SELECTOR)
        clicked = await session.evaluate(_PICK_INTERVAL, [INTERVAL_ITEM_SELECTOR, timeframe])
        if not clicked:
            logger.warning("Interval %r not offered for %s; keeping the chart default.", timeframe, symbol)

        await session.wait_for_selector(LOADING_SCREEN_SELECTOR)
        await session.click(SNAPSHOT_BUTTON_SELECTOR)
        await session.wait_for_selector(SNAPSHOT_URL_SELECTOR)
        image_url = await session.evaluate(_READ_SNAPSHOT_URL, SNAPSHOT_URL_SELECTOR)
        if not image_url:
            raise ScreenshotError(f"Snapshot link was empty for {symbol}", symbol=symbol)
        return image_url
