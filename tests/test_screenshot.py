import asyncio

import pytest

from tvdispatch.domain.errors import ScreenshotError, WebSessionError
from tvdispatch.services.screenshot import (
    CHART_LINK_SELECTOR,
    INTERVAL_MENU_SELECTOR,
    LOADING_SCREEN_SELECTOR,
    SNAPSHOT_BUTTON_SELECTOR,
    SNAPSHOT_URL_SELECTOR,
    ScreenshotAcquirer,
    build_symbol_url,
)

from fakes import CHART_URL, IMAGE_URL, FakeWebSession


@pytest.mark.parametrize(
    "symbol, expected",
    [
        ("NASDAQ:AAPL", "https://www.tradingview.com/symbols/AAPL/?exchange=NASDAQ"),
        ("BINANCE:BTCUSDT", "https://www.tradingview.com/symbols/BTCUSDT/?exchange=BINANCE"),
        ("AAPL", "https://www.tradingview.com/symbols/AAPL/"),
    ],
)
def test_build_symbol_url(symbol, expected):
    assert build_symbol_url(symbol) == expected


def test_exchange_parameter_only_with_prefix():
    assert "exchange=" in build_symbol_url("NYSE:IBM")
    assert "exchange=" not in build_symbol_url("IBM")
    # Without a ticker after the colon there is nothing to qualify.
    assert "exchange=" not in build_symbol_url("NYSE:")


def test_extra_colon_segments_are_dropped():
    assert build_symbol_url("CME:ES1!:extra") == "https://www.tradingview.com/symbols/ES1%21/?exchange=CME"


def test_acquire_follows_navigation_sequence():
    session = FakeWebSession()

    url = asyncio.run(ScreenshotAcquirer().acquire(session, "NASDAQ:AAPL", "1D"))

    assert url == IMAGE_URL
    assert session.visited == [
        "https://www.tradingview.com/symbols/AAPL/?exchange=NASDAQ",
        CHART_URL,
    ]
    kinds = [call[0] for call in session.calls]
    assert kinds.index("goto") < kinds.index("wait")
    assert ("click", INTERVAL_MENU_SELECTOR) in session.calls
    assert session.picked == ["1D"]
    steps = [call for call in session.calls if call[0] in ("wait", "click")]
    assert steps[0] == ("wait", CHART_LINK_SELECTOR)
    assert steps[-3:] == [
        ("wait", LOADING_SCREEN_SELECTOR),
        ("click", SNAPSHOT_BUTTON_SELECTOR),
        ("wait", SNAPSHOT_URL_SELECTOR),
    ]


def test_unknown_timeframe_clicks_nothing_but_still_captures():
    session = FakeWebSession(options=["1h", "4h"])

    url = asyncio.run(ScreenshotAcquirer().acquire(session, "AAPL", "1D"))

    assert url == IMAGE_URL
    assert session.picked == []
    assert ("click", SNAPSHOT_BUTTON_SELECTOR) in session.calls


def test_selector_timeout_raises_screenshot_error():
    session = FakeWebSession(failing_selectors={SNAPSHOT_URL_SELECTOR})

    with pytest.raises(ScreenshotError) as info:
        asyncio.run(ScreenshotAcquirer().acquire(session, "NASDAQ:AAPL", "1D"))

    assert info.value.symbol == "NASDAQ:AAPL"
    assert isinstance(info.value.__cause__, WebSessionError)


def test_each_call_restarts_from_symbol_page():
    session = FakeWebSession()
    acquirer = ScreenshotAcquirer()

    async def scenario():
        await acquirer.acquire(session, "NASDAQ:AAPL", "1D")
        await acquirer.acquire(session, "TSLA", "1h")

    asyncio.run(scenario())

    assert session.visited == [
        "https://www.tradingview.com/symbols/AAPL/?exchange=NASDAQ",
        CHART_URL,
        "https://www.tradingview.com/symbols/TSLA/",
        CHART_URL,
    ]
    assert session.picked == ["1D", "1h"]


def test_empty_snapshot_link_is_an_error():
    session = FakeWebSession(image_url="")

    with pytest.raises(ScreenshotError):
        asyncio.run(ScreenshotAcquirer().acquire(session, "AAPL", "1D"))
