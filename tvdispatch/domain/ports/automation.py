from __future__ import annotations

from typing import Any, Optional, Protocol


class WebSession(Protocol):
    """An automated browser tab.

    Every waiting call is bounded by the session's own timeout and raises
    ``WebSessionError`` when it expires or the page rejects the action.
    """

    async def goto(self, url: str) -> None:
        ...

    async def wait_for_selector(self, selector: str) -> None:
        ...

    async def click(self, selector: str) -> None:
        ...

    async def type(self, selector: str, text: str) -> None:
        ...

    async def evaluate(self, expression: str, arg: Optional[Any] = None) -> Any:
        ...

    async def click_and_wait_for_navigation(self, selector: str) -> None:
        ...
