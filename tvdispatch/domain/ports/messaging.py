from __future__ import annotations

from typing import Any, Dict, Optional, Protocol


class Messenger(Protocol):
    """Delivers messages to a chat platform channel.

    Both send calls return a JSON-serialisable response payload or raise
    ``DispatchError``.
    """

    async def send_photo(
        self, channel: str, image_url: str, caption: Optional[str] = None
    ) -> Dict[str, Any]:
        ...

    async def send_message(self, channel: str, text: str) -> Dict[str, Any]:
        ...


class MessengerProvider(Protocol):
    """Hands out a messenger bound to the bot token currently configured."""

    async def for_token(self, token: str) -> Messenger:
        ...
