import asyncio
import logging
from typing import Any, Dict, Optional, Union

from telethon import TelegramClient
from telethon.errors import FloodWaitError, RPCError
from telethon.sessions import StringSession
from telethon.tl.types import InputMediaPhotoExternal

from ..domain.errors import DispatchError

logger = logging.getLogger(__name__)

Peer = Union[int, str]


def coerce_peer(channel: str) -> Peer:
    """Numeric chat ids must reach telethon as integers, usernames as strings."""
    identifier = channel.strip()
    try:
        return int(identifier)
    except ValueError:
        return identifier


class TelegramBotMessenger:
    """Sends chart posts through a bot account authorised by token."""

    def __init__(self, client: TelegramClient, token: str) -> None:
        self._client = client
        self._token = token
        self._lock = asyncio.Lock()
        self._authorized = False

    @property
    def token(self) -> str:
        return self._token

    async def _ensure_connection(self) -> None:
        async with self._lock:
            if self._authorized and self._client.is_connected():
                return
            if not self._token:
                raise DispatchError("Telegram bot token is not configured.")
            try:
                if not self._client.is_connected():
                    await self._client.connect()
                if not await self._client.is_user_authorized():
                    await self._client.sign_in(bot_token=self._token)
            except (RPCError, ConnectionError, OSError) as exc:
                raise DispatchError(f"Unable to authorise Telegram bot: {exc}") from exc
            self._authorized = True
            logger.info("Telegram bot client connected.")

    async def send_photo(
        self, channel: str, image_url: str, caption: Optional[str] = None
    ) -> Dict[str, Any]:
        await self._ensure_connection()
        # Snapshot links carry no file extension; without this telethon sends a document.
        media = InputMediaPhotoExternal(url=image_url)
        try:
            message = await self._client.send_file(coerce_peer(channel), media, caption=caption)
        except FloodWaitError as exc:
            raise DispatchError(f"Rate limited, retry in {exc.seconds} seconds.", channel) from exc
        except (RPCError, ValueError, ConnectionError, OSError) as exc:
            raise DispatchError(f"Unable to send photo to {channel!r}: {exc}", channel) from exc
        return message.to_dict()

    async def send_message(self, channel: str, text: str) -> Dict[str, Any]:
        await self._ensure_connection()
        try:
            message = await self._client.send_message(coerce_peer(channel), text)
        except FloodWaitError as exc:
            raise DispatchError(f"Rate limited, retry in {exc.seconds} seconds.", channel) from exc
        except (RPCError, ValueError, ConnectionError, OSError) as exc:
            raise DispatchError(f"Unable to send message to {channel!r}: {exc}", channel) from exc
        return message.to_dict()

    async def close(self) -> None:
        if self._client.is_connected():
            await self._client.disconnect()
        self._authorized = False


class TelegramBotGateway:
    """Keeps one bot client alive and swaps it when the stored token changes."""

    def __init__(self, api_id: int, api_hash: str) -> None:
        self._api_id = api_id
        self._api_hash = api_hash
        self._messenger: Optional[TelegramBotMessenger] = None

    async def for_token(self, token: str) -> TelegramBotMessenger:
        token = token.strip()
        if self._messenger is not None and self._messenger.token == token:
            return self._messenger
        if self._messenger is not None:
            logger.info("Telegram bot token changed; reconnecting.")
            await self._messenger.close()
        client = TelegramClient(StringSession(), self._api_id, self._api_hash)
        self._messenger = TelegramBotMessenger(client, token)
        return self._messenger

    async def stop(self) -> None:
        if self._messenger is not None:
            await self._messenger.close()
            self._messenger = None
        logger.info("Telegram bot client disconnected.")
