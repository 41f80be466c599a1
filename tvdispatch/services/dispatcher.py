from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..domain.errors import ConfigurationMissing, serialize_error
from ..domain.models import (
    DEFAULT_PLACEHOLDER_IMAGE_URL,
    ConfigEntry,
    MessageStatus,
    QueueMessage,
    SettingType,
    StatusMode,
)
from ..domain.ports.automation import WebSession
from ..domain.ports.messaging import Messenger, MessengerProvider
from ..domain.ports.persistence import PersistenceGateway
from .heartbeat import HeartbeatRecorder
from .screenshot import ScreenshotAcquirer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CycleReport:
    messages: int = 0
    screenshots: int = 0
    screenshot_failures: int = 0
    sends: int = 0
    send_failures: int = 0


class QueueDispatcher:
    """Drains pending queue rows once: screenshot, send and record per channel.

    With ``StatusMode.LAST`` the row ends up carrying the outcome of the last
    channel only. ``StatusMode.AGGREGATE`` keeps a row ``failed`` once any of
    its channels failed.
    """

    def __init__(
        self,
        persistence: PersistenceGateway,
        heartbeat: HeartbeatRecorder,
        screenshots: ScreenshotAcquirer,
        messengers: MessengerProvider,
        *,
        placeholder_image_url: str = DEFAULT_PLACEHOLDER_IMAGE_URL,
        status_mode: str = StatusMode.LAST,
    ) -> None:
        if status_mode not in StatusMode.ALL:
            raise ValueError(f"Unknown status mode: {status_mode}")
        self._persistence = persistence
        self._heartbeat = heartbeat
        self._screenshots = screenshots
        self._messengers = messengers
        self._placeholder = placeholder_image_url
        self._status_mode = status_mode

    async def process_queue(self, session: WebSession) -> CycleReport:
        self._heartbeat.touch()

        bot_settings = self._require(SettingType.TELEGRAM_BOT)
        screenshot_settings = self._require(SettingType.TRADINGVIEW_SCREENSHOT)
        pending = self._persistence.get_messages_by_status(MessageStatus.PENDING)

        logger.info("Pending messages: %s", len(pending))
        report = CycleReport(messages=len(pending))
        if not pending:
            return report

        messenger = await self._messengers.for_token(bot_settings.data)
        for message in pending:
            await self._process_message(session, messenger, message, screenshot_settings, report)
        return report

    def _require(self, setting_type: str) -> ConfigEntry:
        entry = self._persistence.find_setting(setting_type)
        if entry is None:
            raise ConfigurationMissing(setting_type)
        return entry

    async def _process_message(
        self,
        session: WebSession,
        messenger: Messenger,
        message: QueueMessage,
        screenshot_settings: ConfigEntry,
        report: CycleReport,
    ) -> None:
        logger.info("Processing Message ID: %s", message.id)
        symbol = message.symbol
        any_failed = False

        for channel in message.channel_list():
            image: Optional[str] = None
            if screenshot_settings.enabled:
                report.screenshots += 1
                image = await self._take_screenshot(
                    session, message, symbol, message.timeframe or screenshot_settings.data, report
                )
                self._heartbeat.touch()

            report.sends += 1
            try:
                if image is not None:
                    response = await messenger.send_photo(channel, image, message.caption or None)
                else:
                    response = await messenger.send_message(channel, message.data)
            except Exception as exc:
                any_failed = True
                report.send_failures += 1
                self._persistence.update_message(
                    message.id, status=MessageStatus.FAILED, log=serialize_error(exc)
                )
                logger.warning("Dispatch (FAILED): %s -> %s", channel, exc)
            else:
                status = MessageStatus.SUCCESS
                if any_failed and self._status_mode == StatusMode.AGGREGATE:
                    status = MessageStatus.FAILED
                self._persistence.update_message(
                    message.id, status=status, log=_serialize_response(response)
                )
                logger.info("Dispatch (SUCCESS): %s", channel)

            self._heartbeat.touch()

    async def _take_screenshot(
        self,
        session: WebSession,
        message: QueueMessage,
        symbol: str,
        timeframe: str,
        report: CycleReport,
    ) -> str:
        try:
            image = await self._screenshots.acquire(session, symbol, timeframe)
        except Exception as exc:
            report.screenshot_failures += 1
            self._persistence.update_message(message.id, log=serialize_error(exc))
            logger.warning("Screenshot (FAILED): %s (%s)", symbol, exc)
            return self._placeholder
        logger.info("Screenshot (SUCCESS): %s", symbol)
        return image


def _serialize_response(response: Dict[str, Any]) -> str:
    return json.dumps(response, default=str, ensure_ascii=False)
