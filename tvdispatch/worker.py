"""Queue worker entrypoint.

Boots the store, opens one stealth browser session, optionally signs it in to
TradingView, then polls the message queue until the process is stopped.
"""

import asyncio
import logging
import signal

from .core.config import Settings
from .core.logging import configure_logging
from .domain.models import SettingType
from .domain.ports.automation import WebSession
from .domain.ports.persistence import SettingsRepository
from .infrastructure.browser.playwright_session import open_browser_session
from .infrastructure.persistence.sqlite import SQLitePersistence
from .services.authenticator import AuthenticationResult, SessionAuthenticator
from .services.dispatcher import QueueDispatcher
from .services.heartbeat import HeartbeatRecorder
from .services.queue_worker import QueueWorker
from .services.screenshot import ScreenshotAcquirer
from .services.telegram import TelegramBotGateway

logger = logging.getLogger(__name__)


async def sign_in_if_enabled(
    settings_repository: SettingsRepository,
    session: WebSession,
    authenticator: SessionAuthenticator,
) -> AuthenticationResult:
    credentials = settings_repository.find_setting(SettingType.TRADINGVIEW_CREDENTIALS)
    if credentials is None or not credentials.enabled:
        logger.info("TradingView login disabled; continuing as guest.")
        return AuthenticationResult(success=False, reason="disabled")
    return await authenticator.authenticate(session, credentials.data)


async def main() -> None:
    configure_logging()
    logger.info("Worker started")

    settings = Settings()
    settings.require_telegram_credentials()

    persistence = SQLitePersistence(settings.database_path)
    heartbeat = HeartbeatRecorder(persistence)
    heartbeat.init()
    gateway = TelegramBotGateway(settings.telegram_api_id, settings.telegram_api_hash)

    try:
        async with open_browser_session(
            headless=settings.browser_headless,
            timeout_ms=settings.browser_timeout_ms,
            window_size=settings.browser_window_size,
        ) as session:
            await sign_in_if_enabled(persistence, session, SessionAuthenticator())

            dispatcher = QueueDispatcher(
                persistence,
                heartbeat,
                ScreenshotAcquirer(),
                gateway,
                placeholder_image_url=settings.placeholder_image_url,
                status_mode=settings.status_mode,
            )
            worker = QueueWorker(dispatcher, session, interval_seconds=settings.poll_interval_seconds)

            loop = asyncio.get_running_loop()
            try:
                loop.add_signal_handler(signal.SIGTERM, worker.request_stop)
            except NotImplementedError:
                logger.debug("Signal handlers unsupported on this platform.")

            await worker.run_forever()
    finally:
        await gateway.stop()
        persistence.close()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Terminated by user.")


if __name__ == "__main__":
    run()
