from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..domain.errors import AuthenticationFailure, WebSessionError
from ..domain.ports.automation import WebSession

logger = logging.getLogger(__name__)

SIGNIN_URL = "https://www.tradingview.com/#signin"
SHOW_EMAIL_SELECTOR = "span.js-show-email"
USERNAME_SELECTOR = '[name="username"]'
PASSWORD_SELECTOR = '[name="password"]'
SUBMIT_SELECTOR = '[type="submit"]'
ERROR_SELECTOR = ".tv-dialog__error"

_HAS_ERROR = "(selector) => !!document.querySelector(selector)"


@dataclass(slots=True)
class AuthenticationResult:
    success: bool
    reason: Optional[str] = None


def parse_credentials(payload: str) -> Tuple[str, str]:
    """Split an ``email:password`` pair.

    Only the segment between the first and second colon is used as the
    password, so passwords containing ``:`` are cut short.
    """
    parts = payload.split(":")
    if len(parts) < 2 or not parts[0]:
        raise AuthenticationFailure("Credentials must be formatted as email:password.")
    return parts[0], parts[1]


class SessionAuthenticator:
    """Logs the shared browser session into TradingView."""

    async def authenticate(self, session: WebSession, credentials: str) -> AuthenticationResult:
        try:
            await self._login(session, credentials)
        except AuthenticationFailure as exc:
            logger.warning("Login (INVALID): %s", exc)
            return AuthenticationResult(success=False, reason=str(exc))
        except WebSessionError as exc:
            logger.warning("Login (FAILED): %s", exc)
            return AuthenticationResult(success=False, reason=str(exc))
        except Exception as exc:
            logger.exception("Login (FAILED) with an unexpected error.")
            return AuthenticationResult(success=False, reason=str(exc))
        logger.info("Login (SUCCESS)")
        return AuthenticationResult(success=True)

    async def _login(self, session: WebSession, credentials: str) -> None:
        email, password = parse_credentials(credentials)
        logger.info("Signing in to TradingView as %s", email)

        await session.goto(SIGNIN_URL)
        await session.click(SHOW_EMAIL_SELECTOR)
        await session.type(USERNAME_SELECTOR, email)
        await session.type(PASSWORD_SELECTOR, password)

        await self._race_submit(session)

        if await session.evaluate(_HAS_ERROR, ERROR_SELECTOR):
            raise AuthenticationFailure("TradingView rejected the credentials.")

    async def _race_submit(self, session: WebSession) -> None:
        navigation = asyncio.ensure_future(session.click_and_wait_for_navigation(SUBMIT_SELECTOR))
        rejection = asyncio.ensure_future(session.wait_for_selector(ERROR_SELECTOR))
        done, pending = await asyncio.wait(
            {navigation, rejection}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        # Whichever outcome settled first decides; a timeout there is a failure.
        errors = [task.exception() for task in done]
        if all(error is not None for error in errors):
            raise errors[0]
