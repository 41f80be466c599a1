from __future__ import annotations

import json
from typing import Optional


class DispatcherError(Exception):
    """Base class for every error raised by the dispatcher domain."""


class ConfigurationMissing(DispatcherError):
    def __init__(self, setting_type: str) -> None:
        super().__init__(f"Missing configuration row: {setting_type}")
        self.setting_type = setting_type


class WebSessionError(DispatcherError):
    """A browser step failed or timed out."""


class ScreenshotError(DispatcherError):
    def __init__(self, message: str, symbol: Optional[str] = None) -> None:
        super().__init__(message)
        self.symbol = symbol


class DispatchError(DispatcherError):
    def __init__(self, message: str, channel: Optional[str] = None) -> None:
        super().__init__(message)
        self.channel = channel


class AuthenticationFailure(DispatcherError):
    pass


def serialize_error(exc: BaseException) -> str:
    cause = exc.__cause__
    payload = {"error": type(exc).__name__, "message": str(exc)}
    if cause is not None:
        payload["cause"] = {"error": type(cause).__name__, "message": str(cause)}
    return json.dumps(payload, ensure_ascii=False)
