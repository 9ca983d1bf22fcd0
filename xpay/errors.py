from __future__ import annotations

from typing import Any


class XPayError(Exception):
    """Base class for everything raised by the SDK."""


class InvalidPayloadError(XPayError, ValueError):
    """A payload value has no canonical text form and cannot be signed."""


class ApiError(XPayError):
    def __init__(
        self,
        status: int,
        message: str | None = None,
        *,
        code: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(f"API Error {status}: {message or 'Unknown error'}")
        self.status = status
        self.code = code
        self.data = data


class NetworkError(XPayError):
    def __init__(self, message: str = "Network Error: No response received from API") -> None:
        super().__init__(message)
