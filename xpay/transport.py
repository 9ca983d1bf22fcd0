from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .config import XPayConfig
from .errors import ApiError, NetworkError
from .models import ErrorResponse
from .signing import dumps_json

logger = logging.getLogger("xpay.transport")


class ApiClient:
    """JSON-over-HTTP access to the gateway, authenticated with the API key header."""

    def __init__(self, config: XPayConfig) -> None:
        self._base_url = config.base_url.rstrip("/")
        self._timeout_s = config.timeout_s
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-API-TOKEN": config.api_key,
        }

    def get(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Mapping[str, Any]) -> Any:
        return self._request("POST", endpoint, data=data)

    def put(self, endpoint: str, data: Mapping[str, Any]) -> Any:
        return self._request("PUT", endpoint, data=data)

    def delete(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._request("DELETE", endpoint, params=params)

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{endpoint}"
        content = dumps_json(data) if data is not None else None
        logger.debug("%s %s", method, endpoint)
        try:
            response = httpx.request(
                method,
                url,
                params=dict(params) if params else None,
                content=content,
                headers=self._headers,
                timeout=self._timeout_s,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise _api_error(exc.response) from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed without a response: %s", method, endpoint, exc)
            raise NetworkError() from exc
        return response.json()


def _api_error(response: httpx.Response) -> ApiError:
    try:
        body = ErrorResponse.model_validate(response.json())
    except ValueError:
        body = ErrorResponse()
    error = ApiError(response.status_code, body.message, code=body.code, data=body.data)
    logger.warning("%s", error)
    return error
