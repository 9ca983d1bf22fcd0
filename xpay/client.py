from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

from . import signing
from .config import XPayConfig
from .models import (
    CollectionRequest,
    CollectionResponse,
    OrderDetails,
    PayoutRequest,
    PayoutResponse,
    SupportedSymbolsResponse,
    WebhookEvent,
)
from .transport import ApiClient

logger = logging.getLogger("xpay.client")

CREATE_PAYOUT_PATH = "/v1/order/createPayout"
CREATE_COLLECTION_PATH = "/v1/order/createCollection"
ORDER_STATUS_PATH = "/v1/order/status/{order_id}"
SUPPORTED_SYMBOLS_PATH = "/v1/symbol/supportSymbols"


class XPayClient:
    """Entry point for the X-Pay gateway.

    Order-creating calls are signed with the configured secret; lookups are
    sent with the API key header only. Webhook helpers never raise.
    """

    def __init__(self, config: XPayConfig, transport: ApiClient | None = None) -> None:
        self._config = config
        self._transport = transport or ApiClient(config)

    def create_payout(self, request: PayoutRequest | Mapping[str, Any]) -> PayoutResponse:
        response = self._post_signed(CREATE_PAYOUT_PATH, _as_payload(request))
        return PayoutResponse.model_validate(response)

    def create_collection(self, request: CollectionRequest | Mapping[str, Any]) -> CollectionResponse:
        response = self._post_signed(CREATE_COLLECTION_PATH, _as_payload(request))
        return CollectionResponse.model_validate(response)

    def get_order_status(self, order_id: str) -> OrderDetails:
        cleaned = (order_id or "").strip()
        if not cleaned:
            raise ValueError("order_id is required")
        path = ORDER_STATUS_PATH.format(order_id=quote(cleaned, safe=""))
        return OrderDetails.model_validate(self._transport.get(path))

    def get_supported_symbols(
        self,
        chain: str | None = None,
        symbol: str | None = None,
    ) -> SupportedSymbolsResponse:
        params: dict[str, str] = {}
        if chain:
            params["chain"] = chain
        if symbol:
            params["symbol"] = symbol
        response = self._transport.get(SUPPORTED_SYMBOLS_PATH, params)
        return SupportedSymbolsResponse.model_validate(response)

    def verify_webhook(
        self,
        body: bytes | str,
        signature: str | None = None,
        timestamp: int | str | None = None,
    ) -> bool:
        return signing.verify_webhook(body, self._config.api_secret, signature, timestamp)

    def parse_webhook(
        self,
        body: bytes | str,
        signature: str | None = None,
        timestamp: int | str | None = None,
    ) -> WebhookEvent | None:
        return signing.parse_webhook(body, self._config.api_secret, signature, timestamp)

    def _post_signed(self, path: str, payload: Mapping[str, Any]) -> Any:
        envelope = signing.sign_payload(payload, self._config.api_secret)
        logger.debug("Signed request for %s with nonce %s", path, envelope.nonce)
        return self._transport.post(path, envelope.as_dict())


def _as_payload(request: PayoutRequest | CollectionRequest | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(request, (PayoutRequest, CollectionRequest)):
        return request.to_payload()
    return request
