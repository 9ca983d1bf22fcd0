from __future__ import annotations

from .canonical import serialize_payload
from .client import XPayClient
from .config import XPayConfig
from .errors import ApiError, InvalidPayloadError, NetworkError, XPayError
from .models import (
    CollectionRequest,
    CollectionResponse,
    OrderDetails,
    OrderStatus,
    OrderType,
    PayoutRequest,
    PayoutResponse,
    SupportedSymbol,
    SupportedSymbolsResponse,
    WebhookEvent,
    WebhookNotifyType,
)
from .signing import REPLAY_WINDOW_SECONDS, SignedEnvelope, parse_webhook, sign_payload, verify_webhook
from .transport import ApiClient

__all__ = [
    "ApiClient",
    "ApiError",
    "CollectionRequest",
    "CollectionResponse",
    "InvalidPayloadError",
    "NetworkError",
    "OrderDetails",
    "OrderStatus",
    "OrderType",
    "PayoutRequest",
    "PayoutResponse",
    "REPLAY_WINDOW_SECONDS",
    "SignedEnvelope",
    "SupportedSymbol",
    "SupportedSymbolsResponse",
    "WebhookEvent",
    "WebhookNotifyType",
    "XPayClient",
    "XPayConfig",
    "XPayError",
    "parse_webhook",
    "serialize_payload",
    "sign_payload",
    "verify_webhook",
]
