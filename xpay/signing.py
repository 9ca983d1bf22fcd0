from __future__ import annotations

import hashlib
import hmac
import json
import logging
import secrets
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from pydantic import ValidationError

from .canonical import format_scalar, serialize_payload
from .errors import InvalidPayloadError
from .models import WebhookEvent

logger = logging.getLogger("xpay.signing")

REPLAY_WINDOW_SECONDS = 30
MAX_TIMESTAMP_DIGITS = 12


@dataclass(frozen=True)
class SignedEnvelope:
    signature: str
    timestamp: int
    nonce: str
    data: Mapping[str, Any]

    def as_dict(self) -> dict[str, Any]:
        return {
            "sign": self.signature,
            "timestamp": self.timestamp,
            "nonce": self.nonce,
            "data": self.data,
        }


def generate_nonce() -> str:
    return secrets.token_hex(16)


def hmac_hex(secret: str, message: str | bytes) -> str:
    if isinstance(message, str):
        message = message.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def request_signature_string(data: Mapping[str, Any], nonce: str, timestamp: int) -> str:
    return f"data={{{serialize_payload(data)}}}&nonce={nonce}&timestamp={timestamp}"


def webhook_signature_string(
    data: Mapping[str, Any],
    nonce: object,
    notify_type: object,
    timestamp: int,
) -> str:
    # Webhooks add notifyType between nonce and timestamp; outbound requests never carry it.
    return (
        f"data={{{serialize_payload(data)}}}"
        f"&nonce={format_scalar(nonce)}"
        f"&notifyType={format_scalar(notify_type)}"
        f"&timestamp={timestamp}"
    )


def sign_payload(payload: Mapping[str, Any], secret: str) -> SignedEnvelope:
    """Sign an outbound request payload.

    The payload's own key order is the signing order. Amounts that must keep
    trailing zeros should be passed as ``Decimal`` or as decimal strings.
    Raises ``InvalidPayloadError`` when a value has no canonical text form.
    """
    timestamp = int(time.time())
    nonce = generate_nonce()
    signature = hmac_hex(secret, request_signature_string(payload, nonce, timestamp))
    return SignedEnvelope(signature=signature, timestamp=timestamp, nonce=nonce, data=payload)


def encode_envelope(envelope: SignedEnvelope) -> str:
    return dumps_json(envelope.as_dict())


def dumps_json(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=_json_default)


def _json_default(value: object) -> object:
    # Decimals travel as strings so the wire literal matches the signed token.
    if isinstance(value, Decimal):
        return format(value, "f")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def load_webhook_document(body: bytes | str) -> dict[str, Any] | None:
    """Parse a webhook body, keeping fractional literals as ``Decimal``.

    Returns ``None`` when the body is not a JSON object.
    """
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        document = json.loads(text, parse_float=Decimal)
    except (ValueError, RecursionError):
        # Decode errors are ValueErrors, as are integer literals past the digit limit.
        return None
    if not isinstance(document, dict):
        return None
    return document


def coerce_timestamp(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (ArithmeticError, ValueError):
        return None
    # Reject huge exponents before int() expands them digit by digit.
    if not number.is_finite() or number.adjusted() > MAX_TIMESTAMP_DIGITS:
        return None
    return int(number)


def verify_webhook(
    body: bytes | str,
    secret: str,
    signature: str | None = None,
    timestamp: int | str | None = None,
) -> bool:
    """Check that a webhook body was signed by the gateway.

    ``signature`` and ``timestamp`` override the body's own ``sign`` and
    ``timestamp`` fields (for example when they arrive as headers). Never
    raises: every failure is reported as ``False`` and logged.
    """
    document = load_webhook_document(body)
    if document is None:
        return verify_raw_webhook(body, secret, signature, timestamp)

    expected_sign = signature or document.get("sign")
    if not isinstance(expected_sign, str) or not expected_sign:
        logger.warning("Webhook rejected: no signature supplied")
        return False

    raw_timestamp = timestamp if timestamp not in (None, "") else document.get("timestamp")
    effective_timestamp = coerce_timestamp(raw_timestamp)
    if effective_timestamp is None:
        logger.warning("Webhook rejected: unusable timestamp %r", raw_timestamp)
        return False

    skew = abs(int(time.time()) - effective_timestamp)
    if skew > REPLAY_WINDOW_SECONDS:
        logger.warning(
            "Webhook rejected: timestamp is %s seconds from now (window is %s seconds)",
            skew,
            REPLAY_WINDOW_SECONDS,
        )
        return False

    nonce = document.get("nonce")
    notify_type = document.get("notifyType")
    if nonce is None or notify_type is None:
        logger.warning("Webhook rejected: nonce or notifyType missing from body")
        return False

    data = document.get("data") or {}
    if not isinstance(data, Mapping):
        logger.warning("Webhook rejected: data is not an object")
        return False

    try:
        message = webhook_signature_string(data, nonce, notify_type, effective_timestamp)
    except InvalidPayloadError as exc:
        logger.warning("Webhook rejected: %s", exc)
        return False

    if not _digests_match(hmac_hex(secret, message), expected_sign):
        logger.warning("Webhook rejected: signature mismatch")
        return False
    return True


def verify_raw_webhook(
    body: bytes | str,
    secret: str,
    signature: str | None,
    timestamp: int | str | None,
) -> bool:
    """Legacy scheme for bodies that are not JSON: HMAC over timestamp + raw body."""
    logger.warning("Webhook body is not a JSON object; using the raw-body signature scheme")
    if not signature or timestamp in (None, ""):
        return False
    raw = body if isinstance(body, bytes) else body.encode("utf-8")
    message = str(timestamp).encode("utf-8") + raw
    return _digests_match(hmac_hex(secret, message), signature)


def parse_webhook(
    body: bytes | str,
    secret: str,
    signature: str | None = None,
    timestamp: int | str | None = None,
) -> WebhookEvent | None:
    """Verify a webhook and return it as a ``WebhookEvent``, or ``None``.

    The event carries the body's own fields, not the override values.
    """
    document = load_webhook_document(body)
    if document is None:
        logger.warning("Webhook body is not a JSON object; no event produced")
        return None
    if not verify_webhook(body, secret, signature, timestamp):
        return None
    try:
        return WebhookEvent.model_validate(
            {
                "sign": document.get("sign"),
                "timestamp": document.get("timestamp"),
                "nonce": document.get("nonce"),
                "notifyType": document.get("notifyType"),
                "data": document.get("data"),
            }
        )
    except ValidationError as exc:
        logger.warning("Verified webhook has an unexpected shape: %s", exc)
        return None


def _digests_match(expected: str, provided: str) -> bool:
    return secrets.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
