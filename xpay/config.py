from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "https://api.x-pay.fun"
DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class XPayConfig:
    api_key: str
    api_secret: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> "XPayConfig":
        api_key = os.getenv("XPAY_API_KEY", "").strip()
        api_secret = os.getenv("XPAY_API_SECRET", "")
        if not api_key:
            raise ValueError("XPAY_API_KEY is not set")
        if not api_secret:
            raise ValueError("XPAY_API_SECRET is not set")
        return cls(
            api_key=api_key,
            api_secret=api_secret,
            base_url=os.getenv("XPAY_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout_s=float(os.getenv("XPAY_TIMEOUT_S", str(DEFAULT_TIMEOUT_S))),
        )
