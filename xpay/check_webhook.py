from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .signing import verify_webhook


def main() -> None:
    parser = argparse.ArgumentParser(description="Verify the signature of an X-Pay webhook body.")
    parser.add_argument("--input", required=True, help="Path to the raw webhook body.")
    parser.add_argument("--signature", help="X-Signature header value, if it was sent separately.")
    parser.add_argument("--timestamp", help="X-Timestamp header value, if it was sent separately.")
    args = parser.parse_args()

    secret = os.getenv("XPAY_API_SECRET")
    if not secret:
        parser.error("XPAY_API_SECRET is not set")

    body = Path(args.input).read_bytes()
    valid = verify_webhook(body, secret, args.signature, args.timestamp)
    print("valid" if valid else "invalid")
    sys.exit(0 if valid else 1)


if __name__ == "__main__":
    main()
