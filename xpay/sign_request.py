from __future__ import annotations

import argparse
import json
import os
import sys
from decimal import Decimal
from pathlib import Path

from .signing import encode_envelope, sign_payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Sign a JSON request payload for the X-Pay API.")
    parser.add_argument("--input", required=True, help="Path to the payload JSON object.")
    parser.add_argument("--output", help="Path to write the signed envelope. Defaults to stdout.")
    args = parser.parse_args()

    secret = os.getenv("XPAY_API_SECRET")
    if not secret:
        parser.error("XPAY_API_SECRET is not set")

    payload = json.loads(Path(args.input).read_text(encoding="utf-8"), parse_float=Decimal)
    if not isinstance(payload, dict):
        parser.error("payload must be a JSON object")

    encoded = encode_envelope(sign_payload(payload, secret))
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(encoded, encoding="utf-8")
    else:
        sys.stdout.write(encoded + "\n")


if __name__ == "__main__":
    main()
