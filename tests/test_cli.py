import hashlib
import hmac
import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from xpay import check_webhook, sign_request

SECRET = "test-api-secret"


class SignRequestCliTest(unittest.TestCase):
    def test_writes_signed_envelope(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            input_path = Path(tmp) / "payload.json"
            output_path = Path(tmp) / "out" / "envelope.json"
            input_path.write_text('{"orderId": "o-1", "amount": 1.50}', encoding="utf-8")
            argv = ["xpay-sign", "--input", str(input_path), "--output", str(output_path)]
            with patch("sys.argv", argv), patch.dict(os.environ, {"XPAY_API_SECRET": SECRET}), patch(
                "xpay.signing.time.time", return_value=1700000000
            ), patch("xpay.signing.generate_nonce", return_value="n"):
                sign_request.main()
            envelope = json.loads(output_path.read_text(encoding="utf-8"))
        expected = hmac.new(
            SECRET.encode("utf-8"),
            b"data={orderId=o-1, amount=1.50}&nonce=n&timestamp=1700000000",
            hashlib.sha256,
        ).hexdigest()
        self.assertEqual(envelope["sign"], expected)
        self.assertEqual(envelope["data"], {"orderId": "o-1", "amount": "1.50"})

    def test_requires_secret(self) -> None:
        with patch("sys.argv", ["xpay-sign", "--input", "missing.json"]), patch.dict(
            os.environ, {}, clear=True
        ), patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                sign_request.main()


class CheckWebhookCliTest(unittest.TestCase):
    def _run(self, body: bytes, *extra: str) -> tuple[int, str]:
        with tempfile.TemporaryDirectory() as tmp:
            input_path = Path(tmp) / "body.txt"
            input_path.write_bytes(body)
            argv = ["xpay-verify", "--input", str(input_path), *extra]
            stdout = io.StringIO()
            with patch("sys.argv", argv), patch.dict(os.environ, {"XPAY_API_SECRET": SECRET}), patch(
                "sys.stdout", stdout
            ):
                with self.assertRaises(SystemExit) as ctx:
                    check_webhook.main()
        return ctx.exception.code, stdout.getvalue().strip()

    def test_valid_raw_body(self) -> None:
        body = b"legacy-body"
        signature = hmac.new(SECRET.encode("utf-8"), b"1700000000" + body, hashlib.sha256).hexdigest()
        self.assertEqual(self._run(body, "--signature", signature, "--timestamp", "1700000000"), (0, "valid"))

    def test_invalid_body(self) -> None:
        self.assertEqual(self._run(b"legacy-body", "--signature", "bad", "--timestamp", "1"), (1, "invalid"))


if __name__ == "__main__":
    unittest.main()
