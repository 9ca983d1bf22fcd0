import unittest
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal

from xpay.canonical import MAX_NESTING_DEPTH, format_scalar, serialize_payload
from xpay.errors import InvalidPayloadError


class SerializePayloadTest(unittest.TestCase):
    def test_flat_mapping_keeps_insertion_order(self) -> None:
        self.assertEqual(serialize_payload({"a": 1, "b": 2}), "a=1, b=2")
        self.assertEqual(serialize_payload({"b": 2, "a": 1}), "b=2, a=1")

    def test_nested_mapping(self) -> None:
        payload = {"tx": {"amount": 1, "to": "X"}}
        self.assertEqual(serialize_payload(payload), "tx={amount=1, to=X}")

    def test_sequence_of_mappings(self) -> None:
        payload = {"items": [{"a": 1}, {"a": 2}]}
        self.assertEqual(serialize_payload(payload), "items=[{a=1}, {a=2}]")

    def test_sequence_of_scalars_and_nested_sequences(self) -> None:
        payload = {"tags": ("x", 2, None, True), "grid": [[1, 2], []]}
        self.assertEqual(serialize_payload(payload), "tags=[x, 2, null, true], grid=[[1, 2], []]")

    def test_scalars(self) -> None:
        payload = {"reason": None, "ok": True, "bad": False, "name": "USDT", "count": 0}
        self.assertEqual(serialize_payload(payload), "reason=null, ok=true, bad=false, name=USDT, count=0")

    def test_decimal_keeps_trailing_zeros(self) -> None:
        payload = {"amount": Decimal("100.00000000"), "dust": Decimal("0.00000001")}
        self.assertEqual(serialize_payload(payload), "amount=100.00000000, dust=0.00000001")

    def test_decimal_string_is_verbatim(self) -> None:
        self.assertEqual(serialize_payload({"amount": "100.00000000"}), "amount=100.00000000")

    def test_float_uses_shortest_digits(self) -> None:
        self.assertEqual(serialize_payload({"fee": 27.35985, "ratio": 0.5}), "fee=27.35985, ratio=0.5")

    def test_float_never_uses_exponent_notation(self) -> None:
        self.assertEqual(format_scalar(1e16), "10000000000000000")
        self.assertEqual(format_scalar(1e-7), "0.0000001")
        self.assertEqual(format_scalar(2.5e-5), "0.000025")

    def test_empty_mapping(self) -> None:
        self.assertEqual(serialize_payload({}), "")
        self.assertEqual(serialize_payload({"data": {}}), "data={}")

    def test_separators_are_not_escaped(self) -> None:
        self.assertEqual(serialize_payload({"note": "a=b, c}"}), "note=a=b, c}")

    def test_any_mapping_type_is_accepted(self) -> None:
        payload = OrderedDict([("z", 1), ("a", OrderedDict([("k", "v")]))])
        self.assertEqual(serialize_payload(payload), "z=1, a={k=v}")

    def test_same_object_serializes_identically(self) -> None:
        payload = {"orderId": "o-1", "amount": Decimal("1.50"), "meta": {"list": [1, {"x": None}]}}
        self.assertEqual(serialize_payload(payload), serialize_payload(payload))


class InvalidPayloadTest(unittest.TestCase):
    def test_rejects_unsupported_values(self) -> None:
        for value in (b"raw", {1, 2}, datetime(2024, 1, 1), object()):
            with self.subTest(value=value):
                with self.assertRaises(InvalidPayloadError):
                    serialize_payload({"value": value})

    def test_rejects_unsupported_values_inside_sequences(self) -> None:
        with self.assertRaises(InvalidPayloadError):
            serialize_payload({"items": [1, b"raw"]})

    def test_rejects_non_finite_numbers(self) -> None:
        for value in (float("nan"), float("inf"), Decimal("NaN"), Decimal("-Infinity")):
            with self.subTest(value=value):
                with self.assertRaises(InvalidPayloadError):
                    serialize_payload({"amount": value})

    def test_rejects_out_of_range_exponents(self) -> None:
        for value in (Decimal("1e999999999"), Decimal("1E-999999999"), 1e300):
            with self.subTest(value=value):
                with self.assertRaises(InvalidPayloadError):
                    serialize_payload({"amount": value})
        self.assertEqual(format_scalar(Decimal("1E+3")), "1000")

    def test_rejects_runaway_nesting(self) -> None:
        payload: dict = {}
        for _ in range(700):
            payload = {"a": payload}
        with self.assertRaises(InvalidPayloadError):
            serialize_payload(payload)
        deep_list: list = []
        for _ in range(700):
            deep_list = [deep_list]
        with self.assertRaises(InvalidPayloadError):
            serialize_payload({"items": deep_list})

    def test_moderate_nesting_is_accepted(self) -> None:
        payload: dict = {}
        for _ in range(MAX_NESTING_DEPTH - 1):
            payload = {"a": payload}
        self.assertTrue(serialize_payload(payload).startswith("a={a={"))

    def test_rejects_non_string_keys(self) -> None:
        with self.assertRaises(InvalidPayloadError):
            serialize_payload({1: "one"})

    def test_rejects_non_mapping_payload(self) -> None:
        with self.assertRaises(InvalidPayloadError):
            serialize_payload(["a", "b"])

    def test_invalid_payload_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            format_scalar(object())


if __name__ == "__main__":
    unittest.main()
