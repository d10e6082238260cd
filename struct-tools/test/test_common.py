import datetime
import io
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from common import (
    DecodeFailure,
    Decoder,
    JsonDecoder,
    UnsupportedValueKind,
    YamlDecoder,
    decode_document,
    read_text,
    type_name,
)


class TestDecodeDocument(unittest.TestCase):
    def test_json_first(self) -> None:
        fmt, data = decode_document('{"b": 1, "a": [1, 2]}')
        self.assertEqual(fmt, "json")
        self.assertEqual(list(data), ["b", "a"])

    def test_yaml_fallback(self) -> None:
        fmt, data = decode_document("name: Ann\nage: 30\ntags:\n  - x\n  - y\n")
        self.assertEqual(fmt, "yaml")
        self.assertEqual(data, {"name": "Ann", "age": 30, "tags": ["x", "y"]})

    def test_yaml_keys_become_strings(self) -> None:
        _, data = decode_document("1: one\nnested:\n  2: two\n")
        self.assertEqual(data, {"1": "one", "nested": {"2": "two"}})

    def test_yaml_keys_keep_source_spelling(self) -> None:
        _, data = decode_document("true: 1\nnull: 2\nyes: 3\n~: 4\n3.50: 5\n")
        self.assertEqual(list(data), ["true", "null", "yes", "~", "3.50"])

    def test_yaml_values_are_still_typed(self) -> None:
        _, data = decode_document("flag: true\nn: 1\nitems:\n  - k: v\n")
        self.assertIs(data["flag"], True)
        self.assertEqual(data["items"], [{"k": "v"}])

    def test_yaml_merge_keys(self) -> None:
        text = "base: &b\n  x: 1\nchild:\n  <<: *b\n  y: 2\n"
        _, data = decode_document(text)
        self.assertEqual(data["child"], {"x": 1, "y": 2})

    def test_yaml_non_scalar_key_fails(self) -> None:
        with self.assertRaises(DecodeFailure):
            decode_document("? [a, b]\n: 1\n")

    def test_top_level_list_fails(self) -> None:
        with self.assertRaises(DecodeFailure) as ctx:
            decode_document("[1, 2, 3]")
        self.assertEqual(ctx.exception.tried, ["json", "yaml"])

    def test_scalar_and_empty_fail(self) -> None:
        for text in ("just some words", "", "42"):
            with self.assertRaises(DecodeFailure):
                decode_document(text)

    def test_malformed_everywhere(self) -> None:
        with self.assertRaises(DecodeFailure) as ctx:
            decode_document("{a: [1, 2")
        self.assertIn("json", str(ctx.exception))

    def test_custom_decoder_order(self) -> None:
        class Refuses(Decoder):
            name = "refuses"
            errors = (ValueError,)

            def decode(self, text: str):
                raise ValueError("no")

        fmt, _ = decode_document('{"a": 1}', decoders=(Refuses(), YamlDecoder(), JsonDecoder()))
        self.assertEqual(fmt, "yaml")


class TestHelpers(unittest.TestCase):
    def test_type_name(self) -> None:
        self.assertEqual(type_name(None), "null")
        self.assertEqual(type_name(True), "bool")
        self.assertEqual(type_name(3), "int")
        self.assertEqual(type_name(3.5), "float")
        self.assertEqual(type_name("s"), "string")
        self.assertEqual(type_name([]), "array")
        self.assertEqual(type_name({}), "object")
        self.assertEqual(type_name(datetime.date(2024, 1, 2)), "date")

    def test_invalid_utf8_file_is_decode_failure(self) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "in.json"
            path.write_bytes(b'{"a": "\xff"}')
            with self.assertRaises(DecodeFailure) as ctx:
                read_text(str(path))
        self.assertIn("not valid UTF-8", str(ctx.exception))
        self.assertEqual(ctx.exception.tried, [])

    def test_invalid_utf8_stdin_is_decode_failure(self) -> None:
        stdin = io.TextIOWrapper(io.BytesIO(b"a: \xff\n"), encoding="utf-8")
        with patch("sys.stdin", stdin), self.assertRaises(DecodeFailure):
            read_text("-")

    def test_unsupported_message(self) -> None:
        err = UnsupportedValueKind("user.active", False)
        self.assertEqual(str(err), "Unrecognized type: bool at user.active")
        self.assertEqual(str(UnsupportedValueKind("", None)), "Unrecognized type: null at <root>")


if __name__ == "__main__":
    unittest.main()
