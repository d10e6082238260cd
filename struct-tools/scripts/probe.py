#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Quick probe of an input file before generating structs from it."""

from __future__ import annotations

import argparse
from typing import Any

from common import DecodeFailure, decode_document, join_index, join_key, read_text, type_name, write_json


def find_unsupported(value: Any, path: str = "") -> list[str]:
    """Paths of values that have no struct field type, in document order."""
    if isinstance(value, dict):
        found: list[str] = []
        for key, inner in value.items():
            found.extend(find_unsupported(inner, join_key(path, key)))
        return found
    if isinstance(value, list):
        found = []
        for idx, inner in enumerate(value):
            found.extend(find_unsupported(inner, join_index(path, idx)))
        return found
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return [path]
    return []


def count_records(value: Any) -> int:
    """Count objects in the document, the root included."""
    if isinstance(value, dict):
        return 1 + sum(count_records(inner) for inner in value.values())
    if isinstance(value, list):
        return sum(count_records(inner) for inner in value)
    return 0


def probe(text: str) -> dict[str, Any]:
    size_bytes = len(text.encode("utf-8"))
    try:
        fmt, data = decode_document(text)
    except DecodeFailure as err:
        return {"valid": False, "format": None, "tried": err.tried, "size_bytes": size_bytes}

    return {
        "valid": True,
        "format": fmt,
        "size_bytes": size_bytes,
        "top_level_fields": list(data.keys()),
        "field_types": {key: type_name(value) for key, value in data.items()},
        "record_count": count_records(data),
        "unsupported": find_unsupported(data),
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Quick structural probe of a JSON or YAML file.")
    parser.add_argument("input", nargs="?", default="-", help="Input file path or '-' for stdin.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    args = parser.parse_args(argv)

    try:
        text = read_text(args.input)
    except DecodeFailure as err:
        write_json({"valid": False, "format": None, "error": str(err)}, compact=args.compact)
        return
    write_json(probe(text), compact=args.compact)


if __name__ == "__main__":
    main()
