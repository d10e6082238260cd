#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Shared helpers for struct-tools scripts: input decoding, output sinks, errors."""

from __future__ import annotations

import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterator, TextIO

import yaml

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class GenStructError(Exception):
    """Base class for failures that abort a whole run."""


class DecodeFailure(GenStructError):
    def __init__(self, tried: list[str], reason: str | None = None) -> None:
        self.tried = list(tried)
        message = reason or f"Could not parse after trying parsers for: {self.tried}"
        super().__init__(message)


class NestingTooDeep(GenStructError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Document nested too deeply to infer types for {name}")


class UnsupportedValueKind(GenStructError):
    """A value whose kind has no field type (booleans, nulls, dates...)."""

    def __init__(self, path: str, value: Any) -> None:
        self.path = path
        self.kind = type_name(value)
        location = path or "<root>"
        super().__init__(f"Unrecognized type: {self.kind} at {location}")


class OutputWriteFailure(GenStructError):
    pass


def is_std_stream(path: str | None) -> bool:
    return not path or path == "-"


def read_text(path: str | None) -> str:
    """Read file or stdin as text; undecodable bytes are a DecodeFailure."""
    try:
        if is_std_stream(path):
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as err:
        raise DecodeFailure([], reason=f"Input is not valid UTF-8: {err}") from err


@contextlib.contextmanager
def open_output(path: str | None) -> Iterator[TextIO]:
    """Yield stdout for '-' or None, otherwise a UTF-8 file closed on exit."""
    if is_std_stream(path):
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8") as handle:
        yield handle


def write_json(data: Any, compact: bool = False) -> None:
    """Write JSON to stdout with deterministic formatting."""
    if compact:
        json.dump(data, sys.stdout, ensure_ascii=False, separators=(",", ":"))
    else:
        json.dump(data, sys.stdout, ensure_ascii=False, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def configure_logging(errors_path: str | None = "-", verbose: bool = False) -> None:
    """Route log records to stderr or, lazily created, to errors_path."""
    if is_std_stream(errors_path):
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(errors_path, mode="w", encoding="utf-8", delay=True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=[handler],
        force=True,
    )


class Decoder:
    """Strategy that turns raw text into a decoded value."""

    name = ""
    errors: tuple[type[Exception], ...] = ()

    def decode(self, text: str) -> Any:
        raise NotImplementedError


class JsonDecoder(Decoder):
    name = "json"
    errors = (json.JSONDecodeError, RecursionError)

    def decode(self, text: str) -> Any:
        return json.loads(text)


class YamlDecoder(Decoder):
    name = "yaml"
    errors = (yaml.YAMLError, RecursionError)

    def decode(self, text: str) -> Any:
        return yaml.load(text, Loader=SourceKeyLoader)


class SourceKeyLoader(yaml.SafeLoader):
    """SafeLoader that keeps mapping keys exactly as spelled in the source.

    ``true: 1`` yields the key ``"true"``, not ``True``. Keys that are
    sequences or mappings are rejected.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[str, Any]:
        self.flatten_mapping(node)
        mapping: dict[str, Any] = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found a non-scalar key",
                    key_node.start_mark,
                )
            mapping[key_node.value] = self.construct_object(value_node, deep=deep)
        return mapping


DEFAULT_DECODERS: tuple[Decoder, ...] = (JsonDecoder(), YamlDecoder())


def decode_document(
    text: str, decoders: tuple[Decoder, ...] = DEFAULT_DECODERS
) -> tuple[str, dict[str, Any]]:
    """Try decoders in order; return (decoder name, mapping) for the first that yields a mapping."""
    tried: list[str] = []
    for decoder in decoders:
        tried.append(decoder.name)
        try:
            value = decoder.decode(text)
        except decoder.errors as err:
            logger.debug("%s decoder rejected input: %s", decoder.name, err)
            continue
        if not isinstance(value, dict):
            logger.debug("%s decoder produced %s, not an object", decoder.name, type_name(value))
            continue
        return decoder.name, value
    raise DecodeFailure(tried)


def join_key(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def join_index(prefix: str, idx: int) -> str:
    return f"{prefix}[{idx}]"


def type_name(value: Any) -> str:
    """Map python value to a JSON-like type name."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
