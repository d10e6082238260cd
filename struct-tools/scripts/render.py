#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Write an inferred record tree as Go struct declarations."""

from __future__ import annotations

import json
import logging
from typing import Iterator, TextIO

from common import OutputWriteFailure
from schema import Record, Scalar, ScalarKind, Sequence, TypeNode

logger = logging.getLogger(__name__)

GO_SCALARS = {
    ScalarKind.NUMBER: "float64",
    ScalarKind.STRING: "string",
    ScalarKind.UNKNOWN: "interface{}",
}


def capitalize(name: str) -> str:
    """Uppercase the first character only; an empty key stays empty (not a valid Go name)."""
    return name[:1].upper() + name[1:]


def type_expr(node: TypeNode) -> str:
    if isinstance(node, Scalar):
        return GO_SCALARS[node.kind]
    if isinstance(node, Sequence):
        return "[]" + type_expr(node.element)
    return capitalize(node.name)


def tag(key: str) -> str:
    return f"`json:{json.dumps(key, ensure_ascii=False)}`"


def referenced_records(node: TypeNode) -> Iterator[Record]:
    """Yield the record a field refers to, looking through any list nesting."""
    while isinstance(node, Sequence):
        node = node.element
    if isinstance(node, Record):
        yield node


def _write(sink: TextIO, text: str) -> None:
    try:
        sink.write(text)
    except (OSError, ValueError) as err:
        raise OutputWriteFailure(f"write failed: {err}") from err


def render_record(record: Record, sink: TextIO) -> None:
    # Nested declarations come first, in field order.
    for field in record.fields:
        for nested in referenced_records(field.type):
            render_record(nested, sink)

    _write(sink, f"type {capitalize(record.name)} struct {{\n")
    for field in record.fields:
        _write(sink, f"\t{capitalize(field.name)} {type_expr(field.type)} {tag(field.tag)}\n")
    _write(sink, f"}} {tag(record.name)}\n\n")


def render(root: Record, sink: TextIO, package: str = "main") -> None:
    _write(sink, f"// Code generated by genstruct. Root type: {capitalize(root.name)}.\n\n")
    _write(sink, f"package {package}\n\n")
    _write(sink, "import (\n)\n\n")
    render_record(root, sink)
    logger.debug("rendered %s", root.name)
