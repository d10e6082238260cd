#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Infer a tree of record types from a decoded JSON/YAML object."""

from __future__ import annotations

import argparse
import enum
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Union

from common import (
    GenStructError,
    NestingTooDeep,
    UnsupportedValueKind,
    configure_logging,
    decode_document,
    join_index,
    join_key,
    read_text,
    write_json,
)

logger = logging.getLogger(__name__)

ROOT_NAME = "TopLevelElement"


class ScalarKind(enum.Enum):
    NUMBER = "number"
    STRING = "string"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Scalar:
    kind: ScalarKind


@dataclass(frozen=True)
class Field:
    name: str
    tag: str
    type: TypeNode


@dataclass(frozen=True)
class Record:
    name: str
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class Sequence:
    element: TypeNode


TypeNode = Union[Scalar, Record, Sequence]

NUMBER = Scalar(ScalarKind.NUMBER)
STRING = Scalar(ScalarKind.STRING)
UNKNOWN = Scalar(ScalarKind.UNKNOWN)


def identity(name: str) -> str:
    return name


def last_pair(types: list[TypeNode]) -> TypeNode:
    """Keep the last element type unless it differs from the one before it."""
    if not types:
        return UNKNOWN
    if len(types) > 1 and types[-2] != types[-1]:
        return UNKNOWN
    return types[-1]


def fold(types: list[TypeNode]) -> TypeNode:
    """Keep the first element type only if every other element agrees with it."""
    if not types:
        return UNKNOWN
    first = types[0]
    if any(other != first for other in types[1:]):
        return UNKNOWN
    return first


UNIFY_POLICIES: dict[str, Callable[[list[TypeNode]], TypeNode]] = {
    "last-pair": last_pair,
    "fold": fold,
}


class Synthesizer:
    """Builds record types from mappings and element types from lists.

    ``naming`` maps a list's name to the name given to records found inside it
    (identity: no singularization). ``policy`` reduces the element types of a
    list to one type.
    """

    def __init__(
        self,
        naming: Callable[[str], str] = identity,
        policy: Callable[[list[TypeNode]], TypeNode] = last_pair,
    ) -> None:
        self.naming = naming
        self.policy = policy

    def infer(self, name: str, mapping: dict[str, Any]) -> Record:
        """Entry point for a whole document; nesting beyond the stack limit is a NestingTooDeep."""
        try:
            return self.synthesize(name, mapping)
        except RecursionError as err:
            raise NestingTooDeep(name) from err

    def infer_elements(self, name: str, elements: list[Any]) -> TypeNode:
        try:
            return self.unify(name, elements)
        except RecursionError as err:
            raise NestingTooDeep(name) from err

    def synthesize(self, name: str, mapping: dict[str, Any], path: str = "") -> Record:
        fields = []
        for key, value in mapping.items():
            field_type = self.classify(key, value, join_key(path, key))
            fields.append(Field(name=key, tag=key, type=field_type))
        logger.debug("synthesized record %s with %d fields", name, len(fields))
        return Record(name=name, fields=tuple(fields))

    def unify(self, name: str, elements: list[Any], path: str = "") -> TypeNode:
        types: list[TypeNode] = []
        for idx, value in enumerate(elements):
            item_path = join_index(path, idx)
            if isinstance(value, dict):
                types.append(self.synthesize(self.naming(name), value, item_path))
            else:
                types.append(self.classify(name, value, item_path))
        result = self.policy(types)
        if result == UNKNOWN and types:
            logger.debug("elements of %s disagree; using unknown element type", path or name)
        return result

    def classify(self, name: str, value: Any, path: str) -> TypeNode:
        if isinstance(value, bool):
            raise UnsupportedValueKind(path, value)
        if isinstance(value, (int, float)):
            return NUMBER
        if isinstance(value, str):
            return STRING
        if isinstance(value, dict):
            return self.synthesize(name, value, path)
        if isinstance(value, list):
            return Sequence(self.unify(name, value, path))
        raise UnsupportedValueKind(path, value)


def synthesize(name: str, mapping: dict[str, Any]) -> Record:
    return Synthesizer().infer(name, mapping)


def unify(name: str, elements: list[Any]) -> TypeNode:
    return Synthesizer().infer_elements(name, elements)


def to_dict(node: TypeNode) -> dict[str, Any]:
    """Plain JSON-ready view of a type tree."""
    if isinstance(node, Scalar):
        return {"type": node.kind.value}
    if isinstance(node, Sequence):
        return {"type": "sequence", "element": to_dict(node.element)}
    return {
        "type": "record",
        "name": node.name,
        "fields": [
            {"name": field.name, "tag": field.tag, "type": to_dict(field.type)}
            for field in node.fields
        ],
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show the record types inferred from a JSON/YAML file.")
    parser.add_argument("input", nargs="?", default="-", help="Input file path or '-' for stdin.")
    parser.add_argument("--unify", choices=sorted(UNIFY_POLICIES), default="last-pair", help="Element type unification policy.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log inference details to stderr.")
    args = parser.parse_args(argv)

    configure_logging("-", args.verbose)
    try:
        _, document = decode_document(read_text(args.input))
        root = Synthesizer(policy=UNIFY_POLICIES[args.unify]).infer(ROOT_NAME, document)
    except (GenStructError, OSError) as err:
        logger.error("%s", err)
        return 1
    write_json(to_dict(root), compact=args.compact)
    return 0


if __name__ == "__main__":
    sys.exit(main())
