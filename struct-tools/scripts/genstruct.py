#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Generate Go struct declarations from a sample JSON or YAML document."""

from __future__ import annotations

import argparse
import logging
import sys

from common import GenStructError, configure_logging, decode_document, open_output, read_text
from render import render
from schema import ROOT_NAME, UNIFY_POLICIES, Synthesizer

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate Go structs from a JSON or YAML sample.")
    parser.add_argument("-i", "--input", default="-", help="Name of file to read from. '-' for stdin.")
    parser.add_argument("-o", "--output", default="-", help="Name of file to generate. '-' for stdout.")
    parser.add_argument("-e", "--errors", default="-", help="Name of the file to log errors to. '-' for stderr.")
    parser.add_argument("-p", "--package", default="main", help="Go package name of the generated file.")
    parser.add_argument(
        "--unify",
        choices=sorted(UNIFY_POLICIES),
        default="last-pair",
        help="last-pair compares only the final two list elements; fold requires all elements to agree.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log decoding and inference details.")
    args = parser.parse_args(argv)

    configure_logging(args.errors, args.verbose)
    try:
        fmt, document = decode_document(read_text(args.input))
        logger.debug("decoded input as %s", fmt)
        root = Synthesizer(policy=UNIFY_POLICIES[args.unify]).infer(ROOT_NAME, document)
        with open_output(args.output) as sink:
            render(root, sink, package=args.package)
    except (GenStructError, OSError) as err:
        logger.error("%s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
