#!/usr/bin/env python
"""Build a CIP-108 or CIP-136 vote rationale document from form fields."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable

from _cli_common import dump_json, load_json

from gov_metadata.anchors import RationaleBuilder, RationaleStandard
from gov_metadata.core.config import get_settings
from gov_metadata.core.exceptions import RationaleValidationError
from gov_metadata.core.logging import configure_logging


def _parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("fields", type=Path, help="JSON object with the rationale fields ('-' for stdin).")
    parser.add_argument(
        "--standard",
        choices=[standard.value for standard in RationaleStandard],
        help="Rationale standard (defaults to GOV_RATIONALE_STANDARD).",
    )
    parser.add_argument("--output", type=Path, help="Where to write the document (default: stdout).")
    parser.add_argument(
        "--hash-only",
        action="store_true",
        help="Print only the blake2b-256 hash of the document.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings=settings)
    fields = load_json(args.fields)
    if not isinstance(fields, dict):
        raise SystemExit("Rationale fields must be a JSON object")

    builder = RationaleBuilder(args.standard or settings.rationale_standard)
    try:
        document = builder.build(fields)
    except RationaleValidationError as exc:
        raise SystemExit("\n".join(exc.errors) or str(exc)) from exc

    if args.hash_only:
        print(document.content_hash())
        return
    dump_json({"document": document.as_dict(), "hash": document.content_hash()}, args.output)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover
        raise SystemExit(130)
