#!/usr/bin/env python
"""Build CIP-119 DRep registration metadata from form fields."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable

from _cli_common import dump_json, load_json

from gov_metadata.anchors import build_drep_profile
from gov_metadata.core.config import get_settings
from gov_metadata.core.exceptions import ProfileDocumentError
from gov_metadata.core.logging import configure_logging


def _parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("fields", type=Path, help="JSON object with the profile fields ('-' for stdin).")
    parser.add_argument("--output", type=Path, help="Where to write the document (default: stdout).")
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(settings=get_settings())
    fields = load_json(args.fields)
    if not isinstance(fields, dict):
        raise SystemExit("Profile fields must be a JSON object")
    try:
        document = build_drep_profile(fields)
    except ProfileDocumentError as exc:
        raise SystemExit("\n".join(exc.errors) or str(exc)) from exc
    dump_json({"document": document.as_dict(), "hash": document.content_hash()}, args.output)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover
        raise SystemExit(130)
