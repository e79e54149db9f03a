#!/usr/bin/env python
"""Canonicalize raw DRep or governance-action metadata into a flat profile."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable

from _cli_common import dump_json, load_json

from gov_metadata.core.config import get_settings
from gov_metadata.core.logging import configure_logging
from gov_metadata.normalization import detect_shapes, extract_profile


def _parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("input", type=Path, help="Raw metadata JSON file ('-' for stdin).")
    parser.add_argument("--output", type=Path, help="Where to write the canonical profile (default: stdout).")
    parser.add_argument(
        "--bytes-depth",
        type=int,
        help="Maximum nesting depth for the hex-encoded bytes fallback.",
    )
    parser.add_argument(
        "--show-shapes",
        action="store_true",
        help="Include the detected metadata layouts in the output.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(settings=get_settings())
    raw = load_json(args.input)

    profile = extract_profile(raw, bytes_depth=args.bytes_depth)
    if profile is None:
        payload: dict = {"profile": None, "has_profile": False}
    else:
        payload = {"profile": profile.as_dict(), "has_profile": profile.is_present}
    if args.show_shapes:
        payload["shapes"] = [shape.value for shape in detect_shapes(raw)]
    dump_json(payload, args.output)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover
        raise SystemExit(130)
