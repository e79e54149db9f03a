"""Shared helpers for the governance metadata scripts."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any


def load_json(path: Path) -> Any:
    """Read a JSON document; ``-`` reads from stdin."""
    if str(path) == "-":
        return json.load(sys.stdin)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise SystemExit(f"Input file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Input is not valid JSON: {path} ({exc})") from exc


def dump_json(data: Any, path: Path | None) -> None:
    """Write JSON to ``path`` (creating parent directories) or to stdout when ``path`` is None."""
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if path is None:
        sys.stdout.write(text + "\n")
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
