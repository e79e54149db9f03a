#!/usr/bin/env python
"""Fetch one page of DReps or governance actions and enrich it with profile metadata."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable

import anyio

from _cli_common import dump_json

from gov_metadata.core.config import Settings, get_settings
from gov_metadata.core.exceptions import IndexerError
from gov_metadata.core.logging import configure_logging, log_context
from gov_metadata.core.models import PageQuery
from gov_metadata.enrichment import IndexerClient, ListingController, display_label


def _parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--kind", choices=["drep", "action"], default="drep", help="Entity list to load.")
    parser.add_argument("--page", type=int, default=1, help="1-based page number.")
    parser.add_argument("--page-size", type=int, help="Entities per page (defaults to GOV_PAGE_SIZE).")
    parser.add_argument("--search", help="Free-text search forwarded to the indexer.")
    parser.add_argument("--status", action="append", default=[], help="Status filter (repeatable).")
    parser.add_argument("--sort", help="Sort key understood by the indexer.")
    parser.add_argument("--direction", choices=["Ascending", "Descending"], help="Sort direction.")
    parser.add_argument("--output", type=Path, help="Write the enriched page as JSON instead of printing labels.")
    return parser.parse_args(list(argv) if argv is not None else None)


async def _run(args: argparse.Namespace, settings: Settings) -> None:
    query = PageQuery(
        page=args.page,
        page_size=args.page_size or settings.page_size,
        search=args.search,
        statuses=tuple(args.status),
        sort=args.sort,
        direction=args.direction,
    )
    with log_context(kind=args.kind):
        async with IndexerClient(settings, kind=args.kind) as client:
            controller = ListingController(client.fetch_page, client.fetch_metadata, settings)
            state = await controller.load(query)

    if state is None:
        return
    if state.error:
        raise SystemExit(f"Failed to load page {query.page}: {state.error}")

    if args.output:
        dump_json(
            {
                "page": query.page,
                "has_more": state.has_more,
                "total": state.total,
                "entities": [
                    {
                        "id": entity.entity_id,
                        "label": display_label(entity),
                        "has_profile": entity.has_profile,
                        "metadata": entity.metadata,
                    }
                    for entity in state.entities
                ],
            },
            args.output,
        )
        print(f"Enriched {len(state.entities)} entities -> {args.output}")
        return

    for entity in state.entities:
        marker = "*" if entity.has_profile else " "
        print(f"{marker} {entity.entity_id}\t{display_label(entity)}")
    if state.has_more:
        print(f"... more results on page {query.page + 1}")


def main(argv: Iterable[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings=settings)
    try:
        anyio.run(_run, args, settings)
    except IndexerError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover
        raise SystemExit(130)
