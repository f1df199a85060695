"""CLI entry point: fetch once and write the map as HTML.

Usage:
    python -m ngsimap.cli --output map.html [--type Station] [-v]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from ngsimap.adapters.folium_renderer import render_html
from ngsimap.adapters.map_surface import InMemoryMapSurface
from ngsimap.adapters.ngsi_client import NgsiClient
from ngsimap.config import Settings
from ngsimap.services.selection import ALL_TYPES
from ngsimap.services.session import MapSession

logger = logging.getLogger(__name__)


async def render_once(settings: Settings, selected: str, output: Path) -> int:
    """Run one cycle, settle the viewport and write the HTML. Returns features rendered."""
    client = NgsiClient(settings)
    surface = InMemoryMapSurface()
    session = MapSession(settings, client, surface=surface, selected=selected)
    try:
        await session.start(poll=False)
        applied = await session.load_once()
    finally:
        await session.stop()
        await client.aclose()

    if not applied:
        state = session.poller.state
        logger.error("Fetch failed: %s", state.error.message if state.error else state.status)
        return -1

    output.write_text(render_html(session.reconciler.layers, surface), encoding="utf-8")
    logger.info(
        "Wrote %s: %d layers, %d features (view %s)",
        output, len(session.reconciler.layers), session.last_report.rendered, session.view.state,
    )
    return session.last_report.rendered


def main() -> None:
    parser = argparse.ArgumentParser(description="Render NGSI-LD entities to an HTML map")
    parser.add_argument("--output", type=Path, required=True, help="HTML file to write")
    parser.add_argument("--type", default=ALL_TYPES, help="Entity type to fetch (default: all)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    rendered = asyncio.run(render_once(settings, args.type, args.output))
    if rendered < 0:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
