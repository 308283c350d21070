"""Scan installed icon packages and write a JSON snapshot the server can load instead.

    python -m icon_search_mcp.build_index --packages-dir node_modules --output dist/icons.json
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections import Counter
from pathlib import Path

from loguru import logger

from icon_search_mcp.logging_config import setup_logging
from icon_search_mcp.models import Icon
from icon_search_mcp.providers.libraries import LibraryDefinition, select_libraries
from icon_search_mcp.providers.svg_scanner import scan_library
from icon_search_mcp.snapshot import write_snapshot


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="icon_search_mcp.build_index", description=__doc__.splitlines()[0])
    parser.add_argument("--packages-dir", default="node_modules", help="Directory holding the icon packages")
    parser.add_argument("--output", default="dist/icons.json", help="Snapshot file to write")
    parser.add_argument(
        "--library",
        action="append",
        dest="libraries",
        help="Library to include (repeatable, default: all built-in libraries)",
    )
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


async def collect_icons(packages_dir: Path, definitions: list[LibraryDefinition]) -> dict[str, list[Icon]]:
    """Scan each library whose package is installed. Missing packages are skipped."""
    found: dict[str, list[Icon]] = {}
    for definition in definitions:
        package_dir = packages_dir / definition.package
        if not package_dir.is_dir():
            logger.warning(f"Skipping {definition.display_name} (directory not found at {package_dir})")
            continue
        icons = await scan_library(package_dir, definition, relative_to=packages_dir)
        logger.info(f"Found {len(icons)} icons in {definition.display_name}")
        found[definition.name] = icons
    return found


async def build_index(packages_dir: Path, output: Path, libraries: list[str] | None = None) -> dict | None:
    """Write the snapshot and return its payload, or None when there was nothing to index."""
    if not packages_dir.is_dir():
        logger.warning(f"Packages directory not found: {packages_dir}. Skipping icon index build.")
        return None

    found = await collect_icons(packages_dir, select_libraries(libraries))
    icons = [icon for library_icons in found.values() for icon in library_icons]
    if not icons:
        logger.warning(f"No icon libraries found in {packages_dir}")
        return None

    return await asyncio.to_thread(write_snapshot, output, icons)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(level=args.log_level, consumers=[{"type": "console"}])

    try:
        payload = asyncio.run(build_index(Path(args.packages_dir), Path(args.output), args.libraries))
    except Exception:
        logger.exception("Icon index build failed")
        return 1

    if payload is None:
        return 0

    counts = Counter(icon["library"] for icon in payload["icons"])
    print("Index build summary:")
    print(f"Total icons: {payload['totalIcons']}")
    print("Library breakdown:")
    for library, count in counts.items():
        print(f"  {library}: {count} icons")
    print(f"Index saved to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
