"""Helpers that turn SVG files on disk into Icon records.

Tags and categories are heuristics: tags come from the file name, its
separator-split parts and synonym tables; categories come from keyword
matches over the name and its path.
"""

from __future__ import annotations

import asyncio
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, Mapping

from loguru import logger

from icon_search_mcp.models import Icon
from icon_search_mcp.providers.libraries import LibraryDefinition

COMMON_SYNONYMS: dict[str, tuple[str, ...]] = {
    "home": ("house", "building"),
    "user": ("person", "profile", "account"),
    "search": ("find", "magnify", "lookup"),
    "settings": ("config", "preferences", "options"),
    "delete": ("remove", "trash", "bin"),
    "edit": ("modify", "change", "update"),
    "add": ("plus", "create", "new"),
    "arrow": ("direction", "pointer"),
}

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "navigation": ("arrow", "chevron", "menu", "home", "back", "forward"),
    "communication": ("mail", "message", "chat", "phone", "call"),
    "media": ("play", "pause", "stop", "volume", "music", "video"),
    "file": ("document", "folder", "file", "download", "upload"),
    "ui": ("button", "input", "form", "modal", "tooltip"),
    "social": ("share", "like", "follow", "twitter", "facebook"),
    "commerce": ("cart", "shop", "buy", "sell", "money", "payment"),
    "weather": ("sun", "cloud", "rain", "snow", "storm"),
}

DEFAULT_SIZE = "24x24"

_SEPARATORS = re.compile(r"[-_\s]+")
_VIEWBOX = re.compile(r"""viewBox=["']([^"']+)["']""")
_WIDTH = re.compile(r"""\swidth=["']([^"']+)["']""")
_HEIGHT = re.compile(r"""\sheight=["']([^"']+)["']""")


def _utc_now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def find_svg_files(base_dir: Path, patterns: Iterable[str]) -> list[Path]:
    files: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        for path in sorted(base_dir.glob(pattern)):
            if path.is_file() and path.suffix.lower() == ".svg" and path not in seen:
                seen.add(path)
                files.append(path)
    return files


def generate_tags(
    icon_name: str,
    synonyms: Mapping[str, Iterable[str]] | None = None,
    extra_tags: Iterable[str] = (),
) -> list[str]:
    name = icon_name.lower()
    tags: dict[str, None] = {name: None}

    for part in _SEPARATORS.split(name):
        if len(part) > 1:
            tags[part] = None

    for table in (COMMON_SYNONYMS, synonyms or {}):
        for key, values in table.items():
            if key in name:
                for synonym in values:
                    tags[synonym.lower()] = None

    for tag in extra_tags:
        tags[tag.lower()] = None

    return list(tags)


def generate_categories(icon_name: str, path_hint: str = "") -> list[str]:
    search_text = f"{icon_name} {path_hint}".lower()
    categories = [
        category
        for category, keywords in CATEGORY_KEYWORDS.items()
        if any(keyword in search_text for keyword in keywords)
    ]
    return categories or ["general"]


def extract_size(svg_content: str) -> str:
    viewbox = _VIEWBOX.search(svg_content)
    if viewbox:
        parts = viewbox.group(1).split()
        if len(parts) == 4:
            return f"{parts[2]}x{parts[3]}"

    width = _WIDTH.search(svg_content)
    height = _HEIGHT.search(svg_content)
    if width and height:
        return f"{width.group(1)}x{height.group(1)}"

    return DEFAULT_SIZE


def extract_style(file_path: Path, styles: Iterable[str]) -> str:
    styles = list(styles)
    lowered = str(file_path).lower()
    # Later styles are more specific ("fill" beats "regular").
    for style in reversed(styles[1:]):
        if style in lowered:
            return style
    return styles[0] if styles else "regular"


def build_icon(file_path: Path, svg_content: str, definition: LibraryDefinition, relative_to: Path) -> Icon:
    name = file_path.stem
    try:
        display_path = file_path.relative_to(relative_to).as_posix()
    except ValueError:
        display_path = file_path.as_posix()

    icon = Icon(
        name=name,
        library=definition.name,
        tags=generate_tags(name, definition.synonyms, definition.extra_tags),
        path=display_path,
        content=svg_content,
        style=extract_style(file_path, definition.styles),
        categories=generate_categories(name, file_path.parent.name),
        size=extract_size(svg_content),
        source=definition.source_url,
        updated_at=_utc_now(),
    )
    icon.validate()
    return icon


async def scan_library(package_dir: Path, definition: LibraryDefinition, relative_to: Path | None = None) -> list[Icon]:
    """Read every SVG of a library package, skipping files that cannot be read."""
    files = await asyncio.to_thread(find_svg_files, package_dir, definition.icon_paths)
    base = relative_to or package_dir
    icons: list[Icon] = []
    for file_path in files:
        try:
            svg_content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
            icons.append(build_icon(file_path, svg_content, definition, base))
        except Exception as ex:
            logger.warning(f"Could not process {file_path}: {ex}")
    return icons
