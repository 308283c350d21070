from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx
from loguru import logger
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from icon_search_mcp.errors import ValidationError
from icon_search_mcp.models import Icon

SNAPSHOT_VERSION = "1.0.0"
_TIMEOUT_SECONDS = 30


@dataclass
class Snapshot:
    version: str
    generated_at: str
    icons: list[Icon] = field(default_factory=list)
    skipped: int = 0

    @property
    def libraries(self) -> list[str]:
        return list(dict.fromkeys(icon.library for icon in self.icons))

    def icons_for(self, library: str) -> list[Icon]:
        return [icon for icon in self.icons if icon.library == library]


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def snapshot_to_dict(icons: list[Icon], generated_at: str | None = None) -> dict[str, Any]:
    serialized: list[dict[str, Any]] = []
    for icon in icons:
        data = icon.to_dict()
        data["svg"] = data.pop("content")
        serialized.append(data)
    return {
        "version": SNAPSHOT_VERSION,
        "generatedAt": generated_at or datetime.now(UTC).isoformat(timespec="seconds"),
        "totalIcons": len(icons),
        "libraries": list(dict.fromkeys(icon.library for icon in icons)),
        "icons": serialized,
    }


def parse_snapshot(data: Any) -> Snapshot:
    if not isinstance(data, dict):
        raise ValidationError("Snapshot must be a JSON object", "snapshot")
    raw_icons = data.get("icons")
    if not isinstance(raw_icons, list):
        raise ValidationError("Snapshot field 'icons' must be a list", "icons")

    icons: list[Icon] = []
    skipped = 0
    for position, raw in enumerate(raw_icons):
        try:
            if not isinstance(raw, dict):
                raise ValidationError("Icon record must be an object", "icons")
            icons.append(Icon.from_dict(raw))
        except ValidationError as ex:
            skipped += 1
            logger.warning(f"Skipping invalid snapshot icon #{position}: {ex}")

    return Snapshot(
        version=str(data.get("version", SNAPSHOT_VERSION)),
        generated_at=str(data.get("generatedAt", "")),
        icons=icons,
        skipped=skipped,
    )


def write_snapshot(path: Path, icons: list[Icon]) -> dict[str, Any]:
    payload = snapshot_to_dict(icons)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return payload


def _is_retryable(ex: BaseException) -> bool:
    if isinstance(ex, httpx.HTTPStatusError):
        return ex.response.status_code >= 500
    return isinstance(ex, httpx.TransportError)


def _on_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    reason = type(exc).__name__ if exc else "Unknown"
    logger.warning(f"{reason} fetching snapshot. Retrying (attempt {retry_state.attempt_number}/3)...")


@retry(
    retry=retry_if_exception(_is_retryable),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    stop=stop_after_attempt(3),
    before_sleep=_on_retry,
    reraise=True,
)
async def _fetch_remote(url: str) -> Any:
    async with httpx.AsyncClient(timeout=_TIMEOUT_SECONDS, follow_redirects=True) as client:
        response = await client.get(url, headers={"Accept": "application/json"})
    response.raise_for_status()
    return response.json()


def _read_local(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


async def load_snapshot(source: str) -> Snapshot:
    """Load a snapshot from a local path or an http(s) URL."""
    if is_remote(source):
        data = await _fetch_remote(source)
    else:
        data = await asyncio.to_thread(_read_local, Path(source))
    snapshot = parse_snapshot(data)
    logger.debug(f"Loaded snapshot from {source}: {len(snapshot.icons)} icons, {snapshot.skipped} skipped")
    return snapshot
