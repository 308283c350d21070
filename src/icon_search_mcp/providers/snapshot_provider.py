from __future__ import annotations

import asyncio

from icon_search_mcp.errors import ProviderError
from icon_search_mcp.models import Icon
from icon_search_mcp.providers.libraries import LibraryDefinition
from icon_search_mcp.providers.source_provider import IconSourceProvider
from icon_search_mcp.snapshot import Snapshot, is_remote, load_snapshot


class SharedSnapshot:
    """Loads a snapshot once and hands it to every provider that reads from it."""

    def __init__(self, source: str):
        self.source = source
        self._snapshot: Snapshot | None = None
        self._lock = asyncio.Lock()

    async def get(self) -> Snapshot:
        async with self._lock:
            if self._snapshot is None:
                self._snapshot = await load_snapshot(self.source)
            return self._snapshot


class SnapshotIconLoader:
    def __init__(self, snapshot: SharedSnapshot, library: str | None = None):
        self._snapshot = snapshot
        self._library = library

    @property
    def source_path(self) -> str:
        return self._snapshot.source

    async def load(self) -> list[Icon]:
        try:
            snapshot = await self._snapshot.get()
        except FileNotFoundError as ex:
            raise ProviderError(
                f"Snapshot not found: {self._snapshot.source}",
                self._library or "snapshot",
                404,
            ) from ex
        if self._library is None:
            return list(snapshot.icons)
        return snapshot.icons_for(self._library)


def create_snapshot_provider(
    definition: LibraryDefinition,
    snapshot: SharedSnapshot | str,
    *,
    restrict_to_library: bool = True,
) -> IconSourceProvider:
    shared = snapshot if isinstance(snapshot, SharedSnapshot) else SharedSnapshot(snapshot)
    library = definition.name if restrict_to_library else None
    return IconSourceProvider(definition, SnapshotIconLoader(shared, library))


def describe_source(source: str) -> str:
    return f"remote snapshot {source}" if is_remote(source) else f"snapshot file {source}"
