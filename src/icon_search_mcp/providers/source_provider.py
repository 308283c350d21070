from __future__ import annotations

from datetime import UTC, datetime
from typing import Iterable, Protocol, runtime_checkable

from loguru import logger

from icon_search_mcp.errors import ProviderError
from icon_search_mcp.models import Icon, IconLibrary, ScoredMatch, SearchOptions
from icon_search_mcp.providers.catalog import IconCatalog
from icon_search_mcp.providers.libraries import LibraryDefinition


@runtime_checkable
class IconLoader(Protocol):
    @property
    def source_path(self) -> str: ...

    async def load(self) -> list[Icon]:
        """Return validated icons. Raises ProviderError when the source is missing."""
        ...


class IconSourceProvider:
    """IconProvider backed by a loader strategy and an owned IconCatalog."""

    def __init__(self, definition: LibraryDefinition, loader: IconLoader):
        self._definition = definition
        self._loader = loader
        self._catalog = IconCatalog()
        self._available = False
        self._loaded_at: str | None = None

    @property
    def name(self) -> str:
        return self._definition.name

    @property
    def display_name(self) -> str:
        return self._definition.display_name

    @property
    def version(self) -> str:
        return self._definition.version

    @property
    def definition(self) -> LibraryDefinition:
        return self._definition

    async def initialize(self) -> None:
        logger.info(f"Initializing {self.display_name} provider...")
        try:
            icons = await self._loader.load()
            self._catalog.replace(icons)
        except ProviderError:
            self._mark_unavailable()
            raise
        except Exception as ex:
            self._mark_unavailable()
            raise ProviderError(
                f"Failed to initialize {self.display_name} provider: {ex}",
                self.name,
                500,
            ) from ex

        self._loaded_at = datetime.now(UTC).isoformat(timespec="seconds")
        self._available = len(self._catalog) > 0
        if self._available:
            logger.info(f"{self.display_name} provider initialized with {len(self._catalog)} icons")
        else:
            logger.warning(f"{self.display_name} provider loaded no icons from {self._loader.source_path}")

    def _mark_unavailable(self) -> None:
        self._available = False
        self._catalog.replace([])

    def _ensure_available(self) -> None:
        if not self._available:
            raise ProviderError(
                f"Provider {self.name} is not initialized. Call initialize() first.",
                self.name,
                503,
            )

    async def is_available(self) -> bool:
        return self._available

    async def search_icons(self, query: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._ensure_available()
        return self._catalog.search(query, options)

    async def get_icon(self, icon_id: str) -> Icon | None:
        self._ensure_available()
        return self._catalog.get(icon_id)

    async def get_all_icons(self) -> list[Icon]:
        self._ensure_available()
        return self._catalog.icons

    async def get_icon_count(self) -> int:
        return len(self._catalog)

    async def get_categories(self) -> list[str]:
        return self._catalog.categories()

    async def get_styles(self) -> list[str]:
        return self._catalog.styles()

    async def get_tags(self) -> list[str]:
        return self._catalog.tags()

    async def search_by_category(self, category: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._ensure_available()
        return self._catalog.by_category(category)

    async def search_by_style(self, style: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._ensure_available()
        return self._catalog.by_style(style)

    async def search_by_tags(self, tags: Iterable[str], options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._ensure_available()
        return self._catalog.by_tags(tags)

    async def get_info(self) -> IconLibrary:
        return IconLibrary(
            name=self.name,
            display_name=self.display_name,
            description=self._definition.description,
            version=self.version,
            icon_count=len(self._catalog),
            source_url=self._definition.source_url,
            license=self._definition.license,
            styles=self._catalog.styles() or list(self._definition.styles),
            categories=self._catalog.categories(),
            last_updated=self._loaded_at or datetime.now(UTC).isoformat(timespec="seconds"),
            source_path=self._loader.source_path,
        )

    async def close(self) -> None:
        self._mark_unavailable()
