from typing import Iterable, Protocol, runtime_checkable

from icon_search_mcp.models import Icon, IconLibrary, ScoredMatch, SearchOptions


@runtime_checkable
class IconProvider(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    @property
    def version(self) -> str: ...

    async def initialize(self) -> None:
        """Load the source's icons. On failure the provider stays unavailable and the error is raised."""
        ...

    async def search_icons(self, query: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        """Fuzzy search over this provider's icons only."""
        ...

    async def get_icon(self, icon_id: str) -> Icon | None: ...

    async def get_all_icons(self) -> list[Icon]: ...

    async def get_info(self) -> IconLibrary: ...

    async def is_available(self) -> bool: ...

    async def get_icon_count(self) -> int: ...

    async def get_categories(self) -> list[str]: ...

    async def get_styles(self) -> list[str]: ...

    async def get_tags(self) -> list[str]: ...

    async def search_by_category(self, category: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]: ...

    async def search_by_style(self, style: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]: ...

    async def search_by_tags(self, tags: Iterable[str], options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]: ...

    async def close(self) -> None: ...
