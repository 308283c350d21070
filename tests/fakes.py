from __future__ import annotations

from typing import Iterable

from icon_search_mcp.models import Icon, IconLibrary, ScoredMatch, SearchOptions
from icon_search_mcp.providers.catalog import IconCatalog
from icon_search_mcp.providers.libraries import LibraryDefinition

HOME_SVG = '<svg viewBox="0 0 24 24"><path d="M10 20v-6h4v6h5v-8h3L12 3 2 12h3v8z"/></svg>'


def make_icon(name: str = "home", library: str = "test-library", **overrides) -> Icon:
    values = {
        "name": name,
        "library": library,
        "tags": [name],
        "path": f"icons/{name}.svg",
        "content": HOME_SVG,
        "style": "solid",
        "categories": ["general"],
        "size": "24x24",
        "source": "https://github.com/test/test-icons",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    values.update(overrides)
    return Icon(**values)


def make_definition(name: str = "test-library", **overrides) -> LibraryDefinition:
    values = {
        "name": name,
        "display_name": name.replace("-", " ").title(),
        "version": "1.0.0",
        "description": f"{name} icons for tests",
        "source_url": f"https://github.com/test/{name}",
        "license": "MIT",
        "package": name,
        "icon_paths": ("icons/*.svg",),
    }
    values.update(overrides)
    return LibraryDefinition(**values)


def octicons_icons() -> list[Icon]:
    return [
        make_icon("home", "octicons", tags=["home", "house", "building"], categories=["navigation"]),
        make_icon("search", "octicons", tags=["search", "find", "magnify"], categories=["ui"]),
        make_icon("user", "octicons", tags=["user", "person", "profile"], categories=["user"]),
    ]


def feather_icons() -> list[Icon]:
    return [
        make_icon("home", "feather", tags=["home", "house"], categories=["navigation"], style="regular"),
        make_icon("search", "feather", tags=["search", "find"], categories=["ui"], style="regular"),
        make_icon("settings", "feather", tags=["settings", "gear", "config"], categories=["ui"], style="regular"),
    ]


def bootstrap_icons() -> list[Icon]:
    return [
        make_icon("house", "bootstrap-icons", tags=["house", "home"], categories=["navigation"], style="fill"),
        make_icon("search", "bootstrap-icons", tags=["search", "find"], categories=["ui"], style="regular"),
        make_icon("gear", "bootstrap-icons", tags=["gear", "settings"], categories=["ui"], style="regular"),
    ]


class StaticIconLoader:
    def __init__(self, icons: list[Icon], source_path: str = "memory://icons"):
        self._icons = icons
        self._source_path = source_path
        self.load_calls = 0

    @property
    def source_path(self) -> str:
        return self._source_path

    async def load(self) -> list[Icon]:
        self.load_calls += 1
        return list(self._icons)


class FakeIconProvider:
    """In-memory IconProvider that counts calls and can be told to fail."""

    def __init__(
        self,
        name: str,
        icons: list[Icon],
        *,
        available: bool = True,
        fail_with: Exception | None = None,
    ):
        self._name = name
        self._catalog = IconCatalog(icons)
        self._available = available
        self.fail_with = fail_with
        self.calls: dict[str, int] = {}
        self.closed = False

    def _record(self, method: str) -> None:
        self.calls[method] = self.calls.get(method, 0) + 1
        if self.fail_with is not None:
            raise self.fail_with

    @property
    def name(self) -> str:
        return self._name

    @property
    def display_name(self) -> str:
        return self._name.title()

    @property
    def version(self) -> str:
        return "1.0.0"

    async def initialize(self) -> None:
        self._record("initialize")

    async def is_available(self) -> bool:
        return self._available

    async def search_icons(self, query: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._record("search_icons")
        return self._catalog.search(query, options)

    async def get_icon(self, icon_id: str) -> Icon | None:
        self._record("get_icon")
        return self._catalog.get(icon_id)

    async def get_all_icons(self) -> list[Icon]:
        self._record("get_all_icons")
        return self._catalog.icons

    async def get_info(self) -> IconLibrary:
        return IconLibrary(
            name=self._name,
            display_name=self.display_name,
            description=f"{self._name} test icons",
            version=self.version,
            icon_count=len(self._catalog),
            source_url=f"https://example.com/{self._name}",
            license="MIT",
            styles=self._catalog.styles(),
            categories=self._catalog.categories(),
            last_updated="2024-01-01T00:00:00+00:00",
        )

    async def get_icon_count(self) -> int:
        return len(self._catalog)

    async def get_categories(self) -> list[str]:
        return self._catalog.categories()

    async def get_styles(self) -> list[str]:
        return self._catalog.styles()

    async def get_tags(self) -> list[str]:
        return self._catalog.tags()

    async def search_by_category(self, category: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._record("search_by_category")
        return self._catalog.by_category(category)

    async def search_by_style(self, style: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._record("search_by_style")
        return self._catalog.by_style(style)

    async def search_by_tags(self, tags: Iterable[str], options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        self._record("search_by_tags")
        return self._catalog.by_tags(tags)

    async def close(self) -> None:
        self.closed = True
        self._available = False
