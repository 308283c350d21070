from __future__ import annotations

from typing import Callable, Iterable

from icon_search_mcp.models import Icon, ScoredMatch, SearchOptions
from icon_search_mcp.providers.fuzzy_index import FuzzyIndex


def as_filtered_matches(icons: Iterable[Icon]) -> list[ScoredMatch[Icon]]:
    """Wrap filter hits as perfect-score matches, indexed by position in the hit list."""
    return [ScoredMatch(item=icon, score=0.0, original_index=i) for i, icon in enumerate(icons)]


def filter_by_category(icons: Iterable[Icon], category: str) -> list[Icon]:
    needle = category.lower()
    return [icon for icon in icons if any(needle in cat.lower() for cat in icon.categories)]


def filter_by_style(icons: Iterable[Icon], style: str) -> list[Icon]:
    needle = style.lower()
    return [icon for icon in icons if icon.style is not None and icon.style.lower() == needle]


def filter_by_tags(icons: Iterable[Icon], tags: Iterable[str]) -> list[Icon]:
    needles = [t.lower() for t in tags]
    return [icon for icon in icons if any(n in tag.lower() for n in needles for tag in icon.tags)]


def _sorted_unique(values: Iterable[str | None]) -> list[str]:
    return sorted({v for v in values if v})


class IconCatalog:
    """Icon set owned by a single provider, together with its fuzzy index.

    Providers compose a catalog instead of inheriting shared behaviour; the
    index is rebuilt every time ``replace`` swaps the icon set.
    """

    def __init__(self, icons: Iterable[Icon] = (), *, index_factory: Callable[[list[Icon]], FuzzyIndex] = FuzzyIndex):
        self._index_factory = index_factory
        self._icons: list[Icon] = []
        self._by_name: dict[str, Icon] = {}
        self._index = index_factory([])
        self.replace(icons)

    def replace(self, icons: Iterable[Icon]) -> None:
        valid: list[Icon] = []
        for icon in icons:
            icon.validate()
            valid.append(icon)
        self._icons = valid
        self._by_name = {}
        for icon in valid:
            self._by_name.setdefault(icon.name, icon)
        self._index = self._index_factory(valid)

    def __len__(self) -> int:
        return len(self._icons)

    @property
    def icons(self) -> list[Icon]:
        return list(self._icons)

    def get(self, name: str) -> Icon | None:
        return self._by_name.get(name)

    def search(self, query: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        return self._index.search(query, options)

    def by_category(self, category: str) -> list[ScoredMatch[Icon]]:
        return as_filtered_matches(filter_by_category(self._icons, category))

    def by_style(self, style: str) -> list[ScoredMatch[Icon]]:
        return as_filtered_matches(filter_by_style(self._icons, style))

    def by_tags(self, tags: Iterable[str]) -> list[ScoredMatch[Icon]]:
        return as_filtered_matches(filter_by_tags(self._icons, tags))

    def categories(self) -> list[str]:
        return _sorted_unique(cat for icon in self._icons for cat in icon.categories)

    def styles(self) -> list[str]:
        return _sorted_unique(icon.style for icon in self._icons)

    def tags(self) -> list[str]:
        return _sorted_unique(tag for icon in self._icons for tag in icon.tags)
