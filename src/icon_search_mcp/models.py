from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Generic, Literal, TypeVar

from icon_search_mcp.errors import ValidationError

T = TypeVar("T")

SearchType = Literal["fuzzy", "exact", "filtered", "failed"]

DEFAULT_SEARCH_KEYS: dict[str, float] = {"name": 1.0, "tags": 0.7, "categories": 0.5}


def _required_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"Icon field '{key}' must be a non-empty string", key)
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Icon field '{key}' must be a string", key)
    return value


def _str_list(data: dict[str, Any], key: str, *, required: bool) -> list[str]:
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(f"Icon field '{key}' is required", key)
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"Icon field '{key}' must be a list of strings", key)
    return list(value)


@dataclass
class Icon:
    name: str
    library: str
    tags: list[str]
    path: str
    content: str
    style: str | None = None
    categories: list[str] = field(default_factory=list)
    size: str | None = None
    source: str | None = None
    updated_at: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.library)

    def validate(self) -> None:
        """Raise ValidationError unless every required field is populated."""
        for key in ("name", "library", "path", "content"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value:
                raise ValidationError(f"Icon field '{key}' must be a non-empty string", key)
        if self.tags is None:
            raise ValidationError("Icon field 'tags' is required", "tags")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "library": self.library,
            "tags": list(self.tags),
            "path": self.path,
            "content": self.content,
            "categories": list(self.categories),
        }
        if self.style is not None:
            data["style"] = self.style
        if self.size is not None:
            data["size"] = self.size
        if self.source is not None:
            data["source"] = self.source
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Icon:
        # Snapshots written by older tooling store the markup under "svg".
        payload = dict(data)
        if not payload.get("content") and payload.get("svg"):
            payload["content"] = payload["svg"]
        return cls(
            name=_required_str(payload, "name"),
            library=_required_str(payload, "library"),
            tags=_str_list(payload, "tags", required=True),
            path=_required_str(payload, "path"),
            content=_required_str(payload, "content"),
            style=_optional_str(payload, "style"),
            categories=_str_list(payload, "categories", required=False),
            size=_optional_str(payload, "size"),
            source=_optional_str(payload, "source"),
            updated_at=_optional_str(payload, "updatedAt"),
        )


@dataclass(frozen=True)
class MatchSpan:
    """Which part of a field matched: ``indices`` are inclusive character ranges."""

    key: str
    value: str
    indices: list[tuple[int, int]]

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value, "indices": [list(pair) for pair in self.indices]}


@dataclass
class ScoredMatch(Generic[T]):
    item: T
    score: float | None = None
    matches: list[MatchSpan] | None = None
    original_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        item = self.item.to_dict() if hasattr(self.item, "to_dict") else self.item
        data: dict[str, Any] = {"item": item}
        if self.score is not None:
            data["score"] = self.score
        if self.matches is not None:
            data["matches"] = [m.to_dict() for m in self.matches]
        if self.original_index is not None:
            data["refIndex"] = self.original_index
        return data


@dataclass
class SearchOptions:
    fuzzy: bool = True
    threshold: float = 0.3
    limit: int = 50
    include_score: bool = True
    include_matches: bool = True
    keys: list[str] | None = None
    use_extended_search: bool = False
    ignore_location: bool = False
    min_match_char_length: int = 2
    is_case_sensitive: bool = False

    def cache_fragment(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fuzzy": self.fuzzy,
            "threshold": self.threshold,
            "limit": self.limit,
            "includeScore": self.include_score,
            "includeMatches": self.include_matches,
            "keys": self.keys,
            "useExtendedSearch": self.use_extended_search,
            "ignoreLocation": self.ignore_location,
            "minMatchCharLength": self.min_match_char_length,
            "isCaseSensitive": self.is_case_sensitive,
        }


@dataclass
class SearchResult:
    query: str
    results: list[ScoredMatch[Icon]]
    total_results: int
    search_type: SearchType
    execution_time_ms: float
    libraries_searched: list[str]
    error_message: str | None = None
    options: SearchOptions | None = None

    @classmethod
    def failed(cls, query: str, message: str, execution_time_ms: float) -> SearchResult:
        return cls(
            query=query,
            results=[],
            total_results=0,
            search_type="failed",
            execution_time_ms=execution_time_ms,
            libraries_searched=[],
            error_message=message,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
            "totalResults": self.total_results,
            "searchType": self.search_type,
            "executionTime": self.execution_time_ms,
            "libraries": list(self.libraries_searched),
        }
        if self.options is not None:
            data["options"] = self.options.to_dict()
        if self.error_message is not None:
            data["error"] = self.error_message
        return data


@dataclass
class SimilarSearchOptions:
    limit: int = 10
    threshold: float = 0.4
    exclude_original: bool = True
    same_library_only: bool = False


@dataclass
class SimilarIconsResult:
    original_icon: Icon
    similar_icons: list[ScoredMatch[Icon]]
    total_similar: int
    threshold: float
    same_library_only: bool
    fields_compared: list[str] = field(default_factory=lambda: ["name", "tags"])

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalIcon": self.original_icon.to_dict(),
            "similarIcons": [r.to_dict() for r in self.similar_icons],
            "totalSimilar": self.total_similar,
            "searchCriteria": {
                "threshold": self.threshold,
                "sameLibraryOnly": self.same_library_only,
                "fieldsCompared": list(self.fields_compared),
            },
        }


@dataclass
class AutocompleteOptions:
    max_suggestions: int = 10
    include_libraries: bool = True
    include_categories: bool = True
    min_query_length: int = 2

    def cache_fragment(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


@dataclass
class AutocompleteResult:
    suggestions: list[str]
    categories: list[str]
    libraries: list[str]
    execution_time_ms: float

    @classmethod
    def empty(cls, execution_time_ms: float = 0.0) -> AutocompleteResult:
        return cls(suggestions=[], categories=[], libraries=[], execution_time_ms=execution_time_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggestions": list(self.suggestions),
            "categories": list(self.categories),
            "libraries": list(self.libraries),
            "executionTime": self.execution_time_ms,
        }


@dataclass
class IconLibrary:
    name: str
    display_name: str
    description: str
    version: str
    icon_count: int
    source_url: str
    license: str
    styles: list[str]
    categories: list[str]
    last_updated: str
    source_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "version": self.version,
            "iconCount": self.icon_count,
            "sourcePath": self.source_path,
            "sourceUrl": self.source_url,
            "license": self.license,
            "styles": list(self.styles),
            "categories": list(self.categories),
            "lastUpdated": self.last_updated,
        }


@dataclass(frozen=True)
class CacheConfig:
    ttl_ms: float = 5 * 60 * 1000
    max_size: int = 1000
    check_period_ms: float = 60 * 1000
