from __future__ import annotations

import asyncio
import re
import time
from typing import Awaitable, Callable, Iterable, TypeVar

from loguru import logger

from icon_search_mcp.errors import (
    SIMILAR_SEARCH_FAILED,
    IconNotFoundError,
    IconSearchError,
    InvalidQueryError,
    LibraryNotFoundError,
    ProviderError,
    error_message,
)
from icon_search_mcp.models import (
    AutocompleteOptions,
    AutocompleteResult,
    Icon,
    ScoredMatch,
    SearchOptions,
    SearchResult,
    SimilarIconsResult,
    SimilarSearchOptions,
)
from icon_search_mcp.providers.icon_provider import IconProvider
from icon_search_mcp.providers.registry import ProviderRegistry
from icon_search_mcp.services.cache_service import CacheService

T = TypeVar("T")

MAX_QUERY_LENGTH = 100
SEARCH_TTL_MS = 5 * 60 * 1000
ICON_TTL_MS = 10 * 60 * 1000
LIBRARIES_TTL_MS = 30 * 60 * 1000
AUTOCOMPLETE_TTL_MS = 5 * 60 * 1000
LIBRARIES_CACHE_KEY = "libraries:all"

_UNSAFE_QUERY_CHARS = re.compile(r"""[<>"']""")
_EXTENDED_OPERATOR_CHARS = "!='^$|"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def _sort_key(match: ScoredMatch[Icon]) -> float:
    # Unscored matches rank with perfect ones.
    return match.score or 0.0


def _case_mask(query: str) -> str:
    return "".join("u" if ch.isupper() else "l" for ch in query)


def _similar_query(icon: Icon) -> str:
    """Name and tags as extended-search OR groups, e.g. ``home | house | building``."""
    terms: dict[str, None] = {}
    for value in (icon.name, *icon.tags):
        for token in value.replace("|", " ").split():
            term = token.strip(_EXTENDED_OPERATOR_CHARS)
            if term:
                terms[term] = None

    query = ""
    for term in terms:
        candidate = f"{query} | {term}" if query else term
        if len(candidate) > MAX_QUERY_LENGTH:
            break
        query = candidate
    return query or icon.name[:MAX_QUERY_LENGTH]


class SearchService:
    """Fans queries out across registered providers and merges the results.

    ``search_icons``, ``search_by_category`` and autocomplete never raise: every
    failure is reported through the returned envelope. ``get_icon`` returns None
    on any failure. ``search_similar`` raises ``IconSearchError``.
    """

    def __init__(self, cache: CacheService, registry: ProviderRegistry):
        self._cache = cache
        self._registry = registry

    def get_provider_registry(self) -> ProviderRegistry:
        return self._registry

    def clear_cache(self) -> None:
        self._cache.clear()

    async def search_icons(
        self,
        query: str,
        options: SearchOptions | None = None,
        libraries: list[str] | None = None,
    ) -> SearchResult:
        started = time.perf_counter()
        options = options or SearchOptions()

        try:
            self._validate_query(query)

            key_parts = ["search", query, options.cache_fragment(), ",".join(libraries) if libraries else "all"]
            if options.is_case_sensitive:
                # Keys are lowercased; keep "Home" and "home" apart.
                key_parts.append(_case_mask(query))
            cache_key = CacheService.generate_key(*key_parts)
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Search cache hit: {cache_key}")
                return cached

            providers = await self._target_providers(libraries)
            if options.fuzzy:
                matches = await self._fan_out(
                    providers,
                    lambda p: p.search_icons(query, options),
                    operation="search",
                )
            else:
                matches = await self._exact_search(providers, query)

            ordered = sorted(matches, key=_sort_key)
            result = SearchResult(
                query=query,
                results=ordered[: max(0, options.limit)],
                total_results=len(ordered),
                search_type="fuzzy" if options.fuzzy else "exact",
                execution_time_ms=_elapsed_ms(started),
                libraries_searched=[p.name for p in providers],
                options=options,
            )

            self._cache.set(cache_key, result, SEARCH_TTL_MS)
            return result
        except Exception as ex:
            logger.warning(f"Search for {query!r} failed: {ex}")
            return SearchResult.failed(query, error_message(ex), _elapsed_ms(started))

    async def get_icon(self, name: str, library: str) -> Icon | None:
        try:
            cache_key = CacheService.generate_key("icon", library, name)
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached

            provider = self._registry.get(library)
            if provider is None:
                raise LibraryNotFoundError(library)

            icon = await provider.get_icon(name)
            if icon is not None:
                self._cache.set(cache_key, icon, ICON_TTL_MS)
            return icon
        except Exception as ex:
            logger.error(f"Error getting icon {name} from {library}: {ex}")
            return None

    async def get_libraries(self) -> list[str]:
        cached = self._cache.get(LIBRARIES_CACHE_KEY)
        if cached is not None:
            return cached

        providers = await self._registry.get_available_providers()
        names = [p.name for p in providers]
        self._cache.set(LIBRARIES_CACHE_KEY, names, LIBRARIES_TTL_MS)
        return names

    async def search_similar(
        self,
        name: str,
        library: str,
        options: SimilarSearchOptions | None = None,
    ) -> SimilarIconsResult:
        options = options or SimilarSearchOptions()

        original = await self.get_icon(name, library)
        if original is None:
            raise IconNotFoundError(name, library)

        try:
            result = await self.search_icons(
                _similar_query(original),
                SearchOptions(threshold=options.threshold, limit=options.limit * 2, use_extended_search=True),
                [library] if options.same_library_only else None,
            )
            if result.search_type == "failed":
                raise IconSearchError(result.error_message or "Search failed", SIMILAR_SEARCH_FAILED)

            similar = result.results
            if options.exclude_original:
                similar = [m for m in similar if m.item.key != original.key]
            similar = similar[: options.limit]
        except IconSearchError as ex:
            if ex.code == SIMILAR_SEARCH_FAILED:
                raise
            raise IconSearchError(f"Failed to find similar icons: {ex.message}", SIMILAR_SEARCH_FAILED) from ex
        except Exception as ex:
            raise IconSearchError(
                f"Failed to find similar icons: {error_message(ex, 'Unknown error')}",
                SIMILAR_SEARCH_FAILED,
            ) from ex

        return SimilarIconsResult(
            original_icon=original,
            similar_icons=similar,
            total_similar=len(similar),
            threshold=options.threshold,
            same_library_only=options.same_library_only,
        )

    async def search_by_category(
        self,
        category: str,
        libraries: list[str] | None = None,
        options: SearchOptions | None = None,
    ) -> SearchResult:
        return await self._filtered_search(
            f"category:{category}",
            libraries,
            options,
            lambda p: p.search_by_category(category, options),
        )

    async def search_by_style(
        self,
        style: str,
        libraries: list[str] | None = None,
        options: SearchOptions | None = None,
    ) -> SearchResult:
        return await self._filtered_search(
            f"style:{style}",
            libraries,
            options,
            lambda p: p.search_by_style(style, options),
        )

    async def search_by_tags(
        self,
        tags: Iterable[str],
        libraries: list[str] | None = None,
        options: SearchOptions | None = None,
    ) -> SearchResult:
        tag_list = list(tags)
        return await self._filtered_search(
            f"tags:{','.join(tag_list)}",
            libraries,
            options,
            lambda p: p.search_by_tags(tag_list, options),
        )

    async def get_autocomplete_suggestions(
        self,
        partial_query: str,
        options: AutocompleteOptions | None = None,
    ) -> AutocompleteResult:
        started = time.perf_counter()
        options = options or AutocompleteOptions()

        if len(partial_query) < options.min_query_length:
            return AutocompleteResult.empty(_elapsed_ms(started))

        try:
            cache_key = CacheService.generate_key("autocomplete", partial_query, options.cache_fragment())
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached

            needle = partial_query.lower()
            suggestions: dict[str, None] = {}
            categories: dict[str, None] = {}
            libraries: dict[str, None] = {}

            for provider in await self._registry.get_available_providers():
                if options.include_libraries and needle in provider.name.lower():
                    libraries[provider.name] = None

                for icon in await provider.get_all_icons():
                    if needle in icon.name.lower():
                        suggestions[icon.name] = None
                    for tag in icon.tags:
                        if needle in tag.lower():
                            suggestions[tag] = None
                    if options.include_categories:
                        for category in icon.categories:
                            if needle in category.lower():
                                categories[category] = None

            limit = options.max_suggestions
            result = AutocompleteResult(
                suggestions=list(suggestions)[:limit],
                categories=list(categories)[:limit],
                libraries=list(libraries)[:limit],
                execution_time_ms=_elapsed_ms(started),
            )
            self._cache.set(cache_key, result, AUTOCOMPLETE_TTL_MS)
            return result
        except Exception as ex:
            logger.warning(f"Autocomplete for {partial_query!r} failed: {ex}")
            return AutocompleteResult.empty(_elapsed_ms(started))

    async def _filtered_search(
        self,
        label: str,
        libraries: list[str] | None,
        options: SearchOptions | None,
        call: Callable[[IconProvider], Awaitable[list[ScoredMatch[Icon]]]],
    ) -> SearchResult:
        started = time.perf_counter()
        options = options or SearchOptions()
        try:
            providers = await self._target_providers(libraries)
            matches = await self._fan_out(providers, call, operation=label)
            return SearchResult(
                query=label,
                results=matches[: max(0, options.limit)],
                total_results=len(matches),
                search_type="filtered",
                execution_time_ms=_elapsed_ms(started),
                libraries_searched=[p.name for p in providers],
            )
        except Exception as ex:
            logger.warning(f"Filtered search {label!r} failed: {ex}")
            return SearchResult.failed(label, error_message(ex, "Filtered search failed"), _elapsed_ms(started))

    async def _exact_search(self, providers: list[IconProvider], query: str) -> list[ScoredMatch[Icon]]:
        needle = query.lower()

        async def _search(provider: IconProvider) -> list[ScoredMatch[Icon]]:
            icons = await provider.get_all_icons()
            hits = [
                icon
                for icon in icons
                if needle in icon.name.lower() or any(needle in tag.lower() for tag in icon.tags)
            ]
            return [ScoredMatch(item=icon, score=0.0, original_index=i) for i, icon in enumerate(hits)]

        return await self._fan_out(providers, _search, operation="exact search")

    async def _fan_out(
        self,
        providers: list[IconProvider],
        call: Callable[[IconProvider], Awaitable[list[T]]],
        *,
        operation: str,
    ) -> list[T]:
        """Run ``call`` on every provider concurrently and concatenate results in provider order.

        A failing provider contributes nothing; if every provider fails the first
        failure is raised as a ProviderError.
        """
        if not providers:
            return []

        outcomes = await asyncio.gather(*(call(p) for p in providers), return_exceptions=True)

        merged: list[T] = []
        failures: list[tuple[IconProvider, Exception]] = []
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Provider '{provider.name}' failed during {operation}: {outcome}")
                failures.append((provider, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                logger.debug(f"Provider '{provider.name}' returned {len(outcome)} matches for {operation}")
                merged.extend(outcome)

        if len(failures) == len(providers):
            provider, first = failures[0]
            logger.error(f"All {len(providers)} providers failed during {operation}")
            raise ProviderError(
                f"All providers failed: {error_message(first, 'Provider error')}",
                provider.name,
                502,
                {"providers": [p.name for p, _ in failures]},
            ) from first

        return merged

    async def _target_providers(self, libraries: list[str] | None) -> list[IconProvider]:
        available = await self._registry.get_available_providers()
        if not libraries:
            return available
        wanted = set(libraries)
        return [p for p in available if p.name in wanted]

    def _validate_query(self, query: str) -> None:
        if not query or not query.strip():
            raise InvalidQueryError("Search query cannot be empty")
        if len(query) > MAX_QUERY_LENGTH:
            raise InvalidQueryError(f"Search query too long (max {MAX_QUERY_LENGTH} characters)")

        # Only warns: the original query string is still the one searched.
        if _UNSAFE_QUERY_CHARS.sub("", query) != query:
            logger.warning("Search query contained potentially unsafe characters")
