from __future__ import annotations

import json
from typing import Any
from urllib.parse import unquote

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.prompts.base import AssistantMessage

from icon_search_mcp.handlers import IconSearchHandlers
from icon_search_mcp.models import AutocompleteOptions, SearchOptions, SimilarSearchOptions

JSON_MIME = "application/json"

INSTRUCTIONS = (
    "Search SVG icons across installed icon libraries. Use search_icons for fuzzy lookups, "
    "get_icon for the markup of a single icon and list_libraries to see what is loaded."
)


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2)


def create_server(handlers: IconSearchHandlers, name: str = "icon-search") -> FastMCP:
    mcp = FastMCP(name, instructions=INSTRUCTIONS)

    @mcp.tool(description="Search for icons by name across all or specific libraries with fuzzy matching.")
    async def search_icons(
        query: str,
        libraries: list[str] | None = None,
        fuzzy: bool = True,
        limit: int = 10,
        threshold: float = 0.3,
        include_score: bool = True,
        include_matches: bool = True,
        keys: list[str] | None = None,
        use_extended_search: bool = False,
        ignore_location: bool = False,
        min_match_char_length: int = 2,
        is_case_sensitive: bool = False,
    ) -> dict[str, Any]:
        options = SearchOptions(
            fuzzy=fuzzy,
            threshold=threshold,
            limit=limit,
            include_score=include_score,
            include_matches=include_matches,
            keys=keys,
            use_extended_search=use_extended_search,
            ignore_location=ignore_location,
            min_match_char_length=min_match_char_length,
            is_case_sensitive=is_case_sensitive,
        )
        return await handlers.search_icons(query, libraries, options)

    @mcp.tool(description="Get the full record, including SVG markup, of one icon.")
    async def get_icon(id: str, library: str) -> dict[str, Any]:
        return await handlers.get_icon(id, library)

    @mcp.tool(description="List the icon libraries that are currently available.")
    async def list_libraries() -> dict[str, Any]:
        return await handlers.list_libraries()

    @mcp.tool(description="Get detailed information about a specific library.")
    async def get_library_info(library: str) -> dict[str, Any]:
        return await handlers.get_library_info(library)

    @mcp.tool(description="Find icons whose categories contain the given text.")
    async def search_by_category(
        category: str,
        libraries: list[str] | None = None,
        limit: int = 10,
    ) -> dict[str, Any]:
        return await handlers.search_by_category(category, libraries, SearchOptions(limit=limit))

    @mcp.tool(description="Find icons similar to a given icon by name and tags.")
    async def find_similar_icons(
        id: str,
        library: str,
        limit: int = 10,
        threshold: float = 0.4,
        exclude_original: bool = True,
        same_library_only: bool = False,
    ) -> dict[str, Any]:
        options = SimilarSearchOptions(
            limit=limit,
            threshold=threshold,
            exclude_original=exclude_original,
            same_library_only=same_library_only,
        )
        return await handlers.find_similar_icons(id, library, options)

    @mcp.tool(description="Suggest icon names, tags, categories and libraries for a partial query.")
    async def autocomplete_icons(
        query: str,
        max_suggestions: int = 10,
        include_libraries: bool = True,
        include_categories: bool = True,
    ) -> dict[str, Any]:
        options = AutocompleteOptions(
            max_suggestions=max_suggestions,
            include_libraries=include_libraries,
            include_categories=include_categories,
        )
        return await handlers.autocomplete_icons(query, options)

    @mcp.resource("icons://libraries", name="icon-libraries", description="Available icon libraries", mime_type=JSON_MIME)
    async def libraries_resource() -> str:
        return _dump(await handlers.library_summaries())

    @mcp.resource(
        "icons://libraries/{library}",
        name="library-info",
        description="Detailed information about a specific icon library",
        mime_type=JSON_MIME,
    )
    async def library_resource(library: str) -> str:
        return _dump(await handlers.get_library_info(library))

    @mcp.resource(
        "icons://libraries/{library}/icons",
        name="library-icons",
        description="All icons from a specific library",
        mime_type=JSON_MIME,
    )
    async def library_icons_resource(library: str) -> str:
        return _dump(await handlers.library_icons(library))

    @mcp.resource(
        "icons://libraries/{library}/icons/{icon_id}",
        name="icon-detail",
        description="Detailed information about a specific icon",
        mime_type=JSON_MIME,
    )
    async def icon_resource(library: str, icon_id: str) -> str:
        return _dump(await handlers.get_icon(icon_id, library))

    @mcp.resource(
        "icons://search/{query}",
        name="search-results",
        description="Icon search results for a specific query",
        mime_type=JSON_MIME,
    )
    async def search_resource(query: str) -> str:
        return _dump(await handlers.search_results(unquote(query)))

    @mcp.prompt(name="explore-icons", description="Get started exploring the available icon libraries.")
    async def explore_icons(start_from: str = "libraries") -> list[AssistantMessage]:
        return [AssistantMessage(await handlers.explore_icons_prompt(start_from))]

    @mcp.prompt(name="find-icon", description="Help find the right icon for a specific use case.")
    def find_icon(use_case: str, style: str | None = None, libraries: str | None = None) -> list[AssistantMessage]:
        return [AssistantMessage(handlers.find_icon_prompt(use_case, style, libraries))]

    @mcp.prompt(name="compare-icons", description="Compare icon libraries by count, style, categories or license.")
    async def compare_icons(criteria: str | None = None) -> list[AssistantMessage]:
        return [AssistantMessage(await handlers.compare_icons_prompt(criteria))]

    @mcp.prompt(name="icon-usage", description="Recommendations for using icons in web, mobile, desktop or print.")
    def icon_usage(context: str, size: str | None = None) -> list[AssistantMessage]:
        return [AssistantMessage(handlers.icon_usage_prompt(context, size))]

    return mcp
