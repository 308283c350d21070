from __future__ import annotations

from typing import Any

from loguru import logger

from icon_search_mcp.errors import IconSearchError
from icon_search_mcp.models import AutocompleteOptions, SearchOptions, SimilarSearchOptions
from icon_search_mcp.providers.icon_provider import IconProvider
from icon_search_mcp.services.search_service import SearchService

_CATEGORY_PREVIEW = 5

_USAGE_RECOMMENDATIONS = {
    "web": (
        "For web applications:\n"
        "- Use SVG format for scalability\n"
        "- Consider outline styles for better clarity at small sizes\n"
        "- Ensure icons work well with your color scheme\n"
        "- Test accessibility with screen readers"
    ),
    "mobile": (
        "For mobile applications:\n"
        "- Use filled/solid styles for better touch targets\n"
        "- Ensure minimum 24px touch area\n"
        "- Consider platform-specific icon guidelines\n"
        "- Test on various screen densities"
    ),
    "desktop": (
        "For desktop applications:\n"
        "- Use consistent icon families\n"
        "- Consider platform conventions (Windows, macOS, Linux)\n"
        "- Ensure icons scale well for high-DPI displays\n"
        "- Maintain visual hierarchy"
    ),
    "print": (
        "For print materials:\n"
        "- Use high-contrast icons\n"
        "- Avoid very thin lines that may not print well\n"
        "- Consider solid/filled styles\n"
        "- Test at actual print size"
    ),
}

_SIZE_GUIDANCE = {
    "small": "For small icons (16-24px), prefer simple, bold designs with minimal detail.",
    "medium": "For medium icons (24-48px), you have more flexibility with detail and style.",
    "large": "For large icons (48px+), detailed designs work well and can include more visual elements.",
}


class IconSearchHandlers:
    """Transport-independent bodies of the MCP tools, resources and prompts.

    Everything returns plain JSON-ready data. Not-found conditions raise ValueError,
    which the MCP layer reports as a tool error.
    """

    def __init__(self, service: SearchService):
        self._service = service

    @property
    def service(self) -> SearchService:
        return self._service

    def _provider(self, library: str) -> IconProvider:
        provider = self._service.get_provider_registry().get(library)
        if provider is None:
            raise ValueError(f'Library "{library}" not found')
        return provider

    # -- tools ---------------------------------------------------------------

    async def search_icons(
        self,
        query: str,
        libraries: list[str] | None = None,
        options: SearchOptions | None = None,
    ) -> dict[str, Any]:
        result = await self._service.search_icons(query, options, libraries)
        return result.to_dict()

    async def get_icon(self, icon_id: str, library: str) -> dict[str, Any]:
        icon = await self._service.get_icon(icon_id, library)
        if icon is None:
            raise ValueError(f'Icon "{icon_id}" not found in library "{library}"')
        return icon.to_dict()

    async def list_libraries(self) -> dict[str, Any]:
        libraries = await self._service.get_libraries()
        return {"libraries": libraries, "count": len(libraries)}

    async def get_library_info(self, library: str) -> dict[str, Any]:
        provider = self._provider(library)
        info = (await provider.get_info()).to_dict()
        info.update(
            {
                "iconCount": await provider.get_icon_count(),
                "categories": await provider.get_categories(),
                "styles": await provider.get_styles(),
                "isAvailable": await provider.is_available(),
            }
        )
        return info

    async def search_by_category(
        self,
        category: str,
        libraries: list[str] | None = None,
        options: SearchOptions | None = None,
    ) -> dict[str, Any]:
        result = await self._service.search_by_category(category, libraries, options)
        return result.to_dict()

    async def find_similar_icons(
        self,
        icon_id: str,
        library: str,
        options: SimilarSearchOptions | None = None,
    ) -> dict[str, Any]:
        try:
            result = await self._service.search_similar(icon_id, library, options)
        except IconSearchError as ex:
            raise ValueError(ex.message) from ex
        return result.to_dict()

    async def autocomplete_icons(
        self,
        partial_query: str,
        options: AutocompleteOptions | None = None,
    ) -> dict[str, Any]:
        result = await self._service.get_autocomplete_suggestions(partial_query, options)
        return result.to_dict()

    # -- resources -----------------------------------------------------------

    async def library_summaries(self) -> list[dict[str, Any]]:
        summaries: list[dict[str, Any]] = []
        for name in await self._service.get_libraries():
            provider = self._service.get_provider_registry().get(name)
            if provider is None:
                summaries.append({"name": name})
                continue
            info = await provider.get_info()
            summaries.append(
                {
                    "name": name,
                    "displayName": info.display_name,
                    "description": info.description,
                    "iconCount": await provider.get_icon_count(),
                    "version": info.version,
                }
            )
        return summaries

    async def library_icons(self, library: str) -> list[dict[str, Any]]:
        provider = self._provider(library)
        return [icon.to_dict() for icon in await provider.get_all_icons()]

    async def search_results(self, query: str) -> dict[str, Any]:
        result = await self._service.search_icons(query)
        return result.to_dict()

    # -- prompts -------------------------------------------------------------

    async def explore_icons_prompt(self, start_from: str = "libraries") -> str:
        if start_from == "search":
            return (
                "You can search for icons using the search_icons tool. Try searching for common terms "
                'like "home", "user", "arrow", or "settings".'
            )
        if start_from == "categories":
            return (
                "You can explore icons by category using the search_by_category tool. Common categories "
                'include "navigation", "social", "communication", "media", and "interface".'
            )

        libraries = await self._service.get_libraries()
        listing = "\n".join(f"- {name}" for name in libraries)
        return (
            f"Here are the available icon libraries:\n\n{listing}\n\n"
            "You can get detailed information about any library using the get_library_info tool."
        )

    def find_icon_prompt(self, use_case: str, style: str | None = None, libraries: str | None = None) -> str:
        terms = [word for word in use_case.lower().split(" ") if len(word) > 2][:3]

        library_filter = ""
        if libraries:
            names = [name.strip() for name in libraries.split(",")]
            library_filter = f" in libraries: {', '.join(names)}"

        style_filter = f" with {style} style" if style and style != "any" else ""
        suggestions = "\n".join(f'   - "{term}"' for term in terms)

        return (
            f'I\'ll help you find the perfect icon for "{use_case}"{library_filter}{style_filter}.\n\n'
            "Here are some search strategies:\n\n"
            f"1. **Direct search**: Try searching for these terms:\n{suggestions}\n\n"
            "2. **Related concepts**: Consider these related terms:\n"
            '   - For UI elements: "interface", "control", "button"\n'
            '   - For actions: "action", "tool", "function"\n'
            '   - For objects: "object", "item", "element"\n\n'
            "3. **Category search**: Try searching by category:\n"
            '   - "interface" for UI elements\n'
            '   - "navigation" for directional icons\n'
            '   - "communication" for messaging/contact icons\n'
            '   - "media" for multimedia icons\n\n'
            "Use the search_icons tool with fuzzy search enabled to find the best matches!"
        )

    async def compare_icons_prompt(self, criteria: str | None = None) -> str:
        criteria = criteria or "count"
        lines = [f"Here's a comparison of available icon libraries based on {criteria}:", ""]

        for name in await self._service.get_libraries():
            provider = self._service.get_provider_registry().get(name)
            if provider is None:
                continue
            try:
                info = await provider.get_info()
                if criteria == "count":
                    lines.append(f"**{info.display_name}**: {await provider.get_icon_count()} icons")
                elif criteria == "style":
                    lines.append(f"**{info.display_name}**: {', '.join(await provider.get_styles())}")
                elif criteria == "categories":
                    categories = await provider.get_categories()
                    more = "..." if len(categories) > _CATEGORY_PREVIEW else ""
                    lines.append(f"**{info.display_name}**: {', '.join(categories[:_CATEGORY_PREVIEW])}{more}")
                elif criteria == "license":
                    lines.append(f"**{info.display_name}**: {info.license}")
            except Exception as ex:
                logger.debug(f"Comparison skipped {name}: {ex}")
                lines.append(f"**{name}**: Information unavailable")

        lines.append("")
        lines.append("Use the get_library_info tool to get detailed information about any specific library.")
        return "\n".join(lines)

    def icon_usage_prompt(self, context: str, size: str | None = None) -> str:
        size = size or "medium"
        recommendations = _USAGE_RECOMMENDATIONS.get(context, "")
        guidance = _SIZE_GUIDANCE.get(size, _SIZE_GUIDANCE["medium"])
        return (
            f"{recommendations}\n\n"
            f"**Size considerations for {size} icons:**\n{guidance}\n\n"
            "**General best practices:**\n"
            "- Maintain consistent visual weight across icon sets\n"
            "- Use appropriate padding/margins around icons\n"
            "- Consider the icon's semantic meaning in your context\n"
            "- Test icons with your target audience\n\n"
            "Use the search_icons tool to find icons that match these criteria!"
        )
