from icon_search_mcp.providers.catalog import IconCatalog
from icon_search_mcp.providers.fuzzy_index import FuzzyIndex
from icon_search_mcp.providers.icon_provider import IconProvider
from icon_search_mcp.providers.libraries import BUILTIN_LIBRARIES, LibraryDefinition
from icon_search_mcp.providers.package_provider import create_package_provider
from icon_search_mcp.providers.registry import ProviderRegistry
from icon_search_mcp.providers.snapshot_provider import SharedSnapshot, create_snapshot_provider
from icon_search_mcp.providers.source_provider import IconSourceProvider

__all__ = [
    "BUILTIN_LIBRARIES",
    "FuzzyIndex",
    "IconCatalog",
    "IconProvider",
    "IconSourceProvider",
    "LibraryDefinition",
    "ProviderRegistry",
    "SharedSnapshot",
    "create_package_provider",
    "create_snapshot_provider",
]
