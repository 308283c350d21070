from __future__ import annotations

import asyncio
from pathlib import Path

from icon_search_mcp.errors import ProviderError
from icon_search_mcp.models import Icon
from icon_search_mcp.providers.libraries import LibraryDefinition
from icon_search_mcp.providers.source_provider import IconSourceProvider
from icon_search_mcp.providers.svg_scanner import scan_library


class PackageIconLoader:
    """Scans an installed icon package (e.g. ``node_modules/@primer/octicons``) for SVG files."""

    def __init__(self, definition: LibraryDefinition, packages_dir: Path):
        self._definition = definition
        self._packages_dir = Path(packages_dir)

    @property
    def package_dir(self) -> Path:
        return self._packages_dir / self._definition.package

    @property
    def source_path(self) -> str:
        return self.package_dir.as_posix()

    async def load(self) -> list[Icon]:
        package_dir = self.package_dir
        if not await asyncio.to_thread(package_dir.is_dir):
            raise ProviderError(
                f"Icon package not found: {self._definition.package} (looked in {package_dir})",
                self._definition.name,
                404,
            )
        return await scan_library(package_dir, self._definition, relative_to=self._packages_dir)


def create_package_provider(definition: LibraryDefinition, packages_dir: Path) -> IconSourceProvider:
    return IconSourceProvider(definition, PackageIconLoader(definition, packages_dir))
