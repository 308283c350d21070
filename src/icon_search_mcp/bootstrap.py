from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from mcp.server.fastmcp import FastMCP

from icon_search_mcp.app_config import AppConfig
from icon_search_mcp.handlers import IconSearchHandlers
from icon_search_mcp.logging_config import setup_logging
from icon_search_mcp.mcp_server import create_server
from icon_search_mcp.providers import ProviderRegistry, SharedSnapshot, create_package_provider, create_snapshot_provider
from icon_search_mcp.providers.libraries import select_libraries
from icon_search_mcp.providers.snapshot_provider import describe_source
from icon_search_mcp.services.cache_service import CacheService
from icon_search_mcp.services.search_service import SearchService


@dataclass
class AppRuntime:
    cache: CacheService
    registry: ProviderRegistry
    service: SearchService
    server: FastMCP
    log_descriptions: list[str]
    init_failures: dict[str, Exception] = field(default_factory=dict)

    async def close(self) -> None:
        self.cache.destroy()
        await self.registry.close_all()


def build_registry(app: AppConfig) -> ProviderRegistry:
    definitions = select_libraries(app.libraries)
    if app.libraries and len(definitions) < len(app.libraries):
        known = {d.name for d in definitions}
        unknown = [name for name in app.libraries if name not in known]
        logger.warning(f"Ignoring unknown icon libraries: {', '.join(unknown)}")

    registry = ProviderRegistry()
    if app.snapshot_source:
        logger.info(f"Loading icons from {describe_source(app.snapshot_source)}")
        shared = SharedSnapshot(app.snapshot_source)
        for definition in definitions:
            registry.register(create_snapshot_provider(definition, shared))
    else:
        packages_dir = Path(app.packages_dir)
        if not packages_dir.is_absolute():
            packages_dir = Path.cwd() / packages_dir
        logger.info(f"Scanning icon packages under {packages_dir}")
        for definition in definitions:
            registry.register(create_package_provider(definition, packages_dir))
    return registry


async def bootstrap_runtime(app: AppConfig) -> AppRuntime:
    log_descriptions = setup_logging(level=app.log_level, consumers=app.log_consumers)

    cache = CacheService(app.cache_config())
    registry = build_registry(app)
    outcomes = await registry.initialize_all()
    failures = {name: ex for name, ex in outcomes.items() if ex is not None}

    if app.cache_cleanup_enabled:
        cache.start_cleanup_timer()

    service = SearchService(cache, registry)
    server = create_server(IconSearchHandlers(service), name=app.server_name)

    return AppRuntime(
        cache=cache,
        registry=registry,
        service=service,
        server=server,
        log_descriptions=log_descriptions,
        init_failures=failures,
    )
