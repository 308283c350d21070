from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from icon_search_mcp.providers.icon_provider import IconProvider


class ProviderRegistry:
    """Named collection of icon providers. Registering an existing name replaces it."""

    def __init__(self, providers: list[IconProvider] | None = None):
        self._providers: dict[str, IconProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: IconProvider) -> None:
        if provider.name in self._providers:
            logger.debug(f"Replacing provider '{provider.name}'")
        self._providers[provider.name] = provider

    def unregister(self, name: str) -> bool:
        return self._providers.pop(name, None) is not None

    def get(self, name: str) -> IconProvider | None:
        return self._providers.get(name)

    def get_all(self) -> list[IconProvider]:
        return list(self._providers.values())

    def names(self) -> list[str]:
        return list(self._providers)

    def clear(self) -> None:
        self._providers.clear()

    async def initialize_all(self) -> dict[str, Exception | None]:
        """Initialize every provider concurrently; one failing source does not block the others.

        Returns each provider's failure (or None) keyed by name.
        """
        providers = self.get_all()
        outcomes = await asyncio.gather(*(p.initialize() for p in providers), return_exceptions=True)

        failures: dict[str, Exception | None] = {}
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Failed to initialize {provider.display_name}: {outcome}")
                failures[provider.name] = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                failures[provider.name] = None

        available = await self.get_available_providers()
        logger.info(f"Initialized {len(available)}/{len(providers)} providers successfully")
        return failures

    async def get_available_providers(self) -> list[IconProvider]:
        providers = self.get_all()
        checks = await asyncio.gather(*(p.is_available() for p in providers))
        return [provider for provider, available in zip(providers, checks) if available]

    def get_stats(self) -> dict[str, Any]:
        return {
            "totalProviders": len(self._providers),
            "providerNames": self.names(),
        }

    async def get_statistics(self) -> dict[str, Any]:
        breakdown: list[dict[str, Any]] = []
        total_icons = 0
        for provider in self.get_all():
            available = await provider.is_available()
            icon_count = await provider.get_icon_count() if available else 0
            total_icons += icon_count
            breakdown.append(
                {
                    "name": provider.name,
                    "displayName": provider.display_name,
                    "iconCount": icon_count,
                    "available": available,
                }
            )
        return {
            "totalProviders": len(breakdown),
            "availableProviders": sum(1 for entry in breakdown if entry["available"]),
            "totalIcons": total_icons,
            "providerBreakdown": breakdown,
        }

    async def close_all(self) -> None:
        for provider in self.get_all():
            try:
                await provider.close()
            except Exception as ex:
                logger.warning(f"Provider '{provider.name}' shutdown error: {ex}")
