from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path

from icon_search_mcp.models import CacheConfig


@dataclass
class RuntimeEnv:
    cache_ttl_seconds: str | None
    cache_max_size: str | None
    cache_check_period_seconds: str | None
    packages_dir: str | None
    snapshot_source: str | None
    libraries: str | None
    log_level: str | None


@dataclass
class AppConfig:
    server_name: str
    cache_ttl_seconds: float
    cache_max_size: int
    cache_check_period_seconds: float
    cache_cleanup_enabled: bool
    packages_dir: str
    snapshot_source: str | None
    libraries: list[str] | None
    log_level: str
    log_consumers: list | None

    def cache_config(self) -> CacheConfig:
        return CacheConfig(
            ttl_ms=self.cache_ttl_seconds * 1000,
            max_size=self.cache_max_size,
            check_period_ms=self.cache_check_period_seconds * 1000,
        )


def load_json_config(path: Path | None = None) -> dict:
    config_path = path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def _to_bool(value: object, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def _to_list(value: object) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    else:
        items = [str(part).strip() for part in value]
    items = [item for item in items if item]
    return items or None


def parse_app_config(config: dict) -> AppConfig:
    snapshot_source = str(config.get("SnapshotSource", "")).strip() or None
    return AppConfig(
        server_name=config.get("ServerName", "icon-search"),
        cache_ttl_seconds=float(config.get("CacheTtlSeconds", 300)),
        cache_max_size=int(config.get("CacheMaxSize", 1000)),
        cache_check_period_seconds=float(config.get("CacheCheckPeriodSeconds", 60)),
        cache_cleanup_enabled=_to_bool(config.get("CacheCleanupEnabled", True), default=True),
        packages_dir=str(config.get("PackagesDir", "node_modules")),
        snapshot_source=snapshot_source,
        libraries=_to_list(config.get("Libraries")),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env() -> RuntimeEnv:
    return RuntimeEnv(
        cache_ttl_seconds=os.environ.get("ICON_CACHE_TTL_SECONDS"),
        cache_max_size=os.environ.get("ICON_CACHE_MAX_SIZE"),
        cache_check_period_seconds=os.environ.get("ICON_CACHE_CHECK_PERIOD_SECONDS"),
        packages_dir=os.environ.get("ICON_PACKAGES_DIR"),
        snapshot_source=os.environ.get("ICON_SNAPSHOT_SOURCE"),
        libraries=os.environ.get("ICON_LIBRARIES"),
        log_level=os.environ.get("ICON_LOG_LEVEL"),
    )


def apply_runtime_env(app: AppConfig, env: RuntimeEnv) -> AppConfig:
    """Environment variables win over config.json."""
    overrides: dict = {}
    if env.cache_ttl_seconds:
        overrides["cache_ttl_seconds"] = float(env.cache_ttl_seconds)
    if env.cache_max_size:
        overrides["cache_max_size"] = int(env.cache_max_size)
    if env.cache_check_period_seconds:
        overrides["cache_check_period_seconds"] = float(env.cache_check_period_seconds)
    if env.packages_dir:
        overrides["packages_dir"] = env.packages_dir
    if env.snapshot_source:
        overrides["snapshot_source"] = env.snapshot_source.strip()
    if env.libraries:
        overrides["libraries"] = _to_list(env.libraries)
    if env.log_level:
        overrides["log_level"] = env.log_level.strip().upper()
    return replace(app, **overrides)
