import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

from loguru import logger

CONSOLE_FORMAT = "<level>{level:<8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


def module_filter(modules: Iterable[str] | None) -> Callable[[dict], bool] | None:
    """Accept records from the given modules and their submodules; None accepts everything."""
    prefixes = tuple(m for m in (modules or []) if m)
    if not prefixes:
        return None

    def _accept(record: dict) -> bool:
        name = record.get("name") or ""
        return any(name == p or name.startswith(p + ".") for p in prefixes)

    return _accept


@runtime_checkable
class LogConsumer(Protocol):
    def register(self, level: str) -> None: ...
    def describe(self, level: str) -> str: ...


class _FilteredConsumer:
    def __init__(self, modules: list[str] | None = None):
        self._modules = list(modules or [])

    @property
    def _filter(self) -> Callable[[dict], bool] | None:
        return module_filter(self._modules)

    def _scope(self) -> str:
        return f", modules={','.join(self._modules)}" if self._modules else ""


class ConsoleLogConsumer(_FilteredConsumer):
    """Logs to stderr; stdout carries the MCP stdio protocol and must stay clean."""

    def register(self, level: str) -> None:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, filter=self._filter)

    def describe(self, level: str) -> str:
        return f"console (stderr, {level}{self._scope()})"


class FileLogConsumer(_FilteredConsumer):
    def __init__(
        self,
        path: str = "icon-search.log",
        rotation: str = "10 MB",
        retention: int = 3,
        serialize: bool = False,
        modules: list[str] | None = None,
    ):
        super().__init__(modules)
        self._path = path
        self._rotation = rotation
        self._retention = retention
        self._serialize = serialize

    def register(self, level: str) -> None:
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            self._path,
            level=level,
            format=FILE_FORMAT,
            rotation=self._rotation,
            retention=self._retention,
            serialize=self._serialize,
            filter=self._filter,
        )

    def describe(self, level: str) -> str:
        kind = "json" if self._serialize else "text"
        return f"file ({self._path}, {kind}, {level}{self._scope()})"


_CONSUMER_TYPES: dict[str, type] = {
    "console": ConsoleLogConsumer,
    "file": FileLogConsumer,
}

_DEFAULT_CONSUMERS = [
    {"type": "console"},
    {"type": "file", "path": "icon-search.log"},
]


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Replace all loguru sinks with the configured consumers.

    Each consumer dict names a ``type`` plus optional ``level`` and ``modules``
    (module prefixes the sink accepts); remaining keys go to the consumer.
    Returns a description of each registered consumer.
    """
    logger.remove()

    if consumers is None:
        consumers = _DEFAULT_CONSUMERS

    descriptions: list[str] = []
    skipped: list[str] = []

    for config in consumers:
        sink_type = config.get("type", "")
        cls = _CONSUMER_TYPES.get(sink_type)
        if cls is None:
            skipped.append(repr(sink_type))
            continue

        kwargs = {k: v for k, v in config.items() if k not in ("type", "level")}
        sink_level = config.get("level", level)

        consumer = cls(**kwargs)
        consumer.register(sink_level)
        descriptions.append(consumer.describe(sink_level))

    # Sinks were just replaced, so report skipped consumers only once the new ones exist.
    for sink_type in skipped:
        logger.warning(f"Unknown log consumer type: {sink_type}")

    return descriptions
