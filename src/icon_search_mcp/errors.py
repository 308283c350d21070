from __future__ import annotations

from typing import Any

INVALID_QUERY = "INVALID_QUERY"
LIBRARY_NOT_FOUND = "LIBRARY_NOT_FOUND"
ICON_NOT_FOUND = "ICON_NOT_FOUND"
SIMILAR_SEARCH_FAILED = "SIMILAR_SEARCH_FAILED"


class IconSearchError(Exception):
    """Base error for the icon search core.

    Carries a machine-readable ``code`` and an HTTP-style ``status_code`` so the
    tool layer can report failures without inspecting exception types.
    """

    def __init__(self, message: str, code: str, status_code: int = 500, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "statusCode": self.status_code,
            "details": self.details,
        }


class ProviderError(IconSearchError):
    def __init__(self, message: str, provider: str, status_code: int = 500, details: Any = None):
        super().__init__(message, "PROVIDER_ERROR", status_code, details)
        self.provider = provider

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["provider"] = self.provider
        return data


class ValidationError(IconSearchError):
    def __init__(self, message: str, field: str, details: Any = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        return data


class InvalidQueryError(ValidationError):
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, "query", details)
        self.code = INVALID_QUERY


class CacheError(IconSearchError):
    def __init__(self, message: str, key: str | None = None, details: Any = None):
        super().__init__(message, "CACHE_ERROR", 500, details)
        self.key = key

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["key"] = self.key
        return data


class LibraryNotFoundError(IconSearchError):
    def __init__(self, library: str):
        super().__init__(f'Library "{library}" not found', LIBRARY_NOT_FOUND, 404, {"library": library})
        self.library = library


class IconNotFoundError(IconSearchError):
    def __init__(self, name: str, library: str):
        super().__init__(
            f'Icon "{name}" not found in library "{library}"',
            ICON_NOT_FOUND,
            404,
            {"name": name, "library": library},
        )
        self.name = name
        self.library = library


def error_message(ex: BaseException, fallback: str = "Unknown search error") -> str:
    message = str(ex).strip()
    return message or fallback
