import unittest

from icon_search_mcp.errors import (
    ICON_NOT_FOUND,
    INVALID_QUERY,
    LIBRARY_NOT_FOUND,
    CacheError,
    IconNotFoundError,
    IconSearchError,
    InvalidQueryError,
    LibraryNotFoundError,
    ProviderError,
    ValidationError,
    error_message,
)


class ErrorTests(unittest.TestCase):
    def test_base_error_serializes(self) -> None:
        error = IconSearchError("Something broke", "TEST_ERROR", 418, {"a": 1})

        self.assertEqual("Something broke", str(error))
        self.assertEqual(
            {
                "name": "IconSearchError",
                "message": "Something broke",
                "code": "TEST_ERROR",
                "statusCode": 418,
                "details": {"a": 1},
            },
            error.to_dict(),
        )

    def test_provider_error(self) -> None:
        error = ProviderError("Provider failed", "octicons", 503)

        self.assertIsInstance(error, IconSearchError)
        self.assertEqual("PROVIDER_ERROR", error.code)
        self.assertEqual("octicons", error.to_dict()["provider"])
        self.assertEqual(503, error.status_code)

    def test_validation_errors(self) -> None:
        error = ValidationError("Bad field", "name")
        self.assertEqual(400, error.status_code)
        self.assertEqual("name", error.to_dict()["field"])

        query_error = InvalidQueryError("Search query cannot be empty")
        self.assertIsInstance(query_error, ValidationError)
        self.assertEqual(INVALID_QUERY, query_error.code)
        self.assertEqual("query", query_error.field)

    def test_cache_error_defaults(self) -> None:
        error = CacheError("Cache failed")
        self.assertEqual(500, error.status_code)
        self.assertIsNone(error.to_dict()["key"])

    def test_not_found_errors(self) -> None:
        library = LibraryNotFoundError("nope")
        self.assertEqual(LIBRARY_NOT_FOUND, library.code)
        self.assertEqual(404, library.status_code)
        self.assertEqual('Library "nope" not found', library.message)

        icon = IconNotFoundError("home", "octicons")
        self.assertEqual(ICON_NOT_FOUND, icon.code)
        self.assertEqual('Icon "home" not found in library "octicons"', icon.message)
        self.assertEqual({"name": "home", "library": "octicons"}, icon.details)

    def test_error_message_fallback(self) -> None:
        self.assertEqual("boom", error_message(RuntimeError("boom")))
        self.assertEqual("Unknown search error", error_message(RuntimeError()))
        self.assertEqual("other", error_message(RuntimeError(""), "other"))


if __name__ == "__main__":
    unittest.main()
