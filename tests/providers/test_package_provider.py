import asyncio
import tempfile
import unittest
from pathlib import Path

from icon_search_mcp.errors import ProviderError
from icon_search_mcp.providers.libraries import get_library_definition, select_libraries
from icon_search_mcp.providers.package_provider import create_package_provider


class PackageProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.packages_dir = Path(self._tmp.name)
        icons_dir = self.packages_dir / "feather-icons" / "dist" / "icons"
        icons_dir.mkdir(parents=True)
        for name in ("home", "settings", "arrow-left"):
            (icons_dir / f"{name}.svg").write_text(
                '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"></svg>',
                encoding="utf-8",
            )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_loads_icons_from_installed_package(self) -> None:
        provider = create_package_provider(get_library_definition("feather"), self.packages_dir)

        async def scenario():
            await provider.initialize()
            return await provider.get_icon("home"), await provider.search_icons("settings")

        home, matches = asyncio.run(scenario())

        self.assertEqual("feather", home.library)
        self.assertEqual("feather-icons/dist/icons/home.svg", home.path)
        self.assertIn("house", home.tags)
        self.assertIn("feather", home.tags)
        self.assertEqual("outline", home.style)
        self.assertEqual("settings", matches[0].item.name)

    def test_info_reports_package_location(self) -> None:
        provider = create_package_provider(get_library_definition("feather"), self.packages_dir)
        asyncio.run(provider.initialize())

        info = asyncio.run(provider.get_info())

        self.assertEqual("Feather Icons", info.display_name)
        self.assertEqual(3, info.icon_count)
        self.assertTrue(info.source_path.endswith("feather-icons"))

    def test_missing_package_raises_not_found(self) -> None:
        provider = create_package_provider(get_library_definition("octicons"), self.packages_dir)

        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(provider.initialize())

        self.assertEqual(404, ctx.exception.status_code)
        self.assertEqual("octicons", ctx.exception.provider)
        self.assertFalse(asyncio.run(provider.is_available()))


class LibraryDefinitionTests(unittest.TestCase):
    def test_builtin_libraries(self) -> None:
        self.assertEqual(
            ["bootstrap-icons", "feather", "octicons", "tabler-icons"],
            [d.name for d in select_libraries(None)],
        )

    def test_select_keeps_requested_order_and_drops_unknown(self) -> None:
        selected = select_libraries(["octicons", "nope", "feather", "octicons"])
        self.assertEqual(["octicons", "feather"], [d.name for d in selected])

    def test_unknown_definition(self) -> None:
        self.assertIsNone(get_library_definition("nope"))


if __name__ == "__main__":
    unittest.main()
