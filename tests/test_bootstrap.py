import asyncio
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

from icon_search_mcp.app_config import parse_app_config
from icon_search_mcp.bootstrap import bootstrap_runtime, build_registry
from icon_search_mcp.snapshot import write_snapshot
from tests.fakes import feather_icons, octicons_icons


class BootstrapTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.snapshot_path = Path(self._tmp.name) / "icons.json"
        write_snapshot(self.snapshot_path, octicons_icons() + feather_icons())
        self.app = parse_app_config(
            {
                "SnapshotSource": str(self.snapshot_path),
                "Libraries": ["octicons", "feather", "tabler-icons"],
                "LogConsumers": [],
            }
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_runtime_serves_snapshot_icons(self) -> None:
        async def scenario():
            runtime = await bootstrap_runtime(self.app)
            try:
                self.assertTrue(runtime.cache.cleanup_running)
                libraries = await runtime.service.get_libraries()
                result = await runtime.service.search_icons("settings")
                return runtime, libraries, result
            finally:
                await runtime.close()

        runtime, libraries, result = asyncio.run(scenario())

        self.assertEqual(["octicons", "feather"], libraries)
        self.assertEqual("settings", result.results[0].item.name)
        self.assertEqual({}, runtime.init_failures)
        self.assertFalse(runtime.cache.cleanup_running)

    def test_missing_packages_are_reported_as_failures(self) -> None:
        app = replace(self.app, snapshot_source=None, packages_dir=self._tmp.name, cache_cleanup_enabled=False)

        async def scenario():
            runtime = await bootstrap_runtime(app)
            await runtime.close()
            return runtime

        runtime = asyncio.run(scenario())

        self.assertEqual({"octicons", "feather", "tabler-icons"}, set(runtime.init_failures))
        self.assertEqual([], asyncio.run(runtime.registry.get_available_providers()))

    def test_build_registry_ignores_unknown_libraries(self) -> None:
        registry = build_registry(replace(self.app, libraries=["feather", "nope"]))
        self.assertEqual(["feather"], registry.names())


if __name__ == "__main__":
    unittest.main()
