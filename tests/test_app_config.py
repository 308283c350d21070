import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from icon_search_mcp.app_config import (
    _to_bool,
    apply_runtime_env,
    load_json_config,
    parse_app_config,
    resolve_runtime_env,
)


class AppConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        app = parse_app_config({})

        self.assertEqual("icon-search", app.server_name)
        self.assertEqual("node_modules", app.packages_dir)
        self.assertIsNone(app.snapshot_source)
        self.assertIsNone(app.libraries)
        self.assertEqual("INFO", app.log_level)
        self.assertTrue(app.cache_cleanup_enabled)

        cache = app.cache_config()
        self.assertEqual(300_000, cache.ttl_ms)
        self.assertEqual(1000, cache.max_size)
        self.assertEqual(60_000, cache.check_period_ms)

    def test_parses_config_values(self) -> None:
        app = parse_app_config(
            {
                "CacheTtlSeconds": 10,
                "CacheMaxSize": "50",
                "CacheCleanupEnabled": "off",
                "Libraries": ["octicons", " feather "],
                "SnapshotSource": "  ",
                "LogConsumers": [{"type": "console"}],
            }
        )

        self.assertEqual(10_000, app.cache_config().ttl_ms)
        self.assertEqual(50, app.cache_max_size)
        self.assertFalse(app.cache_cleanup_enabled)
        self.assertEqual(["octicons", "feather"], app.libraries)
        self.assertIsNone(app.snapshot_source)
        self.assertEqual([{"type": "console"}], app.log_consumers)

    def test_environment_overrides_config(self) -> None:
        env = {
            "ICON_CACHE_TTL_SECONDS": "1.5",
            "ICON_SNAPSHOT_SOURCE": "https://example.com/icons.json",
            "ICON_LIBRARIES": "tabler-icons,octicons",
            "ICON_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=True):
            app = apply_runtime_env(parse_app_config({"Libraries": "feather"}), resolve_runtime_env())

        self.assertEqual(1500, app.cache_config().ttl_ms)
        self.assertEqual("https://example.com/icons.json", app.snapshot_source)
        self.assertEqual(["tabler-icons", "octicons"], app.libraries)
        self.assertEqual("DEBUG", app.log_level)
        self.assertEqual("node_modules", app.packages_dir)

    def test_empty_environment_changes_nothing(self) -> None:
        app = parse_app_config({"PackagesDir": "vendor"})
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(app, apply_runtime_env(app, resolve_runtime_env()))

    def test_load_json_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            self.assertEqual({}, load_json_config(path))
            path.write_text(json.dumps({"ServerName": "icons"}), encoding="utf-8")
            self.assertEqual({"ServerName": "icons"}, load_json_config(path))

    def test_to_bool(self) -> None:
        self.assertTrue(_to_bool("yes"))
        self.assertFalse(_to_bool("0"))
        self.assertTrue(_to_bool(None, default=True))


if __name__ == "__main__":
    unittest.main()
