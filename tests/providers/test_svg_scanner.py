import asyncio
import tempfile
import unittest
from pathlib import Path

from icon_search_mcp.providers.svg_scanner import (
    build_icon,
    extract_size,
    extract_style,
    find_svg_files,
    generate_categories,
    generate_tags,
    scan_library,
)
from tests.fakes import make_definition

SVG_16 = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16"><path d="M0 0h16v16H0z"/></svg>'


class TagAndCategoryTests(unittest.TestCase):
    def test_tags_from_name_parts_and_synonyms(self) -> None:
        self.assertEqual(
            ["arrow-right", "arrow", "right", "direction", "pointer"],
            generate_tags("Arrow-Right"),
        )

    def test_tags_include_library_synonyms_and_extras(self) -> None:
        tags = generate_tags("zap", {"zap": ("lightning", "fast")}, ("octicon", "Lightning"))
        self.assertEqual(["zap", "lightning", "fast", "octicon"], tags)

    def test_single_character_parts_are_skipped(self) -> None:
        self.assertEqual(["x-circle", "circle"], generate_tags("x-circle"))

    def test_categories_from_keywords(self) -> None:
        self.assertEqual(["navigation"], generate_categories("chevron-left"))
        self.assertEqual(["communication"], generate_categories("inbox", "mail"))
        self.assertEqual(["general"], generate_categories("zap"))


class SvgAttributeTests(unittest.TestCase):
    def test_size_from_viewbox(self) -> None:
        self.assertEqual("16x16", extract_size(SVG_16))

    def test_size_from_width_and_height(self) -> None:
        self.assertEqual("20x30", extract_size('<svg width="20" height="30"></svg>'))

    def test_size_default(self) -> None:
        self.assertEqual("24x24", extract_size("<svg></svg>"))

    def test_style_from_path(self) -> None:
        styles = ("regular", "fill")
        self.assertEqual("fill", extract_style(Path("icons/house-fill.svg"), styles))
        self.assertEqual("regular", extract_style(Path("icons/house.svg"), styles))
        self.assertEqual("regular", extract_style(Path("icons/house.svg"), ()))


class ScanTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.package_dir = self.root / "test-icons"
        icons_dir = self.package_dir / "icons"
        icons_dir.mkdir(parents=True)
        (icons_dir / "home.svg").write_text(SVG_16, encoding="utf-8")
        (icons_dir / "gear.svg").write_text('<svg width="24" height="24"></svg>', encoding="utf-8")
        (icons_dir / "README.txt").write_text("not an icon", encoding="utf-8")
        (icons_dir / "broken.svg").write_bytes(b"\xff\xfe\xfa not utf-8")
        self.definition = make_definition("test-icons", extra_tags=("test",))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_find_svg_files_only_returns_svgs(self) -> None:
        files = find_svg_files(self.package_dir, ["icons/*.svg", "icons/*"])
        self.assertEqual(["broken.svg", "gear.svg", "home.svg"], [f.name for f in files])

    def test_build_icon(self) -> None:
        path = self.package_dir / "icons" / "home.svg"
        icon = build_icon(path, SVG_16, self.definition, self.root)

        self.assertEqual("home", icon.name)
        self.assertEqual("test-icons", icon.library)
        self.assertEqual("test-icons/icons/home.svg", icon.path)
        self.assertEqual("16x16", icon.size)
        self.assertEqual(["navigation"], icon.categories)
        self.assertEqual(["home", "house", "building", "test"], icon.tags)
        self.assertEqual("https://github.com/test/test-icons", icon.source)
        self.assertTrue(icon.updated_at)

    def test_scan_library_skips_unreadable_files(self) -> None:
        icons = asyncio.run(scan_library(self.package_dir, self.definition))

        self.assertEqual(["gear", "home"], [icon.name for icon in icons])
        self.assertEqual("icons/gear.svg", icons[0].path)


if __name__ == "__main__":
    unittest.main()
