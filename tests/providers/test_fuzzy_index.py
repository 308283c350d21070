import unittest

from icon_search_mcp.models import SearchOptions
from icon_search_mcp.providers.fuzzy_index import FuzzyIndex
from tests.fakes import make_icon


def _icons():
    return [
        make_icon("home", tags=["home", "house"], categories=["navigation"]),
        make_icon("search", tags=["search", "find"], categories=["ui"]),
        make_icon("settings", tags=["settings", "gear", "config"], categories=["ui"]),
        make_icon("arrow-right", tags=["arrow", "right", "direction"], categories=["navigation"]),
    ]


class FuzzyIndexTests(unittest.TestCase):
    def setUp(self) -> None:
        self.index = FuzzyIndex(_icons())

    def _names(self, query: str, **options) -> list[str]:
        return [m.item.name for m in self.index.search(query, SearchOptions(**options))]

    def test_exact_name_scores_zero_and_ranks_first(self) -> None:
        results = self.index.search("home")

        self.assertEqual("home", results[0].item.name)
        self.assertEqual(0.0, results[0].score)
        self.assertEqual(0, results[0].original_index)

    def test_tolerates_typos(self) -> None:
        self.assertIn("search", self._names("serch"))

    def test_zero_threshold_requires_exact_field_match(self) -> None:
        self.assertEqual([], self._names("serch", threshold=0.0))
        self.assertEqual(["search"], self._names("search", threshold=0.0))

    def test_scores_are_sorted_and_bounded(self) -> None:
        results = self.index.search("set")
        scores = [m.score for m in results]
        self.assertEqual(sorted(scores), scores)
        self.assertTrue(all(0.0 <= s <= 1.0 for s in scores))

    def test_keys_restrict_searched_fields(self) -> None:
        self.assertEqual(["home", "arrow-right"], self._names("navigation", keys=["categories"], threshold=0.0))
        self.assertEqual([], self._names("navigation", keys=["name"], threshold=0.0))

    def test_unknown_keys_match_nothing(self) -> None:
        self.assertEqual([], self._names("home", keys=["bogus"]))

    def test_limit(self) -> None:
        self.assertEqual(1, len(self.index.search("ui", SearchOptions(limit=1, keys=["categories"]))))

    def test_score_and_matches_can_be_omitted(self) -> None:
        result = self.index.search("home", SearchOptions(include_score=False, include_matches=False))[0]
        self.assertIsNone(result.score)
        self.assertIsNone(result.matches)

    def test_matches_report_inclusive_ranges(self) -> None:
        result = self.index.search("home")[0]
        name_span = next(span for span in result.matches if span.key == "name")

        self.assertEqual("home", name_span.value)
        self.assertEqual([(0, 3)], name_span.indices)

    def test_min_match_char_length(self) -> None:
        self.assertEqual([], self._names("h"))

    def test_case_sensitivity(self) -> None:
        self.assertIn("home", self._names("HOME", threshold=0.1))
        self.assertEqual([], self._names("HOME", threshold=0.1, is_case_sensitive=True))

    def test_blank_query_returns_nothing(self) -> None:
        self.assertEqual([], self._names("   "))

    def test_value_inside_longer_query_is_not_a_perfect_match(self) -> None:
        index = FuzzyIndex([make_icon("down"), make_icon("download"), make_icon("up")])

        results = index.search("download")
        self.assertEqual("download", results[0].item.name)
        self.assertEqual(0.0, results[0].score)
        self.assertTrue(all(m.score > 0 for m in results if m.item.name == "down"))

        loose = index.search("download", SearchOptions(threshold=1.0, keys=["name"]))
        scores = {m.item.name: m.score for m in loose}
        self.assertAlmostEqual(1 - 2 * 4 / 12, scores["down"], places=4)

        self.assertNotIn("up", [m.item.name for m in index.search("cloud-upload")])

    def test_original_index_is_position_in_index(self) -> None:
        result = self.index.search("settings", SearchOptions(threshold=0.0))
        self.assertEqual(2, result[0].original_index)


class ExtendedSearchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.index = FuzzyIndex(_icons())

    def _names(self, query: str) -> list[str]:
        return [m.item.name for m in self.index.search(query, SearchOptions(use_extended_search=True))]

    def test_exact_operator(self) -> None:
        self.assertEqual(["home"], self._names("=home"))

    def test_prefix_and_suffix_operators(self) -> None:
        self.assertEqual(["search", "settings"], self._names("^se"))
        self.assertEqual(["settings"], self._names("ings$"))

    def test_include_operator(self) -> None:
        self.assertEqual(["search", "settings"], self._names("'ear"))

    def test_exclusion_operators(self) -> None:
        self.assertEqual(["search", "settings", "arrow-right"], self._names("!home"))
        self.assertEqual(["home", "search", "settings"], self._names("!^arr"))
        self.assertEqual(["home", "search", "arrow-right"], self._names("!ings$"))

    def test_and_terms(self) -> None:
        self.assertEqual(["search"], self._names("^se !gear"))

    def test_or_groups(self) -> None:
        self.assertEqual(["home", "settings"], self._names("=home | =gear"))


if __name__ == "__main__":
    unittest.main()
