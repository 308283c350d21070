"""Per-provider fuzzy index over a fixed icon set.

Scores follow the convention 0 = perfect match, 1 = no match. Each searchable
key contributes a distance derived from rapidfuzz's partial alignment (or the
plain ratio when the value is shorter than the query), and the distances of
matching keys are combined as a weighted product.
"""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz import fuzz

from icon_search_mcp.models import DEFAULT_SEARCH_KEYS, Icon, MatchSpan, ScoredMatch, SearchOptions

SEARCHABLE_KEYS = ("name", "tags", "categories", "style", "library")

_LOCATION_DISTANCE = 100


@dataclass(frozen=True)
class _FieldHit:
    distance: float
    value: str
    start: int
    end: int


@dataclass(frozen=True)
class _Term:
    operator: str
    text: str


def _field_values(icon: Icon, key: str) -> list[str]:
    value = getattr(icon, key, None)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [v for v in value if isinstance(v, str)]


def _normalize_weights(keys: list[str] | None) -> dict[str, float]:
    if not keys:
        weights = dict(DEFAULT_SEARCH_KEYS)
    else:
        weights = {k: DEFAULT_SEARCH_KEYS.get(k, 1.0) for k in keys if k in SEARCHABLE_KEYS}
    total = sum(weights.values())
    if total <= 0:
        return {}
    return {k: w / total for k, w in weights.items()}


def _fuzzy_hit(query: str, value: str, options: SearchOptions) -> _FieldHit | None:
    if len(value) < options.min_match_char_length:
        return None
    if query == value:
        return _FieldHit(0.0, value, 0, len(value))

    if len(query) > len(value):
        # A value contained in a longer query is not a perfect match; compare whole strings.
        score = fuzz.ratio(query, value)
        if score <= 0:
            return None
        return _FieldHit(min(1.0, 1.0 - score / 100), value, 0, len(value))

    alignment = fuzz.partial_ratio_alignment(query, value)
    if alignment is None or alignment.score <= 0:
        return None

    start, end = alignment.dest_start, alignment.dest_end
    if end - start < options.min_match_char_length:
        return None

    distance = 1.0 - alignment.score / 100
    if not options.ignore_location:
        distance += start / _LOCATION_DISTANCE
    return _FieldHit(min(1.0, max(0.0, distance)), value, start, end)


def _operator_hit(term: _Term, value: str) -> _FieldHit | None:
    text = term.text
    if term.operator == "=":
        return _FieldHit(0.0, value, 0, len(value)) if value == text else None
    if term.operator == "'":
        pos = value.find(text)
        return _FieldHit(0.0, value, pos, pos + len(text)) if pos >= 0 else None
    if term.operator == "^":
        return _FieldHit(0.0, value, 0, len(text)) if value.startswith(text) else None
    if term.operator == "$":
        return _FieldHit(0.0, value, len(value) - len(text), len(value)) if value.endswith(text) else None
    return None


def _parse_extended(query: str) -> list[list[_Term]]:
    groups: list[list[_Term]] = []
    for raw_group in query.split("|"):
        terms: list[_Term] = []
        for token in raw_group.split():
            if token.startswith("!^"):
                terms.append(_Term("!^", token[2:]))
            elif token.startswith("!") and token.endswith("$") and len(token) > 2:
                terms.append(_Term("!$", token[1:-1]))
            elif token.startswith("!"):
                terms.append(_Term("!", token[1:]))
            elif token.startswith("="):
                terms.append(_Term("=", token[1:]))
            elif token.startswith("'"):
                terms.append(_Term("'", token[1:]))
            elif token.startswith("^"):
                terms.append(_Term("^", token[1:]))
            elif token.endswith("$") and len(token) > 1:
                terms.append(_Term("$", token[:-1]))
            else:
                terms.append(_Term("", token))
        terms = [t for t in terms if t.text]
        if terms:
            groups.append(terms)
    return groups


class FuzzyIndex:
    """Precomputed searchable fields for one provider's icons.

    The index is immutable; providers build a new one whenever their icon set
    changes.
    """

    def __init__(self, icons: list[Icon]):
        self._icons = list(icons)
        self._fields: list[dict[str, list[str]]] = [
            {key: _field_values(icon, key) for key in SEARCHABLE_KEYS} for icon in self._icons
        ]
        self._folded: list[dict[str, list[str]]] = [
            {key: [v.lower() for v in values] for key, values in fields.items()} for fields in self._fields
        ]

    def __len__(self) -> int:
        return len(self._icons)

    def search(self, query: str, options: SearchOptions | None = None) -> list[ScoredMatch[Icon]]:
        options = options or SearchOptions()
        weights = _normalize_weights(options.keys)
        if not weights or not query.strip():
            return []

        needle = query if options.is_case_sensitive else query.lower()
        hits: list[tuple[float, int, list[MatchSpan]]] = []
        for index in range(len(self._icons)):
            if options.use_extended_search:
                scored = self._score_extended(index, needle, weights, options)
            else:
                scored = self._score_fuzzy(index, needle, weights, options)
            if scored is not None:
                hits.append((scored[0], index, scored[1]))

        hits.sort(key=lambda hit: (hit[0], hit[1]))
        results: list[ScoredMatch[Icon]] = []
        for score, index, spans in hits[: max(0, options.limit)]:
            results.append(
                ScoredMatch(
                    item=self._icons[index],
                    score=round(score, 6) if options.include_score else None,
                    matches=spans if options.include_matches else None,
                    original_index=index,
                )
            )
        return results

    def _values(self, index: int, key: str, options: SearchOptions) -> list[str]:
        source = self._fields if options.is_case_sensitive else self._folded
        return source[index][key]

    def _best_hit(self, index: int, key: str, needle: str, options: SearchOptions) -> _FieldHit | None:
        best: _FieldHit | None = None
        for position, value in enumerate(self._values(index, key, options)):
            hit = _fuzzy_hit(needle, value, options)
            if hit is None:
                continue
            if best is None or hit.distance < best.distance:
                best = _FieldHit(hit.distance, self._fields[index][key][position], hit.start, hit.end)
        return best

    def _score_fuzzy(
        self,
        index: int,
        needle: str,
        weights: dict[str, float],
        options: SearchOptions,
    ) -> tuple[float, list[MatchSpan]] | None:
        total = 1.0
        spans: list[MatchSpan] = []
        for key, weight in weights.items():
            hit = self._best_hit(index, key, needle, options)
            if hit is None or hit.distance > options.threshold:
                continue
            total *= hit.distance**weight
            spans.append(MatchSpan(key=key, value=hit.value, indices=[(hit.start, hit.end - 1)]))
        if not spans:
            return None
        return total, spans

    def _score_extended(
        self,
        index: int,
        needle: str,
        weights: dict[str, float],
        options: SearchOptions,
    ) -> tuple[float, list[MatchSpan]] | None:
        best: tuple[float, list[MatchSpan]] | None = None
        for group in _parse_extended(needle):
            distances: list[float] = []
            spans: list[MatchSpan] = []
            for term in group:
                matched = self._match_term(index, term, weights, options)
                if matched is None:
                    break
                distances.append(matched[0])
                spans.extend(matched[1])
            else:
                score = sum(distances) / len(distances)
                if best is None or score < best[0]:
                    best = (score, spans)
        return best

    def _match_term(
        self,
        index: int,
        term: _Term,
        weights: dict[str, float],
        options: SearchOptions,
    ) -> tuple[float, list[MatchSpan]] | None:
        values = [(key, v) for key in weights for v in self._values(index, key, options)]

        if term.operator.startswith("!"):
            positive = {"!": "'", "!^": "^", "!$": "$"}[term.operator]
            if any(_operator_hit(_Term(positive, term.text), v) for _, v in values):
                return None
            return 0.0, []

        best: tuple[float, list[MatchSpan]] | None = None
        for key in weights:
            originals = self._fields[index][key]
            for position, value in enumerate(self._values(index, key, options)):
                if term.operator:
                    hit = _operator_hit(term, value)
                else:
                    hit = _fuzzy_hit(term.text, value, options)
                    if hit is not None and hit.distance > options.threshold:
                        hit = None
                if hit is None:
                    continue
                if best is None or hit.distance < best[0]:
                    span = MatchSpan(key=key, value=originals[position], indices=[(hit.start, hit.end - 1)])
                    best = (hit.distance, [span])
        return best
