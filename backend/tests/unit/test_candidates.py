"""Unit tests for candidate deduplication and ranking"""

from matching.candidates import dedupe_candidates, filter_and_rank
from matching.models import MatchConfig, ScoreBreakdown, ScoredCandidate
from platforms import EcommercePlatform


def _scored(product, name_similarity):
    # keyword/category/attribute zeroed so confidence == 0.4 * name_similarity
    return ScoredCandidate(product=product, breakdown=ScoreBreakdown(name_similarity, 0.0, 0.0, 0.0))


class TestDedupeCandidates:
    """Test merging of per-query results"""

    def test_first_occurrence_wins(self, make_product):
        first = make_product("p1", "鸡胸肉", price=10.0)
        duplicate = make_product("p1", "鸡胸肉", price=99.0)
        other = make_product("p2", "鸡胸肉")

        unique = dedupe_candidates([first, other, duplicate])

        assert unique == [first, other]
        assert unique[0].price == 10.0

    def test_same_id_on_different_platforms_is_kept(self, make_product):
        sams = make_product("p1", "牛奶", platform=EcommercePlatform.SAMS_CLUB)
        hema = make_product("p1", "牛奶", platform=EcommercePlatform.HEMA)

        assert dedupe_candidates([sams, hema]) == [sams, hema]

    def test_empty(self):
        assert dedupe_candidates([]) == []


class TestFilterAndRank:
    """Test threshold, ordering and cap"""

    def test_threshold_is_inclusive(self, make_product):
        at_threshold = _scored(make_product("p1", "a"), 1.0)   # 0.4
        below = _scored(make_product("p2", "b"), 0.5)          # 0.2

        ranked = filter_and_rank([at_threshold, below], MatchConfig(min_confidence=0.4))

        assert ranked == [at_threshold]

    def test_sorted_descending(self, make_product):
        low = _scored(make_product("p1", "a"), 0.25)
        high = _scored(make_product("p2", "b"), 1.0)
        mid = _scored(make_product("p3", "c"), 0.5)

        ranked = filter_and_rank([low, high, mid], MatchConfig(min_confidence=0.0))

        assert [c.product.platform_product_id for c in ranked] == ["p2", "p3", "p1"]

    def test_ties_keep_catalog_order(self, make_product):
        candidates = [_scored(make_product(f"p{i}", "a"), 0.5) for i in range(5)]

        ranked = filter_and_rank(candidates, MatchConfig(min_confidence=0.0))

        assert ranked == candidates

    def test_capped_at_max_results(self, make_product):
        candidates = [_scored(make_product(f"p{i}", "a"), i / 10) for i in range(10)]

        ranked = filter_and_rank(candidates, MatchConfig(min_confidence=0.0, max_results=3))

        assert len(ranked) == 3
        assert [c.product.platform_product_id for c in ranked] == ["p9", "p8", "p7"]

    def test_raising_threshold_only_removes(self, make_product):
        candidates = [_scored(make_product(f"p{i}", "a"), i / 10) for i in range(10)]

        loose = filter_and_rank(candidates, MatchConfig(min_confidence=0.1))
        strict = filter_and_rank(candidates, MatchConfig(min_confidence=0.2))

        assert all(candidate in loose for candidate in strict)
        assert [c for c in loose if c.confidence >= 0.2] == strict
