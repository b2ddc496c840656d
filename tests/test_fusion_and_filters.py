"""
Tests for Reciprocal Rank Fusion and result filtering.

Run with: pytest tests/test_fusion_and_filters.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from journal_rag.core.models.search import Provenance, SearchFilters
from journal_rag.core.strategies.filtering import apply_filters
from journal_rag.core.strategies.fusion import reciprocal_rank_fusion

from fakes import make_result


class TestReciprocalRankFusion:
    """Rank fusion ordering, provenance and score scale."""

    def test_entry_in_both_lists_becomes_hybrid(self):
        fused = reciprocal_rank_fusion(
            [make_result("1", 0.9)], [make_result("1", 0.8, Provenance.VECTOR)]
        )
        assert len(fused) == 1
        assert fused[0].provenance == Provenance.HYBRID

    def test_first_in_both_beats_first_in_one(self):
        lexical = [make_result("both"), make_result("lex-only")]
        vector = [
            make_result("vec-only", provenance=Provenance.VECTOR),
            make_result("both", provenance=Provenance.VECTOR),
        ]
        # "both" is 1st lexically and 2nd semantically; "vec-only" is 1st in one list
        fused = reciprocal_rank_fusion(lexical, vector)
        scores = {r.id: r.score for r in fused}
        assert fused[0].id == "both"
        assert scores["both"] > scores["vec-only"]

    def test_first_in_both_scores_one(self):
        fused = reciprocal_rank_fusion(
            [make_result("a")], [make_result("a", provenance=Provenance.VECTOR)]
        )
        assert fused[0].score == pytest.approx(1.0)

    def test_single_list_first_place_scores_half(self):
        fused = reciprocal_rank_fusion([make_result("a")], [])
        assert fused[0].score == pytest.approx(0.5)
        assert fused[0].provenance == Provenance.LEXICAL

    def test_output_is_union(self):
        fused = reciprocal_rank_fusion(
            [make_result("a"), make_result("b")],
            [make_result("c", provenance=Provenance.VECTOR)],
        )
        assert {r.id for r in fused} == {"a", "b", "c"}

    def test_ties_keep_lexical_then_vector_order(self):
        fused = reciprocal_rank_fusion(
            [make_result("lex")], [make_result("vec", provenance=Provenance.VECTOR)]
        )
        assert [r.id for r in fused] == ["lex", "vec"]

    def test_duplicates_within_list_ignored(self):
        fused = reciprocal_rank_fusion([make_result("a"), make_result("a")], [])
        assert len(fused) == 1
        assert fused[0].score == pytest.approx(0.5)

    def test_inputs_not_mutated(self):
        lexical = [make_result("a", 0.9)]
        vector = [make_result("a", 0.8, Provenance.VECTOR)]
        reciprocal_rank_fusion(lexical, vector)
        assert lexical[0].provenance == Provenance.LEXICAL
        assert lexical[0].score == 0.9


class TestApplyFilters:
    """Result filter constraints."""

    def _results(self):
        return [
            make_result("jan", 0.9, tags=["work"], date=datetime(2024, 1, 10, tzinfo=timezone.utc)),
            make_result("feb", 0.2, tags=["family"], date=datetime(2024, 2, 10, tzinfo=timezone.utc), source_type="md"),
            make_result("mar", 0.6, tags=["work", "goals"], date=datetime(2024, 3, 31, tzinfo=timezone.utc)),
        ]

    def test_no_filters_only_caps(self):
        assert [r.id for r in apply_filters(self._results(), None, 2)] == ["jan", "feb"]

    def test_date_range_inclusive(self):
        filters = SearchFilters(
            date_range=(
                datetime(2024, 2, 10, tzinfo=timezone.utc),
                datetime(2024, 3, 31, tzinfo=timezone.utc),
            )
        )
        assert [r.id for r in apply_filters(self._results(), filters)] == ["feb", "mar"]

    def test_naive_date_bounds_read_as_utc(self):
        filters = SearchFilters(date_range=(datetime(2024, 2, 1), datetime(2024, 3, 31, 23, 59)))
        assert [r.id for r in apply_filters(self._results(), filters)] == ["feb", "mar"]

    def test_offset_date_bounds_compared_in_utc(self):
        plus_two = timezone(timedelta(hours=2))
        # 2024-01-10 01:00 +02:00 is 2024-01-09 23:00 UTC
        filters = SearchFilters(
            date_range=(datetime(2024, 1, 10, 1, 0, tzinfo=plus_two), datetime(2024, 1, 31, tzinfo=plus_two))
        )
        assert [r.id for r in apply_filters(self._results(), filters)] == ["jan"]

    def test_tags_any_match(self):
        filters = SearchFilters(tags=frozenset({"goals", "family"}))
        assert [r.id for r in apply_filters(self._results(), filters)] == ["feb", "mar"]

    def test_empty_tag_filter_is_no_constraint(self):
        filters = SearchFilters(tags=frozenset())
        assert len(apply_filters(self._results(), filters)) == 3

    def test_source_types(self):
        filters = SearchFilters(source_types=frozenset({"md"}))
        assert [r.id for r in apply_filters(self._results(), filters)] == ["feb"]

    def test_min_score(self):
        filters = SearchFilters(min_score=0.6)
        assert [r.id for r in apply_filters(self._results(), filters)] == ["jan", "mar"]

    def test_idempotent(self):
        filters = SearchFilters(tags=frozenset({"work"}), min_score=0.5)
        once = apply_filters(self._results(), filters, 5)
        twice = apply_filters(once, filters, 5)
        assert [r.id for r in once] == [r.id for r in twice]

    def test_without_min_score_keeps_structure(self):
        filters = SearchFilters(tags=frozenset({"work"}), min_score=0.95)
        structural = filters.without_min_score()
        assert structural.min_score is None
        assert structural.tags == frozenset({"work"})
