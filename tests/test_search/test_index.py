"""Tests for mla.search.index module."""

from mla.core.models import Arc, Mapping, Root, Series
from mla.search.index import Match, normalize_term, search, truncate


def _kinds(matches):
    return [(m.kind, m.title) for m in matches]


class TestNormalizeTerm:
    """Tests for normalize_term function."""

    def test_trims_and_folds(self):
        assert normalize_term("  GuILD ") == "guild"

    def test_blank(self):
        assert normalize_term("   ") == ""
        assert normalize_term(None) == ""


class TestSearch:
    """Tests for search function."""

    def test_empty_term_yields_nothing(self, sample_root):
        assert list(search(sample_root, "")) == []

    def test_arc_summary_match(self, sample_root):
        matches = list(search(sample_root, "guild"))
        arc_matches = [m for m in matches if m.kind == "Arc"]

        assert len(arc_matches) == 1
        assert arc_matches[0].title == "Chronicles of Aether · Prologue Sparks"
        assert arc_matches[0].arc_id == "arc-aether-prologue"

    def test_arc_and_mapping_both_reported(self, sample_root):
        # "guild" is in the prologue summary and in the "Guild Oath" label
        matches = list(search(sample_root, "guild"))
        assert _kinds(matches) == [
            ("Arc", "Chronicles of Aether · Prologue Sparks"),
            ("Mapping", "Guild Oath"),
        ]

    def test_no_match(self, sample_root):
        assert list(search(sample_root, "ink")) == []

    def test_series_match(self, sample_root):
        matches = list(search(sample_root, "moonforge"))
        series_match = matches[0]

        assert series_match.kind == "Series"
        assert series_match.description == "1 arc"
        assert series_match.arc_id == "arc-moonforge-trials"
        assert [m.kind for m in matches] == ["Series", "Arc"]

    def test_series_plural_description(self, sample_root):
        match = next(search(sample_root, "chronicles"))
        assert match.description == "2 arcs"

    def test_series_without_arcs(self):
        root = Root(series=[Series(id="s1", name="Empty Saga")])
        match = next(search(root, "saga"))
        assert match.arc_id is None
        assert match.locator == "s1:"

    def test_mapping_description(self, sample_root):
        match = next(m for m in search(sample_root, "montage") if m.kind == "Mapping")
        assert match.title == "Inciting Incident"
        assert match.description == "Chronicles of Aether · Prologue Sparks"
        assert match.mapping_id == "map-prologue-1"

    def test_untitled_mapping(self):
        arc = Arc(id="a1", title="A", mappings=[Mapping(id="m1", manga="Chapter 99")])
        root = Root(series=[Series(id="s1", name="S", arcs=[arc])])
        match = next(search(root, "chapter 99"))
        assert match.title == "Untitled Mapping"

    def test_missing_summary(self):
        arc = Arc(id="a1", title="Lonely Arc")
        root = Root(series=[Series(id="s1", name="S", arcs=[arc])])
        assert next(search(root, "lonely")).description == "No summary yet."

    def test_long_summary_truncated(self):
        arc = Arc(id="a1", title="Long", summary="x" * 200)
        root = Root(series=[Series(id="s1", name="S", arcs=[arc])])
        description = next(search(root, "long")).description

        assert len(description) == 140
        assert description.endswith("…")

    def test_one_hit_per_granularity(self):
        arc = Arc(
            id="a1",
            title="Storm",
            summary="storm again",
            mappings=[Mapping(id="m1", label="Storm", notes="storm")],
        )
        root = Root(series=[Series(id="s1", name="Storm Saga", arcs=[arc])])
        assert [m.kind for m in search(root, "storm")] == ["Series", "Arc", "Mapping"]

    def test_restartable(self, sample_root):
        assert list(search(sample_root, "guild")) == list(search(sample_root, "guild"))


class TestMatch:
    """Tests for Match and truncate."""

    def test_to_dict(self):
        match = Match("Arc", "s1", "a1", None, "T", "D")
        assert match.to_dict() == {
            "type": "Arc",
            "seriesId": "s1",
            "arcId": "a1",
            "mappingId": None,
            "title": "T",
            "description": "D",
        }
        assert match.locator == "s1:a1"

    def test_truncate_short_text_unchanged(self):
        assert truncate("short", 140) == "short"
