"""Tests for mla.catalog.commands CLI module."""

import json

import pytest
from click.testing import CliRunner

from mla.catalog.commands import arc, mapping, series


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def _db(mock_site_root):
    return json.loads((mock_site_root / ".mla" / "mla_db.json").read_text())


def _arc(db, series_id, arc_id):
    entry = next(s for s in db["series"] if s["id"] == series_id)
    return next(a for a in entry["arcs"] if a["id"] == arc_id)


# ---------------------------------------------------------------------------
# series
# ---------------------------------------------------------------------------


class TestSeries:
    """Tests for the series group."""

    def test_list(self, runner, sample_db_file):
        result = runner.invoke(series, ["list"])
        assert result.exit_code == 0
        assert "series-moonforge" in result.output

    def test_list_empty(self, runner, mock_site_root):
        (mock_site_root / ".mla" / "mla_db.json").write_text('{"series": []}')
        result = runner.invoke(series, ["list"])
        assert "No series yet" in result.output

    def test_add(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(series, ["add", "Starfall"])
        assert result.exit_code == 0
        assert "Added series" in result.output
        assert _db(mock_site_root)["series"][-1]["name"] == "Starfall"

    def test_add_blank_name(self, runner, sample_db_file):
        result = runner.invoke(series, ["add", "  "])
        assert result.exit_code == 1
        assert "Series name is required" in result.output

    def test_remove(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(series, ["remove", "series-moonforge", "-y"])
        assert result.exit_code == 0
        assert [s["id"] for s in _db(mock_site_root)["series"]] == ["series-chronicles"]

    def test_remove_cancelled(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(series, ["remove", "series-moonforge"], input="n\n")
        assert "Cancelled" in result.output
        assert len(_db(mock_site_root)["series"]) == 2

    def test_remove_unknown(self, runner, sample_db_file):
        result = runner.invoke(series, ["remove", "series-missing", "-y"])
        assert result.exit_code == 1

    def test_not_initialized(self, runner, tmp_path, monkeypatch):
        from mla.core import config

        monkeypatch.delenv("MLA_DATA_ROOT", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        monkeypatch.chdir(tmp_path)
        config.get_data_root.cache_clear()

        result = runner.invoke(series, ["list"])
        config.get_data_root.cache_clear()

        assert result.exit_code == 1
        assert "mla init" in result.output


# ---------------------------------------------------------------------------
# arc
# ---------------------------------------------------------------------------


class TestArc:
    """Tests for the arc group."""

    def test_list(self, runner, sample_db_file):
        result = runner.invoke(arc, ["list", "series-chronicles"])
        assert result.exit_code == 0
        assert "arc-aether-delta" in result.output

    def test_show(self, runner, sample_db_file):
        result = runner.invoke(arc, ["show", "series-chronicles", "arc-aether-prologue"])
        assert result.exit_code == 0
        assert "Prologue Sparks" in result.output
        assert "map-prologue-2" in result.output

    def test_show_no_mappings(self, runner, sample_db_file):
        result = runner.invoke(arc, ["show", "series-moonforge", "arc-moonforge-trials"])
        assert result.exit_code == 0
        assert "No mappings yet" in result.output

    def test_add_with_rating(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(arc, ["add", "series-moonforge", "Forge War", "-s", "Battle", "-r", "9"])
        assert result.exit_code == 0
        assert "rated 5/5" in result.output

        added = _db(mock_site_root)["series"][1]["arcs"][-1]
        assert added["title"] == "Forge War"
        assert added["summary"] == "Battle"
        assert added["rating"] == 5

    def test_add_default_rating(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(arc, ["add", "series-moonforge", "Forge War"])
        assert result.exit_code == 0
        assert _db(mock_site_root)["series"][1]["arcs"][-1]["rating"] == 3

    def test_add_unknown_series(self, runner, sample_db_file):
        result = runner.invoke(arc, ["add", "series-missing", "Title"])
        assert result.exit_code == 1
        assert "Series not found" in result.output

    def test_edit_bad_rating(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(arc, ["edit", "series-chronicles", "arc-aether-delta", "-r", "abc"])
        assert result.exit_code == 0
        assert _arc(_db(mock_site_root), "series-chronicles", "arc-aether-delta")["rating"] == 1

    def test_edit_requires_a_change(self, runner, sample_db_file):
        result = runner.invoke(arc, ["edit", "series-chronicles", "arc-aether-delta"])
        assert result.exit_code == 1
        assert "Nothing to change" in result.output

    def test_show_unusable_stored_rating(self, runner, mock_site_root):
        db_path = mock_site_root / ".mla" / "mla_db.json"
        db_path.write_text(json.dumps({"series": [{"id": "s1", "name": "Mine", "arcs": [
            {"id": "a1", "title": "Opening", "rating": None},
            {"id": "a2", "title": "Finale", "rating": "five"},
        ]}]}))

        listed = runner.invoke(arc, ["list", "s1"])
        assert listed.exit_code == 0
        assert "Finale" in listed.output

        shown = runner.invoke(arc, ["show", "s1", "a1"])
        assert shown.exit_code == 0
        assert "★☆☆☆☆" in shown.output
        assert _arc(_db(mock_site_root), "s1", "a2")["rating"] == "five"

    def test_remove(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(arc, ["remove", "series-chronicles", "arc-aether-delta", "--yes"])
        assert result.exit_code == 0
        arcs = _db(mock_site_root)["series"][0]["arcs"]
        assert [a["id"] for a in arcs] == ["arc-aether-prologue"]


# ---------------------------------------------------------------------------
# mapping
# ---------------------------------------------------------------------------


class TestMapping:
    """Tests for the mapping group."""

    def test_add(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(mapping, [
            "add", "series-moonforge", "arc-moonforge-trials",
            "--label", "First Trial", "--manga", "Ch 40", "--ln", "Vol 8", "--anime", "Ep 20",
        ])
        assert result.exit_code == 0
        assert "OK · Fully aligned" in result.output

        rows = _arc(_db(mock_site_root), "series-moonforge", "arc-moonforge-trials")["mappings"]
        assert rows[0]["label"] == "First Trial"
        assert rows[0]["notes"] == ""

    def test_set_fills_gap(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(mapping, [
            "set", "series-chronicles", "arc-aether-prologue", "map-prologue-2", "anime", "Episode 2",
        ])
        assert result.exit_code == 0
        assert "OK · Fully aligned" in result.output

        row = _arc(_db(mock_site_root), "series-chronicles", "arc-aether-prologue")["mappings"][1]
        assert row["anime"] == "Episode 2"

    def test_set_blank_makes_gap(self, runner, sample_db_file):
        result = runner.invoke(mapping, [
            "set", "series-chronicles", "arc-aether-delta", "map-delta-1", "manga", "",
        ])
        assert result.exit_code == 0
        assert "Gaps · 1 incomplete row" in result.output

    def test_set_invalid_field(self, runner, sample_db_file):
        result = runner.invoke(mapping, [
            "set", "series-chronicles", "arc-aether-delta", "map-delta-1", "id", "x",
        ])
        assert result.exit_code == 2

    def test_remove(self, runner, sample_db_file, mock_site_root):
        result = runner.invoke(mapping, ["remove", "series-chronicles", "arc-aether-prologue", "map-prologue-1"])
        assert result.exit_code == 0
        rows = _arc(_db(mock_site_root), "series-chronicles", "arc-aether-prologue")["mappings"]
        assert [r["id"] for r in rows] == ["map-prologue-2"]

    def test_remove_unknown(self, runner, sample_db_file):
        result = runner.invoke(mapping, ["remove", "series-chronicles", "arc-aether-prologue", "map-x"])
        assert result.exit_code == 1
        assert "Mapping not found" in result.output
