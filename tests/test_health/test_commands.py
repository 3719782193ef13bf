"""Tests for mla.health.commands CLI module."""

import json

import pytest
from click.testing import CliRunner

from mla.health.commands import health


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def test_list_json(runner, sample_db_file):
    result = runner.invoke(health, ["list", "--json"])
    assert result.exit_code == 0

    rows = json.loads(result.output)
    assert [r["arcId"] for r in rows] == ["arc-aether-prologue", "arc-aether-delta", "arc-moonforge-trials"]
    assert rows[0]["status"] == "Gaps"
    assert rows[0]["missingCount"] == 1
    assert rows[2]["label"] == "Gaps · No mappings yet"


def test_list_status_filter(runner, sample_db_file):
    result = runner.invoke(health, ["list", "--status", "OK", "--json"])
    assert result.exit_code == 0
    assert [r["arcId"] for r in json.loads(result.output)] == ["arc-aether-delta"]


def test_list_nothing_to_report(runner, sample_db_file):
    result = runner.invoke(health, ["list", "--status", "Mismatched"])
    assert result.exit_code == 0
    assert "No arcs to report" in result.output


def test_list_table(runner, sample_db_file):
    result = runner.invoke(health, ["list"])
    assert result.exit_code == 0
    assert "Prologue Sparks" in result.output


def test_arc_json_with_coverage(runner, sample_db_file):
    result = runner.invoke(health, ["arc", "series-chronicles", "arc-aether-prologue", "--json"])
    assert result.exit_code == 0

    data = json.loads(result.output)
    assert data["status"] == "Gaps"
    assert data["coverage"] == {"manga": 2, "ln": 2, "anime": 1}


def test_arc_not_found(runner, sample_db_file):
    result = runner.invoke(health, ["arc", "series-chronicles", "arc-missing"])
    assert result.exit_code == 1
    assert "Arc not found" in result.output


def test_summary(runner, sample_db_file):
    result = runner.invoke(health, ["summary"])
    assert result.exit_code == 0
    assert "Gaps" in result.output
    assert "2" in result.output
