"""Tests for mla.config.commands CLI module."""

import yaml
import pytest
from click.testing import CliRunner

from mla.config.commands import config


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def test_get_default(runner, mock_site_root):
    result = runner.invoke(config, ["get", "backup.keep_days"])
    assert result.exit_code == 0
    assert "backup.keep_days = 30" in result.output
    assert "(default)" in result.output


def test_set_int(runner, mock_site_root):
    result = runner.invoke(config, ["set", "backup.keep_count", "5"])
    assert result.exit_code == 0

    saved = yaml.safe_load((mock_site_root / ".mla" / "config.yaml").read_text())
    assert saved == {"backup": {"keep_count": 5}}


def test_set_then_get(runner, mock_site_root):
    runner.invoke(config, ["set", "publish.branch", "main"])
    result = runner.invoke(config, ["get", "publish.branch"])
    assert "publish.branch = main" in result.output


def test_set_invalid_int(runner, mock_site_root):
    result = runner.invoke(config, ["set", "backup.keep_days", "soon"])
    assert result.exit_code == 1
    assert "Expected int" in result.output


def test_set_blank_string(runner, mock_site_root):
    result = runner.invoke(config, ["set", "publish.repo_owner", "  "])
    assert result.exit_code == 1


def test_unknown_key(runner, mock_site_root):
    result = runner.invoke(config, ["get", "nope.key"])
    assert result.exit_code == 1
    assert "Unknown setting" in result.output
    assert "backup.keep_days" in result.output


def test_show(runner, mock_site_root):
    (mock_site_root / ".mla" / "config.yaml").write_text("publish:\n  repo_owner: octo\n")
    result = runner.invoke(config, ["show"])
    assert result.exit_code == 0
    assert "octo" in result.output
    assert "publish.path" in result.output


def test_malformed_config_reported(runner, mock_site_root):
    (mock_site_root / ".mla" / "config.yaml").write_text("backup: [unclosed\n")

    result = runner.invoke(config, ["show"])
    assert result.exit_code == 1
    assert "Cannot read" in result.output
