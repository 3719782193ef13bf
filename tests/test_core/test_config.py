"""Tests for mla.core.config module."""

import pytest

from mla.core import config
from mla.core.errors import ConfigurationError
from mla.core.config import (
    find_data_root,
    get_config_value,
    get_global_config_path,
    get_paths,
    load_global_config,
    load_project_config,
    set_config_value,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No env override and an empty global config."""
    monkeypatch.delenv("MLA_DATA_ROOT", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path


class TestFindDataRoot:
    """Tests for the three-tier data root resolution."""

    def test_env_var_wins(self, clean_env, monkeypatch):
        root = clean_env / "env-root"
        (root / ".mla").mkdir(parents=True)
        monkeypatch.setenv("MLA_DATA_ROOT", str(root))

        assert find_data_root(clean_env) == root.resolve()

    def test_env_var_without_mla_dir(self, clean_env, monkeypatch):
        monkeypatch.setenv("MLA_DATA_ROOT", str(clean_env))
        with pytest.raises(FileNotFoundError):
            find_data_root()

    def test_walks_up(self, clean_env):
        (clean_env / "site" / ".mla").mkdir(parents=True)
        nested = clean_env / "site" / "a" / "b"
        nested.mkdir(parents=True)

        assert find_data_root(nested) == (clean_env / "site").resolve()

    def test_global_config(self, clean_env):
        root = clean_env / "global-root"
        (root / ".mla").mkdir(parents=True)
        global_path = get_global_config_path()
        global_path.parent.mkdir(parents=True)
        global_path.write_text(f"data_root: {root}\n")

        start = clean_env / "elsewhere"
        start.mkdir()
        assert find_data_root(start) == root.resolve()

    def test_not_found(self, clean_env):
        start = clean_env / "empty"
        start.mkdir()
        with pytest.raises(FileNotFoundError, match="mla init"):
            find_data_root(start)


class TestGlobalConfig:
    """Tests for load_global_config function."""

    def test_xdg_path(self, clean_env):
        assert get_global_config_path() == clean_env / "xdg" / "mla" / "config.yaml"

    def test_missing_file(self, clean_env):
        assert load_global_config() == {}

    def test_invalid_yaml(self, clean_env):
        path = get_global_config_path()
        path.parent.mkdir(parents=True)
        path.write_text("data_root: [unclosed\n")
        assert load_global_config() == {}


class TestPaths:
    """Tests for get_paths function."""

    def test_layout(self, tmp_path):
        paths = get_paths(tmp_path)
        assert paths.mla_dir == tmp_path / ".mla"
        assert paths.db == tmp_path / ".mla" / "mla_db.json"
        assert paths.backups == tmp_path / ".mla" / "backups"
        assert paths.config_file == tmp_path / ".mla" / "config.yaml"

    def test_uses_cached_root(self, mock_site_root):
        assert get_paths().root == mock_site_root
        assert config.get_data_root() == mock_site_root


class TestProjectConfig:
    """Tests for project configuration helpers."""

    def test_no_file(self, mock_site_root):
        assert load_project_config() == {}

    def test_yaml(self, mock_site_root):
        (mock_site_root / ".mla" / "config.yaml").write_text("backup:\n  keep_days: 14\n")
        assert load_project_config()["backup"]["keep_days"] == 14

    def test_json_content(self, mock_site_root):
        (mock_site_root / ".mla" / "config.yaml").write_text('{"publish": {"branch": "main"}}')
        assert get_config_value("publish.branch") == "main"

    def test_get_default(self, mock_site_root):
        assert get_config_value("backup.keep_days", 30) == 30

    def test_malformed_yaml_raises(self, mock_site_root):
        (mock_site_root / ".mla" / "config.yaml").write_text("backup: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_project_config()

    def test_malformed_json_raises(self, mock_site_root):
        (mock_site_root / ".mla" / "config.yaml").write_text('{"publish": ')
        with pytest.raises(ConfigurationError):
            load_project_config()

    def test_set_then_get(self, mock_site_root):
        set_config_value("publish.repo_owner", "octo")
        set_config_value("publish.repo_name", "arcs")

        assert get_config_value("publish.repo_owner") == "octo"
        assert load_project_config() == {"publish": {"repo_owner": "octo", "repo_name": "arcs"}}

    def test_set_replaces_scalar_parent(self, mock_site_root):
        set_config_value("backup", 3)
        set_config_value("backup.keep_count", 5)
        assert get_config_value("backup.keep_count") == 5
