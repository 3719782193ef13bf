"""Shared test fixtures for mla package."""

import copy
import json

import pytest

from mla.core.models import Root
from mla.core.sample import SAMPLE_DB


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep rich tables from wrapping ids in captured output."""
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def sample_json_file(tmp_path):
    """Create a sample JSON file for testing."""
    data = {"key": "value", "number": 42}
    file_path = tmp_path / "sample.json"
    file_path.write_text(json.dumps(data))
    return file_path


@pytest.fixture
def sample_data():
    """A private copy of the example dataset as plain JSON data."""
    return copy.deepcopy(SAMPLE_DB)


@pytest.fixture
def sample_root(sample_data):
    """The example dataset as a Root tree."""
    return Root.from_dict(sample_data)


@pytest.fixture
def mock_site_root(tmp_path, monkeypatch):
    """Create a data root with an .mla/ directory and point mla at it."""
    mla_dir = tmp_path / ".mla"
    (mla_dir / "backups").mkdir(parents=True)

    monkeypatch.delenv("MLA_DATA_ROOT", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("REPO_OWNER", raising=False)
    monkeypatch.delenv("REPO_NAME", raising=False)
    monkeypatch.delenv("REPO_DEFAULT_BRANCH", raising=False)

    from mla.core import config
    # Clear the lru_cache first
    config.get_data_root.cache_clear()
    monkeypatch.setattr(config, "get_data_root", lambda: tmp_path)

    return tmp_path


@pytest.fixture
def sample_db_file(mock_site_root, sample_data):
    """Write the example dataset as the snapshot of the mock data root."""
    db_path = mock_site_root / ".mla" / "mla_db.json"
    db_path.write_text(json.dumps(sample_data, indent=2))
    return db_path


@pytest.fixture
def store(mock_site_root):
    """A DataStore rooted in the mock data root (starts from example data)."""
    from mla.core.store import DataStore

    mla_dir = mock_site_root / ".mla"
    return DataStore(mla_dir / "mla_db.json", mla_dir / "backups")
