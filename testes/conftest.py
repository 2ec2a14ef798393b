import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from news_migration.config import load_config
from news_migration.utils import errors


@pytest.fixture(autouse=True)
def report_dir(tmp_path, monkeypatch):
    """Keep migration logs and reports out of the working tree."""
    path = tmp_path / "reports" / "migration"
    monkeypatch.setattr(errors, "_REPORT_DIR", str(path))
    return path


@pytest.fixture
def raw_config(tmp_path):
    return {
        "legacy": {"base_url": "https://www.example.org/"},
        "destination": {"api_base": "https://cms.example.org", "access_token": "secret-token"},
        "storage": {
            "backend": "local",
            "directory": str(tmp_path / "renditions"),
            "public_base_url": "https://cdn.example.org/news",
        },
        "migration": {"timeout": 5},
    }


@pytest.fixture
def config(raw_config):
    return load_config(raw_config)
