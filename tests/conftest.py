"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# Complete test environment that overrides ALL possible config values
TEST_ENV = {
    "FZF_IMPORT_RG_PATH": "rg",
    "FZF_IMPORT_FZF_PATH": "fzf",
    "FZF_IMPORT_BATCH_SIZE": "20",
    "FZF_IMPORT_READ_CHUNK_SIZE": "65536",
    "FZF_IMPORT_TERMINATE_GRACE_SECONDS": "0.5",
    "FZF_IMPORT_FZF_HEIGHT": "40%",
    "FZF_IMPORT_FZF_LAYOUT": "reverse",
    "FZF_IMPORT_FZF_BORDER": "true",
    "FZF_IMPORT_SELECT_SINGLE_MATCH": "true",
    "FZF_IMPORT_PROJECT_MARKERS": "package.json",
    "FZF_IMPORT_LOG_LEVEL": "warning",
    "FZF_IMPORT_LOG_JSON": "false",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

from tests.fixtures.fake_tools import FakeTools  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset FZF_IMPORT_* variables before each test and keep .env files out of the way."""
    for key in list(os.environ):
        if key.startswith("FZF_IMPORT_"):
            monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def settings():
    from fzf_import.config import Settings

    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def fake_tools(tmp_path: Path) -> FakeTools:
    return FakeTools(tmp_path / "tools")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal JS project with a package.json marker and one target file."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text("{}\n", encoding="utf-8")
    (root / "src" / "app.ts").write_text(
        "// App entry\nimport { Foo } from '@lib/foo';\n\nexport const app = new Foo();\n",
        encoding="utf-8",
    )
    return root
