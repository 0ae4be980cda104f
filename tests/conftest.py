"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["ENVIRONMENT"] = "test"
os.environ["SAVE_DELAY_MAX"] = "0"

from formaction.config import Settings  # noqa: E402
from formaction.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the save stub instant and the environment predictable."""

    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("SAVE_DELAY_MAX", "0")


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app():
    return create_app()
