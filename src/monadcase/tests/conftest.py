"""Shared fixtures: isolate settings and logging between tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from monadcase.foundation.config import clear_settings_cache
from monadcase.runtime.observability import reset_logging


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop MONADCASE_* variables and cached settings/logging before each test."""
    for key in list(os.environ):
        if key.startswith("MONADCASE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))  # keep stray .env files out of the way
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()
