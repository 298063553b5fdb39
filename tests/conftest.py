"""Shared pytest fixtures for kira-dependencies tests."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from kira_dependencies.core.config import Settings, load_settings

BASE_ENV = {"DEPENDABOT_PROJECT_PATH": "group/project"}


@pytest.fixture
def base_env() -> dict[str, str]:
    return dict(BASE_ENV)


@pytest.fixture
def make_settings(base_env):
    """Factory: Settings from ``base_env`` plus keyword overrides; no .env file is read."""

    def _make(**env: str) -> Settings:
        with patch.dict(os.environ, {**base_env, **env}, clear=True):
            return load_settings(_env_file=None)

    return _make
