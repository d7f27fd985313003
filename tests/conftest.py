# tests/conftest.py

import os

import pytest

import firflow.config.loaders as loaders


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps tests away from the user's real config files and FIRFLOW_* variables."""
    monkeypatch.setattr(loaders, "USER_CONFIG_FILE", tmp_path / "user_config" / "firflow.toml")
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith(loaders.ENV_PREFIX):
            monkeypatch.delenv(name)
    yield
