"""Pytest configuration and shared fixtures for cloud-sdk-core tests."""

import pytest

from cloud_sdk_core.auth import NoAuthAuthenticator


@pytest.fixture(autouse=True)
def clear_env(monkeypatch, tmp_path):
    """Auto-cleanup: isolate tests from real credentials.

    Clears credential-related environment variables and points the working
    and home directories at empty temporary directories, so no real
    ``ibm-credentials.env`` file is picked up.
    """
    import os

    test_prefixes = ("IBM_CREDENTIALS_FILE", "TEST_", "MY_SERVICE_", "WIDGETS_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    home = tmp_path / "home"
    workdir = tmp_path / "work"
    home.mkdir()
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)

    yield


@pytest.fixture
def home_dir(tmp_path):
    return tmp_path / "home"


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path / "work"


@pytest.fixture
def authenticator():
    return NoAuthAuthenticator()
