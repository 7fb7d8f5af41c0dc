from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Every variable the service reads from the environment.
BRIDGE_ENV_NAMES = (
    "SONIOX_WEBSOCKET_URL",
    "SONIOX_API_KEY",
    "SONIOX_SPEECH_RECOGNITION_MODEL",
    "SONIOX_SPEECH_RECOGNITION_LANGUAGE",
    "SONIOX_ENABLE_ENDPOINT_DETECTION",
    "SONIOX_CONNECT_TIMEOUT_S",
    "SONIOX_FINISH_TIMEOUT_S",
    "TRANSCRIPT_TOKEN_SEPARATOR",
    "MAX_CONCURRENT_SESSIONS",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "SHOW_WEBSOCKETS_LOGS",
)


def pytest_configure() -> None:
    # Keep `import src...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Start from an environment where every setting falls back to its default.

    Runs from an empty working directory so no stray `.env` is picked up, and
    registers every name with monkeypatch so values a test loads from a `.env`
    are removed again afterwards.
    """
    monkeypatch.chdir(tmp_path)
    for name in BRIDGE_ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
