"""Secrets configuration."""

from __future__ import annotations

import os

ENV_SONIOX_API_KEY = "SONIOX_API_KEY"

# Read from the working directory at startup; real environment variables win.
DEFAULT_DOTENV_FILE = ".env"


def get_soniox_api_key() -> str | None:
    # Missing credentials are passed through to Soniox, which rejects them.
    return (os.getenv(ENV_SONIOX_API_KEY) or "").strip() or None


__all__ = ["DEFAULT_DOTENV_FILE", "ENV_SONIOX_API_KEY", "get_soniox_api_key"]
