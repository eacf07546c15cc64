"""Runtime settings read from the environment.

PARSEOS_LOG_LEVEL           logging level name or number (default INFO)
PARSEOS_STRICT_LINE_LENGTH  "1"/"true" turns a positional line of the wrong
                            length into an error instead of a warning
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    strict_line_length: bool = False


def get_settings() -> Settings:
    # Read on every call so tests can flip variables with monkeypatch.
    return Settings(
        log_level=os.getenv("PARSEOS_LOG_LEVEL", "INFO"),
        strict_line_length=os.getenv("PARSEOS_STRICT_LINE_LENGTH", "").strip().lower() in _TRUTHY,
    )
