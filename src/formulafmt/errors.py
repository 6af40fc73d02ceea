"""Error types with formatted context.

The lexer and formatter never raise; only configuration loading does.
"""

from __future__ import annotations

from pathlib import Path


class ConfigError(Exception):
    """Raised when a config file cannot be read or holds invalid values."""

    def __init__(self, message: str, path: Path) -> None:
        self.message = message
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        return f"error: {self.message}\n  --> {self.path}"
