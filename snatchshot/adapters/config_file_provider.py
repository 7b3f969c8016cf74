"""Bundled config file adapter.

Reads a plain-text ``KEY = VALUE`` file (Config.xcconfig in the app bundle):

    GOOGLE_CLIENT_ID = abc123.apps.googleusercontent.com
    DATABASE_API_BASE_URL =   https://api.example.com/api?x=1

Each line is split on the first " = "; key and value are stripped, any further
"=" characters stay in the value. Blank lines and // or # comments are skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from snatchshot.ports.config_provider import ConfigProvider

_LOGGER = logging.getLogger(__name__)

DELIMITER = " = "
COMMENT_PREFIXES = ("//", "#")


def _iter_assignments(text: str) -> Iterator[tuple[str, str]]:
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        key, sep, value = line.partition(DELIMITER)
        if not sep:
            continue
        key = key.strip()
        if key:
            yield key, value.strip()


def parse_config_text(text: str) -> dict[str, str]:
    """Parse a whole file; the first assignment of a key wins."""
    parsed: dict[str, str] = {}
    for key, value in _iter_assignments(text):
        parsed.setdefault(key, value)
    return parsed


class ConfigFileProvider(ConfigProvider):
    name = "config_file"

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def lookup(self, key: str) -> Optional[str]:
        """
        Re-read the file on every call so edits between lookups are visible.
        An absent or unreadable file counts as "not defined here".
        """
        try:
            text = self._path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            _LOGGER.debug(
                "config_file_missing",
                extra={"event": "config_file_missing", "path": str(self._path)},
            )
            return None
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning(
                "config_file_unreadable",
                extra={
                    "event": "config_file_unreadable",
                    "path": str(self._path),
                    "error": str(exc),
                },
            )
            return None

        for found_key, value in _iter_assignments(text):
            if found_key == key:
                return value
        return None
