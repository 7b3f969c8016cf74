"""ConfigProvider Port Interface.

Contract: look up a raw configuration value by key in one source.
"""

from __future__ import annotations

from typing import Optional, Protocol


class ConfigProvider(Protocol):
    name: str

    def lookup(self, key: str) -> Optional[str]: ...

    """
    Return the raw string stored under ``key`` in this source, or None when
    the source does not define it. Providers never raise for a missing key;
    the resolver decides what absence means.
    """
