"""Build metadata adapter.

Build metadata is the key/value data baked into the app bundle at build time
(Info.plist on device). It is read once, when the provider is created, and is
immutable afterwards.
"""

from __future__ import annotations

import logging
import plistlib
import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from snatchshot.ports.config_provider import ConfigProvider

_LOGGER = logging.getLogger(__name__)

_PLIST_SUFFIXES = frozenset({".plist"})
_TOML_SUFFIXES = frozenset({".toml"})


class BuildMetadataProvider(ConfigProvider):
    name = "build_metadata"

    def __init__(self, metadata: Optional[Mapping[str, Any]] = None) -> None:
        self._metadata: Mapping[str, Any] = MappingProxyType(dict(metadata or {}))

    @classmethod
    def from_file(cls, path: str | Path) -> "BuildMetadataProvider":
        """
        Load metadata from an Info.plist (binary or XML) or a TOML file.
        A missing file gives an empty provider: bundles built without
        metadata are valid and simply fall through to the next source.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in _PLIST_SUFFIXES | _TOML_SUFFIXES:
            raise ValueError(f"Unsupported build metadata format: {path.name}")

        if not path.exists():
            _LOGGER.debug(
                "build_metadata_missing",
                extra={"event": "build_metadata_missing", "path": str(path)},
            )
            return cls()

        with path.open("rb") as f:
            if suffix in _PLIST_SUFFIXES:
                data = plistlib.load(f)
            else:
                data = tomllib.load(f)

        if not isinstance(data, Mapping):
            raise ValueError(f"Build metadata must be a dictionary at top level: {path}")
        return cls(data)

    def lookup(self, key: str) -> Optional[str]:
        value = self._metadata.get(key)
        # non-string entries (numbers, arrays, ...) do not count as a value
        if not isinstance(value, str):
            return None
        return value

    def keys(self) -> list[str]:
        return sorted(k for k, v in self._metadata.items() if isinstance(v, str))
