"""
Purpose:
    - Resolve named settings across ordered sources
      (environment -> build metadata -> bundled config file)
    - Mandatory string values fail fast when no source defines them
    - Numeric values fall back to a caller supplied default

Nothing is cached: every call re-reads the environment and re-parses the
config file, so the same inputs always give the same answer and edits on disk
are picked up by the next call.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from snatchshot.adapters.config_file_provider import ConfigFileProvider
from snatchshot.adapters.env_provider import EnvConfigProvider
from snatchshot.adapters.metadata_provider import BuildMetadataProvider
from snatchshot.config.keys import MANDATORY_KEYS, ConfigKey, key_name
from snatchshot.errors.errors import ConfigValidationError, MissingConfigError
from snatchshot.ports.config_provider import ConfigProvider
from snatchshot.ports.telemetry import Telemetry

_LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "Config.xcconfig"
DEFAULT_SOURCE = "default"

# plain ASCII decimal: no digit separators ("4_5"), no non-ASCII digits, no nan/inf
_DECIMAL_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def parse_number(raw: str) -> Optional[float]:
    """Parse ``raw`` as a finite decimal number, or return None."""
    candidate = raw.strip()
    if not _DECIMAL_RE.fullmatch(candidate):
        return None
    number = float(candidate)
    # overflow such as "1e999" parses to inf
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True)
class ResolvedValue:
    key: str
    value: str
    source: str  # provider name, e.g. "env"


class ConfigResolver:
    def __init__(
        self,
        providers: Sequence[ConfigProvider],
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        if not providers:
            raise ValueError("ConfigResolver needs at least one provider")
        self._providers: tuple[ConfigProvider, ...] = tuple(providers)
        self.telemetry = telemetry

    @classmethod
    def from_paths(
        cls,
        config_file: str | Path = DEFAULT_CONFIG_FILE,
        metadata_file: str | Path | None = None,
        *,
        env_prefix: str = "",
        telemetry: Optional[Telemetry] = None,
    ) -> "ConfigResolver":
        """Build the standard Environment -> BuildMetadata -> ConfigFile chain."""
        metadata = (
            BuildMetadataProvider.from_file(metadata_file)
            if metadata_file is not None
            else BuildMetadataProvider()
        )
        return cls(
            [
                EnvConfigProvider(prefix=env_prefix),
                metadata,
                ConfigFileProvider(config_file),
            ],
            telemetry=telemetry,
        )

    @property
    def providers(self) -> tuple[ConfigProvider, ...]:
        return self._providers

    @property
    def source_names(self) -> list[str]:
        return [p.name for p in self._providers]

    # --- lookup ---------------------------------------------

    def lookup(self, key: str | ConfigKey) -> Optional[ResolvedValue]:
        """Return the first value found in priority order, or None."""
        name = key_name(key)
        for provider in self._providers:
            value = provider.lookup(name)
            if value is not None:
                _LOGGER.debug(
                    "config_value_resolved",
                    extra={
                        "event": "config_value_resolved",
                        "key": name,
                        "source": provider.name,
                    },
                )
                return ResolvedValue(key=name, value=value, source=provider.name)
        return None

    def sources_for(self, key: str | ConfigKey) -> list[str]:
        """Names of every source defining ``key`` (shadowed ones included)."""
        name = key_name(key)
        return [p.name for p in self._providers if p.lookup(name) is not None]

    # --- typed accessors ------------------------------------

    def resolve_string(self, key: str | ConfigKey) -> str:
        """
        Mandatory lookup. Raises MissingConfigError when no source defines
        the key; callers are not expected to recover from it.
        """
        return self.resolve(key).value

    def resolve(self, key: str | ConfigKey) -> ResolvedValue:
        """Like resolve_string, but keeps the name of the source that answered."""
        resolved = self.lookup(key)
        if resolved is None:
            name = key_name(key)
            _LOGGER.error(
                "config_key_missing",
                extra={
                    "event": "config_key_missing",
                    "key": name,
                    "sources": self.source_names,
                },
            )
            if self.telemetry is not None:
                self.telemetry.log(
                    event="config_validation_error",
                    layer="resolver",
                    step="resolve_string",
                    errors=[
                        {
                            "path": name,
                            "message": "not defined in any source",
                            "error_type": "missing",
                        }
                    ],
                )
            raise MissingConfigError(name, sources=self.source_names)
        return resolved

    def resolve_double(self, key: str | ConfigKey, default: float) -> float:
        """
        Optional numeric lookup: absent or unparsable values give ``default``.
        """
        return self.resolve_double_with_source(key, default)[0]

    def resolve_double_with_source(
        self, key: str | ConfigKey, default: float
    ) -> tuple[float, str]:
        """
        Return the number and where it came from; the source is
        DEFAULT_SOURCE whenever ``default`` was used.
        """
        resolved = self.lookup(key)
        if resolved is None:
            return default, DEFAULT_SOURCE

        number = parse_number(resolved.value)
        if number is None:
            _LOGGER.warning(
                "config_numeric_unparsable",
                extra={
                    "event": "config_numeric_unparsable",
                    "key": resolved.key,
                    "source": resolved.source,
                    "default": default,
                },
            )
            return default, DEFAULT_SOURCE
        return number, resolved.source

    # --- startup validation ---------------------------------

    def missing(self, keys: Iterable[str | ConfigKey] = MANDATORY_KEYS) -> list[str]:
        return [key_name(k) for k in keys if self.lookup(k) is None]

    def validate(self, keys: Iterable[str | ConfigKey] = MANDATORY_KEYS) -> None:
        """Check every key up front and report all of the missing ones together."""
        missing = self.missing(keys)
        if not missing:
            return

        errors = [
            {"path": name, "message": "not defined in any source", "error_type": "missing"}
            for name in missing
        ]
        _LOGGER.error(
            "config_validation_failed",
            extra={"event": "config_validation_failed", "missing": missing},
        )
        if self.telemetry is not None:
            self.telemetry.log(
                event="config_validation_error",
                layer="resolver",
                step="required_keys",
                errors=errors,
            )
        raise ConfigValidationError(missing=missing, errors=errors)
