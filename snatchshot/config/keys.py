"""
Canonical configuration keys read by the app at startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

KeyKind = Literal["string", "number"]


class ConfigKey(str, Enum):
    GOOGLE_CLIENT_ID = "GOOGLE_CLIENT_ID"
    DATABASE_API_BASE_URL = "DATABASE_API_BASE_URL"
    DATABASE_API_TIMEOUT = "DATABASE_API_TIMEOUT"
    WEBSOCKET_BASE_URL = "WEBSOCKET_BASE_URL"
    APPSFLYER_DEV_KEY = "APPSFLYER_DEV_KEY"
    APPLE_APP_ID = "APPLE_APP_ID"
    MIXPANEL_TOKEN = "MIXPANEL_TOKEN"


@dataclass(frozen=True)
class KeySpec:
    key: ConfigKey
    kind: KeyKind = "string"
    mandatory: bool = True
    default: Optional[float] = None
    secret: bool = False  # masked in status output and telemetry

    def __post_init__(self) -> None:
        if self.kind == "number" and self.mandatory:
            raise ValueError(f"Numeric key {self.key.value} must be optional with a default")
        if self.kind == "number" and self.default is None:
            raise ValueError(f"Numeric key {self.key.value} requires a default")


DEFAULT_DATABASE_API_TIMEOUT: float = 30.0

KEY_SPECS: dict[ConfigKey, KeySpec] = {
    ConfigKey.GOOGLE_CLIENT_ID: KeySpec(ConfigKey.GOOGLE_CLIENT_ID),
    ConfigKey.DATABASE_API_BASE_URL: KeySpec(ConfigKey.DATABASE_API_BASE_URL),
    ConfigKey.DATABASE_API_TIMEOUT: KeySpec(
        ConfigKey.DATABASE_API_TIMEOUT,
        kind="number",
        mandatory=False,
        default=DEFAULT_DATABASE_API_TIMEOUT,
    ),
    ConfigKey.WEBSOCKET_BASE_URL: KeySpec(ConfigKey.WEBSOCKET_BASE_URL),
    ConfigKey.APPSFLYER_DEV_KEY: KeySpec(ConfigKey.APPSFLYER_DEV_KEY, secret=True),
    ConfigKey.APPLE_APP_ID: KeySpec(ConfigKey.APPLE_APP_ID),
    ConfigKey.MIXPANEL_TOKEN: KeySpec(ConfigKey.MIXPANEL_TOKEN, secret=True),
}

MANDATORY_KEYS: tuple[str, ...] = tuple(
    spec.key.value for spec in KEY_SPECS.values() if spec.mandatory
)
SECRET_KEYS: frozenset[str] = frozenset(
    spec.key.value for spec in KEY_SPECS.values() if spec.secret
)


def key_name(key: str | ConfigKey) -> str:
    """Return the plain string name for ``key``; rejects empty names."""
    name = key.value if isinstance(key, ConfigKey) else key
    if not isinstance(name, str) or not name:
        raise ValueError("Config key must be a non-empty string")
    return name
