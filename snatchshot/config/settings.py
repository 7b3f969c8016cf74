"""
Typed app settings assembled from the resolver.

load_app_config() is the single startup entry point: it validates every
mandatory key at once, resolves each field, validates the typed model and
emits a redacted `config_resolved` event. Nothing downstream (auth, database
client, websocket, analytics SDKs) should be initialised before it returns.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from snatchshot.adapters.config_file_provider import ConfigFileProvider
from snatchshot.config.config_resolver import ConfigResolver
from snatchshot.config.keys import KEY_SPECS, SECRET_KEYS, ConfigKey
from snatchshot.core.utility import compute_hash, validation_error_parser
from snatchshot.errors.errors import ConfigValidationError
from snatchshot.ports.telemetry import Telemetry

REDACTED: str = "***REDACTED***"
CLIENT_ID_PREVIEW_CHARS: int = 20

# model field -> config key
FIELD_KEYS: dict[str, ConfigKey] = {
    "google_client_id": ConfigKey.GOOGLE_CLIENT_ID,
    "database_api_base_url": ConfigKey.DATABASE_API_BASE_URL,
    "database_api_timeout": ConfigKey.DATABASE_API_TIMEOUT,
    "websocket_base_url": ConfigKey.WEBSOCKET_BASE_URL,
    "appsflyer_dev_key": ConfigKey.APPSFLYER_DEV_KEY,
    "apple_app_id": ConfigKey.APPLE_APP_ID,
    "mixpanel_token": ConfigKey.MIXPANEL_TOKEN,
}


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    google_client_id: str = Field(min_length=1, description="Google Sign In OAuth client id")
    database_api_base_url: str = Field(description="Database REST API base URL")
    database_api_timeout: float = Field(gt=0, description="Request timeout in seconds")
    websocket_base_url: str = Field(description="Realtime WebSocket endpoint")
    appsflyer_dev_key: str = Field(min_length=1, description="AppsFlyer SDK dev key")
    apple_app_id: str = Field(min_length=1, description="App Store app id")
    mixpanel_token: str = Field(min_length=1, description="Mixpanel project token")

    @field_validator("database_api_base_url")
    @classmethod
    def _http_scheme(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return value

    @field_validator("websocket_base_url")
    @classmethod
    def _ws_scheme(cls, value: str) -> str:
        if not value.startswith(("ws://", "wss://")):
            raise ValueError("must start with ws:// or wss://")
        return value

    def as_key_mapping(self) -> dict[str, Any]:
        """Values keyed by their config key names (GOOGLE_CLIENT_ID, ...)."""
        return {key.value: getattr(self, field) for field, key in FIELD_KEYS.items()}


def load_app_config(resolver: ConfigResolver, telemetry: Optional[Telemetry] = None) -> AppConfig:
    telemetry = telemetry if telemetry is not None else resolver.telemetry

    # 1. All-at-once check; raises ConfigValidationError listing every missing key
    resolver.validate()

    # 2. Resolve each field through its typed accessor, noting which source answered
    values: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for field, key in FIELD_KEYS.items():
        spec = KEY_SPECS[key]
        if spec.kind == "number" and spec.default is not None:
            values[field], sources[key.value] = resolver.resolve_double_with_source(
                key, spec.default
            )
        else:
            resolved = resolver.resolve(key)
            values[field], sources[key.value] = resolved.value, resolved.source

    # 3. Typed validation
    try:
        config = AppConfig(**values)
    except ValidationError as e:
        parsed_error = validation_error_parser(e)
        if telemetry is not None:
            telemetry.log(
                event="config_validation_error",
                layer="settings",
                step="model_validation",
                errors=parsed_error,
            )
        raise ConfigValidationError(errors=parsed_error) from e

    if telemetry is not None:
        key_mapping = config.as_key_mapping()
        telemetry.log(
            event="config_resolved",
            config_hash=compute_hash(key_mapping),
            redacted_config=redact(config),
            config_keys_total=len(key_mapping),
            sources=sources,
        )
    return config


def redact(config: AppConfig) -> dict[str, Any]:
    return {
        key: (REDACTED if key in SECRET_KEYS else value)
        for key, value in config.as_key_mapping().items()
    }


def config_file_found(resolver: ConfigResolver) -> bool:
    return any(
        p.exists() for p in resolver.providers if isinstance(p, ConfigFileProvider)
    )


def _preview(value: str, chars: int = CLIENT_ID_PREVIEW_CHARS) -> str:
    if len(value) <= chars * 2:
        return value
    return f"{value[:chars]}...{value[-chars:]}"


def describe(config: AppConfig, resolver: ConfigResolver) -> Mapping[str, str]:
    """Human-readable status lines; secrets are only reported as configured."""
    return {
        "Google Client ID": _preview(config.google_client_id),
        "Database API URL": config.database_api_base_url,
        "Database API Timeout": f"{config.database_api_timeout}s",
        "WebSocket URL": config.websocket_base_url,
        "AppsFlyer Dev Key": "configured",
        "Apple App ID": config.apple_app_id,
        "Mixpanel Token": "configured",
        "Config file found": "yes" if config_file_found(resolver) else "no",
    }
