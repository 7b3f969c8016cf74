"""
Unit tests for ConfigResolver source priority and failure semantics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest

from snatchshot.adapters.config_file_provider import ConfigFileProvider
from snatchshot.adapters.env_provider import EnvConfigProvider
from snatchshot.adapters.metadata_provider import BuildMetadataProvider
from snatchshot.config.config_resolver import (
    DEFAULT_SOURCE,
    ConfigResolver,
    ResolvedValue,
    parse_number,
)
from snatchshot.config.keys import MANDATORY_KEYS, ConfigKey
from snatchshot.errors.errors import ConfigValidationError, MissingConfigError


@dataclass
class FakeProvider:
    name: str
    values: Dict[str, str] = field(default_factory=dict)
    calls: List[str] = field(default_factory=list)

    def lookup(self, key: str) -> Optional[str]:
        self.calls.append(key)
        return self.values.get(key)


def _resolver(env=None, metadata=None, config_path=None, telemetry=None) -> ConfigResolver:
    providers = [
        EnvConfigProvider(environ=env or {}),
        BuildMetadataProvider(metadata or {}),
    ]
    if config_path is not None:
        providers.append(ConfigFileProvider(config_path))
    return ConfigResolver(providers, telemetry=telemetry)


class TestPriority:
    """Environment beats build metadata beats the config file."""

    @pytest.mark.parametrize("key", MANDATORY_KEYS)
    def test_environment_wins_for_every_mandatory_key(self, key, full_config) -> None:
        resolver = _resolver(env={key: "from-env"}, metadata={key: "from-meta"}, config_path=full_config)

        assert resolver.resolve_string(key) == "from-env"

    def test_empty_environment_falls_through_to_metadata(self, full_config) -> None:
        resolver = _resolver(
            env={"APPLE_APP_ID": ""}, metadata={"APPLE_APP_ID": "meta"}, config_path=full_config
        )

        assert resolver.resolve_string("APPLE_APP_ID") == "meta"
        assert resolver.lookup("APPLE_APP_ID") == ResolvedValue(
            key="APPLE_APP_ID", value="meta", source="build_metadata"
        )

    def test_file_used_when_env_and_metadata_silent(self, write_config) -> None:
        path = write_config("GOOGLE_CLIENT_ID = abc123.apps.googleusercontent.com\n")
        resolver = _resolver(config_path=path)

        assert resolver.resolve_string(ConfigKey.GOOGLE_CLIENT_ID) == "abc123.apps.googleusercontent.com"
        assert resolver.lookup("GOOGLE_CLIENT_ID").source == "config_file"

    def test_websocket_env_override_beats_file(self, monkeypatch, full_config) -> None:
        monkeypatch.setenv("WEBSOCKET_BASE_URL", "ws://override:4001")
        resolver = ConfigResolver.from_paths(full_config)

        assert resolver.resolve_string("WEBSOCKET_BASE_URL") == "ws://override:4001"

    def test_stops_at_first_hit(self) -> None:
        first = FakeProvider("first", {"APPLE_APP_ID": "1"})
        second = FakeProvider("second", {"APPLE_APP_ID": "2"})
        resolver = ConfigResolver([first, second])

        assert resolver.resolve_string("APPLE_APP_ID") == "1"
        assert second.calls == []

    def test_sources_for_reports_shadowed_sources(self, full_config) -> None:
        resolver = _resolver(env={"APPLE_APP_ID": "env"}, config_path=full_config)

        assert resolver.sources_for("APPLE_APP_ID") == ["env", "config_file"]


class TestResolveString:
    """Mandatory lookups fail fast."""

    def test_missing_key_raises(self, tmp_path) -> None:
        resolver = _resolver(config_path=tmp_path / "missing.xcconfig")

        with pytest.raises(MissingConfigError) as exc_info:
            resolver.resolve_string("MIXPANEL_TOKEN")

        assert exc_info.value.key == "MIXPANEL_TOKEN"
        assert "MIXPANEL_TOKEN" in str(exc_info.value)
        assert exc_info.value.sources == ["env", "build_metadata", "config_file"]

    def test_missing_key_logged_to_telemetry(self, telemetry) -> None:
        resolver = _resolver(telemetry=telemetry)

        with pytest.raises(MissingConfigError):
            resolver.resolve_string("APPLE_APP_ID")

        assert telemetry.names() == ["config_validation_error"]
        assert telemetry.events[0][1]["errors"][0]["path"] == "APPLE_APP_ID"

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            _resolver().resolve_string("")

    def test_needs_a_provider(self) -> None:
        with pytest.raises(ValueError):
            ConfigResolver([])

    def test_file_edits_observed_between_calls(self, write_config) -> None:
        path = write_config("APPLE_APP_ID = one\n")
        resolver = _resolver(config_path=path)
        assert resolver.resolve_string("APPLE_APP_ID") == "one"

        path.write_text("APPLE_APP_ID = two\n", encoding="utf-8")

        assert resolver.resolve_string("APPLE_APP_ID") == "two"

    def test_value_never_logged(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="snatchshot")
        resolver = _resolver(env={"MIXPANEL_TOKEN": "very-secret-token"})

        resolver.resolve_string("MIXPANEL_TOKEN")

        assert "very-secret-token" not in caplog.text
        assert any(getattr(r, "event", None) == "config_value_resolved" for r in caplog.records)


class TestResolveDouble:
    """Numeric lookups fall back to the supplied default."""

    def test_absent_gives_default(self) -> None:
        assert _resolver().resolve_double("DATABASE_API_TIMEOUT", 30.0) == 30.0

    def test_present_value_parsed(self) -> None:
        resolver = _resolver(env={"DATABASE_API_TIMEOUT": "45"})

        assert resolver.resolve_double("DATABASE_API_TIMEOUT", 30.0) == 45.0

    def test_file_value_parsed(self, full_config) -> None:
        assert _resolver(config_path=full_config).resolve_double("DATABASE_API_TIMEOUT", 30.0) == 45.0

    @pytest.mark.parametrize(
        "raw", ["soon", "12s", "nan", "inf", "4_5", "\u0664\u0665", "1e999", "0x1E", "   "]
    )
    def test_unparsable_gives_default(self, raw, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="snatchshot.config.config_resolver")
        resolver = _resolver(env={"DATABASE_API_TIMEOUT": raw})

        assert resolver.resolve_double("DATABASE_API_TIMEOUT", 30.0) == 30.0
        assert any(
            getattr(r, "event", None) == "config_numeric_unparsable" for r in caplog.records
        )

    def test_unparsable_higher_source_does_not_fall_through(self, full_config) -> None:
        # the first defining source wins even if its value is junk
        resolver = _resolver(env={"DATABASE_API_TIMEOUT": "junk"}, config_path=full_config)

        assert resolver.resolve_double("DATABASE_API_TIMEOUT", 30.0) == 30.0

    def test_fractional_value(self) -> None:
        resolver = _resolver(metadata={"DATABASE_API_TIMEOUT": "12.5"})

        assert resolver.resolve_double("DATABASE_API_TIMEOUT", 30.0) == 12.5

    @pytest.mark.parametrize(
        "raw, expected",
        [("45", 45.0), (" 45 ", 45.0), ("-1.5", -1.5), (".5", 0.5), ("2.", 2.0), ("1e3", 1000.0)],
    )
    def test_plain_decimals_parse(self, raw, expected) -> None:
        assert parse_number(raw) == expected

    def test_source_reported_for_parsed_value(self, full_config) -> None:
        resolver = _resolver(config_path=full_config)

        assert resolver.resolve_double_with_source("DATABASE_API_TIMEOUT", 30.0) == (
            45.0,
            "config_file",
        )

    def test_source_is_default_after_fallback(self) -> None:
        resolver = _resolver(env={"DATABASE_API_TIMEOUT": "4_5"})

        assert resolver.resolve_double_with_source("DATABASE_API_TIMEOUT", 30.0) == (
            30.0,
            DEFAULT_SOURCE,
        )
        assert _resolver().resolve_double_with_source("DATABASE_API_TIMEOUT", 30.0) == (
            30.0,
            DEFAULT_SOURCE,
        )


class TestValidate:
    """All-at-once startup validation."""

    def test_reports_every_missing_key(self, write_config, telemetry) -> None:
        path = write_config("GOOGLE_CLIENT_ID = id\nAPPLE_APP_ID = 1\n")
        resolver = _resolver(config_path=path, telemetry=telemetry)

        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.validate()

        assert exc_info.value.missing == [
            "DATABASE_API_BASE_URL",
            "WEBSOCKET_BASE_URL",
            "APPSFLYER_DEV_KEY",
            "MIXPANEL_TOKEN",
        ]
        for key in exc_info.value.missing:
            assert key in str(exc_info.value)
        assert telemetry.names() == ["config_validation_error"]

    def test_timeout_is_not_mandatory(self, write_config) -> None:
        text = "".join(f"{key} = x\n" for key in MANDATORY_KEYS)
        resolver = _resolver(config_path=write_config(text))

        resolver.validate()
        assert resolver.missing() == []
        assert "DATABASE_API_TIMEOUT" not in MANDATORY_KEYS

    def test_custom_key_list(self) -> None:
        resolver = _resolver(env={"APPLE_APP_ID": "1"})

        assert resolver.missing(["APPLE_APP_ID", "MIXPANEL_TOKEN"]) == ["MIXPANEL_TOKEN"]


class TestFromPaths:
    """The standard provider chain."""

    def test_chain_order(self, full_config) -> None:
        resolver = ConfigResolver.from_paths(full_config)

        assert resolver.source_names == ["env", "build_metadata", "config_file"]

    def test_metadata_file_used(self, tmp_path, full_config) -> None:
        meta = tmp_path / "build.toml"
        meta.write_text('APPLE_APP_ID = "from-meta"\n', encoding="utf-8")

        resolver = ConfigResolver.from_paths(full_config, meta)

        assert resolver.resolve_string("APPLE_APP_ID") == "from-meta"
        assert resolver.resolve_string("MIXPANEL_TOKEN") == "mp-token"

    def test_env_prefix(self, monkeypatch, full_config) -> None:
        monkeypatch.setenv("SNATCHSHOT_APPLE_APP_ID", "prefixed")

        resolver = ConfigResolver.from_paths(full_config, env_prefix="SNATCHSHOT_")

        assert resolver.resolve_string("APPLE_APP_ID") == "prefixed"
