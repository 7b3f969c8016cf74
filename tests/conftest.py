from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

import pytest

from snatchshot.config.keys import ConfigKey

FULL_CONFIG = """\
// Config.xcconfig
GOOGLE_CLIENT_ID = abc123.apps.googleusercontent.com
DATABASE_API_BASE_URL = http://localhost:4000/api
DATABASE_API_TIMEOUT = 45
WEBSOCKET_BASE_URL = ws://localhost:4001
APPSFLYER_DEV_KEY = af-dev-key
APPLE_APP_ID = 1234567890
MIXPANEL_TOKEN = mp-token
"""


@dataclass
class StubTelemetry:
    events: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def log(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep resolution independent of whatever the developer shell exports.
    for key in ConfigKey:
        monkeypatch.delenv(key.value, raising=False)
        monkeypatch.delenv(f"SNATCHSHOT_{key.value}", raising=False)


@pytest.fixture
def telemetry() -> StubTelemetry:
    return StubTelemetry()


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write ``text`` to tmp_path/Config.xcconfig and return the path."""

    def _write(text: str) -> Path:
        path = tmp_path / "Config.xcconfig"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def full_config(write_config: Callable[[str], Path]) -> Path:
    return write_config(FULL_CONFIG)
