"""JSON Lines Telemetry adapter.

Implements the Telemetry port by appending one JSON object per event to a
sink file. Fields named like secrets are redacted before they are written.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from snatchshot.config.keys import SECRET_KEYS


class JsonlTelemetry:
    _REDACTION_TOKEN = "***REDACTED***"
    _DEFAULT_SECRET_KEYS = SECRET_KEYS | frozenset(
        {
            "api_key",
            "secret",
            "password",
            "token",
        }
    )

    def __init__(
        self,
        session_id: str,
        app_version: str,
        sink_path: Path,
        secret_keys: Iterable[str] = _DEFAULT_SECRET_KEYS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._session_id = str(session_id)
        self._app_version = str(app_version)
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)
        self._secret_keys = frozenset(secret_keys)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def log(self, event: str, **fields: Any) -> None:
        sanitized_fields, redacted = self._sanitize_fields(fields)

        record: dict[str, Any] = {
            "event": event,
            "ts_utc": self._clock().isoformat(),
            "session_id": self._session_id,
            "app_version": self._app_version,
            **sanitized_fields,
        }
        if redacted:
            record["redacted_fields"] = sorted(redacted)

        self._write_record(record)

    def _sanitize_fields(self, fields: Mapping[str, Any]) -> tuple[dict[str, Any], set[str]]:
        sanitized: dict[str, Any] = {}
        redacted: set[str] = set()
        for key, value in fields.items():
            if key in self._secret_keys:
                sanitized[key] = self._REDACTION_TOKEN
                redacted.add(key)
            else:
                sanitized[key] = value

        return sanitized, redacted

    def _write_record(self, record: Mapping[str, Any]) -> None:
        payload = json.dumps(
            record, sort_keys=True, separators=(",", ":"), ensure_ascii=True, default=str
        )
        self._sink_path.parent.mkdir(parents=True, exist_ok=True)
        with self._sink_path.open("a", encoding="utf-8") as handle:
            handle.write(payload + "\n")
