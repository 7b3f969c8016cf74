"""Telemetry Port Interface.

Contract: Log structured events. Only a log(event, **fields) call for now.
"""
from __future__ import annotations
from typing import Protocol, Any

class Telemetry(Protocol):
    def log(self, event: str, **fields: Any) -> None: ...
