"""
Exceptions for the configuration layer.

Exception hierarchy:
- ConfigError (base)
  - MissingConfigError: a mandatory key is undefined in every source
  - ConfigValidationError: startup validation found one or more problems

An unparsable numeric value is not an error type: the resolver falls back to
the caller's default and logs it.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class ConfigError(Exception):
    """Base exception for all configuration errors."""

    def __init__(
        self,
        message: str,
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.component = component
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.component:
            parts.append(f"[component={self.component}]")
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class MissingConfigError(ConfigError):
    """Raised when a mandatory key is not defined by any configuration source."""

    def __init__(
        self,
        key: str,
        *,
        sources: Sequence[str] = (),
        component: Optional[str] = "config.resolver",
    ) -> None:
        self.key = key
        self.sources = list(sources)
        details: dict[str, Any] = {}
        if self.sources:
            details["sources"] = self.sources
        super().__init__(
            f"Missing required config key '{key}'",
            component=component,
            details=details,
        )


class ConfigValidationError(ConfigError):
    """
    Raised by startup validation. Collects every problem at once so a broken
    build reports all missing keys in a single pass.
    """

    def __init__(
        self,
        *,
        missing: Sequence[str] = (),
        errors: Optional[list[dict[str, str]]] = None,
        component: Optional[str] = "config.validation",
    ) -> None:
        self.missing = list(missing)
        self.errors = list(errors or [])
        if self.missing:
            message = f"Missing required config key(s): {', '.join(self.missing)}"
        else:
            message = "Invalid configuration: " + "; ".join(
                f"{err['path']}: {err['message']}" for err in self.errors
            )
        super().__init__(message, component=component)
