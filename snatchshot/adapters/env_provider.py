from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from snatchshot.ports.config_provider import ConfigProvider

_LOGGER = logging.getLogger(__name__)


class EnvConfigProvider(ConfigProvider):
    name = "env"

    def __init__(self, prefix: str = "", environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Environment-backed lookup. Variable names equal the key unless a prefix
        is configured (e.g. prefix "SNATCHSHOT_" reads SNATCHSHOT_GOOGLE_CLIENT_ID).
        """
        # None means the live process environment, read again on every lookup
        self._prefix = prefix
        self._environ = environ

    def lookup(self, key: str) -> Optional[str]:
        """Return the variable's value, treating unset and empty alike."""
        env_var = f"{self._prefix}{key}"
        environ = os.environ if self._environ is None else self._environ
        value = environ.get(env_var)
        if not value:
            return None

        _LOGGER.debug(
            "config_lookup_hit",
            extra={
                "event": "config_lookup_hit",
                "key": key,
                "source": self.name,
                "env_var": env_var,
            },
        )
        return value
