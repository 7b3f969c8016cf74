from snatchshot.config.config_resolver import ConfigResolver, ResolvedValue
from snatchshot.config.keys import KEY_SPECS, MANDATORY_KEYS, ConfigKey, KeySpec
from snatchshot.config.settings import AppConfig, describe, load_app_config, redact

__all__ = [
    "AppConfig",
    "ConfigKey",
    "ConfigResolver",
    "KEY_SPECS",
    "KeySpec",
    "MANDATORY_KEYS",
    "ResolvedValue",
    "describe",
    "load_app_config",
    "redact",
]
