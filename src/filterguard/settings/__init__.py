from .environment import ENV_PREFIX, parse_env_bool, parse_env_int, parse_env_str
from .settings import (
    DEFAULT_ENCODING,
    DEFAULT_MAX_DEPTH,
    MAX_DEPTH_CEILING,
    SanitizerSettings,
    load_settings,
    reset_settings_cache,
)

__all__ = [
    "ENV_PREFIX",
    "DEFAULT_ENCODING",
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_CEILING",
    "SanitizerSettings",
    "load_settings",
    "reset_settings_cache",
    "parse_env_bool",
    "parse_env_int",
    "parse_env_str",
]
