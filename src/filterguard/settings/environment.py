"""Environment variable parsing helpers."""

from __future__ import annotations

import os
from collections.abc import Mapping

ENV_PREFIX = "FILTERGUARD_"


def env_name(key: str) -> str:
    return key if key.startswith(ENV_PREFIX) else f"{ENV_PREFIX}{key.upper()}"


def parse_env_str(name: str, default: str = "", *, environ: Mapping[str, str] | None = None) -> str:
    source = os.environ if environ is None else environ
    value = source.get(env_name(name))
    if value is None:
        return default
    return str(value).strip()


def parse_env_bool(
    name: str,
    default: bool = False,
    *,
    environ: Mapping[str, str] | None = None,
) -> bool:
    raw = parse_env_str(name, "", environ=environ).lower()
    if raw in {"1", "true", "yes", "on", "y"}:
        return True
    if raw in {"0", "false", "no", "off", "n"}:
        return False
    return default


def parse_env_int(
    name: str,
    default: int,
    minimum: int,
    maximum: int,
    *,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Read an integer, clamped to ``[minimum, maximum]``; junk yields ``default``."""
    raw = parse_env_str(name, "", environ=environ)
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return max(minimum, min(parsed, maximum))
