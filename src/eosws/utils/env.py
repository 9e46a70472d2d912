from __future__ import annotations

import os
from typing import Optional

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def env_optional_bool(name: str) -> Optional[bool]:
    """Return True/False for a recognised flag value, None when unset or unrecognised."""
    v = os.getenv(name)
    if v is None:
        return None
    s = v.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None


def env_bool(name: str, default: bool = False) -> bool:
    value = env_optional_bool(name)
    return default if value is None else value


def env_optional_int(name: str) -> Optional[int]:
    v = os.getenv(name)
    if not v:
        return None
    try:
        return int(v.strip(), 10)
    except ValueError:
        return None
