"""Envelope protocol for eosws stream subscriptions."""

from __future__ import annotations

from .envelopes import *  # noqa: F401,F403
from .errors import InvalidArgument, MalformedPayload, ProtocolError
from .messages import *  # noqa: F401,F403
from .parser import *  # noqa: F401,F403

__all__ = [name for name in globals().keys() if not name.startswith("_")]
