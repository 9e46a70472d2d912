"""Host-side helpers that run eosws subscriptions over a websocket."""

from __future__ import annotations

from .config import ChannelConfig
from .stream_channel import StreamChannel

__all__ = ["ChannelConfig", "StreamChannel"]
