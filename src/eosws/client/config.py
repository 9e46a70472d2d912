"""Runtime configuration for :class:`eosws.client.StreamChannel`.

Only the channel reads configuration; the protocol helpers are pure.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from eosws.protocol import SubscriptionOptions
from eosws.utils.env import env_bool, env_optional_bool, env_optional_int


@dataclass
class ChannelConfig:
    """Knobs for the host-side stream channel."""

    debug: bool = False
    raise_on_malformed: bool = False
    # Drop traces/rows whose req_id was never subscribed on this channel
    filter_unknown_req_ids: bool = True

    # Applied to subscription options the caller left unset
    default_fetch: Optional[bool] = None
    default_start_block: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def apply_defaults(
        self, options: SubscriptionOptions | Mapping[str, Any] | None
    ) -> SubscriptionOptions:
        opts = SubscriptionOptions.coerce(options)
        return SubscriptionOptions(
            req_id=opts.req_id,
            start_block=opts.start_block if opts.start_block is not None else self.default_start_block,
            fetch=opts.fetch if opts.fetch is not None else self.default_fetch,
        )

    @staticmethod
    def from_env() -> "ChannelConfig":
        return ChannelConfig(
            debug=env_bool("EOSWS_DEBUG", False),
            raise_on_malformed=env_bool("EOSWS_RAISE_ON_MALFORMED", False),
            filter_unknown_req_ids=env_bool("EOSWS_FILTER_UNKNOWN_REQ_IDS", True),
            default_fetch=env_optional_bool("EOSWS_FETCH"),
            default_start_block=env_optional_int("EOSWS_START_BLOCK"),
        )


__all__ = ["ChannelConfig"]
