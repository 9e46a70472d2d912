"""Wire schema for the eosws stream protocol.

Outbound requests and inbound frames share one envelope shape: a ``type``
discriminator, an optional ``req_id`` correlation token and a kind-specific
``data`` mapping. Inbound ``data`` is kept as an opaque mapping; the typed
frames below only add read-only conveniences on top of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

# Outbound request types
GET_ACTIONS_TYPE = "get_actions"
GET_TRANSACTION_TYPE = "get_transaction"
GET_TABLE_ROWS_TYPE = "get_table_rows"
UNLISTEN_TYPE = "unlisten"

# Inbound frame types
ACTION_TRACE_TYPE = "action_trace"
TABLE_ROWS_TYPE = "table_rows"
TABLE_DELTA_TYPE = "table_delta"
PING_TYPE = "ping"

# Both spellings name the same table stream; servers have shipped either.
TABLE_ROWS_TYPES = frozenset({TABLE_ROWS_TYPE, TABLE_DELTA_TYPE})

REQUEST_TYPES = frozenset(
    {GET_ACTIONS_TYPE, GET_TRANSACTION_TYPE, GET_TABLE_ROWS_TYPE, UNLISTEN_TYPE}
)


def _strip_none(mapping: Dict[str, Any]) -> Dict[str, Any]:
    """Return *mapping* without keys whose value is ``None``."""

    return {key: value for key, value in mapping.items() if value is not None}


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(slots=True)
class SubscriptionOptions:
    """Optional knobs shared by every subscription request."""

    req_id: str | None = None
    start_block: int | None = None
    fetch: bool | None = None

    @classmethod
    def coerce(cls, value: "SubscriptionOptions | Mapping[str, Any] | None") -> "SubscriptionOptions":
        if value is None:
            return cls()
        if isinstance(value, SubscriptionOptions):
            return value
        if not isinstance(value, Mapping):
            raise TypeError("options must be SubscriptionOptions or a mapping")
        # Values go out as given on both paths; the server validates them.
        return cls(
            req_id=value.get("req_id"),
            start_block=value.get("start_block"),
            fetch=value.get("fetch"),
        )


@dataclass(slots=True)
class SubscriptionRequest:
    """Outbound ``listen=true`` request (actions, transaction or table rows)."""

    type: str
    req_id: str
    data: Dict[str, Any]
    fetch: bool | None = None
    start_block: int | None = None
    listen: bool = True

    def to_dict(self) -> Dict[str, Any]:
        # Key order mirrors what eosws servers document.
        return _strip_none(
            {
                "type": self.type,
                "req_id": self.req_id,
                "listen": self.listen,
                "fetch": self.fetch,
                "start_block": self.start_block,
                "data": _strip_none(dict(self.data)),
            }
        )


@dataclass(slots=True)
class UnlistenRequest:
    """Outbound request closing the subscription tagged *req_id*."""

    req_id: str
    type: str = UNLISTEN_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "data": {"req_id": self.req_id}}


@dataclass(slots=True)
class Envelope:
    """Minimal representation of any decoded envelope."""

    type: str | None
    data: Any = None
    req_id: str | None = None
    listen: bool | None = None
    fetch: bool | None = None
    start_block: int | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Envelope":
        listen = data.get("listen")
        fetch = data.get("fetch")
        req_id = data.get("req_id")
        return cls(
            type=_optional_str(data.get("type")),
            data=data.get("data"),
            # Non-string ids never match a filter; raw keeps the wire value.
            req_id=req_id if isinstance(req_id, str) else None,
            listen=bool(listen) if listen is not None else None,
            fetch=bool(fetch) if fetch is not None else None,
            start_block=_optional_int(data.get("start_block")),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw)

    def get(self, key: str, default: Any = None) -> Any:
        """Read any top-level field, including ones this class does not model."""

        return self.raw.get(key, default)

    def data_field(self, key: str, default: Any = None) -> Any:
        payload = self.data
        if isinstance(payload, Mapping):
            return payload.get(key, default)
        return default


@dataclass(slots=True)
class ActionTrace:
    """Inbound ``action_trace`` frame answering a ``get_actions`` request."""

    envelope: Envelope

    @property
    def type(self) -> str:
        return ACTION_TRACE_TYPE

    @property
    def req_id(self) -> str | None:
        return self.envelope.req_id

    @property
    def data(self) -> Any:
        return self.envelope.data

    @property
    def block_num(self) -> int | None:
        return _optional_int(self.envelope.data_field("block_num"))

    @property
    def block_id(self) -> str | None:
        return _optional_str(self.envelope.data_field("block_id"))

    @property
    def trx_id(self) -> str | None:
        return _optional_str(self.envelope.data_field("trx_id"))

    @property
    def trace(self) -> Any:
        return self.envelope.data_field("trace")

    def to_dict(self) -> Dict[str, Any]:
        return self.envelope.to_dict()


@dataclass(slots=True)
class TableRows:
    """Inbound ``table_rows``/``table_delta`` frame for ``get_table_rows``."""

    envelope: Envelope

    @property
    def type(self) -> str:
        # Keep the spelling the server used.
        return self.envelope.type or TABLE_ROWS_TYPE

    @property
    def req_id(self) -> str | None:
        return self.envelope.req_id

    @property
    def data(self) -> Any:
        return self.envelope.data

    @property
    def block_num(self) -> int | None:
        return _optional_int(self.envelope.data_field("block_num"))

    @property
    def rows(self) -> Any:
        return self.envelope.data_field("rows")

    def to_dict(self) -> Dict[str, Any]:
        return self.envelope.to_dict()


@dataclass(slots=True)
class Ping:
    """Unsolicited liveness frame, never tied to a subscription."""

    envelope: Envelope

    @property
    def type(self) -> str:
        return PING_TYPE

    @property
    def data(self) -> Any:
        return self.envelope.data

    def to_dict(self) -> Dict[str, Any]:
        return self.envelope.to_dict()


@dataclass(slots=True)
class UnknownFrame:
    """Any envelope whose ``type`` is not an inbound kind we model."""

    envelope: Envelope

    @property
    def type(self) -> str | None:
        return self.envelope.type

    @property
    def req_id(self) -> str | None:
        return self.envelope.req_id

    def to_dict(self) -> Dict[str, Any]:
        return self.envelope.to_dict()


InboundFrame = ActionTrace | TableRows | Ping | UnknownFrame


__all__ = [
    "GET_ACTIONS_TYPE",
    "GET_TRANSACTION_TYPE",
    "GET_TABLE_ROWS_TYPE",
    "UNLISTEN_TYPE",
    "ACTION_TRACE_TYPE",
    "TABLE_ROWS_TYPE",
    "TABLE_DELTA_TYPE",
    "PING_TYPE",
    "TABLE_ROWS_TYPES",
    "REQUEST_TYPES",
    "SubscriptionOptions",
    "SubscriptionRequest",
    "UnlistenRequest",
    "Envelope",
    "ActionTrace",
    "TableRows",
    "Ping",
    "UnknownFrame",
    "InboundFrame",
]
