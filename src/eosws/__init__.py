"""
eosws: request/response envelopes for EOSIO websocket streams.

Build subscription requests with the ``build_*`` helpers, hand the text to
your websocket's ``send`` and feed every inbound message to the ``decode_*``
helpers (or to :class:`eosws.client.StreamChannel`).
"""

from eosws.protocol import (
    ActionTrace,
    Envelope,
    InvalidArgument,
    MalformedPayload,
    Ping,
    ProtocolError,
    SubscriptionOptions,
    TableRows,
    UnknownFrame,
    build_actions_subscription,
    build_table_rows_subscription,
    build_transaction_subscription,
    build_unlisten,
    classify,
    decode_action_trace,
    decode_envelope,
    decode_ping,
    decode_table_rows,
    generate_request_id,
)

__version__ = "0.1.0"

__all__ = [
    "ActionTrace",
    "Envelope",
    "InvalidArgument",
    "MalformedPayload",
    "Ping",
    "ProtocolError",
    "SubscriptionOptions",
    "TableRows",
    "UnknownFrame",
    "build_actions_subscription",
    "build_table_rows_subscription",
    "build_transaction_subscription",
    "build_unlisten",
    "classify",
    "decode_action_trace",
    "decode_envelope",
    "decode_ping",
    "decode_table_rows",
    "generate_request_id",
    "__version__",
]
