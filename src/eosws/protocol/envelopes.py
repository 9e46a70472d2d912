"""Builders for outbound eosws request envelopes.

Each ``build_*`` helper returns compact JSON text ready for ``ws.send``. The
``*_request`` twins return the dataclass instead so callers can read the
assigned ``req_id`` before the frame goes out.
"""

from __future__ import annotations

import itertools
import json
import random
from typing import Any, Mapping

from .errors import InvalidArgument
from .messages import (
    GET_ACTIONS_TYPE,
    GET_TABLE_ROWS_TYPE,
    GET_TRANSACTION_TYPE,
    SubscriptionOptions,
    SubscriptionRequest,
    UnlistenRequest,
)

REQUEST_ID_PREFIX = "req"
REQUEST_ID_SPACE = 1000

OptionsLike = SubscriptionOptions | Mapping[str, Any] | None


def generate_request_id() -> str:
    """Return ``"req"`` plus a pseudo-random number in ``[0, 1000)``.

    Two calls can return the same id; callers running many concurrent
    subscriptions should pass explicit ids or use :class:`RequestIdFactory`.
    """

    return f"{REQUEST_ID_PREFIX}{random.randrange(REQUEST_ID_SPACE)}"


class RequestIdFactory:
    """Monotonic ``req<N>`` ids, unique for the lifetime of the factory."""

    __slots__ = ("_prefix", "_counter")

    def __init__(self, *, prefix: str = REQUEST_ID_PREFIX, start: int = 0) -> None:
        self._prefix = str(prefix)
        self._counter = itertools.count(int(start))

    @property
    def prefix(self) -> str:
        return self._prefix

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


def _resolve_req_id(options: SubscriptionOptions) -> str:
    if options.req_id:
        return str(options.req_id)
    return generate_request_id()


def _subscription(kind: str, data: dict[str, Any], options: OptionsLike) -> SubscriptionRequest:
    opts = SubscriptionOptions.coerce(options)
    return SubscriptionRequest(
        type=kind,
        req_id=_resolve_req_id(opts),
        data=data,
        fetch=opts.fetch,
        start_block=opts.start_block,
    )


def encode_envelope(message: Any) -> str:
    """Serialize a request dataclass or plain mapping to compact JSON text."""

    payload = message.to_dict() if hasattr(message, "to_dict") else dict(message)
    return json.dumps(payload, separators=(",", ":"))


def actions_request(
    account: str,
    action_name: str,
    receiver: str | None = None,
    options: OptionsLike = None,
) -> SubscriptionRequest:
    return _subscription(
        GET_ACTIONS_TYPE,
        {"account": account, "action_name": action_name, "receiver": receiver},
        options,
    )


def transaction_request(trx_id: str, options: OptionsLike = None) -> SubscriptionRequest:
    return _subscription(GET_TRANSACTION_TYPE, {"id": trx_id}, options)


def table_rows_request(
    code: str,
    scope: str,
    table_name: str,
    options: OptionsLike = None,
) -> SubscriptionRequest:
    # Rows are always requested as decoded JSON, never raw hex.
    return _subscription(
        GET_TABLE_ROWS_TYPE,
        {"code": code, "scope": scope, "table_name": table_name, "json": True},
        options,
    )


def unlisten_request(req_id: str | None) -> UnlistenRequest:
    if not req_id:
        raise InvalidArgument("req_id is required")
    return UnlistenRequest(req_id=str(req_id))


def build_actions_subscription(
    account: str,
    action_name: str,
    receiver: str | None = None,
    options: OptionsLike = None,
) -> str:
    """Subscribe to actions ``account::action_name``, optionally for one *receiver*.

    Example::

        ws.send(build_actions_subscription("eosio.token", "transfer"))
    """

    return encode_envelope(actions_request(account, action_name, receiver, options))


def build_transaction_subscription(trx_id: str, options: OptionsLike = None) -> str:
    """Subscribe to a single transaction by id.

    The server side of ``get_transaction`` is not stable yet; treat the
    payload shape as provisional.
    """

    return encode_envelope(transaction_request(trx_id, options))


def build_table_rows_subscription(
    code: str,
    scope: str,
    table_name: str,
    options: OptionsLike = None,
) -> str:
    """Subscribe to row changes of ``code``/``scope``/``table_name``."""

    return encode_envelope(table_rows_request(code, scope, table_name, options))


def build_unlisten(req_id: str | None) -> str:
    """Close the subscription tagged *req_id*; an empty id raises ``InvalidArgument``."""

    return encode_envelope(unlisten_request(req_id))


__all__ = [
    "REQUEST_ID_PREFIX",
    "REQUEST_ID_SPACE",
    "generate_request_id",
    "RequestIdFactory",
    "encode_envelope",
    "actions_request",
    "transaction_request",
    "table_rows_request",
    "unlisten_request",
    "build_actions_subscription",
    "build_transaction_subscription",
    "build_table_rows_subscription",
    "build_unlisten",
]
