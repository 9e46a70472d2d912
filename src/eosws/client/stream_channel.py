"""Host-side subscription channel over an already-open eosws websocket."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from eosws.client.config import ChannelConfig
from eosws.protocol import (
    ActionTrace,
    InboundFrame,
    MalformedPayload,
    Ping,
    SubscriptionOptions,
    SubscriptionRequest,
    TableRows,
    UnknownFrame,
    actions_request,
    classify,
    encode_envelope,
    table_rows_request,
    transaction_request,
    unlisten_request,
)
from eosws.protocol.parser import RawPayload


logger = logging.getLogger(__name__)


def _maybe_enable_debug_logger(enabled: bool) -> bool:
    if not enabled:
        return False
    has_local = any(getattr(h, "_eosws_local", False) for h in logger.handlers)
    if not has_local:
        handler = logging.StreamHandler()
        fmt = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
        handler.setLevel(logging.DEBUG)
        setattr(handler, "_eosws_local", True)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return True


class StreamChannel:
    """Drive eosws subscriptions over an already-open WebSocket.

    The channel never connects or reconnects; pass it a connection from
    ``websockets.connect`` (or anything with async ``send`` and async
    iteration). Inbound frames are classified and forwarded to the
    registered callbacks.
    """

    def __init__(
        self,
        websocket: Any,
        config: ChannelConfig | None = None,
        on_action_trace: Optional[Callable[[ActionTrace], None]] = None,
        on_table_rows: Optional[Callable[[TableRows], None]] = None,
        on_ping: Optional[Callable[[Ping], None]] = None,
        on_unknown: Optional[Callable[[UnknownFrame], None]] = None,
    ) -> None:
        self.websocket = websocket
        self.config = config if config is not None else ChannelConfig.from_env()
        self.on_action_trace = on_action_trace
        self.on_table_rows = on_table_rows
        self.on_ping = on_ping
        self.on_unknown = on_unknown
        self._live: dict[str, str] = {}
        _maybe_enable_debug_logger(self.config.debug)

    @property
    def live_request_ids(self) -> frozenset[str]:
        return frozenset(self._live)

    def request_type(self, req_id: str) -> str | None:
        """Return the request type that opened *req_id*, if it is still live."""

        return self._live.get(req_id)

    async def subscribe_actions(
        self,
        account: str,
        action_name: str,
        receiver: str | None = None,
        options: SubscriptionOptions | Mapping[str, Any] | None = None,
    ) -> str:
        request = actions_request(account, action_name, receiver, self.config.apply_defaults(options))
        return await self._subscribe(request)

    async def subscribe_transaction(
        self,
        trx_id: str,
        options: SubscriptionOptions | Mapping[str, Any] | None = None,
    ) -> str:
        request = transaction_request(trx_id, self.config.apply_defaults(options))
        return await self._subscribe(request)

    async def subscribe_table_rows(
        self,
        code: str,
        scope: str,
        table_name: str,
        options: SubscriptionOptions | Mapping[str, Any] | None = None,
    ) -> str:
        request = table_rows_request(code, scope, table_name, self.config.apply_defaults(options))
        return await self._subscribe(request)

    async def unlisten(self, req_id: str) -> None:
        """Ask the server to stop streaming *req_id*.

        Frames for *req_id* already in flight may still arrive; they are
        dropped once the id is no longer live.
        """

        request = unlisten_request(req_id)
        logger.debug("StreamChannel unlisten -> %s", request.req_id)
        await self.websocket.send(encode_envelope(request))
        # Only forget the id once the server has been told.
        self._live.pop(request.req_id, None)

    async def _subscribe(self, request: SubscriptionRequest) -> str:
        if request.req_id in self._live:
            logger.warning("StreamChannel: req_id %s already live; events will be shared", request.req_id)
        self._live[request.req_id] = request.type
        text = encode_envelope(request)
        logger.debug("StreamChannel subscribe -> %s", text)
        try:
            await self.websocket.send(text)
        except Exception:
            self._live.pop(request.req_id, None)
            raise
        return request.req_id

    def handle_raw(self, raw: RawPayload) -> InboundFrame | None:
        """Classify one inbound payload and dispatch it.

        Returns the frame, or ``None`` when it was dropped because its
        ``req_id`` is not live on this channel. ``MalformedPayload``
        propagates.
        """

        frame = classify(raw)
        if isinstance(frame, (ActionTrace, TableRows)) and not self._accepts(frame.req_id):
            logger.debug("StreamChannel: dropping %s for req_id=%s", frame.type, frame.req_id)
            return None

        if isinstance(frame, ActionTrace):
            callback = self.on_action_trace
        elif isinstance(frame, TableRows):
            callback = self.on_table_rows
        elif isinstance(frame, Ping):
            callback = self.on_ping
        else:
            callback = self.on_unknown
            logger.debug("StreamChannel: unhandled envelope type %r", frame.type)

        if callback is not None:
            try:
                callback(frame)
            except Exception:
                logger.exception("StreamChannel %s callback failed", frame.type)
        return frame

    def _accepts(self, req_id: str | None) -> bool:
        if not self.config.filter_unknown_req_ids:
            return True
        return req_id is not None and req_id in self._live

    async def run(self) -> None:
        """Consume the websocket until it closes."""

        try:
            async for message in self.websocket:
                try:
                    self.handle_raw(message)
                except MalformedPayload:
                    if self.config.raise_on_malformed:
                        raise
                    logger.warning("StreamChannel: skipping malformed payload", exc_info=True)
        except ConnectionClosedOK as exc:
            logger.info("StreamChannel connection closed (%s)", exc)
            return
        except ConnectionClosed as exc:
            logger.warning("StreamChannel connection lost (%s)", exc)
            return
        logger.info("StreamChannel connection closed")


__all__ = ["StreamChannel"]
