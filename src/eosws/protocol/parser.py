"""Parser helpers for inbound eosws envelopes."""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Sequence, TypeVar, Union

from .errors import MalformedPayload
from .messages import (
    ACTION_TRACE_TYPE,
    PING_TYPE,
    TABLE_ROWS_TYPES,
    ActionTrace,
    Envelope,
    InboundFrame,
    Ping,
    TableRows,
    UnknownFrame,
)

FrameT = TypeVar("FrameT")

RawPayload = Union[str, bytes, bytearray, memoryview, Sequence[Union[bytes, bytearray, memoryview]]]


def payload_text(raw: RawPayload) -> str:
    """Normalise any websocket payload shape into text."""

    if isinstance(raw, str):
        return raw
    try:
        if isinstance(raw, (bytes, bytearray, memoryview)):
            return bytes(raw).decode("utf-8")
        if isinstance(raw, Sequence):
            # A fragmented message arrives as ordered buffers.
            return b"".join(bytes(chunk) for chunk in raw).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedPayload("payload is not valid UTF-8") from exc
    except TypeError as exc:
        raise MalformedPayload("payload fragments must be byte buffers") from exc
    raise MalformedPayload(f"unsupported payload type {type(raw).__name__}")


class EnvelopeParser:
    """Parse JSON/mapping payloads into typed frames."""

    def parse(self, data: Mapping[str, Any]) -> Envelope:
        if not isinstance(data, Mapping):
            raise MalformedPayload("Decoded envelope must be a JSON object")
        return Envelope.from_dict(data)

    def parse_json(self, raw: RawPayload) -> Envelope:
        text = payload_text(raw)
        try:
            mapping = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedPayload(f"payload is not valid JSON: {exc.msg}") from exc
        except (ValueError, RecursionError) as exc:
            # Valid JSON the decoder still refuses: oversized integers, deep nesting.
            raise MalformedPayload(f"payload cannot be decoded: {exc}") from exc
        return self.parse(mapping)

    def parse_action_trace(self, data: Mapping[str, Any], req_id: str | None = None) -> ActionTrace | None:
        return self._match_action_trace(self.parse(data), req_id)

    def parse_table_rows(self, data: Mapping[str, Any], req_id: str | None = None) -> TableRows | None:
        return self._match_table_rows(self.parse(data), req_id)

    def parse_ping(self, data: Mapping[str, Any], req_id: str | None = None) -> Ping | None:
        return self._match_ping(self.parse(data))

    def classify(self, data: Mapping[str, Any]) -> InboundFrame:
        return self._classify(self.parse(data))

    def _match_action_trace(self, envelope: Envelope, req_id: str | None) -> ActionTrace | None:
        if envelope.type != ACTION_TRACE_TYPE:
            return None
        return self._correlate(envelope, req_id, ActionTrace)

    def _match_table_rows(self, envelope: Envelope, req_id: str | None) -> TableRows | None:
        if envelope.type not in TABLE_ROWS_TYPES:
            return None
        return self._correlate(envelope, req_id, TableRows)

    def _match_ping(self, envelope: Envelope) -> Ping | None:
        # Pings are unsolicited; no req_id filtering.
        if envelope.type != PING_TYPE:
            return None
        return Ping(envelope)

    def _classify(self, envelope: Envelope) -> InboundFrame:
        if envelope.type == ACTION_TRACE_TYPE:
            return ActionTrace(envelope)
        if envelope.type in TABLE_ROWS_TYPES:
            return TableRows(envelope)
        if envelope.type == PING_TYPE:
            return Ping(envelope)
        return UnknownFrame(envelope)

    def _correlate(
        self,
        envelope: Envelope,
        req_id: str | None,
        loader: Callable[[Envelope], FrameT],
    ) -> FrameT | None:
        if req_id and envelope.req_id != req_id:
            return None
        return loader(envelope)


_PARSER = EnvelopeParser()


def decode_envelope(raw: RawPayload) -> Envelope:
    """Decode one raw payload; raises :class:`MalformedPayload` on bad input."""

    return _PARSER.parse_json(raw)


def decode_action_trace(raw: RawPayload, req_id: str | None = None) -> ActionTrace | None:
    """Return the ``action_trace`` frame in *raw*, or ``None``.

    ``None`` also covers a trace whose ``req_id`` differs from the filter.

    Example::

        trace = decode_action_trace(message, req_id="req1")
        if trace is not None:
            handle(trace.data)
    """

    return _PARSER._match_action_trace(_PARSER.parse_json(raw), req_id)


def decode_table_rows(raw: RawPayload, req_id: str | None = None) -> TableRows | None:
    """Return the ``table_rows`` (or ``table_delta``) frame in *raw*, or ``None``."""

    return _PARSER._match_table_rows(_PARSER.parse_json(raw), req_id)


def decode_ping(raw: RawPayload, req_id: str | None = None) -> Ping | None:
    return _PARSER._match_ping(_PARSER.parse_json(raw))


def classify(raw: RawPayload) -> InboundFrame:
    """Decode *raw* once and return its typed frame, ``UnknownFrame`` included."""

    return _PARSER._classify(_PARSER.parse_json(raw))


__all__ = [
    "RawPayload",
    "payload_text",
    "EnvelopeParser",
    "decode_envelope",
    "decode_action_trace",
    "decode_table_rows",
    "decode_ping",
    "classify",
]
