"""Exceptions raised by the eosws protocol layer."""

from __future__ import annotations


class ProtocolError(ValueError):
    """Base class for eosws protocol failures."""


class InvalidArgument(ProtocolError):
    """Raised when a request cannot be built from the supplied arguments."""


class MalformedPayload(ProtocolError):
    """Raised when an inbound payload is not a JSON object envelope."""


__all__ = ["ProtocolError", "InvalidArgument", "MalformedPayload"]
