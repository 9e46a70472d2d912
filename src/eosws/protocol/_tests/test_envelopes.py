from __future__ import annotations

import json
import re

import pytest

from eosws.protocol import (
    GET_ACTIONS_TYPE,
    GET_TABLE_ROWS_TYPE,
    GET_TRANSACTION_TYPE,
    UNLISTEN_TYPE,
    InvalidArgument,
    RequestIdFactory,
    SubscriptionOptions,
    actions_request,
    build_actions_subscription,
    build_table_rows_subscription,
    build_transaction_subscription,
    build_unlisten,
    decode_envelope,
    encode_envelope,
    generate_request_id,
)

_REQ_ID = re.compile(r"^req(\d+)$")


def test_actions_subscription_defaults() -> None:
    encoded = json.loads(build_actions_subscription("eosio.token", "transfer"))

    assert encoded["type"] == GET_ACTIONS_TYPE
    assert encoded["listen"] is True
    assert _REQ_ID.match(encoded["req_id"])
    assert encoded["data"] == {"account": "eosio.token", "action_name": "transfer"}
    # Unset optionals are omitted, not sent as null.
    assert "fetch" not in encoded
    assert "start_block" not in encoded


def test_actions_subscription_with_options() -> None:
    text = build_actions_subscription(
        "eosio.token",
        "transfer",
        "eosnationftw",
        {"req_id": "my-req", "start_block": 1200, "fetch": True},
    )
    encoded = json.loads(text)

    assert encoded == {
        "type": "get_actions",
        "req_id": "my-req",
        "listen": True,
        "fetch": True,
        "start_block": 1200,
        "data": {"account": "eosio.token", "action_name": "transfer", "receiver": "eosnationftw"},
    }
    assert text.startswith('{"type":"get_actions","req_id":"my-req","listen":true')


def test_fetch_false_is_sent() -> None:
    encoded = json.loads(
        build_transaction_subscription("517abc", SubscriptionOptions(req_id="r", fetch=False))
    )
    assert encoded["fetch"] is False


def test_empty_req_id_option_falls_back_to_generated() -> None:
    encoded = json.loads(build_actions_subscription("a", "b", options={"req_id": ""}))
    assert _REQ_ID.match(encoded["req_id"])


def test_transaction_subscription() -> None:
    encoded = json.loads(build_transaction_subscription("517abc", {"req_id": "trx-1"}))

    assert encoded["type"] == GET_TRANSACTION_TYPE
    assert encoded["req_id"] == "trx-1"
    assert encoded["listen"] is True
    assert encoded["data"] == {"id": "517abc"}


def test_table_rows_subscription_forces_json() -> None:
    encoded = json.loads(build_table_rows_subscription("eosio", "eosio", "global"))

    assert encoded["type"] == GET_TABLE_ROWS_TYPE
    assert encoded["listen"] is True
    assert encoded["data"] == {"code": "eosio", "scope": "eosio", "table_name": "global", "json": True}


def test_malformed_values_pass_through() -> None:
    encoded = json.loads(build_actions_subscription("NOT A NAME", ""))
    assert encoded["data"]["account"] == "NOT A NAME"
    assert encoded["data"]["action_name"] == ""


@pytest.mark.parametrize("req_id", ["", None])
def test_unlisten_requires_req_id(req_id) -> None:
    with pytest.raises(InvalidArgument):
        build_unlisten(req_id)


def test_unlisten_envelope() -> None:
    encoded = json.loads(build_unlisten("req42"))

    assert encoded == {"type": UNLISTEN_TYPE, "data": {"req_id": "req42"}}


def test_invalid_argument_is_value_error() -> None:
    with pytest.raises(ValueError, match="req_id is required"):
        build_unlisten("")


def test_generate_request_id_format() -> None:
    for _ in range(500):
        match = _REQ_ID.match(generate_request_id())
        assert match is not None
        assert 0 <= int(match.group(1)) < 1000


def test_request_id_factory_is_monotonic() -> None:
    factory = RequestIdFactory(start=7)

    assert [factory(), factory(), factory()] == ["req7", "req8", "req9"]
    assert RequestIdFactory(prefix="sub-")() == "sub-0"


def test_structured_request_exposes_req_id() -> None:
    request = actions_request("eosio", "buyrambytes", options=SubscriptionOptions(req_id="ram"))

    assert request.req_id == "ram"
    assert json.loads(encode_envelope(request))["req_id"] == "ram"


def test_options_rejects_non_mapping() -> None:
    with pytest.raises(TypeError):
        build_actions_subscription("a", "b", options=["req_id"])  # type: ignore[arg-type]


def test_request_decodes_back_to_get_actions() -> None:
    envelope = decode_envelope(build_actions_subscription("eosio.token", "transfer"))

    assert envelope.type == GET_ACTIONS_TYPE
    assert envelope.listen is True
    assert envelope.data_field("account") == "eosio.token"


def test_option_values_pass_through_verbatim() -> None:
    from_mapping = json.loads(
        build_actions_subscription("a", "b", options={"req_id": "r", "fetch": "false", "start_block": 1.7})
    )
    from_options = json.loads(
        build_actions_subscription("a", "b", options=SubscriptionOptions(req_id="r", fetch="false", start_block=1.7))  # type: ignore[arg-type]
    )

    assert from_mapping["fetch"] == "false"
    assert from_mapping["start_block"] == 1.7
    assert from_mapping == from_options
