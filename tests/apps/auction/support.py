"""
Builds Sui JSON-RPC responses for auction transactions and objects
"""
from typing import Any

PACKAGE_ID = "0x" + "ab" * 32
OTHER_PACKAGE_ID = "0x" + "cd" * 32

SENDER = "0x" + "11" * 32
AUCTION_ID = "0x" + "aa" * 32
ITEM_ID = "0x" + "bb" * 32
USER_ID = "0x" + "ee" * 32
# base58: 31 zero bytes followed by 0x01
USER_DIGEST = "1" * 31 + "2"
PAY_ADDR = "0x" + "22" * 32
CLOCK_ID = "0x" + "0" * 63 + "6"

SUI = "0x2::sui::SUI"
ITEM_TYPE = "0x" + "99" * 32 + "::nft::Nft"
AUCTION_TYPE = f"{PACKAGE_ID}::auction::Auction<{SUI}>"
USER_TYPE = f"{PACKAGE_ID}::user::User"


def pure(value: Any, value_type: str | None = "u64") -> dict[str, Any]:
    data: dict[str, Any] = {"type": "pure", "value": value}
    if value_type is not None:
        data["valueType"] = value_type
    return data


def obj(object_id: str, object_type: str = "sharedObject") -> dict[str, Any]:
    return {
        "type": "object",
        "objectType": object_type,
        "objectId": object_id,
        "mutable": True,
    }


def inp(index: int) -> dict[str, int]:
    return {"Input": index}


def result(index: int) -> dict[str, int]:
    return {"Result": index}


def move_call(
    function: str,
    arguments: list[Any] | None,
    type_arguments: list[str] | None = None,
    package: str = PACKAGE_ID,
    module: str = "auction",
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "package": package,
        "module": module,
        "function": function,
    }
    if type_arguments is not None:
        body["type_arguments"] = type_arguments
    if arguments is not None:
        body["arguments"] = arguments
    return {"MoveCall": body}


def split_coins(amounts: list[Any], coin: Any = "GasCoin") -> dict[str, Any]:
    return {"SplitCoins": [coin, amounts]}


def object_change(
    kind: str, object_type: str, object_id: str = AUCTION_ID
) -> dict[str, Any]:
    return {
        "type": kind,
        "sender": SENDER,
        "objectType": object_type,
        "objectId": object_id,
        "version": "2",
    }


def tx_response(
    inputs: list[dict[str, Any]],
    transactions: list[dict[str, Any]],
    object_changes: list[dict[str, Any]] | None = None,
    digest: str = "9x2Tf3kQ",
    timestamp_ms: str | None = "1700000000000",
) -> dict[str, Any]:
    resp: dict[str, Any] = {
        "digest": digest,
        "transaction": {
            "data": {
                "messageVersion": "v1",
                "sender": SENDER,
                "transaction": {
                    "kind": "ProgrammableTransaction",
                    "inputs": inputs,
                    "transactions": transactions,
                },
            }
        },
        "objectChanges": object_changes if object_changes is not None else [],
    }
    if timestamp_ms is not None:
        resp["timestampMs"] = timestamp_ms
    return resp


# === transactions for each auction function ===


def creates_auction_response() -> dict[str, Any]:
    inputs = [
        pure("Cool NFTs", "0x1::string::String"),
        pure("Auction of cool NFTs", "0x1::string::String"),
        pure([ITEM_ID], "vector<address>"),
        pure(PAY_ADDR, "address"),
        pure("0"),
        pure("86400000"),
        pure("1000000000"),
        pure("500"),
        pure("900000"),
        obj(CLOCK_ID),
    ]
    return tx_response(
        inputs=inputs,
        transactions=[
            move_call(
                "admin_creates_auction",
                [inp(i) for i in range(10)],
                [SUI],
            ),
            move_call("public_share_object", [result(0)], [AUCTION_TYPE], package="0x2", module="transfer"),
        ],
        object_changes=[
            object_change("created", AUCTION_TYPE),
            object_change("mutated", "0x2::coin::Coin<0x2::sui::SUI>", "0x" + "33" * 32),
        ],
    )


def bids_response(split_first: bool = True) -> dict[str, Any]:
    split = split_coins([inp(3)])
    bid = move_call("anyone_bids", [inp(0), inp(1), result(0)], [SUI])
    return tx_response(
        inputs=[
            obj(USER_ID, "immOrOwnedObject"),
            pure("0xAA", "address"),
            obj(CLOCK_ID),
            pure("500"),
        ],
        transactions=[split, bid] if split_first else [bid, split],
        object_changes=[
            object_change("mutated", AUCTION_TYPE),
            object_change("mutated", USER_TYPE, USER_ID),
        ],
    )


def auction_call_response(
    function: str,
    inputs: list[dict[str, Any]],
    type_arguments: list[str],
    object_changes: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return tx_response(
        inputs=inputs,
        transactions=[
            move_call(function, [inp(i) for i in range(len(inputs))], type_arguments)
        ],
        object_changes=object_changes
        if object_changes is not None
        else [object_change("mutated", AUCTION_TYPE)],
    )


def accepts_bid_response() -> dict[str, Any]:
    return auction_call_response(
        "admin_accepts_bid", [obj(AUCTION_ID), obj(CLOCK_ID)], [SUI]
    )


def cancels_auction_response(
    object_changes: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return auction_call_response(
        "admin_cancels_auction",
        [obj(AUCTION_ID), obj(CLOCK_ID)],
        [SUI],
        object_changes,
    )


def sets_pay_addr_response(
    object_changes: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return auction_call_response(
        "admin_sets_pay_addr",
        [obj(AUCTION_ID), pure(PAY_ADDR, "address"), obj(CLOCK_ID)],
        [SUI],
        object_changes,
    )


def settlement_response() -> dict[str, Any]:
    """
    anyone_pays_funds followed by anyone_sends_item_to_winner
    """
    return tx_response(
        inputs=[obj(AUCTION_ID), obj(CLOCK_ID), pure(ITEM_ID, "address")],
        transactions=[
            move_call("anyone_pays_funds", [inp(0), inp(1)], [SUI]),
            move_call(
                "anyone_sends_item_to_winner",
                [inp(0), inp(2), inp(1)],
                [SUI, ITEM_TYPE],
            ),
        ],
        object_changes=[
            object_change("mutated", AUCTION_TYPE),
            object_change("transferred", ITEM_TYPE, ITEM_ID),
        ],
    )


# === objects ===


def auction_object_response(
    begin_time_ms: str = "1000",
    end_time_ms: str = "2000",
    object_type: str = AUCTION_TYPE,
    **field_overrides: Any,
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "id": {"id": AUCTION_ID},
        "name": "Cool NFTs",
        "description": "Auction of cool NFTs",
        "item_addrs": [ITEM_ID],
        "item_bag": {
            "type": "0x2::object_bag::ObjectBag",
            "fields": {"id": {"id": "0x" + "44" * 32}, "size": "1"},
        },
        "admin_addr": SENDER,
        "pay_addr": PAY_ADDR,
        "lead_addr": "0x" + "55" * 32,
        "lead_bal": "1500000000",
        "begin_time_ms": begin_time_ms,
        "end_time_ms": end_time_ms,
        "minimum_bid": "1000000000",
        "minimum_increase_bps": "500",
        "extension_period_ms": "900000",
    }
    fields.update(field_overrides)
    return {
        "data": {
            "objectId": AUCTION_ID,
            "version": "7",
            "digest": "Fh4q",
            "type": object_type,
            "owner": {"Shared": {"initial_shared_version": 3}},
            "content": {
                "dataType": "moveObject",
                "type": object_type,
                "hasPublicTransfer": False,
                "fields": fields,
            },
        }
    }


def item_object_response(
    object_id: str = ITEM_ID,
    has_public_transfer: bool = True,
    display: dict[str, Any] | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "objectId": object_id,
        "version": "12",
        "digest": "Ab3r",
        "type": ITEM_TYPE,
        "owner": {"AddressOwner": SENDER},
        "content": {
            "dataType": "moveObject",
            "type": ITEM_TYPE,
            "hasPublicTransfer": has_public_transfer,
            "fields": {
                "id": {"id": object_id},
                "name": "Nft #1",
                "url": "https://example.com/1.png",
            },
        },
    }
    if display is not None:
        data["display"] = {"data": display, "error": None}
    return {"data": data}


def user_object_response() -> dict[str, Any]:
    return {
        "data": {
            "objectId": USER_ID,
            "version": "42",
            "digest": USER_DIGEST,
            "type": USER_TYPE,
            "owner": {"AddressOwner": SENDER},
        }
    }


def dev_inspect_response(*return_values: bytes, error: str | None = None) -> dict[str, Any]:
    if error is not None:
        return {
            "effects": {"status": {"status": "failure", "error": error}},
            "results": None,
            "error": error,
        }
    return {
        "effects": {"status": {"status": "success"}},
        "results": [
            {
                "mutableReferenceOutputs": [],
                "returnValues": [[list(value), "unknown"] for value in return_values],
            }
        ],
    }
