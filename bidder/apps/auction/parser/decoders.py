"""
Per action decoding rules.

Each decoder combines the arguments of a matched `bidder::auction` call with the transaction's object changes.
Decoders return None when the transaction does not have the expected shape:
- the number of arguments that resolve to transaction inputs must equal the function's arity
- actions that require a correlated object change fail when it is missing

Invalid argument values raise `InvalidArgValue`, which `AuctionTxParser` treats as a failed decode.
"""
import logging
from typing import Any, Callable, cast

from bidder.apps.auction import AUCTION_MODULE
from bidder.apps.auction.domain.events import (
    AnyAuctionTx,
    AuctionTxKind,
    TxAdminAcceptsBid,
    TxAdminCancelsAuction,
    TxAdminCreatesAuction,
    TxAdminSetsPayAddr,
    TxAnyoneBids,
    TxAnyonePaysFunds,
    TxAnyoneSendsItemToWinner,
)
from bidder.apps.auction.parser.effects import (
    extract_auction_obj_created,
    extract_auction_obj_mutated,
    extract_user_obj_change,
)
from bidder.apps.auction.parser.matcher import CallTarget, dual_match, is_split_coins
from bidder.sui.args import arg_int, arg_str, arg_str_list, resolve_inputs
from bidder.sui.model import Address, CallArg, MoveCall, ObjectId, SplitCoins, TxData, TypeTag

logger = logging.getLogger(__name__)

Decoder = Callable[[TxData, MoveCall, ObjectId], AnyAuctionTx | None]

# number of call arguments that reference transaction inputs
AUCTION_FUNCTION_ARITY: dict[AuctionTxKind, int] = {
    AuctionTxKind.ADMIN_CREATES_AUCTION: 10,
    AuctionTxKind.ANYONE_BIDS: 2,
    AuctionTxKind.ADMIN_ACCEPTS_BID: 2,
    AuctionTxKind.ADMIN_CANCELS_AUCTION: 2,
    AuctionTxKind.ADMIN_SETS_PAY_ADDR: 3,
    AuctionTxKind.ANYONE_PAYS_FUNDS: 2,
    AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER: 3,
}

# the bid amount is the single input of the SplitCoins operation that creates the payment coin
SPLIT_COINS_ARITY = 1


def _tx_fields(tx: TxData) -> dict[str, Any]:
    return {"digest": tx.digest, "timestamp": tx.timestamp_ms, "sender": tx.sender}


def _type_argument(call: MoveCall, index: int) -> TypeTag | None:
    if call.type_arguments is None or len(call.type_arguments) <= index:
        return None
    return call.type_arguments[index]


def _call_inputs(tx: TxData, call: MoveCall, kind: AuctionTxKind) -> list[CallArg] | None:
    """
    :return: None if the number of resolved inputs does not match the function arity
    """
    inputs = resolve_inputs(call.arguments, tx.inputs)
    expected = AUCTION_FUNCTION_ARITY[kind]
    if len(inputs) != expected:
        logger.debug(
            "[%s] %s: expected %s inputs but found %s",
            tx.digest,
            kind,
            expected,
            len(inputs),
        )
        return None
    return inputs


def _missing(tx: TxData, kind: AuctionTxKind, what: str) -> None:
    logger.debug("[%s] %s: %s not found", tx.digest, kind, what)


def decode_admin_creates_auction(
    tx: TxData, call: MoveCall, package_id: ObjectId
) -> TxAdminCreatesAuction | None:
    kind = AuctionTxKind.ADMIN_CREATES_AUCTION
    inputs = _call_inputs(tx, call, kind)
    if inputs is None:
        return None

    auction_obj_change = extract_auction_obj_created(tx.object_changes, package_id)
    if auction_obj_change is None or auction_obj_change.object_id is None:
        return _missing(tx, kind, "created Auction object")

    type_coin = _type_argument(call, 0)
    if type_coin is None:
        return _missing(tx, kind, "coin type argument")

    # inputs[9] is the Clock
    return TxAdminCreatesAuction(
        **_tx_fields(tx),
        auction_id=auction_obj_change.object_id,
        type_coin=type_coin,
        name=arg_str(inputs[0]),
        description=arg_str(inputs[1]),
        item_addrs=tuple(Address(addr) for addr in arg_str_list(inputs[2])),
        pay_addr=Address(arg_str(inputs[3])),
        begin_delay_ms=arg_int(inputs[4]),
        duration_ms=arg_int(inputs[5]),
        minimum_bid=arg_int(inputs[6]),
        minimum_increase_bps=arg_int(inputs[7]),
        extension_period_ms=arg_int(inputs[8]),
    )


def decode_anyone_bids(
    tx: TxData, _call: MoveCall, package_id: ObjectId
) -> TxAnyoneBids | None:
    """
    The bid amount is not an argument of the `anyone_bids` call: it is the input of the SplitCoins operation
    that creates the payment coin. Both operations are located in a single pass, in any order.

    Assumes the transaction block contains a single `anyone_bids` call.
    """
    kind = AuctionTxKind.ANYONE_BIDS
    target = CallTarget(package_id, AUCTION_MODULE, kind.value)
    splits, calls = dual_match(tx.operations, is_split_coins, target)

    amount: int | None = None
    for split in cast(list[SplitCoins], splits):
        split_inputs = resolve_inputs(split.amounts, tx.inputs)
        if len(split_inputs) != SPLIT_COINS_ARITY:
            logger.debug(
                "[%s] %s: expected %s SplitCoins input but found %s",
                tx.digest,
                kind,
                SPLIT_COINS_ARITY,
                len(split_inputs),
            )
            return None
        amount = arg_int(split_inputs[0])

    type_coin: TypeTag | None = None
    auction_addr: Address | None = None
    for call in cast(list[MoveCall], calls):
        bid_inputs = _call_inputs(tx, call, kind)
        if bid_inputs is None:
            return None
        type_coin = _type_argument(call, 0)
        # bid_inputs[0] is the bidder's object
        auction_addr = Address(arg_str(bid_inputs[1]))

    if amount is None:
        return _missing(tx, kind, "SplitCoins operation")
    if type_coin is None or auction_addr is None:
        return _missing(tx, kind, "anyone_bids call")

    user_obj_change = extract_user_obj_change(tx.object_changes, package_id)
    return TxAnyoneBids(
        **_tx_fields(tx),
        type_coin=type_coin,
        auction_addr=auction_addr,
        amount=amount,
        user_id=user_obj_change.object_id if user_obj_change else None,
    )


def decode_admin_accepts_bid(
    tx: TxData, call: MoveCall, _package_id: ObjectId
) -> TxAdminAcceptsBid | None:
    kind = AuctionTxKind.ADMIN_ACCEPTS_BID
    inputs = _call_inputs(tx, call, kind)
    if inputs is None:
        return None

    type_coin = _type_argument(call, 0)
    if type_coin is None:
        return _missing(tx, kind, "coin type argument")

    return TxAdminAcceptsBid(
        **_tx_fields(tx),
        type_coin=type_coin,
        auction_addr=Address(arg_str(inputs[0])),
    )


def decode_admin_cancels_auction(
    tx: TxData, call: MoveCall, package_id: ObjectId
) -> TxAdminCancelsAuction | None:
    kind = AuctionTxKind.ADMIN_CANCELS_AUCTION
    inputs = _call_inputs(tx, call, kind)
    if inputs is None:
        return None

    if extract_auction_obj_mutated(tx.object_changes, package_id) is None:
        return _missing(tx, kind, "mutated Auction object")

    type_coin = _type_argument(call, 0)
    if type_coin is None:
        return _missing(tx, kind, "coin type argument")

    return TxAdminCancelsAuction(
        **_tx_fields(tx),
        type_coin=type_coin,
        auction_addr=Address(arg_str(inputs[0])),
    )


def decode_admin_sets_pay_addr(
    tx: TxData, call: MoveCall, package_id: ObjectId
) -> TxAdminSetsPayAddr | None:
    kind = AuctionTxKind.ADMIN_SETS_PAY_ADDR
    inputs = _call_inputs(tx, call, kind)
    if inputs is None:
        return None

    if extract_auction_obj_mutated(tx.object_changes, package_id) is None:
        return _missing(tx, kind, "mutated Auction object")

    type_coin = _type_argument(call, 0)
    if type_coin is None:
        return _missing(tx, kind, "coin type argument")

    return TxAdminSetsPayAddr(
        **_tx_fields(tx),
        type_coin=type_coin,
        auction_addr=Address(arg_str(inputs[0])),
        pay_addr=Address(arg_str(inputs[1])),
    )


def decode_anyone_pays_funds(
    tx: TxData, call: MoveCall, _package_id: ObjectId
) -> TxAnyonePaysFunds | None:
    kind = AuctionTxKind.ANYONE_PAYS_FUNDS
    inputs = _call_inputs(tx, call, kind)
    if inputs is None:
        return None

    type_coin = _type_argument(call, 0)
    if type_coin is None:
        return _missing(tx, kind, "coin type argument")

    return TxAnyonePaysFunds(
        **_tx_fields(tx),
        type_coin=type_coin,
        auction_addr=Address(arg_str(inputs[0])),
    )


def decode_anyone_sends_item_to_winner(
    tx: TxData, call: MoveCall, _package_id: ObjectId
) -> TxAnyoneSendsItemToWinner | None:
    kind = AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER
    inputs = _call_inputs(tx, call, kind)
    if inputs is None:
        return None

    type_coin = _type_argument(call, 0)
    type_item = _type_argument(call, 1)
    if type_coin is None or type_item is None:
        return _missing(tx, kind, "coin and item type arguments")

    return TxAnyoneSendsItemToWinner(
        **_tx_fields(tx),
        type_coin=type_coin,
        type_item=type_item,
        auction_addr=Address(arg_str(inputs[0])),
        item_addr=Address(arg_str(inputs[1])),
    )
