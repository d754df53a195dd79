"""
Auction transactions decoded from executed Sui transaction blocks.

Each transaction kind maps to the `bidder::auction` Move function that was called.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from bidder.sui.model import Address, ObjectId, TxDigest, TypeTag


class AuctionTxKind(StrEnum):
    """
    Auction transaction kinds.

    Values are the `bidder::auction` function names.
    """

    ADMIN_CREATES_AUCTION = "admin_creates_auction"
    ANYONE_BIDS = "anyone_bids"
    ADMIN_ACCEPTS_BID = "admin_accepts_bid"
    ADMIN_CANCELS_AUCTION = "admin_cancels_auction"
    ADMIN_SETS_PAY_ADDR = "admin_sets_pay_addr"
    # settlement: typically both are called in the same transaction block
    ANYONE_PAYS_FUNDS = "anyone_pays_funds"
    ANYONE_SENDS_ITEM_TO_WINNER = "anyone_sends_item_to_winner"


@dataclass(frozen=True, slots=True, kw_only=True)
class AuctionTx:
    """
    Fields common to all auction transactions
    """

    digest: TxDigest
    # when the transaction was executed, in milliseconds since the epoch - 0 if unknown
    timestamp: int
    sender: Address


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAdminCreatesAuction(AuctionTx):
    """
    `bidder::auction::admin_creates_auction`
    """

    # pylint: disable=too-many-instance-attributes

    kind: AuctionTxKind = field(default=AuctionTxKind.ADMIN_CREATES_AUCTION, init=False)

    # created Auction object
    auction_id: ObjectId
    type_coin: TypeTag
    name: str
    description: str
    item_addrs: tuple[Address, ...]
    pay_addr: Address
    begin_delay_ms: int
    duration_ms: int
    minimum_bid: int
    minimum_increase_bps: int
    extension_period_ms: int


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAnyoneBids(AuctionTx):
    """
    `bidder::auction::anyone_bids`

    The bid amount is the value of the coin split off to pay for the bid.
    """

    kind: AuctionTxKind = field(default=AuctionTxKind.ANYONE_BIDS, init=False)

    type_coin: TypeTag
    auction_addr: Address
    amount: int
    # bidder's User object, when the transaction created or mutated it
    user_id: ObjectId | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAdminAcceptsBid(AuctionTx):
    """
    `bidder::auction::admin_accepts_bid`
    """

    kind: AuctionTxKind = field(default=AuctionTxKind.ADMIN_ACCEPTS_BID, init=False)

    type_coin: TypeTag
    auction_addr: Address


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAdminCancelsAuction(AuctionTx):
    """
    `bidder::auction::admin_cancels_auction`
    """

    kind: AuctionTxKind = field(
        default=AuctionTxKind.ADMIN_CANCELS_AUCTION, init=False
    )

    type_coin: TypeTag
    auction_addr: Address


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAdminSetsPayAddr(AuctionTx):
    """
    `bidder::auction::admin_sets_pay_addr`
    """

    kind: AuctionTxKind = field(default=AuctionTxKind.ADMIN_SETS_PAY_ADDR, init=False)

    type_coin: TypeTag
    auction_addr: Address
    pay_addr: Address


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAnyonePaysFunds(AuctionTx):
    """
    `bidder::auction::anyone_pays_funds`
    """

    kind: AuctionTxKind = field(default=AuctionTxKind.ANYONE_PAYS_FUNDS, init=False)

    type_coin: TypeTag
    auction_addr: Address


@dataclass(frozen=True, slots=True, kw_only=True)
class TxAnyoneSendsItemToWinner(AuctionTx):
    """
    `bidder::auction::anyone_sends_item_to_winner`
    """

    kind: AuctionTxKind = field(
        default=AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER, init=False
    )

    type_coin: TypeTag
    type_item: TypeTag
    auction_addr: Address
    item_addr: Address


AnyAuctionTx = (
    TxAdminCreatesAuction
    | TxAnyoneBids
    | TxAdminAcceptsBid
    | TxAdminCancelsAuction
    | TxAdminSetsPayAddr
    | TxAnyonePaysFunds
    | TxAnyoneSendsItemToWinner
)
