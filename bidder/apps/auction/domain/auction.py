"""
Auction object state
"""

import time
from dataclasses import dataclass

from bidder.sui.model import Address, ObjectId, TypeTag


def current_time_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class ItemBag:
    """
    Auctioned items are stored as dynamic fields in this bag
    """

    id: ObjectId  # pylint: disable=invalid-name
    size: int


@dataclass(frozen=True, slots=True)
class AuctionObj:
    """
    `bidder::auction::Auction<T>` object snapshot
    """

    # pylint: disable=too-many-instance-attributes

    # === struct types ===
    type_coin: TypeTag

    # === fields that map 1:1 to on-chain struct fields ===
    id: ObjectId  # pylint: disable=invalid-name
    name: str
    description: str
    # addresses of the auctioned items
    item_addrs: tuple[Address, ...]
    item_bag: ItemBag
    # auction creator and manager
    admin_addr: Address
    # recipient of the winning bid funds
    pay_addr: Address
    # address that submitted the highest bid so far
    lead_addr: Address
    # value of the highest bid so far
    lead_value: int
    begin_time_ms: int
    end_time_ms: int
    # minimum bid size; increases with every bid
    minimum_bid: int
    # new bids must exceed the current highest bid by these many basis points
    minimum_increase_bps: int
    # bids placed within this period before end_time_ms will extend end_time_ms by extension_period_ms
    extension_period_ms: int

    # === derived fields, computed when the snapshot was parsed ===
    is_live: bool
    has_ended: bool


def is_auction_live(auction: AuctionObj, now_ms: int | None = None) -> bool:
    """
    Unlike `AuctionObj.is_live`, liveness is computed against the current time.
    """
    now_ms = current_time_ms() if now_ms is None else now_ms
    return auction.begin_time_ms <= now_ms < auction.end_time_ms


def has_auction_ended(auction: AuctionObj, now_ms: int | None = None) -> bool:
    """
    Computed against the current time
    """
    now_ms = current_time_ms() if now_ms is None else now_ms
    return now_ms >= auction.end_time_ms
