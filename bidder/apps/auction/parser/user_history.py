"""
Decodes the BCS encoded return values of the `bidder::user` history view functions
"""
from typing import Callable, Sequence, TypeVar

from bidder.apps.auction.domain.user import (
    UserAuction,
    UserAuctionsPage,
    UserBid,
    UserBidsPage,
    UserRecentHistory,
)
from bidder.sui.bcs import BcsError, BcsReader

T = TypeVar("T")


def read_user_auction(reader: BcsReader) -> UserAuction:
    return UserAuction(auction_addr=reader.address(), time=reader.u64())


def read_user_bid(reader: BcsReader) -> UserBid:
    return UserBid(
        auction_addr=reader.address(),
        time=reader.u64(),
        amount=reader.u64(),
    )


def _decode(value: bytes, read: Callable[[BcsReader], T]) -> T:
    reader = BcsReader(value)
    result = read(reader)
    reader.done()
    return result


def _check_count(return_values: Sequence[bytes], expected: int):
    if len(return_values) != expected:
        raise BcsError(f"expected {expected} return values, got {len(return_values)}")


def decode_user_auctions_page(return_values: Sequence[bytes]) -> UserAuctionsPage:
    """
    `user::get_auctions_created()` returns (vector<UserAuction>, has_next_page, next_cursor)

    :exception BcsError: if the return values cannot be decoded
    """
    _check_count(return_values, 3)
    return UserAuctionsPage(
        data=_decode(return_values[0], lambda r: r.vector(read_user_auction)),
        has_next_page=_decode(return_values[1], BcsReader.boolean),
        next_cursor=_decode(return_values[2], BcsReader.u64),
    )


def decode_user_bids_page(return_values: Sequence[bytes]) -> UserBidsPage:
    """
    `user::get_bids_placed()` returns (vector<UserBid>, has_next_page, next_cursor)

    :exception BcsError: if the return values cannot be decoded
    """
    _check_count(return_values, 3)
    return UserBidsPage(
        data=_decode(return_values[0], lambda r: r.vector(read_user_bid)),
        has_next_page=_decode(return_values[1], BcsReader.boolean),
        next_cursor=_decode(return_values[2], BcsReader.u64),
    )


def decode_user_recent_history(return_values: Sequence[bytes]) -> UserRecentHistory:
    """
    `user::get_auctions_and_bids()` returns
    (total created, total bids, created page, bids page, has more created, has more bids, created cursor, bids cursor)

    :exception BcsError: if the return values cannot be decoded
    """
    _check_count(return_values, 8)
    return UserRecentHistory(
        created=UserAuctionsPage(
            data=_decode(return_values[2], lambda r: r.vector(read_user_auction)),
            has_next_page=_decode(return_values[4], BcsReader.boolean),
            next_cursor=_decode(return_values[6], BcsReader.u64),
            total=_decode(return_values[0], BcsReader.u64),
        ),
        bids=UserBidsPage(
            data=_decode(return_values[3], lambda r: r.vector(read_user_bid)),
            has_next_page=_decode(return_values[5], BcsReader.boolean),
            next_cursor=_decode(return_values[7], BcsReader.u64),
            total=_decode(return_values[1], BcsReader.u64),
        ),
    )
