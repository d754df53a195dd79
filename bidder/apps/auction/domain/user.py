"""
`bidder::user::User` object, and the auction history it records
"""

from dataclasses import dataclass, field

from bidder.sui.model import Address, ObjectId


@dataclass(frozen=True, slots=True)
class UserObj:
    """
    Each user owns a single User object, which records the auctions they created and the bids they placed.
    """

    id: ObjectId  # pylint: disable=invalid-name
    owner: Address
    version: int
    # base58 encoded
    digest: str


@dataclass(frozen=True, slots=True)
class UserAuction:
    """
    Auction created by the user
    """

    auction_addr: Address
    time: int


@dataclass(frozen=True, slots=True)
class UserBid:
    """
    Bid placed by the user
    """

    auction_addr: Address
    time: int
    amount: int


@dataclass(slots=True)
class UserAuctionsPage:
    data: list[UserAuction] = field(default_factory=list)
    has_next_page: bool = False
    # index into the user's auction history to continue from
    next_cursor: int = 0
    # total number of auctions the user created - only reported by recent history lookups
    total: int | None = None


@dataclass(slots=True)
class UserBidsPage:
    data: list[UserBid] = field(default_factory=list)
    has_next_page: bool = False
    next_cursor: int = 0
    total: int | None = None


@dataclass(slots=True)
class UserRecentHistory:
    """
    Most recent auctions created and bids placed by a user
    """

    created: UserAuctionsPage
    bids: UserBidsPage
