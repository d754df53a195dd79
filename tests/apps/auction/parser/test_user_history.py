import unittest

from bidder.apps.auction.domain.user import UserAuction, UserBid
from bidder.apps.auction.parser.user_history import (
    decode_user_auctions_page,
    decode_user_bids_page,
    decode_user_recent_history,
)
from bidder.sui.bcs import BcsError, BcsWriter
from tests.apps.auction.support import AUCTION_ID, ITEM_ID
from tests.test_support import BidderTestCase

TRUE = b"\x01"
FALSE = b"\x00"


def u64(value: int) -> bytes:
    return BcsWriter().u64(value).getvalue()


def user_auctions(*auctions: tuple[str, int]) -> bytes:
    writer = BcsWriter().uleb128(len(auctions))
    for addr, time in auctions:
        writer.address(addr).u64(time)
    return writer.getvalue()


def user_bids(*bids: tuple[str, int, int]) -> bytes:
    writer = BcsWriter().uleb128(len(bids))
    for addr, time, amount in bids:
        writer.address(addr).u64(time).u64(amount)
    return writer.getvalue()


class DecodeUserHistoryTestCase(BidderTestCase):
    def test_auctions_page(self) -> None:
        page = decode_user_auctions_page(
            [user_auctions((AUCTION_ID, 2000), (ITEM_ID, 1000)), TRUE, u64(5)]
        )
        self.assertEqual(
            [UserAuction(AUCTION_ID, 2000), UserAuction(ITEM_ID, 1000)],
            page.data,
        )
        self.assertTrue(page.has_next_page)
        self.assertEqual(5, page.next_cursor)
        self.assertIsNone(page.total)

    def test_bids_page(self) -> None:
        page = decode_user_bids_page([user_bids((AUCTION_ID, 3000, 2**64 - 1)), FALSE, u64(0)])
        self.assertEqual([UserBid(AUCTION_ID, 3000, 2**64 - 1)], page.data)
        self.assertFalse(page.has_next_page)

    def test_recent_history(self) -> None:
        history = decode_user_recent_history(
            [
                u64(12),
                u64(1),
                user_auctions((AUCTION_ID, 2000)),
                user_bids((ITEM_ID, 2500, 500)),
                TRUE,
                FALSE,
                u64(10),
                u64(0),
            ]
        )
        self.assertEqual(12, history.created.total)
        self.assertEqual([UserAuction(AUCTION_ID, 2000)], history.created.data)
        self.assertTrue(history.created.has_next_page)
        self.assertEqual(10, history.created.next_cursor)

        self.assertEqual(1, history.bids.total)
        self.assertEqual([UserBid(ITEM_ID, 2500, 500)], history.bids.data)
        self.assertFalse(history.bids.has_next_page)

    def test_invalid_return_values(self) -> None:
        for name, return_values in (
            ("missing values", [user_auctions(), TRUE]),
            ("truncated vector", [user_auctions((AUCTION_ID, 2000))[:-1], TRUE, u64(0)]),
            ("trailing bytes", [user_auctions() + b"\x00", TRUE, u64(0)]),
            ("bids decoded as auctions", [user_bids((AUCTION_ID, 1, 2)), TRUE, u64(0)]),
            ("invalid bool", [user_auctions(), b"\x02", u64(0)]),
        ):
            with self.subTest(name):
                with self.assertRaises(BcsError):
                    decode_user_auctions_page(return_values)


if __name__ == "__main__":
    unittest.main()
