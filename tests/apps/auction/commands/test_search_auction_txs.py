import unittest
from unittest.mock import MagicMock

from bidder.apps.auction.commands.search_auction_txs import (
    SearchAuctionTxs,
    SearchAuctionTxsRequest,
    TxOrder,
)
from bidder.apps.auction.domain.events import (
    AuctionTxKind,
    TxAdminAcceptsBid,
    TxAnyoneBids,
    TxAnyonePaysFunds,
    TxAnyoneSendsItemToWinner,
)
from bidder.apps.auction.parser.dispatcher import AuctionTxParser
from bidder.sui.model import ObjectId
from bidder.sui.rpc import DEFAULT_TX_OPTIONS, SuiRpc
from tests.apps.auction.support import (
    AUCTION_ID,
    PACKAGE_ID,
    accepts_bid_response,
    bids_response,
    settlement_response,
    tx_response,
)
from tests.test_support import BidderTestCase


class SearchAuctionTxsTestCase(BidderTestCase):
    def setUp(self) -> None:
        self.rpc = MagicMock(spec=SuiRpc)
        self.search_auction_txs = SearchAuctionTxs(self.rpc, AuctionTxParser(PACKAGE_ID))

    def test_search_by_kind(self) -> None:
        self.rpc.query_transaction_blocks.return_value = {
            "data": [bids_response(), bids_response(split_first=False)],
            "nextCursor": "abc",
            "hasNextPage": True,
        }

        result = self.search_auction_txs(
            SearchAuctionTxsRequest(filter=AuctionTxKind.ANYONE_BIDS, limit=2)
        )
        self.assertEqual(AuctionTxKind.ANYONE_BIDS, result.filter)
        self.assertEqual(2, len(result.txs))
        for tx in result.txs:
            self.assertIsInstance(tx, TxAnyoneBids)
        self.assertEqual("abc", result.next_cursor)
        self.assertTrue(result.has_next_page)
        self.assertEqual(0, result.skipped)

        self.rpc.query_transaction_blocks.assert_called_once_with(
            tx_filter={
                "MoveFunction": {
                    "package": PACKAGE_ID,
                    "module": "auction",
                    "function": "anyone_bids",
                }
            },
            options=DEFAULT_TX_OPTIONS,
            cursor=None,
            limit=2,
            descending_order=True,
        )

    def test_search_by_kind_decodes_the_matching_call(self) -> None:
        self.rpc.query_transaction_blocks.return_value = {
            "data": [settlement_response()],
            "nextCursor": None,
            "hasNextPage": False,
        }
        result = self.search_auction_txs(
            SearchAuctionTxsRequest(filter=AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER)
        )
        self.assertEqual(1, len(result.txs))
        self.assertIsInstance(result.txs[0], TxAnyoneSendsItemToWinner)

    def test_search_by_auction_id(self) -> None:
        self.rpc.query_transaction_blocks.return_value = {
            "data": [
                bids_response(),
                accepts_bid_response(),
                settlement_response(),
                tx_response([], [{"TransferObjects": [[], "GasCoin"]}]),
            ],
            "nextCursor": "xyz",
            "hasNextPage": False,
        }

        result = self.search_auction_txs(
            SearchAuctionTxsRequest(
                filter=ObjectId(AUCTION_ID),
                cursor="abc",
                order=TxOrder.ASCENDING,
            )
        )
        self.assertEqual(
            [TxAnyoneBids, TxAdminAcceptsBid, TxAnyonePaysFunds],
            [type(tx) for tx in result.txs],
        )
        self.assertEqual(1, result.skipped)
        self.assertEqual("xyz", result.next_cursor)
        self.assertFalse(result.has_next_page)

        kwargs = self.rpc.query_transaction_blocks.call_args.kwargs
        self.assertEqual({"ChangedObject": AUCTION_ID}, kwargs["tx_filter"])
        self.assertEqual("abc", kwargs["cursor"])
        self.assertFalse(kwargs["descending_order"])

    def test_empty_page(self) -> None:
        self.rpc.query_transaction_blocks.return_value = {
            "data": [],
            "nextCursor": None,
            "hasNextPage": False,
        }
        result = self.search_auction_txs(SearchAuctionTxsRequest(filter=AuctionTxKind.ADMIN_CREATES_AUCTION))
        self.assertEqual([], result.txs)
        self.assertIsNone(result.next_cursor)


if __name__ == "__main__":
    unittest.main()
