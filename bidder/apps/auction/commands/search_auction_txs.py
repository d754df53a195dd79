"""
Searches Sui for auction transactions
"""
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from bidder.apps.auction import AUCTION_MODULE
from bidder.apps.auction.domain.events import AnyAuctionTx, AuctionTxKind
from bidder.apps.auction.parser.dispatcher import AuctionTxParser
from bidder.core.command import Command
from bidder.sui.model import ObjectId
from bidder.sui.rpc import DEFAULT_TX_OPTIONS, SuiRpc


class TxOrder(StrEnum):
    """
    Transaction search order
    """

    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(slots=True)
class SearchAuctionTxsRequest:
    """
    SearchAuctionTxsRequest
    """

    # either transactions that called a specific auction function, or any transaction that changed the auction object
    filter: AuctionTxKind | ObjectId

    cursor: str | None = None
    limit: int = 50
    order: TxOrder = TxOrder.DESCENDING


@dataclass(slots=True)
class SearchAuctionTxsResult:
    """
    SearchAuctionTxsResult
    """

    filter: AuctionTxKind | ObjectId

    txs: list[AnyAuctionTx] = field(default_factory=list)

    # used for paging
    next_cursor: str | None = None
    has_next_page: bool = False

    # number of transactions on the page that could not be decoded
    skipped: int = 0


class SearchAuctionTxs(Command[SearchAuctionTxsRequest, SearchAuctionTxsResult]):
    """
    Queries transaction blocks and decodes them into auction transactions.

    - when filtering by kind, only the call to that auction function is decoded
    - when filtering by auction ID, each transaction is decoded by the first auction call it contains
    """

    def __init__(self, rpc: SuiRpc, parser: AuctionTxParser):
        self._rpc = rpc
        self._parser = parser

    def __call__(self, request: SearchAuctionTxsRequest) -> SearchAuctionTxsResult:
        page = self._rpc.query_transaction_blocks(
            tx_filter=self.__tx_filter(request.filter),
            options=DEFAULT_TX_OPTIONS,
            cursor=request.cursor,
            limit=request.limit,
            descending_order=request.order == TxOrder.DESCENDING,
        )

        txs: list[AnyAuctionTx] = []
        skipped = 0
        for resp in page.get("data") or []:
            tx = self.__decode(request.filter, resp)
            if tx is None:
                skipped += 1
            else:
                txs.append(tx)

        if skipped:
            self.get_logger().debug("skipped %s transactions that could not be decoded", skipped)

        return SearchAuctionTxsResult(
            filter=request.filter,
            txs=txs,
            next_cursor=page.get("nextCursor"),
            has_next_page=bool(page.get("hasNextPage")),
            skipped=skipped,
        )

    def __decode(
        self, tx_filter: AuctionTxKind | ObjectId, resp: dict[str, Any]
    ) -> AnyAuctionTx | None:
        # AuctionTxKind is a str, thus it must be checked first
        if isinstance(tx_filter, AuctionTxKind):
            return self._parser.decode(tx_filter, resp)
        return self._parser.parse_auction_tx(resp)

    def __tx_filter(self, tx_filter: AuctionTxKind | ObjectId) -> dict[str, Any]:
        if isinstance(tx_filter, AuctionTxKind):
            return {
                "MoveFunction": {
                    "package": self._parser.package_id,
                    "module": AUCTION_MODULE,
                    "function": tx_filter.value,
                }
            }
        return {"ChangedObject": tx_filter}
