"""
Polls Sui for new auction transactions.
"""
from dataclasses import dataclass
from datetime import timedelta
from threading import Thread
from typing import Iterable

from reactivex import Observable, Subject
from reactivex.operators import observe_on

from bidder.apps.auction.commands.search_auction_txs import (
    SearchAuctionTxs,
    SearchAuctionTxsRequest,
    TxOrder,
)
from bidder.apps.auction.domain.events import AnyAuctionTx, AuctionTxKind
from bidder.core.logging import get_logger
from bidder.core.service import Service, ServiceCommand, default_scheduler
from bidder.sui.model import ObjectId
from bidder.sui.rpc import SuiRpcError

TxFilter = AuctionTxKind | ObjectId


@dataclass(slots=True)
class AuctionTxWatcherServiceEvent:
    """
    AuctionTxWatcherServiceEvent
    """

    filter: TxFilter
    txs: list[AnyAuctionTx]


class AuctionTxWatcherService(Service):
    """
    Watches Sui for auction transactions and publishes them (AuctionTxWatcherServiceEvent) to an Observable stream.

    Notes
    -----
    - service runs in a background thread
    - transactions are searched in ascending order, continuing from the cursor of the previous search per filter
    - cursors are held in memory, i.e., a new service instance starts from the first transaction
    - network errors are logged, and the filter is retried on the next poll
    """

    # pylint: disable=too-many-instance-attributes

    def __init__(
        self,
        search_auction_txs: SearchAuctionTxs,
        filters: Iterable[TxFilter] = (
            AuctionTxKind.ADMIN_CREATES_AUCTION,
            AuctionTxKind.ANYONE_BIDS,
        ),
        poll_interval: timedelta = timedelta(seconds=3),
        batch_size: int = 50,
        commands: Observable[ServiceCommand] | None = None,
    ):
        super().__init__(commands)

        self._search_auction_txs = search_auction_txs
        self._filters = list(dict.fromkeys(filters))
        self._poll_interval = poll_interval
        self._batch_size = batch_size
        self._cursors: dict[TxFilter, str | None] = {}

        if len(self._filters) == 0:
            raise ValueError("at least 1 filter is required")

        # init observable
        self._subject: Subject[AuctionTxWatcherServiceEvent] = Subject()
        self._observable: Observable[
            AuctionTxWatcherServiceEvent
        ] = self._subject.pipe(observe_on(default_scheduler))

    @property
    def filters(self) -> list[TxFilter]:
        return list(self._filters)

    @property
    def observable(self) -> Observable[AuctionTxWatcherServiceEvent]:
        return self._observable

    def cursor(self, tx_filter: TxFilter) -> str | None:
        """
        :return: cursor that the next search for the filter continues from
        """
        return self._cursors.get(tx_filter)

    def poll(self) -> bool:
        """
        Searches once per filter, and publishes an event for each filter that found transactions.

        :return: True if any of the searches has more results
        """
        logger = get_logger(self, "poll")
        has_more_results = False
        for tx_filter in self._filters:
            if self._stopped_event.is_set():
                break

            try:
                result = self._search_auction_txs(
                    SearchAuctionTxsRequest(
                        filter=tx_filter,
                        cursor=self._cursors.get(tx_filter),
                        limit=self._batch_size,
                        order=TxOrder.ASCENDING,
                    )
                )
            except SuiRpcError as err:
                logger.error("search failed: filter=%s : %s", tx_filter, err)
                continue

            has_more_results = has_more_results or result.has_next_page
            logger.debug(
                "filter=%s, txs=%s, next_cursor=%s, has_next_page=%s",
                tx_filter,
                len(result.txs),
                result.next_cursor,
                result.has_next_page,
            )

            if result.next_cursor is not None:
                self._cursors[tx_filter] = result.next_cursor
            if result.txs:
                self._subject.on_next(
                    AuctionTxWatcherServiceEvent(tx_filter, result.txs)
                )

        return has_more_results

    def _start(self):
        logger = get_logger(self)

        def run() -> None:
            logger.info("running")
            while not self._stopped_event.is_set():
                if not self.poll():
                    logger.debug("sleeping")
                    self._stopped_event.wait(self._poll_interval.total_seconds())

            logger.info("stop signalled - exiting")

        Thread(target=run, name=self.name, daemon=True).start()

    def _stop(self):
        """
        The polling thread exits once the service is stopped
        """
