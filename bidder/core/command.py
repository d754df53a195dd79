"""
Provides support for the Command pattern.

Each command wraps one operation against the network collaborator, e.g. searching auction transactions,
and is invoked as a function.
"""
from abc import ABC, abstractmethod
from logging import Logger
from typing import TypeVar, Generic

from bidder.core.logging import get_logger

Args = TypeVar("Args")

Result = TypeVar("Result")


class Command(Generic[Args, Result], ABC):
    """
    Commands are invoked as functions:

    >>> search_auction_txs = SearchAuctionTxs(rpc, parser)  # doctest: +SKIP
    >>> result = search_auction_txs(SearchAuctionTxsRequest(filter=auction_id))  # doctest: +SKIP
    """

    @abstractmethod
    def __call__(self, args: Args) -> Result:
        """
        Executes the command
        """

    def get_logger(self, name: str | None = None) -> Logger:
        """
        :return: logger named after the command class, with `name` appended as a child logger if specified
        """
        return get_logger(self, name)
