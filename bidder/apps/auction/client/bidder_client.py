"""
Client used to fetch and decode `bidder` objects and transactions
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, TypeVar

from bidder.apps.auction import USER_MODULE
from bidder.apps.auction.client import errors
from bidder.apps.auction.commands.search_auction_txs import (
    SearchAuctionTxs,
    SearchAuctionTxsRequest,
    SearchAuctionTxsResult,
    TxOrder,
)
from bidder.apps.auction.domain.auction import AuctionObj
from bidder.apps.auction.domain.events import AuctionTxKind
from bidder.apps.auction.domain.item import SuiItem
from bidder.apps.auction.domain.user import (
    UserAuctionsPage,
    UserBidsPage,
    UserObj,
    UserRecentHistory,
)
from bidder.apps.auction.parser.dispatcher import AuctionTxParser
from bidder.apps.auction.parser.objects import (
    InvalidObjectError,
    object_id,
    parse_auction_obj,
    parse_auction_or_item,
    parse_sui_item,
    parse_user_obj,
)
from bidder.apps.auction.parser.user_history import (
    decode_user_auctions_page,
    decode_user_bids_page,
    decode_user_recent_history,
)
from bidder.core.logging import get_logger
from bidder.sui.model import Address, ObjectId, SUI_COIN_STRUCT, normalize_sui_address
from bidder.sui.ptb import (
    MoveCallArg,
    ObjectRef,
    dev_inspect_return_values,
    move_call_tx_kind,
    pure_bool,
    pure_u64,
)
from bidder.sui.rpc import DEFAULT_OBJECT_OPTIONS, SuiRpc

T = TypeVar("T", AuctionObj, SuiItem, AuctionObj | SuiItem)

USER_OBJECT_OPTIONS: dict[str, bool] = {"showType": True, "showOwner": True}

# user history is paged by index: descending pages start from the newest entry
DESCENDING_START_CURSOR = 2**53 - 1


@dataclass(slots=True)
class OwnedItemsPage:
    """
    Page of publicly transferable objects owned by an address
    """

    data: list[SuiItem] = field(default_factory=list)
    next_cursor: str | None = None
    has_next_page: bool = False


@dataclass(slots=True)
class AuctionsAndItems:
    auctions: list[AuctionObj] = field(default_factory=list)
    items: dict[ObjectId, SuiItem] = field(default_factory=dict)


class BidderClient:
    """
    Fetches auctions, items and auction transactions from a Sui node.

    Notes
    -----
    - Auctions, items, and user IDs are cached per object ID (owner address for user IDs) - last write wins.
    - Objects that cannot be parsed are skipped and logged.
    - Transactions are decoded by `AuctionTxParser`. Transactions that cannot be decoded are skipped.
    - User history is read by calling the `bidder::user` view functions in dev inspect mode.
    """

    def __init__(
        self,
        rpc: SuiRpc,
        package_id: str,
        registry_id: str | None = None,
    ):
        self._rpc = rpc
        self._tx_parser = AuctionTxParser(package_id)
        self._package_id = self._tx_parser.package_id
        self._registry_id = (
            ObjectId(normalize_sui_address(registry_id)) if registry_id else None
        )
        self._search_auction_txs = SearchAuctionTxs(rpc, self._tx_parser)

        self._auctions: dict[ObjectId, AuctionObj] = {}
        self._items: dict[ObjectId, SuiItem] = {}
        self._user_ids: dict[Address, ObjectId] = {}

    @property
    def package_id(self) -> ObjectId:
        return self._package_id

    @property
    def registry_id(self) -> ObjectId | None:
        return self._registry_id

    @property
    def tx_parser(self) -> AuctionTxParser:
        return self._tx_parser

    # === objects ===

    def fetch_auction(self, auction_id: ObjectId, use_cache: bool = True) -> AuctionObj | None:
        auctions = self.fetch_auctions([auction_id], use_cache)
        return auctions[0] if auctions else None

    def fetch_auctions(
        self, auction_ids: Sequence[ObjectId], use_cache: bool = True
    ) -> list[AuctionObj]:
        """
        :param use_cache: if False, then all auctions are fetched from the network and the cache is refreshed
        """
        return self._fetch_and_parse_objects(
            auction_ids,
            self._auctions if use_cache else None,
            parse_auction_obj,
        )

    def fetch_item(self, item_id: ObjectId, use_cache: bool = True) -> SuiItem | None:
        items = self.fetch_items([item_id], use_cache)
        return items[0] if items else None

    def fetch_items(
        self, item_ids: Sequence[ObjectId], use_cache: bool = True
    ) -> list[SuiItem]:
        return self._fetch_and_parse_objects(
            item_ids,
            self._items if use_cache else None,
            parse_sui_item,
        )

    def fetch_auctions_and_items(
        self,
        auction_ids: Sequence[ObjectId],
        item_ids: Sequence[ObjectId],
    ) -> AuctionsAndItems:
        """
        Fetches auctions and their items in a single pass, bypassing the cache
        """
        result = AuctionsAndItems()
        for obj in self._fetch_and_parse_objects(
            [*auction_ids, *item_ids],
            None,
            self.parse_auction_or_item_obj,
        ):
            if isinstance(obj, AuctionObj):
                result.auctions.append(obj)
            else:
                result.items[obj.id] = obj
        return result

    def fetch_owned_items(
        self,
        owner: Address,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> OwnedItemsPage:
        """
        Coins and objects that cannot be transferred freely are excluded
        """
        page = self._rpc.get_owned_objects(
            owner,
            object_filter={"MatchNone": [{"StructType": SUI_COIN_STRUCT}]},
            options=DEFAULT_OBJECT_OPTIONS,
            cursor=cursor,
            limit=limit,
        )

        result = OwnedItemsPage(
            next_cursor=page.get("nextCursor"),
            has_next_page=bool(page.get("hasNextPage")),
        )
        for obj_res in page.get("data") or []:
            try:
                item = parse_sui_item(obj_res)
            except InvalidObjectError as err:
                get_logger(self).warning("skipping invalid object: %s", err)
                continue
            if item.has_public_transfer:
                result.data.append(item)
                self._items[item.id] = item
        return result

    def parse_auction_or_item_obj(self, obj_res: dict[str, Any]) -> AuctionObj | SuiItem:
        """
        Parses the object by its declared type. Parsed objects are cached.

        :exception InvalidObjectError: if the object cannot be parsed
        """
        obj = parse_auction_or_item(obj_res, self._package_id)
        if isinstance(obj, AuctionObj):
            self._auctions[obj.id] = obj
        else:
            self._items[obj.id] = obj
        return obj

    # === transactions ===

    def fetch_txs_admin_creates_auction(
        self,
        cursor: str | None = None,
        limit: int = 50,
        order: TxOrder = TxOrder.DESCENDING,
    ) -> SearchAuctionTxsResult:
        return self._search_auction_txs(
            SearchAuctionTxsRequest(
                filter=AuctionTxKind.ADMIN_CREATES_AUCTION,
                cursor=cursor,
                limit=limit,
                order=order,
            )
        )

    def fetch_txs_anyone_bids(
        self,
        cursor: str | None = None,
        limit: int = 50,
        order: TxOrder = TxOrder.DESCENDING,
    ) -> SearchAuctionTxsResult:
        return self._search_auction_txs(
            SearchAuctionTxsRequest(
                filter=AuctionTxKind.ANYONE_BIDS,
                cursor=cursor,
                limit=limit,
                order=order,
            )
        )

    def fetch_txs_by_auction_id(
        self,
        auction_id: ObjectId,
        cursor: str | None = None,
        limit: int = 50,
        order: TxOrder = TxOrder.DESCENDING,
    ) -> SearchAuctionTxsResult:
        """
        Fetches all transactions that changed the auction object, i.e., the auction history
        """
        return self._search_auction_txs(
            SearchAuctionTxsRequest(
                filter=ObjectId(normalize_sui_address(auction_id)),
                cursor=cursor,
                limit=limit,
                order=order,
            )
        )

    # === users ===

    def fetch_user_id(self, owner: Address) -> ObjectId | None:
        """
        :return: ID of the `User` object owned by the address, or None if the address does not own one
        """
        owner = normalize_sui_address(owner)
        if owner in self._user_ids:
            return self._user_ids[owner]

        page = self._rpc.get_owned_objects(
            owner,
            object_filter={"StructType": f"{self._package_id}::{USER_MODULE}::User"},
            options={"showType": True},
        )
        data = page.get("data") or []
        if len(data) == 0:
            return None

        user_id = object_id(data[0])
        self._user_ids[owner] = user_id
        return user_id

    def cache_user_id(self, owner: Address, user_id: ObjectId):
        self._user_ids[normalize_sui_address(owner)] = ObjectId(normalize_sui_address(user_id))

    def fetch_user_obj(self, user_id: ObjectId) -> UserObj | None:
        """
        Always fetched from the network, i.e., User objects are not cached
        """
        (obj_res,) = self._rpc.multi_get_objects(
            [normalize_sui_address(user_id)], USER_OBJECT_OPTIONS
        )
        try:
            return parse_user_obj(obj_res)
        except InvalidObjectError as err:
            get_logger(self).warning("invalid User object: %s", err)
            return None

    def fetch_user_auctions(
        self,
        user_id: ObjectId,
        cursor: int | None = None,
        limit: int = 50,
        order: TxOrder = TxOrder.DESCENDING,
    ) -> UserAuctionsPage | None:
        """
        Pages through the auctions created by the user

        :param cursor: `next_cursor` of the previous page - defaults to the oldest or newest entry, depending on `order`
        :return: None if the User object does not exist
        :exception SuiRpcError: if the view function call fails
        :exception BcsError: if the return values cannot be decoded
        """
        user = self.fetch_user_obj(user_id)
        if user is None:
            return None
        return decode_user_auctions_page(
            self._call_user_view(
                "get_auctions_created",
                user,
                pure_u64(_start_cursor(cursor, order)),
                pure_u64(limit),
                pure_bool(order == TxOrder.ASCENDING),
            )
        )

    def fetch_user_bids(
        self,
        user_id: ObjectId,
        cursor: int | None = None,
        limit: int = 50,
        order: TxOrder = TxOrder.DESCENDING,
    ) -> UserBidsPage | None:
        """
        Pages through the bids placed by the user. Refer to `fetch_user_auctions()`
        """
        user = self.fetch_user_obj(user_id)
        if user is None:
            return None
        return decode_user_bids_page(
            self._call_user_view(
                "get_bids_placed",
                user,
                pure_u64(_start_cursor(cursor, order)),
                pure_u64(limit),
                pure_bool(order == TxOrder.ASCENDING),
            )
        )

    def fetch_user_recent_auctions_and_bids(
        self,
        user_id: ObjectId,
        limit_created: int = 10,
        limit_bids: int = 10,
    ) -> UserRecentHistory | None:
        """
        Fetches the newest auctions created and bids placed by the user, along with their totals, in a single call
        """
        user = self.fetch_user_obj(user_id)
        if user is None:
            return None
        return decode_user_recent_history(
            self._call_user_view(
                "get_auctions_and_bids",
                user,
                pure_u64(DESCENDING_START_CURSOR),
                pure_u64(DESCENDING_START_CURSOR),
                pure_u64(limit_created),
                pure_u64(limit_bids),
                pure_bool(False),
            )
        )

    def _call_user_view(self, function: str, user: UserObj, *args: MoveCallArg) -> list[bytes]:
        tx_kind = move_call_tx_kind(
            self._package_id,
            USER_MODULE,
            function,
            [ObjectRef(user.id, user.version, user.digest), *args],
        )
        get_logger(self, "_call_user_view").debug("user::%s(%s)", function, user.id)
        return dev_inspect_return_values(self._rpc, tx_kind)

    # === errors ===

    def err_code_to_str(
        self,
        err: Any,
        default_message: str,
        error_messages: dict[str, str] | None = None,
    ) -> str | None:
        """
        Refer to `bidder.apps.auction.client.errors.err_code_to_str()`
        """
        return errors.err_code_to_str(
            err, default_message, error_messages, self._package_id
        )

    def _fetch_and_parse_objects(
        self,
        object_ids: Sequence[ObjectId],
        cache: dict[ObjectId, T] | None,
        parse: Callable[[dict[str, Any]], T],
    ) -> list[T]:
        """
        Objects are returned in the requested order. Fetched objects are cached, even when the cache was bypassed.

        :exception ValueError: if an object ID is not a hex encoded address
        """
        logger = get_logger(self, "_fetch_and_parse_objects")
        object_ids = [ObjectId(normalize_sui_address(object_id)) for object_id in object_ids]
        ids_to_fetch = [
            object_id
            for object_id in dict.fromkeys(object_ids)
            if cache is None or object_id not in cache
        ]

        fetched: dict[ObjectId, T] = {}
        if ids_to_fetch:
            for obj_res in self._rpc.multi_get_objects(ids_to_fetch, DEFAULT_OBJECT_OPTIONS):
                try:
                    obj = parse(obj_res)
                except InvalidObjectError as err:
                    logger.warning("skipping invalid object: %s", err)
                    continue
                fetched[obj.id] = obj
                if isinstance(obj, AuctionObj):
                    self._auctions[obj.id] = obj
                else:
                    self._items[obj.id] = obj

        results: list[T] = []
        for object_id in object_ids:
            if object_id in fetched:
                results.append(fetched[object_id])
            elif cache is not None and object_id in cache:
                results.append(cache[object_id])
        return results


def _start_cursor(cursor: int | None, order: TxOrder) -> int:
    if cursor is not None:
        return cursor
    return 0 if order == TxOrder.ASCENDING else DESCENDING_START_CURSOR
