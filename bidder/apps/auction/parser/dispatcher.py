"""
Parses Sui transaction blocks for the `bidder::auction` module
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, cast

from bidder.apps.auction import AUCTION_MODULE
from bidder.apps.auction.domain.events import (
    AnyAuctionTx,
    AuctionTxKind,
    TxAdminAcceptsBid,
    TxAdminCancelsAuction,
    TxAdminCreatesAuction,
    TxAdminSetsPayAddr,
    TxAnyoneBids,
    TxAnyonePaysFunds,
    TxAnyoneSendsItemToWinner,
)
from bidder.apps.auction.parser import effects
from bidder.apps.auction.parser.decoders import (
    Decoder,
    decode_admin_accepts_bid,
    decode_admin_cancels_auction,
    decode_admin_creates_auction,
    decode_admin_sets_pay_addr,
    decode_anyone_bids,
    decode_anyone_pays_funds,
    decode_anyone_sends_item_to_winner,
)
from bidder.apps.auction.parser.matcher import CallTarget, find_call
from bidder.sui.args import InvalidArgValue
from bidder.sui.model import (
    MalformedTxError,
    MoveCall,
    ObjectChange,
    ObjectId,
    TxData,
    normalize_sui_address,
    object_changes_from_response,
)

CallPredicate = Callable[[MoveCall], bool]


def calls_function(kind: AuctionTxKind) -> CallPredicate:
    """
    :return: predicate that matches calls to the auction function for `kind`
    """

    def predicate(call: MoveCall) -> bool:
        return call.function == kind.value

    return predicate


@dataclass(frozen=True, slots=True)
class AuctionTxDecoder:
    """
    Decoding rule for an auction function call
    """

    kind: AuctionTxKind
    matches: CallPredicate
    decode: Decoder


# Dispatch priority: rules are tried in this order against each auction call, in operation order.
AUCTION_TX_DECODERS: tuple[AuctionTxDecoder, ...] = (
    AuctionTxDecoder(
        AuctionTxKind.ADMIN_CREATES_AUCTION,
        calls_function(AuctionTxKind.ADMIN_CREATES_AUCTION),
        decode_admin_creates_auction,
    ),
    AuctionTxDecoder(
        AuctionTxKind.ANYONE_BIDS,
        calls_function(AuctionTxKind.ANYONE_BIDS),
        decode_anyone_bids,
    ),
    AuctionTxDecoder(
        AuctionTxKind.ADMIN_ACCEPTS_BID,
        calls_function(AuctionTxKind.ADMIN_ACCEPTS_BID),
        decode_admin_accepts_bid,
    ),
    AuctionTxDecoder(
        AuctionTxKind.ADMIN_CANCELS_AUCTION,
        calls_function(AuctionTxKind.ADMIN_CANCELS_AUCTION),
        decode_admin_cancels_auction,
    ),
    AuctionTxDecoder(
        AuctionTxKind.ADMIN_SETS_PAY_ADDR,
        calls_function(AuctionTxKind.ADMIN_SETS_PAY_ADDR),
        decode_admin_sets_pay_addr,
    ),
    AuctionTxDecoder(
        AuctionTxKind.ANYONE_PAYS_FUNDS,
        calls_function(AuctionTxKind.ANYONE_PAYS_FUNDS),
        decode_anyone_pays_funds,
    ),
    AuctionTxDecoder(
        AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER,
        calls_function(AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER),
        decode_anyone_sends_item_to_winner,
    ),
)


class AuctionTxParser:
    """
    Decodes `SuiTransactionBlockResponse`s into auction transactions.

    Notes
    -----
    - The parser is stateless and can be shared across threads.
    - Decoding never raises: None is returned when the transaction is not a recognized auction transaction.
    - Only the first auction call is decoded. Settlement transactions typically call both `anyone_pays_funds`
      and `anyone_sends_item_to_winner`: `parse_auction_tx()` returns the `anyone_pays_funds` transaction, and
      `anyone_sends_item_to_winner()` can be used to decode the other call.
    """

    def __init__(
        self,
        package_id: str,
        decoders: Iterable[AuctionTxDecoder] = AUCTION_TX_DECODERS,
    ):
        self._package_id = ObjectId(normalize_sui_address(package_id))
        self._namespace = CallTarget(self._package_id, AUCTION_MODULE)
        self._decoders = tuple(decoders)
        self._decoders_by_kind = {decoder.kind: decoder for decoder in self._decoders}
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def package_id(self) -> ObjectId:
        return self._package_id

    @property
    def decoders(self) -> tuple[AuctionTxDecoder, ...]:
        return self._decoders

    def parse_auction_tx(self, resp: dict[str, Any]) -> AnyAuctionTx | None:
        """
        Scans the operations for the first auction call that has a decoding rule, and returns its decoded result.
        Once a call has matched, later calls are not considered, even if decoding the matched call fails.
        """
        tx = self.to_tx_data(resp)
        if tx is None:
            return None

        for operation in tx.operations:
            if not self._namespace(operation):
                continue
            call = cast(MoveCall, operation)
            for decoder in self._decoders:
                if decoder.matches(call):
                    return self._decode(decoder, tx, call)

        self._logger.debug("[%s] no auction call found", tx.digest)
        return None

    def decode(self, kind: AuctionTxKind, resp: dict[str, Any]) -> AnyAuctionTx | None:
        """
        Decodes the first call to the auction function for the specified kind, ignoring all other calls
        """
        tx = self.to_tx_data(resp)
        if tx is None:
            return None

        call = find_call(tx.operations, self._namespace.with_function(kind.value))
        if call is None:
            self._logger.debug("[%s] no %s call found", tx.digest, kind)
            return None

        decoder = self._decoders_by_kind.get(kind)
        if decoder is None:
            self._logger.debug("[%s] no decoder registered for %s", tx.digest, kind)
            return None
        return self._decode(decoder, tx, call)

    def admin_creates_auction(self, resp: dict[str, Any]) -> TxAdminCreatesAuction | None:
        return cast(
            TxAdminCreatesAuction | None,
            self.decode(AuctionTxKind.ADMIN_CREATES_AUCTION, resp),
        )

    def anyone_bids(self, resp: dict[str, Any]) -> TxAnyoneBids | None:
        return cast(TxAnyoneBids | None, self.decode(AuctionTxKind.ANYONE_BIDS, resp))

    def admin_accepts_bid(self, resp: dict[str, Any]) -> TxAdminAcceptsBid | None:
        return cast(
            TxAdminAcceptsBid | None, self.decode(AuctionTxKind.ADMIN_ACCEPTS_BID, resp)
        )

    def admin_cancels_auction(self, resp: dict[str, Any]) -> TxAdminCancelsAuction | None:
        return cast(
            TxAdminCancelsAuction | None,
            self.decode(AuctionTxKind.ADMIN_CANCELS_AUCTION, resp),
        )

    def admin_sets_pay_addr(self, resp: dict[str, Any]) -> TxAdminSetsPayAddr | None:
        return cast(
            TxAdminSetsPayAddr | None,
            self.decode(AuctionTxKind.ADMIN_SETS_PAY_ADDR, resp),
        )

    def anyone_pays_funds(self, resp: dict[str, Any]) -> TxAnyonePaysFunds | None:
        return cast(
            TxAnyonePaysFunds | None, self.decode(AuctionTxKind.ANYONE_PAYS_FUNDS, resp)
        )

    def anyone_sends_item_to_winner(
        self, resp: dict[str, Any]
    ) -> TxAnyoneSendsItemToWinner | None:
        return cast(
            TxAnyoneSendsItemToWinner | None,
            self.decode(AuctionTxKind.ANYONE_SENDS_ITEM_TO_WINNER, resp),
        )

    # === object change extractors ===

    def extract_auction_obj_created(self, resp: dict[str, Any]) -> ObjectChange | None:
        return effects.extract_auction_obj_created(
            self._object_changes(resp), self._package_id
        )

    def extract_auction_obj_mutated(self, resp: dict[str, Any]) -> ObjectChange | None:
        return effects.extract_auction_obj_mutated(
            self._object_changes(resp), self._package_id
        )

    def extract_auction_obj_change(self, resp: dict[str, Any]) -> ObjectChange | None:
        return effects.extract_auction_obj_change(
            self._object_changes(resp), self._package_id
        )

    def extract_user_obj_change(self, resp: dict[str, Any]) -> ObjectChange | None:
        return effects.extract_user_obj_change(
            self._object_changes(resp), self._package_id
        )

    def to_tx_data(self, resp: dict[str, Any]) -> TxData | None:
        """
        :return: None if the response is not a programmable transaction
        """
        try:
            return TxData.from_response(resp)
        except MalformedTxError as err:
            self._logger.debug("malformed transaction response: %s", err)
            return None

    def _object_changes(self, resp: dict[str, Any]) -> tuple[ObjectChange, ...]:
        try:
            return object_changes_from_response(resp)
        except MalformedTxError as err:
            self._logger.debug("%s", err)
            return ()

    def _decode(
        self, decoder: AuctionTxDecoder, tx: TxData, call: MoveCall
    ) -> AnyAuctionTx | None:
        try:
            return decoder.decode(tx, call, self._package_id)
        except InvalidArgValue as err:
            self._logger.debug("[%s] %s: invalid argument: %s", tx.digest, decoder.kind, err)
            return None
