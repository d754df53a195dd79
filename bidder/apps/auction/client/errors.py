"""
Translates transaction submission errors into user facing messages
"""
from typing import Any

from bidder.sui.errors import parse_tx_error

# `bidder::auction` abort codes
AUCTION_ERRORS: dict[int, str] = {
    5000: "E_WRONG_NAME",
    5001: "E_WRONG_DESCRIPTION",
    5002: "E_WRONG_TIME",
    5003: "E_WRONG_ADMIN",
    5004: "E_WRONG_ADDRESS",
    5005: "E_WRONG_DURATION",
    5006: "E_POINTLESS_PAY_ADDR_CHANGE",
    5007: "E_WRONG_COIN_VALUE",
    5008: "E_WRONG_MINIMUM_BID",
    5009: "E_WRONG_MINIMUM_INCREASE",
    5010: "E_WRONG_EXTENSION_PERIOD",
    5011: "E_CANT_RECLAIM_WITH_BIDS",
    5012: "E_MISSING_ITEMS",
    5013: "E_DUPLICATE_ITEM_ADDRESSES",
    5014: "E_ITEM_LENGTH_MISMATCH",
    5015: "E_NOT_ENOUGH_ITEMS",
    5016: "E_TOO_MANY_ITEMS",
}

USER_REJECTED = "Rejected from user"
INSUFFICIENT_BALANCE = "InsufficientCoinBalance"
INSUFFICIENT_BALANCE_MESSAGE = "You don't have enough balance"


def parse_error_code(err: str, package_id: str) -> str:
    """
    :return: the auction error name if the message is a Move abort raised by the auction package with a known code,
             otherwise the message itself
    """
    error = parse_tx_error(err)
    if error is None or error.package_id != package_id or error.code not in AUCTION_ERRORS:
        return err
    return AUCTION_ERRORS[error.code]


def err_code_to_str(
    err: Any,
    default_message: str,
    error_messages: dict[str, str] | None = None,
    package_id: str = "",
) -> str | None:
    """
    :param err: exception or error message
    :param error_messages: user facing messages keyed by error name, e.g. {"E_WRONG_TIME": "The auction has ended"}
    :return: None if the user rejected the transaction, i.e., there is nothing to report
    """
    if not err:
        return default_message

    message = str(err)
    if USER_REJECTED in message:
        return None
    if INSUFFICIENT_BALANCE in message:
        return INSUFFICIENT_BALANCE_MESSAGE

    code = parse_error_code(message, package_id)
    if error_messages and code in error_messages:
        return error_messages[code]

    return code or default_message
