"""
Parses `SuiObjectResponse` object snapshots into auction domain objects.

Fields are mapped explicitly per object type. A missing or malformed field fails the whole parse with
`InvalidObjectError`.
"""
from dataclasses import dataclass
from typing import Any

from bidder.apps.auction import AUCTION_MODULE, USER_MODULE
from bidder.apps.auction.domain.auction import AuctionObj, ItemBag, current_time_ms
from bidder.apps.auction.domain.item import SuiItem
from bidder.apps.auction.domain.user import UserObj
from bidder.sui.model import Address, ObjectId, TypeTag, is_decimal_str, type_params


@dataclass(slots=True)
class InvalidObjectError(ValueError):
    """
    Raised when an object snapshot does not have the expected shape
    """

    object_id: str | None
    reason: str

    def __str__(self) -> str:
        return f"[{self.object_id}] {self.reason}"


class _Fields:
    """
    Typed access to a Move struct's JSON encoded fields
    """

    def __init__(self, object_id: str | None, fields: Any, path: str = ""):
        if not isinstance(fields, dict):
            raise InvalidObjectError(object_id, f"{path or 'fields'} is not an object")
        self._object_id = object_id
        self._fields = fields
        self._path = path

    def _get(self, name: str) -> Any:
        if name not in self._fields:
            raise InvalidObjectError(self._object_id, f"missing field: {self._path}{name}")
        return self._fields[name]

    def _invalid(self, name: str, expected: str) -> InvalidObjectError:
        return InvalidObjectError(
            self._object_id,
            f"{self._path}{name} is not {expected}: {self._fields.get(name)!r}",
        )

    def text(self, name: str) -> str:
        value = self._get(name)
        if not isinstance(value, str):
            raise self._invalid(name, "a string")
        return value

    def uint(self, name: str) -> int:
        """
        u64 and larger integers are encoded as decimal strings, smaller ones as JSON numbers
        """
        value = self._get(name)
        if isinstance(value, bool):
            raise self._invalid(name, "an unsigned integer")
        if isinstance(value, int) and value >= 0:
            return value
        if isinstance(value, str) and is_decimal_str(value):
            return int(value)
        raise self._invalid(name, "an unsigned integer")

    def text_list(self, name: str) -> list[str]:
        value = self._get(name)
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise self._invalid(name, "a list of strings")
        return value

    def struct(self, name: str) -> "_Fields":
        """
        Nested structs are encoded as {"type": ..., "fields": {...}}
        """
        value = self._get(name)
        if isinstance(value, dict) and "fields" in value:
            value = value["fields"]
        return _Fields(self._object_id, value, f"{self._path}{name}.")

    def uid(self, name: str = "id") -> ObjectId:
        """
        UID fields are encoded as {"id": "0x..."}
        """
        value = self._get(name)
        if not isinstance(value, dict) or not isinstance(value.get("id"), str):
            raise self._invalid(name, "a UID")
        return ObjectId(value["id"])


def _object_data(obj_res: dict[str, Any]) -> dict[str, Any]:
    data = obj_res.get("data") if isinstance(obj_res, dict) else None
    if not isinstance(data, dict):
        error = obj_res.get("error") if isinstance(obj_res, dict) else None
        raise InvalidObjectError(None, f"object data not found: {error!r}")
    return data


def _object_type(data: dict[str, Any]) -> str:
    object_type = data.get("type")
    if object_type is None and isinstance(data.get("content"), dict):
        object_type = data["content"].get("type")
    if not isinstance(object_type, str):
        raise InvalidObjectError(data.get("objectId"), "object type not found")
    return object_type


def _move_object_fields(data: dict[str, Any]) -> _Fields:
    content = data.get("content")
    if not isinstance(content, dict) or content.get("dataType") != "moveObject":
        raise InvalidObjectError(data.get("objectId"), "not a Move object")
    return _Fields(data.get("objectId"), content.get("fields"))


def _owner_address(data: dict[str, Any]) -> Address | None:
    owner = data.get("owner")
    if isinstance(owner, dict) and isinstance(owner.get("AddressOwner"), str):
        return Address(owner["AddressOwner"])
    return None


def object_id(obj_res: dict[str, Any]) -> ObjectId:
    """
    :exception InvalidObjectError: if the response does not contain object data
    """
    data = _object_data(obj_res)
    if not isinstance(data.get("objectId"), str):
        raise InvalidObjectError(None, "objectId not found")
    return ObjectId(data["objectId"])


def is_auction_type(object_type: str, package_id: ObjectId) -> bool:
    return object_type.startswith(f"{package_id}::{AUCTION_MODULE}::Auction<")


def is_user_type(object_type: str, package_id: ObjectId) -> bool:
    return object_type == f"{package_id}::{USER_MODULE}::User"


def parse_auction_obj(obj_res: dict[str, Any], now_ms: int | None = None) -> AuctionObj:
    """
    Parses a `bidder::auction::Auction<T>` object.

    `is_live` and `has_ended` are derived from the current time when the snapshot is parsed.

    :param now_ms: current time in milliseconds - defaults to the wall clock time
    :exception InvalidObjectError: if a field is missing or malformed
    """
    data = _object_data(obj_res)
    object_type = _object_type(data)
    params = type_params(object_type)
    if len(params) != 1:
        raise InvalidObjectError(
            data.get("objectId"), f"not an Auction<T> type: {object_type}"
        )

    fields = _move_object_fields(data)
    item_bag = fields.struct("item_bag")
    begin_time_ms = fields.uint("begin_time_ms")
    end_time_ms = fields.uint("end_time_ms")
    now_ms = current_time_ms() if now_ms is None else now_ms

    return AuctionObj(
        type_coin=TypeTag(params[0]),
        id=fields.uid(),
        name=fields.text("name"),
        description=fields.text("description"),
        item_addrs=tuple(Address(addr) for addr in fields.text_list("item_addrs")),
        item_bag=ItemBag(id=item_bag.uid(), size=item_bag.uint("size")),
        admin_addr=Address(fields.text("admin_addr")),
        pay_addr=Address(fields.text("pay_addr")),
        lead_addr=Address(fields.text("lead_addr")),
        lead_value=fields.uint("lead_bal"),
        begin_time_ms=begin_time_ms,
        end_time_ms=end_time_ms,
        minimum_bid=fields.uint("minimum_bid"),
        minimum_increase_bps=fields.uint("minimum_increase_bps"),
        extension_period_ms=fields.uint("extension_period_ms"),
        is_live=begin_time_ms <= now_ms < end_time_ms,
        has_ended=now_ms >= end_time_ms,
    )


def _text(*candidates: Any) -> str:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return ""


def parse_sui_item(obj_res: dict[str, Any]) -> SuiItem:
    """
    Parses any Move object into an item.

    :exception InvalidObjectError: if the response does not contain a Move object
    """
    data = _object_data(obj_res)
    item_id = object_id(obj_res)
    object_type = _object_type(data)
    content = data.get("content")
    if not isinstance(content, dict) or content.get("dataType") != "moveObject":
        raise InvalidObjectError(item_id, "not a Move object")

    fields = content.get("fields")
    fields = fields if isinstance(fields, dict) else {}
    display = data.get("display")
    display_data = display.get("data") if isinstance(display, dict) else None
    display_data = display_data if isinstance(display_data, dict) else {}

    return SuiItem(
        id=item_id,
        type=object_type,
        owner=_owner_address(data),
        has_public_transfer=bool(content.get("hasPublicTransfer", False)),
        name=_text(display_data.get("name"), fields.get("name")),
        description=_text(display_data.get("description"), fields.get("description")),
        image_url=_text(
            display_data.get("image_url"),
            fields.get("image_url"),
            fields.get("url"),
        ),
        display=display_data,
        fields=fields,
    )


def parse_user_obj(obj_res: dict[str, Any]) -> UserObj:
    """
    :exception InvalidObjectError: if the object is not owned by an address, or its version or digest is missing
    """
    data = _object_data(obj_res)
    user_id = object_id(obj_res)
    owner = _owner_address(data)
    if owner is None:
        raise InvalidObjectError(user_id, "User object is not owned by an address")

    version = data.get("version")
    if (
        isinstance(version, bool)
        or not isinstance(version, (str, int))
        or not is_decimal_str(str(version))
    ):
        raise InvalidObjectError(user_id, f"invalid version: {version!r}")

    digest = data.get("digest")
    if not isinstance(digest, str) or not digest:
        raise InvalidObjectError(user_id, f"invalid digest: {digest!r}")

    return UserObj(id=user_id, owner=owner, version=int(version), digest=digest)


def parse_auction_or_item(
    obj_res: dict[str, Any],
    package_id: ObjectId,
    now_ms: int | None = None,
) -> AuctionObj | SuiItem:
    """
    Auction objects are parsed as `AuctionObj`, any other object as `SuiItem`
    """
    data = _object_data(obj_res)
    if is_auction_type(_object_type(data), package_id):
        return parse_auction_obj(obj_res, now_ms)
    return parse_sui_item(obj_res)
