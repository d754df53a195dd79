"""
Sui domain model

Typed view of the JSON-RPC `SuiTransactionBlockResponse`: programmable transaction inputs, operations (commands),
argument handles and object changes.

https://docs.sui.io/references/sui-api
"""

import string
from dataclasses import dataclass
from enum import StrEnum
from typing import NewType, Any, Iterable

# 0x prefixed, 32 byte hex encoded address
Address = NewType("Address", str)

ObjectId = NewType("ObjectId", str)

TxDigest = NewType("TxDigest", str)

# fully qualified Move type, e.g. 0x2::sui::SUI
TypeTag = NewType("TypeTag", str)

SUI_ADDRESS_LENGTH = 64

# generic Coin<T> struct, without type parameters
SUI_COIN_STRUCT = "0x2::coin::Coin"


class MalformedTxError(Exception):
    """
    Raised when a transaction response cannot be parsed into a programmable transaction
    """


def normalize_sui_address(value: str) -> Address:
    """
    Pads the address with leading zeros to its full 32 byte length, e.g., `0x2` -> `0x000...0002`

    :exception ValueError: if the value is not a hex encoded address
    """
    hex_digits = value.strip().lower().removeprefix("0x")
    if (
        not hex_digits
        or len(hex_digits) > SUI_ADDRESS_LENGTH
        or any(c not in string.hexdigits for c in hex_digits)
    ):
        raise ValueError(f"invalid Sui address: {value!r}")
    return Address(f"0x{hex_digits.rjust(SUI_ADDRESS_LENGTH, '0')}")


def is_decimal_str(value: str) -> bool:
    """
    Only ASCII digits are accepted, i.e., `int()` never fails on a string that passes this check
    """
    return value.isascii() and value.isdigit()


def type_params(type_tag: str) -> tuple[TypeTag, ...]:
    """
    Returns the type parameters of a generic struct type, e.g.

    >>> type_params("0x2::coin::Coin<0x2::sui::SUI>")
    ('0x2::sui::SUI',)
    >>> type_params("0x2::object::ID")
    ()
    """
    start = type_tag.find("<")
    end = type_tag.rfind(">")
    if start == -1 or end < start:
        return ()

    params: list[TypeTag] = []
    depth = 0
    param_start = start + 1
    for i in range(start + 1, end):
        match type_tag[i]:
            case "<":
                depth += 1
            case ">":
                depth -= 1
            case "," if depth == 0:
                params.append(TypeTag(type_tag[param_start:i].strip()))
                param_start = i + 1
    params.append(TypeTag(type_tag[param_start:end].strip()))
    return tuple(params)


# === argument handles ===


@dataclass(frozen=True, slots=True)
class GasCoinArg:
    """
    Refers to the gas coin
    """


@dataclass(frozen=True, slots=True)
class InputArg:
    """
    Refers to the transaction input at `index`
    """

    index: int


@dataclass(frozen=True, slots=True)
class ResultArg:
    """
    Refers to the result of the operation at `index`
    """

    index: int


@dataclass(frozen=True, slots=True)
class NestedResultArg:
    """
    Refers to one of the results of an operation that returns multiple values
    """

    index: int
    result_index: int


Argument = GasCoinArg | InputArg | ResultArg | NestedResultArg


def to_argument(data: Any) -> Argument:
    """
    :exception MalformedTxError: if the argument handle is not recognized
    """
    match data:
        case "GasCoin":
            return GasCoinArg()
        case {"Input": int(index)}:
            return InputArg(index)
        case {"Result": int(index)}:
            return ResultArg(index)
        case {"NestedResult": [int(index), int(result_index)]}:
            return NestedResultArg(index, result_index)
        case _:
            raise MalformedTxError(f"unsupported argument: {data!r}")


# === transaction inputs ===


@dataclass(frozen=True, slots=True)
class PureInput:
    """
    Pure (non object) transaction input.

    `value` is JSON decoded: numbers are encoded as strings, vectors as lists.
    When `value_type` is not known, then the value is the BCS encoded bytes.
    """

    value: Any
    value_type: str | None = None


@dataclass(frozen=True, slots=True)
class ObjectInput:
    """
    Object transaction input
    """

    object_id: ObjectId
    # immOrOwnedObject | sharedObject | receiving
    object_type: str
    mutable: bool | None = None


CallArg = PureInput | ObjectInput


def to_call_arg(data: dict[str, Any]) -> CallArg:
    """
    :exception MalformedTxError: if the input type is not recognized
    """
    match data.get("type"):
        case "pure":
            return PureInput(value=data["value"], value_type=data.get("valueType"))
        case "object":
            return ObjectInput(
                object_id=ObjectId(data["objectId"]),
                object_type=data.get("objectType", ""),
                mutable=data.get("mutable"),
            )
        case other:
            raise MalformedTxError(f"unsupported input type: {other!r}")


# === operations ===


@dataclass(frozen=True, slots=True)
class MoveCall:
    """
    Call into a Move function: `{package}::{module}::{function}`
    """

    package: ObjectId
    module: str
    function: str
    type_arguments: tuple[TypeTag, ...] | None = None
    arguments: tuple[Argument, ...] | None = None

    @property
    def target(self) -> str:
        return f"{self.package}::{self.module}::{self.function}"


@dataclass(frozen=True, slots=True)
class SplitCoins:
    """
    Splits new coins off of `coin`, one per amount
    """

    coin: Argument
    amounts: tuple[Argument, ...]


@dataclass(frozen=True, slots=True)
class OtherOperation:
    """
    Any other programmable transaction command, e.g. MergeCoins, TransferObjects, MakeMoveVec, Publish
    """

    kind: str


Operation = MoveCall | SplitCoins | OtherOperation


def _to_arguments(data: Iterable[Any] | None) -> tuple[Argument, ...] | None:
    if data is None:
        return None
    return tuple(to_argument(arg) for arg in data)


def to_operation(data: dict[str, Any]) -> Operation:
    """
    :exception MalformedTxError: if the operation is not a single keyed object
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise MalformedTxError(f"unsupported operation: {data!r}")

    ((kind, body),) = data.items()
    match kind:
        case "MoveCall":
            type_arguments = body.get("type_arguments")
            return MoveCall(
                package=ObjectId(normalize_sui_address(body["package"])),
                module=body["module"],
                function=body["function"],
                type_arguments=tuple(TypeTag(type_arg) for type_arg in type_arguments)
                if type_arguments is not None
                else None,
                arguments=_to_arguments(body.get("arguments")),
            )
        case "SplitCoins":
            coin, amounts = body
            return SplitCoins(coin=to_argument(coin), amounts=tuple(to_argument(amount) for amount in amounts))
        case _:
            return OtherOperation(kind)


# === object changes ===


class ObjectChangeKind(StrEnum):
    """
    Object change types reported in `SuiTransactionBlockResponse.objectChanges`
    """

    CREATED = "created"
    MUTATED = "mutated"
    DELETED = "deleted"
    WRAPPED = "wrapped"
    TRANSFERRED = "transferred"
    PUBLISHED = "published"


@dataclass(frozen=True, slots=True)
class ObjectChange:
    """
    Object side effect of a transaction.

    `object_type` and `object_id` are not reported for every kind, e.g. published packages have no object type.
    """

    kind: ObjectChangeKind
    object_type: str | None
    object_id: ObjectId | None

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "ObjectChange":
        """
        :param data: `objectChanges` entry; required key: 'type'
        """
        object_id = data.get("objectId", data.get("packageId"))
        return cls(
            kind=ObjectChangeKind(data["type"]),
            object_type=data.get("objectType"),
            object_id=ObjectId(object_id) if object_id else None,
        )


def object_changes_from_response(resp: dict[str, Any]) -> tuple[ObjectChange, ...]:
    """
    :param resp: `SuiTransactionBlockResponse` fetched with `showObjectChanges` enabled
    :exception MalformedTxError: if an object change cannot be parsed
    """
    try:
        return tuple(
            ObjectChange.from_data(change) for change in resp.get("objectChanges") or ()
        )
    except (KeyError, TypeError, ValueError, AttributeError) as err:
        raise MalformedTxError(f"malformed objectChanges: {err}") from err


# === transaction ===


@dataclass(frozen=True, slots=True)
class TxData:
    """
    Executed programmable transaction block.

    Operation arguments reference `inputs` by index.
    """

    digest: TxDigest
    # 0 when the node did not report the timestamp
    timestamp_ms: int
    sender: Address
    inputs: tuple[CallArg, ...]
    operations: tuple[Operation, ...]
    object_changes: tuple[ObjectChange, ...] = ()

    @classmethod
    def from_response(cls, resp: dict[str, Any]) -> "TxData":
        """
        :param resp: `SuiTransactionBlockResponse` fetched with `showInput` and `showObjectChanges` enabled
        :exception MalformedTxError: if the response does not contain a programmable transaction
        """
        try:
            data = resp["transaction"]["data"]
            ptb = data["transaction"]
            if ptb.get("kind") != "ProgrammableTransaction":
                raise MalformedTxError(
                    f"not a programmable transaction: {ptb.get('kind')!r}"
                )
            timestamp_ms = resp.get("timestampMs")
            return cls(
                digest=TxDigest(resp["digest"]),
                timestamp_ms=int(timestamp_ms) if timestamp_ms else 0,
                sender=Address(data["sender"]),
                inputs=tuple(to_call_arg(arg) for arg in ptb["inputs"]),
                operations=tuple(to_operation(op) for op in ptb["transactions"]),
                object_changes=object_changes_from_response(resp),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as err:
            raise MalformedTxError(str(err)) from err
