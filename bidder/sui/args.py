"""
Resolves operation argument handles into transaction input values
"""
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from bidder.sui.model import (
    Argument,
    CallArg,
    InputArg,
    ObjectInput,
    PureInput,
    is_decimal_str,
)

# widths of the fixed size Move unsigned integer types in bytes: u8, u16, u32, u64, u128, u256
_UINT_WIDTHS = (1, 2, 4, 8, 16, 32)


@dataclass(slots=True)
class InvalidArgValue(ValueError):
    """
    Raised when a resolved input value does not have the expected shape
    """

    expected: str
    value: Any

    def __str__(self) -> str:
        return f"expected {self.expected}: {self.value!r}"


def resolve_inputs(
    arguments: Iterable[Argument] | None,
    inputs: Sequence[CallArg],
) -> list[CallArg]:
    """
    Dereferences the argument handles that point into the transaction input table.

    Handles that reference prior operation results, or the gas coin, are skipped.
    Out of range input indexes are skipped as well, i.e., the caller is responsible to validate the count.
    """
    if arguments is None:
        return []

    return [
        inputs[arg.index]
        for arg in arguments
        if isinstance(arg, InputArg) and 0 <= arg.index < len(inputs)
    ]


def arg_value(arg: CallArg) -> Any:
    """
    :return: pure value, or the object ID for object inputs
    """
    match arg:
        case PureInput(value=value):
            return value
        case ObjectInput(object_id=object_id):
            return object_id
    raise InvalidArgValue("transaction input", arg)


def _is_byte_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(b, int) and 0 <= b <= 255 for b in value
    )


def arg_str(arg: CallArg) -> str:
    """
    Strings are reported either as text, or as UTF-8 bytes when passed as vector<u8>
    """
    value = arg_value(arg)
    if isinstance(value, str):
        return value
    if _is_byte_list(value):
        try:
            return bytes(value).decode()
        except UnicodeDecodeError as err:
            raise InvalidArgValue("UTF-8 string", value) from err
    raise InvalidArgValue("string", value)


def arg_int(arg: CallArg) -> int:
    """
    Unsigned integers are reported as decimal strings.
    Raw BCS encoded values, i.e., without a known value type, are decoded as little endian.
    """
    value = arg_value(arg)
    match value:
        case bool():
            raise InvalidArgValue("unsigned integer", value)
        case int():
            result = value
        case str() if is_decimal_str(value):
            result = int(value)
        case list() if _is_byte_list(value) and len(value) in _UINT_WIDTHS:
            result = int.from_bytes(bytes(value), "little")
        case _:
            raise InvalidArgValue("unsigned integer", value)

    if result < 0:
        raise InvalidArgValue("unsigned integer", value)
    return result


def arg_str_list(arg: CallArg) -> list[str]:
    """
    vector<address> and vector<ID> inputs
    """
    value = arg_value(arg)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise InvalidArgValue("list of strings", value)
