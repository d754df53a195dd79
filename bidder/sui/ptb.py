"""
Builds programmable transactions that call a single Move function, and reads their return values via
`sui_devInspectTransactionBlock`.

Only what is needed to call read-only view functions is supported: pure and owned object inputs, and calls without
type arguments.
"""
import base64
from dataclasses import dataclass
from typing import Sequence

from bidder.sui.bcs import BcsWriter, base58_decode
from bidder.sui.model import Address, ObjectId
from bidder.sui.rpc import SuiRpc, SuiRpcError

# devInspect does not check that the sender owns the object inputs
INSPECT_SENDER = Address("0x" + "77" * 32)

# enum variant indexes
_TX_KIND_PROGRAMMABLE = 0
_CALL_ARG_PURE = 0
_CALL_ARG_OBJECT = 1
_OBJECT_ARG_IMM_OR_OWNED = 0
_COMMAND_MOVE_CALL = 0
_ARGUMENT_INPUT = 1


@dataclass(frozen=True, slots=True)
class ObjectRef:
    """
    Reference to a specific version of an owned or immutable object
    """

    object_id: ObjectId
    version: int
    # base58 encoded
    digest: str


@dataclass(frozen=True, slots=True)
class PureArg:
    """
    BCS encoded pure value
    """

    value: bytes


MoveCallArg = ObjectRef | PureArg


def pure_u64(value: int) -> PureArg:
    return PureArg(BcsWriter().u64(value).getvalue())


def pure_bool(value: bool) -> PureArg:
    return PureArg(BcsWriter().boolean(value).getvalue())


def move_call_tx_kind(
    package: ObjectId,
    module: str,
    function: str,
    args: Sequence[MoveCallArg],
) -> bytes:
    """
    :return: BCS encoded `TransactionKind::ProgrammableTransaction` with a single `MoveCall` command, where each
             argument is passed as its own transaction input
    """
    writer = BcsWriter().uleb128(_TX_KIND_PROGRAMMABLE)

    writer.uleb128(len(args))
    for arg in args:
        match arg:
            case PureArg(value=value):
                writer.uleb128(_CALL_ARG_PURE).byte_vector(value)
            case ObjectRef(object_id=object_id, version=version, digest=digest):
                (
                    writer.uleb128(_CALL_ARG_OBJECT)
                    .uleb128(_OBJECT_ARG_IMM_OR_OWNED)
                    .address(object_id)
                    .u64(version)
                    .byte_vector(base58_decode(digest))
                )

    # commands
    writer.uleb128(1).uleb128(_COMMAND_MOVE_CALL)
    writer.address(package).string(module).string(function)
    # type arguments
    writer.uleb128(0)
    writer.uleb128(len(args))
    for i in range(len(args)):
        writer.uleb128(_ARGUMENT_INPUT).u16(i)

    return writer.getvalue()


def dev_inspect_return_values(
    rpc: SuiRpc,
    tx_kind: bytes,
    sender: Address = INSPECT_SENDER,
) -> list[bytes]:
    """
    Runs the transaction in dev inspect mode and returns the BCS encoded return values of its first command

    :exception SuiRpcError: if the transaction failed to execute
    """
    results = rpc.dev_inspect_transaction_block(
        sender, base64.b64encode(tx_kind).decode()
    )

    status = (results.get("effects") or {}).get("status") or {}
    if results.get("error") or status.get("status") != "success":
        raise SuiRpcError(
            "sui_devInspectTransactionBlock",
            results.get("error") or status.get("error") or "transaction failed",
        )

    try:
        return_values = results["results"][0]["returnValues"]
        return [bytes(value) for value, _type in return_values]
    except (KeyError, IndexError, TypeError, ValueError) as err:
        raise SuiRpcError(
            "sui_devInspectTransactionBlock", f"return values not found: {err}"
        ) from err
