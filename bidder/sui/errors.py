"""
Parses Move abort errors reported by Sui when a transaction fails
"""
import re
from dataclasses import dataclass

from bidder.sui.model import ObjectId, normalize_sui_address

# MoveAbort(MoveLocation { module: ModuleId { address: 0x..., name: Identifier("auction") }, function: 12,
#   instruction: 37, function_name: Some("anyone_bids") }, 5003) in command 2
_MOVE_ABORT = re.compile(
    r"MoveAbort\(MoveLocation \{ module: ModuleId \{ address: (?P<package>(?:0x)?[0-9a-fA-F]+), "
    r"name: Identifier\(\"(?P<module>\w+)\"\) \}.*?"
    r"function_name: Some\(\"(?P<function>\w+)\"\) \}, (?P<code>\d+)\)"
    r"(?: in command (?P<command>\d+))?"
)


@dataclass(frozen=True, slots=True)
class TxError:
    """
    Move abort location and error code
    """

    package_id: ObjectId
    module: str
    function: str
    code: int
    # index of the transaction command that aborted
    command: int | None = None


def parse_tx_error(message: str) -> TxError | None:
    """
    :return: None if the message does not describe a Move abort
    """
    match = _MOVE_ABORT.search(message)
    if match is None:
        return None

    command = match.group("command")
    return TxError(
        package_id=ObjectId(normalize_sui_address(match.group("package"))),
        module=match.group("module"),
        function=match.group("function"),
        code=int(match.group("code")),
        command=int(command) if command is not None else None,
    )
