"""
Locates operations within a transaction's ordered operation sequence
"""
from dataclasses import dataclass
from typing import Callable, Iterable

from bidder.sui.model import MoveCall, ObjectId, Operation, SplitCoins

OperationMatcher = Callable[[Operation], bool]


@dataclass(frozen=True, slots=True)
class CallTarget:
    """
    Matches Move calls into `{package_id}::{module}::{function}`.

    If `function` is None, then any function in the module matches.
    Calls that do not report their argument and type argument lists never match.
    """

    package_id: ObjectId
    module: str
    function: str | None = None

    def __call__(self, operation: Operation) -> bool:
        match operation:
            case MoveCall(
                package=package,
                module=module,
                function=function,
                type_arguments=type_arguments,
                arguments=arguments,
            ):
                return (
                    package == self.package_id
                    and module == self.module
                    and (self.function is None or function == self.function)
                    and arguments is not None
                    and type_arguments is not None
                )
        return False

    def with_function(self, function: str) -> "CallTarget":
        return CallTarget(self.package_id, self.module, function)


def is_split_coins(operation: Operation) -> bool:
    return isinstance(operation, SplitCoins)


def find_call(operations: Iterable[Operation], target: CallTarget) -> MoveCall | None:
    """
    Single match mode: returns the first call matching the target
    """
    for operation in operations:
        if isinstance(operation, MoveCall) and target(operation):
            return operation
    return None


def dual_match(
    operations: Iterable[Operation],
    first: OperationMatcher,
    second: OperationMatcher,
) -> tuple[list[Operation], list[Operation]]:
    """
    Dual pass mode: collects the operations matching either shape in a single scan.

    An operation that matches both shapes is collected by both.

    :return: (operations matching `first`, operations matching `second`), each in operation order
    """
    firsts: list[Operation] = []
    seconds: list[Operation] = []
    for operation in operations:
        if first(operation):
            firsts.append(operation)
        if second(operation):
            seconds.append(operation)
    return firsts, seconds
