"""
Correlates transaction object changes with decoded auction calls.

Objects are matched by type:
- `{package}::auction::Auction<T>` for any coin type T
- `{package}::user::User`
"""
from typing import Collection, Iterable

from bidder.apps.auction import AUCTION_MODULE, USER_MODULE
from bidder.sui.model import ObjectChange, ObjectChangeKind, ObjectId

CREATED = frozenset({ObjectChangeKind.CREATED})
MUTATED = frozenset({ObjectChangeKind.MUTATED})
CREATED_OR_MUTATED = frozenset({ObjectChangeKind.CREATED, ObjectChangeKind.MUTATED})


def auction_type_prefix(package_id: ObjectId) -> str:
    return f"{package_id}::{AUCTION_MODULE}::Auction<"


def user_type(package_id: ObjectId) -> str:
    return f"{package_id}::{USER_MODULE}::User"


def find_object_change(
    object_changes: Iterable[ObjectChange],
    kinds: Collection[ObjectChangeKind],
    type_prefix: str,
) -> ObjectChange | None:
    """
    :return: the first object change of one of the `kinds` whose object type starts with `type_prefix`
    """
    for change in object_changes:
        if (
            change.kind in kinds
            and change.object_type is not None
            and change.object_type.startswith(type_prefix)
        ):
            return change
    return None


def extract_auction_obj_created(
    object_changes: Iterable[ObjectChange], package_id: ObjectId
) -> ObjectChange | None:
    return find_object_change(object_changes, CREATED, auction_type_prefix(package_id))


def extract_auction_obj_mutated(
    object_changes: Iterable[ObjectChange], package_id: ObjectId
) -> ObjectChange | None:
    return find_object_change(object_changes, MUTATED, auction_type_prefix(package_id))


def extract_auction_obj_change(
    object_changes: Iterable[ObjectChange], package_id: ObjectId
) -> ObjectChange | None:
    """
    Created or mutated Auction object.

    Both the change kind and the object type must match: a created object of any other type is not an auction.
    """
    return find_object_change(
        object_changes, CREATED_OR_MUTATED, auction_type_prefix(package_id)
    )


def extract_user_obj_change(
    object_changes: Iterable[ObjectChange], package_id: ObjectId
) -> ObjectChange | None:
    """
    Created or mutated User object. The User type is not generic, thus the type must match exactly.
    """
    expected_type = user_type(package_id)
    for change in object_changes:
        if change.kind in CREATED_OR_MUTATED and change.object_type == expected_type:
            return change
    return None
