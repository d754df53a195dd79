"""
Auctioned item
"""

from dataclasses import dataclass, field
from typing import Any

from bidder.sui.model import Address, ObjectId


@dataclass(frozen=True, slots=True)
class SuiItem:
    """
    Any Sui object that can be auctioned, typically an NFT.

    `name`, `description` and `image_url` come from the object's Display, falling back to its fields.
    """

    # pylint: disable=too-many-instance-attributes

    id: ObjectId  # pylint: disable=invalid-name
    type: str
    # None for shared and immutable objects
    owner: Address | None
    has_public_transfer: bool
    name: str
    description: str
    image_url: str
    display: dict[str, Any] = field(default_factory=dict)
    fields: dict[str, Any] = field(default_factory=dict)
