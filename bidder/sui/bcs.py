"""
Binary Canonical Serialization (BCS)

Only the primitives needed to build Move call transactions and to read Move function return values are provided.
https://github.com/diem/bcs
"""
import struct
from typing import Callable, TypeVar

from bidder.sui.model import Address, SUI_ADDRESS_LENGTH, normalize_sui_address

T = TypeVar("T")

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_MAP = {ch: idx for idx, ch in enumerate(BASE58_ALPHABET)}

ADDRESS_BYTES = SUI_ADDRESS_LENGTH // 2


class BcsError(ValueError):
    """
    Raised when the bytes cannot be decoded as the expected BCS value
    """


def base58_decode(value: str) -> bytes:
    """
    Sui object and transaction digests are base58 encoded (no checksum)

    :exception BcsError: if the value contains a non base58 character
    """
    if not value:
        raise BcsError("empty base58 string")

    zero_prefix = len(value) - len(value.lstrip("1"))
    result = 0
    for ch in value:
        try:
            digit = _BASE58_MAP[ch]
        except KeyError as err:
            raise BcsError(f"invalid base58 character: {ch!r}") from err
        result = result * 58 + digit

    decoded = result.to_bytes((result.bit_length() + 7) // 8, "big") if result else b""
    return b"\x00" * zero_prefix + decoded


class BcsWriter:
    """
    Appends BCS encoded values to a buffer
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def u8(self, value: int) -> "BcsWriter":
        self._buffer += struct.pack("<B", value)
        return self

    def u16(self, value: int) -> "BcsWriter":
        self._buffer += struct.pack("<H", value)
        return self

    def u64(self, value: int) -> "BcsWriter":
        self._buffer += struct.pack("<Q", value)
        return self

    def boolean(self, value: bool) -> "BcsWriter":
        return self.u8(1 if value else 0)

    def uleb128(self, value: int) -> "BcsWriter":
        """
        Lengths and enum variant indexes
        """
        if value < 0:
            raise BcsError(f"uleb128 value must not be negative: {value}")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buffer.append(byte | 0x80)
            else:
                self._buffer.append(byte)
                return self

    def raw(self, value: bytes) -> "BcsWriter":
        self._buffer += value
        return self

    def byte_vector(self, value: bytes) -> "BcsWriter":
        """
        vector<u8>: length prefixed
        """
        return self.uleb128(len(value)).raw(value)

    def string(self, value: str) -> "BcsWriter":
        return self.byte_vector(value.encode())

    def address(self, value: str) -> "BcsWriter":
        """
        Addresses and object IDs are encoded as 32 bytes, without a length prefix
        """
        return self.raw(bytes.fromhex(normalize_sui_address(value)[2:]))


class BcsReader:
    """
    Reads BCS encoded values from a buffer
    """

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise BcsError(
                f"unexpected end of data: need {size} bytes at offset {self._offset}, {self.remaining} remaining"
            )
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def u8(self) -> int:
        return self._take(1)[0]

    def u64(self) -> int:
        return struct.unpack("<Q", self._take(8))[0]

    def boolean(self) -> bool:
        value = self.u8()
        if value > 1:
            raise BcsError(f"invalid bool: {value}")
        return value == 1

    def uleb128(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.u8()
            result |= (byte & 0x7F) << shift
            if byte & 0x80 == 0:
                return result
            shift += 7
            if shift > 28:
                raise BcsError("uleb128 length overflows u32")

    def address(self) -> Address:
        return Address("0x" + self._take(ADDRESS_BYTES).hex())

    def vector(self, read_item: Callable[["BcsReader"], T]) -> list[T]:
        return [read_item(self) for _ in range(self.uleb128())]

    def done(self):
        """
        :exception BcsError: if there are unread trailing bytes
        """
        if self.remaining:
            raise BcsError(f"{self.remaining} trailing bytes")