import unittest

from bidder.sui.bcs import BcsError, BcsReader, BcsWriter, base58_decode
from tests.test_support import BidderTestCase


class Base58DecodeTestCase(BidderTestCase):
    def test_base58_decode(self) -> None:
        self.assertEqual(b"\x00\x00\x01", base58_decode("112"))
        self.assertEqual(b"\x00" * 31 + b"\x01", base58_decode("1" * 31 + "2"))
        # 58 == 0x3a
        self.assertEqual(b"\x3a", base58_decode("21"))

    def test_invalid(self) -> None:
        for invalid in ("", "0OIl", "abc!"):
            with self.subTest(invalid=invalid):
                with self.assertRaises(BcsError):
                    base58_decode(invalid)


class BcsWriterTestCase(BidderTestCase):
    def test_primitives(self) -> None:
        self.assertEqual(b"\x07", BcsWriter().u8(7).getvalue())
        self.assertEqual(b"\x01\x02", BcsWriter().u16(0x0201).getvalue())
        self.assertEqual(b"\xf4\x01" + b"\x00" * 6, BcsWriter().u64(500).getvalue())
        self.assertEqual(b"\x01\x00", BcsWriter().boolean(True).boolean(False).getvalue())

    def test_uleb128(self) -> None:
        for value, expected in (
            (0, b"\x00"),
            (127, b"\x7f"),
            (128, b"\x80\x01"),
            (300, b"\xac\x02"),
            (16384, b"\x80\x80\x01"),
        ):
            with self.subTest(value=value):
                self.assertEqual(expected, BcsWriter().uleb128(value).getvalue())

        with self.assertRaises(BcsError):
            BcsWriter().uleb128(-1)

    def test_vectors(self) -> None:
        self.assertEqual(b"\x03abc", BcsWriter().byte_vector(b"abc").getvalue())
        self.assertEqual(b"\x04user", BcsWriter().string("user").getvalue())

    def test_address_is_not_length_prefixed(self) -> None:
        self.assertEqual(b"\x00" * 31 + b"\x02", BcsWriter().address("0x2").getvalue())


class BcsReaderTestCase(BidderTestCase):
    def test_read(self) -> None:
        data = (
            BcsWriter()
            .u8(7)
            .u64(2**64 - 1)
            .boolean(True)
            .uleb128(300)
            .address("0xaa")
            .getvalue()
        )
        reader = BcsReader(data)
        self.assertEqual(7, reader.u8())
        self.assertEqual(2**64 - 1, reader.u64())
        self.assertTrue(reader.boolean())
        self.assertEqual(300, reader.uleb128())
        self.assertEqual("0x" + "0" * 62 + "aa", reader.address())
        self.assertEqual(0, reader.remaining)
        reader.done()

    def test_vector(self) -> None:
        reader = BcsReader(BcsWriter().uleb128(3).u64(1).u64(2).u64(3).getvalue())
        self.assertEqual([1, 2, 3], reader.vector(BcsReader.u64))

    def test_unexpected_end_of_data(self) -> None:
        with self.assertRaises(BcsError):
            BcsReader(b"\x01\x02").u64()
        with self.assertRaises(BcsError):
            # vector of 2 u64 values, with only one present
            BcsReader(BcsWriter().uleb128(2).u64(1).getvalue()).vector(BcsReader.u64)

    def test_invalid_bool(self) -> None:
        with self.assertRaises(BcsError):
            BcsReader(b"\x02").boolean()

    def test_uleb128_overflow(self) -> None:
        with self.assertRaises(BcsError):
            BcsReader(b"\xff" * 6).uleb128()

    def test_trailing_bytes(self) -> None:
        reader = BcsReader(b"\x01\x00")
        reader.boolean()
        with self.assertRaises(BcsError):
            reader.done()


if __name__ == "__main__":
    unittest.main()
