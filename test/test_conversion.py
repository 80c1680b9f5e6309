# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import unittest
import random

from tagsmith.conversion import *

class SyncsafeTestCase(unittest.TestCase):
    def testKnownValues(self):
        self.assertEqual(Syncsafe.encode(0), b"\x00\x00\x00\x00")
        self.assertEqual(Syncsafe.encode(127), b"\x00\x00\x00\x7F")
        self.assertEqual(Syncsafe.encode(128), b"\x00\x00\x01\x00")
        self.assertEqual(Syncsafe.encode(257), b"\x00\x00\x02\x01")
        self.assertEqual(Syncsafe.encode((1 << 28) - 1), b"\x7F\x7F\x7F\x7F")
        self.assertEqual(Syncsafe.decode(b"\x00\x00\x02\x01"), 257)
        self.assertEqual(Syncsafe.decode(b"\x7F\x7F\x7F\x7F"), (1 << 28) - 1)

    def testTopBitsClear(self):
        for value in (0x0FFFFFFF, 0x0AAAAAAA, 0x05555555, 1 << 21):
            self.assertTrue(all(b < 0x80 for b in Syncsafe.encode(value)))

    def testRoundTrip(self):
        values = [0, 1, 127, 128, 16383, 16384, (1 << 28) - 1]
        values.extend(random.randrange(1 << 28) for i in range(200))
        for value in values:
            self.assertEqual(Syncsafe.decode(Syncsafe.encode(value)), value)

    def testOutOfRange(self):
        self.assertRaises(ValueError, Syncsafe.encode, 1 << 28)
        self.assertRaises(ValueError, Syncsafe.encode, -1)
        self.assertRaises(ValueError, Syncsafe.decode, b"\x00\x00\x80\x00")

    def testMaximum(self):
        self.assertEqual(SYNCSAFE_MAX, (1 << 28) - 1)
        self.assertEqual(Syncsafe.encode(SYNCSAFE_MAX), b"\x7F\x7F\x7F\x7F")
        self.assertRaises(ValueError, Syncsafe.encode, SYNCSAFE_MAX + 1)
        self.assertEqual(Syncsafe.encode(SYNCSAFE_MAX + 1, width=-4), b"\x01\x00\x00\x00\x00")

    def testWidth(self):
        self.assertEqual(Syncsafe.encode(1, width=5), b"\x00\x00\x00\x00\x01")
        self.assertEqual(Syncsafe.encode(1 << 28, width=-4), b"\x01\x00\x00\x00\x00")

class Int8TestCase(unittest.TestCase):
    def testPlainBigEndian(self):
        # Frame sizes are plain integers, not syncsafe
        self.assertEqual(Int8.encode(257, width=4), b"\x00\x00\x01\x01")
        self.assertEqual(Int8.decode(b"\x00\x00\x01\x01"), 257)
        self.assertEqual(Int8.decode(b"\x00\x00\x00\x80"), 128)
        self.assertEqual(Int8.encode(0, width=4), b"\x00\x00\x00\x00")

    def testOverflow(self):
        self.assertRaises(ValueError, Int8.encode, 1 << 32, width=4)
        self.assertRaises(ValueError, Int8.encode, -5, width=4)

class UnsyncTestCase(unittest.TestCase):
    def testEncode(self):
        self.assertEqual(Unsync.encode(b"\xFF\xE0"), b"\xFF\x00\xE0")
        self.assertEqual(Unsync.encode(b"\xFF\x00"), b"\xFF\x00\x00")
        self.assertEqual(Unsync.encode(b"\xFF\x12"), b"\xFF\x12")
        self.assertEqual(Unsync.encode(b"abc\xFF"), b"abc\xFF\x00")

    def testDecode(self):
        self.assertEqual(Unsync.decode(b"\xFF\x00\xE0"), b"\xFF\xE0")
        self.assertEqual(Unsync.decode(b"\xFF\x00\x00"), b"\xFF\x00")

    def testRandomData(self):
        data = bytes(random.choice((0x00, 0xFF, 0xE0, 0x41)) for i in range(1000))
        self.assertEqual(Unsync.decode(Unsync.encode(data)), data)

suite = unittest.TestSuite()
suite.addTest(unittest.TestLoader().loadTestsFromTestCase(SyncsafeTestCase))
suite.addTest(unittest.TestLoader().loadTestsFromTestCase(Int8TestCase))
suite.addTest(unittest.TestLoader().loadTestsFromTestCase(UnsyncTestCase))

if __name__ == "__main__":
    unittest.main(defaultTest="suite")
