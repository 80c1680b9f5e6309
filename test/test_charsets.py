# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import unittest

from tagsmith.errors import *
from tagsmith.charsets import *

class CharsetsTestCase(unittest.TestCase):
    def testResolveIndicator(self):
        self.assertIs(resolve_indicator(0), LATIN1)
        self.assertIs(resolve_indicator(1), UTF16)
        self.assertIs(resolve_indicator(2), UTF16BE)
        self.assertIs(resolve_indicator(3), UTF8)
        # Unknown indicators never fail
        self.assertIs(resolve_indicator(4), LATIN1)
        self.assertIs(resolve_indicator(0xFF), LATIN1)

    def testTerminatorWidth(self):
        self.assertEqual(terminator_width(LATIN1), 1)
        self.assertEqual(terminator_width(UTF16), 2)
        self.assertEqual(terminator_width(UTF16BE), 2)
        self.assertEqual(terminator_width(UTF8), 1)
        self.assertEqual(terminator_width(3), 1)

    def testGetEncoding(self):
        self.assertIs(get_encoding("utf-8"), UTF8)
        self.assertIs(get_encoding("UTF-16BE"), UTF16BE)
        self.assertIs(get_encoding("latin-1"), LATIN1)
        self.assertIs(get_encoding(1), UTF16)
        self.assertIs(get_encoding(UTF16), UTF16)
        self.assertRaises(ValueError, get_encoding, 4)
        self.assertRaises(ValueError, get_encoding, "klingon")
        self.assertRaises(TypeError, get_encoding, 1.5)

    def testLatin1(self):
        self.assertEqual(encode("Caf\xe9", LATIN1), b"Caf\xe9")
        self.assertEqual(decode(b"Caf\xe9", LATIN1), "Caf\xe9")
        self.assertRaises(UnicodeEncodeError, encode, "ő", LATIN1)

    def testUTF8(self):
        self.assertEqual(encode("ő", UTF8), b"\xc5\x91")
        self.assertEqual(decode(b"\xc5\x91", UTF8), "ő")
        self.assertRaises(DecodeError, decode, b"\xc5", UTF8)

    def testUTF16WithBOM(self):
        self.assertEqual(encode("ab", UTF16), b"\xff\xfea\x00b\x00")
        self.assertEqual(decode(b"\xff\xfea\x00b\x00", UTF16), "ab")
        self.assertEqual(decode(b"\xfe\xff\x00a\x00b", UTF16), "ab")
        # Without a BOM, little-endian is assumed
        self.assertEqual(decode(b"a\x00b\x00", UTF16), "ab")
        self.assertEqual(decode(b"\xff\xfe", UTF16), "")
        self.assertRaises(DecodeError, decode, b"\xff\xfea", UTF16)

    def testUTF16BE(self):
        self.assertEqual(encode("ab", UTF16BE), b"\x00a\x00b")
        self.assertEqual(decode(b"\x00a\x00b", UTF16BE), "ab")

    def testDecodeErrorIsFrameError(self):
        self.assertTrue(issubclass(DecodeError, FrameError))
        self.assertTrue(issubclass(DecodeError, ValueError))

    def testFindTerminator(self):
        self.assertEqual(find_terminator(b"abc\x00def", 0, 1), 3)
        self.assertEqual(find_terminator(b"abc\x00def\x00", 4, 1), 7)
        self.assertEqual(find_terminator(b"\x00abc", 0, 1), 0)
        self.assertEqual(find_terminator(b"abc", 0, 1), -1)
        self.assertEqual(find_terminator(b"", 0, 1), -1)
        self.assertEqual(find_terminator(b"abc", 5, 1), -1)

    def testFindTerminatorWide(self):
        # "aĀ" in UTF-16LE has a zero byte pair across a code unit boundary
        data = b"a\x00\x00\x01\x00\x00z\x00"
        self.assertEqual(find_terminator(data, 0, 2), 4)
        self.assertEqual(find_terminator(b"a\x00b\x00", 0, 2), -1)
        # Odd trailing byte is never matched
        self.assertEqual(find_terminator(b"a\x00\x00", 0, 2), -1)

    def testStripTerminators(self):
        self.assertEqual(strip_terminators(b"abc\x00", 1), b"abc")
        self.assertEqual(strip_terminators(b"abc\x00\x00\x00", 1), b"abc")
        self.assertEqual(strip_terminators(b"a\x00\x00\x00", 2), b"a\x00")
        self.assertEqual(strip_terminators(b"abc", 1), b"abc")
        self.assertEqual(strip_terminators(b"", 2), b"")

    def testSniffEncoding(self):
        self.assertIs(sniff_encoding(b"\xff\xfea\x00"), UTF16)
        self.assertIs(sniff_encoding(b"\xfe\xff\x00a"), UTF16)
        self.assertIsNone(sniff_encoding(b"abc"))

suite = unittest.TestLoader().loadTestsFromTestCase(CharsetsTestCase)

if __name__ == "__main__":
    unittest.main(defaultTest="suite")
