# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Integer and byte sequence conversions used by the ID3v2 wire format.

Two integer formats appear in ID3v2 headers: the tag size is a syncsafe
integer (7 bits per byte, top bit always clear), while frame sizes are plain
big-endian integers.  The two must not be mixed up.
"""

from warnings import warn

from tagsmith.errors import *

# Syncsafe integers carry 7 bits per byte
SYNCSAFE_BITS = 7
SYNCSAFE_WIDTH = 4
# Largest value of a 4-byte syncsafe field, i.e. the largest tag size
SYNCSAFE_MAX = (1 << (SYNCSAFE_BITS * SYNCSAFE_WIDTH)) - 1

class Unsync:
    """The ID3v2 unsynchronisation scheme.

    A zero byte is inserted after every $FF that is followed by $00 or by a
    byte with its top three bits set, and after a $FF at the very end.  This
    keeps MPEG sync patterns out of the tag.
    """
    @staticmethod
    def gen_decode(iterable):
        "Generate the bytes of iterable with inserted zero bytes removed."
        after_ff = False
        for b in iterable:
            if after_ff and b & 0xE0:
                warn("Invalid unsynchronised data", TagWarning)
            if not (after_ff and b == 0x00):
                yield b
            after_ff = (b == 0xFF)

    @staticmethod
    def gen_encode(iterable):
        "Generate the bytes of iterable with zero bytes inserted where needed."
        after_ff = False
        for b in iterable:
            if after_ff and (b == 0x00 or b & 0xE0):
                yield 0x00
            yield b
            after_ff = (b == 0xFF)
        if after_ff:
            yield 0x00

    @staticmethod
    def decode(data):
        return bytes(Unsync.gen_decode(data))

    @staticmethod
    def encode(data):
        return bytes(Unsync.gen_encode(data))

class Syncsafe:
    """Conversion to/from syncsafe integers.

    Values that do not fit into the requested width are refused with
    ValueError instead of being truncated.
    """
    @staticmethod
    def decode(data):
        value = 0
        for b in data:
            if b & 0x80:
                # Some taggers (old iTunes) write plain integers here
                raise ValueError("Invalid syncsafe integer: {0!r}".format(bytes(data)))
            value = (value << SYNCSAFE_BITS) | b
        return value

    @staticmethod
    def encode(i, *, width=SYNCSAFE_WIDTH):
        """Encode a nonnegative integer in syncsafe format.

        When width > 0, the result is exactly width bytes long.
        When width < 0, it is at least abs(width) bytes long.
        """
        assert width != 0
        if i < 0:
            raise ValueError("Negative value: {0}".format(i))
        length = abs(width)
        while i >> (SYNCSAFE_BITS * length):
            if width > 0:
                raise ValueError("{0} does not fit in {1} syncsafe bytes".format(i, width))
            length += 1
        return bytes((i >> (SYNCSAFE_BITS * k)) & 0x7F
                     for k in reversed(range(length)))

class Int8:
    """Conversion to/from plain big-endian integers of any length."""

    @staticmethod
    def decode(data):
        return int.from_bytes(bytes(data), "big")

    @staticmethod
    def encode(i, *, width=-1):
        """Encode a nonnegative integer as big-endian bytes.

        width has the same meaning as in Syncsafe.encode.
        """
        assert width != 0
        if i < 0:
            raise ValueError("Nonnegative integer expected")
        length = max((i.bit_length() + 7) // 8, abs(width))
        if width > 0 and length > width:
            raise ValueError("{0} does not fit in {1} bytes".format(i, width))
        return i.to_bytes(length, "big")
