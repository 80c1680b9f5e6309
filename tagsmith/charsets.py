# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Text encodings of ID3v2 frames.

Every frame that carries text starts with an encoding indicator byte:

    $00  ISO-8859-1, strings terminated by $00
    $01  UTF-16 with byte order mark, strings terminated by $00 00
    $02  UTF-16BE without byte order mark, terminated by $00 00
    $03  UTF-8, strings terminated by $00

The Encoding objects below know their indicator, their terminator and how
to convert between bytes and str.  UTF-16 is always written little-endian
behind an FF FE byte order mark so that the output does not depend on the
host byte order.
"""

import codecs

from tagsmith.errors import *

class Encoding:
    def __init__(self, indicator, name, terminator, codec=None):
        self.indicator = indicator
        self.name = name
        self.terminator = terminator
        self._codec = codec if codec else name

    @property
    def width(self):
        "Width of the terminator (and of the code unit scan step) in bytes."
        return len(self.terminator)

    def decode(self, data):
        try:
            return bytes(data).decode(self._codec)
        except UnicodeDecodeError as e:
            raise DecodeError("Invalid {0} data: {1}".format(self.name, e)) from e

    def encode(self, text):
        return text.encode(self._codec)

    def __repr__(self):
        return "<Encoding {0} ({1})>".format(self.indicator, self.name)

class _UTF16Encoding(Encoding):
    "UTF-16 with a byte order mark."
    def __init__(self):
        super().__init__(1, "utf-16", b"\x00\x00", "utf-16-le")

    def decode(self, data):
        data = bytes(data)
        codec = "utf-16-le"
        if data.startswith(codecs.BOM_UTF16_LE):
            data = data[2:]
        elif data.startswith(codecs.BOM_UTF16_BE):
            codec = "utf-16-be"
            data = data[2:]
        try:
            return data.decode(codec)
        except UnicodeDecodeError as e:
            raise DecodeError("Invalid {0} data: {1}".format(self.name, e)) from e

    def encode(self, text):
        return codecs.BOM_UTF16_LE + text.encode("utf-16-le")

LATIN1 = Encoding(0, "iso-8859-1", b"\x00")
UTF16 = _UTF16Encoding()
UTF16BE = Encoding(2, "utf-16-be", b"\x00\x00")
UTF8 = Encoding(3, "utf-8", b"\x00")

encodings = (LATIN1, UTF16, UTF16BE, UTF8)

# Try these in order when a frame's text does not fit its own encoding
preferred_encodings = (LATIN1, UTF16)

def resolve_indicator(indicator):
    """Return the Encoding named by an indicator byte.

    Unknown indicators fall back to ISO-8859-1; they must not abort the
    parsing of an otherwise valid tag.
    """
    if 0 <= indicator < len(encodings):
        return encodings[indicator]
    return LATIN1

def _normalize_name(name):
    return name.lower().replace("-", "").replace("_", "")

def get_encoding(value):
    "Convert an Encoding, an indicator or an encoding name to an Encoding."
    if isinstance(value, Encoding):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(encodings):
            return encodings[value]
        raise ValueError("Invalid encoding 0x{0:X}".format(value))
    if isinstance(value, str):
        name = _normalize_name(value)
        for enc in encodings:
            if _normalize_name(enc.name) == name:
                return enc
        if name in ("latin1", "ascii"):
            return LATIN1
        raise ValueError("Unknown encoding {0!r}".format(value))
    raise TypeError("Not an encoding: {0!r}".format(value))

def decode(data, encoding):
    return get_encoding(encoding).decode(data)

def encode(text, encoding):
    return get_encoding(encoding).encode(text)

def terminator_width(encoding):
    return get_encoding(encoding).width

def find_terminator(data, start, width):
    """Return the index of the first terminator at or after start.

    The scan advances in steps of width bytes and matches width zero bytes,
    so a UTF-16 terminator is only recognized on a code unit boundary.
    Returns -1 if data has no terminator after start.
    """
    end = len(data) - width
    i = start
    while i <= end:
        if all(b == 0 for b in data[i:i + width]):
            return i
        i += width
    return -1

def strip_terminators(data, width):
    "Remove trailing terminators (and null padding) from a field."
    end = len(data)
    while end >= width and all(b == 0 for b in data[end - width:end]):
        end -= width
    return data[:end]

def sniff_encoding(data):
    """Guess an encoding from a byte order mark.

    Only used as a fallback when text fails to decode under the encoding
    declared by its frame.  Returns None if data starts with no BOM.
    """
    if data.startswith(codecs.BOM_UTF16_LE) or data.startswith(codecs.BOM_UTF16_BE):
        return UTF16
    return None
