# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Tag and frame flag bits.

Flags are handled as sets of names; the tables below map each name to
its bit in the corresponding flag byte.
"""

from warnings import warn

from tagsmith.errors import *

TAG_UNSYNCHRONISED = 0x80
TAG_EXTENDED_HEADER = 0x40
TAG_EXPERIMENTAL = 0x20
TAG_FOOTER = 0x10

FRAME_STATUS_TAG_ALTER_PRESERVATION = 0x80
FRAME_STATUS_FILE_ALTER_PRESERVATION = 0x40
FRAME_STATUS_READ_ONLY = 0x20

FRAME_FORMAT_COMPRESSED = 0x80
FRAME_FORMAT_ENCRYPTED = 0x40
FRAME_FORMAT_GROUPING = 0x20

tag_flags = (("unsynchronisation", TAG_UNSYNCHRONISED),
             ("extended_header", TAG_EXTENDED_HEADER),
             ("experimental", TAG_EXPERIMENTAL),
             ("footer", TAG_FOOTER))

frame_status_flags = (("tag_alter_preservation", FRAME_STATUS_TAG_ALTER_PRESERVATION),
                      ("file_alter_preservation", FRAME_STATUS_FILE_ALTER_PRESERVATION),
                      ("read_only", FRAME_STATUS_READ_ONLY))

frame_format_flags = (("compressed", FRAME_FORMAT_COMPRESSED),
                      ("encrypted", FRAME_FORMAT_ENCRYPTED),
                      ("grouping", FRAME_FORMAT_GROUPING))

# Frames with these flags have payloads we don't interpret
opaque_frame_flags = frozenset(("compressed", "encrypted", "grouping"))

def has_flag(value, mask):
    return value & mask == mask

def split_flags(value, table):
    "Return (names, bits): the flag names set in value and its unknown bits."
    names = set(name for (name, mask) in table if has_flag(value, mask))
    known = 0
    for (name, mask) in table:
        known |= mask
    return (names, value & ~known & 0xFF)

def decode_flags(value, table, category=TagWarning):
    "Return the set of flag names set in value; warn about unknown bits."
    (names, unknown) = split_flags(value, table)
    if unknown:
        warn("Unknown flag bits: 0x{0:02X}".format(unknown), category)
    return names

def encode_flags(names, table):
    "Return the flag byte representing the set of names in table."
    masks = dict(table)
    value = 0
    for name in names:
        if name not in masks:
            raise ValueError("Unknown flag: {0}".format(name))
        value |= masks[name]
    return value

def decode_frame_flags(flags1, flags2):
    """Return (names, extra) for the two flag bytes of a frame header.

    extra is a (flags1, flags2) pair holding the bits that have no name
    in the tables above.  They are kept so that the frame can be written
    back with the same flag bytes.
    """
    (status, extra1) = split_flags(flags1, frame_status_flags)
    (format, extra2) = split_flags(flags2, frame_format_flags)
    if extra1 or extra2:
        warn("Unknown frame flag bits: 0x{0:02X} 0x{1:02X}".format(extra1, extra2),
             FrameWarning)
    return (status | format, (extra1, extra2))

def encode_frame_flags(names, extra=(0, 0)):
    "Return (flags1, flags2) for a set of frame flag names and extra raw bits."
    status = set(name for name in names if name in dict(frame_status_flags))
    format = set(names) - status
    return (encode_flags(status, frame_status_flags) | extra[0],
            encode_flags(format, frame_format_flags) | extra[1])
