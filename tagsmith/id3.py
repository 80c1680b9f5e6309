# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Fixed tables of the ID3v2.3/ID3v2.4 standards."""

import re

# Frame ids defined by ID3v2.3 and ID3v2.4.  Frames with other ids are
# still read and written, as opaque data.
STANDARD_FRAMES = frozenset((
    "AENC", "APIC", "ASPI", "COMM", "COMR", "TSIZ", "ENCR", "EQUA", "EQU2",
    "ETCO", "GEOB", "GRID", "LINK", "MCDI", "MLLT", "OWNE", "PCNT", "POPM",
    "POSS", "PRIV", "RBUF", "RVAD", "RVA2", "RVRB", "SEEK", "SIGN", "SYLT",
    "SYTC", "TALB", "TBPM", "TCOM", "TCON", "TCOP", "TDEN", "TDLY", "TORY",
    "TDOR", "TDAT", "TDRC", "TRDA", "TIME", "TYER", "TDRL", "TDTG", "TENC",
    "TEXT", "TFLT", "IPLS", "TIPL", "TIT1", "TIT2", "TIT3", "TKEY", "TLAN",
    "TLEN", "TMCL", "TMED", "TMOO", "TOAL", "TOFN", "TOLY", "TOPE", "TOWN",
    "TPE1", "TPE2", "TPE3", "TPE4", "TPOS", "TPRO", "TPUB", "TRCK", "TRSN",
    "TRSO", "TSOA", "TSOP", "TSOT", "TSRC", "TSSE", "TSST", "TXXX", "UFID",
    "USER", "USLT", "WCOM", "WCOP", "WOAF", "WOAR", "WOAS", "WORS", "WPAY",
    "WPUB", "WXXX"))

# Attached picture (APIC) types
PICTURE_TYPES = (
    "Other", "32x32 pixels file icon", "Other file icon", "Cover (front)",
    "Cover (back)", "Leaflet page", "Media", "Lead artist/lead performer/soloist",
    "Artist/performer", "Conductor", "Band/Orchestra", "Composer",
    "Lyricist/text writer", "Recording Location", "During recording",
    "During performance", "Movie/video screen capture",
    "A bright coloured fish", "Illustration", "Band/artist logo",
    "Publisher/Studio logo")

# Allow a single space at end of four-character ids
# Some programs (e.g. iTunes 8.2) generate such frames when converting
# from 2.2 to 2.3/2.4 tags.
_frame_id_pattern = re.compile("[A-Z][A-Z0-9]{2}[A-Z0-9 ]")

def is_frame_id(frameid):
    "Return true if frameid is syntactically valid as an ID3v2.3/2.4 frame id."
    return isinstance(frameid, str) and _frame_id_pattern.fullmatch(frameid) is not None

def is_standard_frameid(frameid):
    "Return true if frameid is one of the standard ID3v2.3/2.4 frame ids."
    return frameid in STANDARD_FRAMES

def is_writable_frame_id(frameid):
    """Return true if frameid fits in a frame header.

    This is looser than is_frame_id: any four ISO-8859-1 characters do, so
    that frames read from a file can always be written back.  A leading
    zero byte would read as padding, so it is refused.
    """
    if not isinstance(frameid, str):
        return False
    try:
        data = frameid.encode("iso-8859-1")
    except UnicodeEncodeError:
        return False
    return len(data) == 4 and data[0] != 0
