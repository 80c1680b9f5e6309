# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Reading and writing ID3v2 tags.

An ID3v2 tag is a 10-byte header followed by a sequence of frames, each
with its own 10-byte header:

    "ID3" $major $minor $flags $size(4, syncsafe)
    $id(4) $size(4, big-endian) $flags1 $flags2 payload...

parse() turns a file into a TagHeader and a list of frame objects;
assemble() and rewrite() produce new tag and file images from a list of
frames.  Nothing here writes to disk except Tag.write and delete_tag.
"""

import collections
import collections.abc
from warnings import warn

from tagsmith.errors import *
from tagsmith.conversion import Syncsafe, Int8, Unsync, SYNCSAFE_MAX
from tagsmith.flags import (tag_flags, decode_flags, encode_flags,
                            decode_frame_flags, encode_frame_flags)
import tagsmith.frames as Frames
import tagsmith.id3 as id3
import tagsmith.fileutil as fileutil

HEADER_SIZE = 10
FRAME_HEADER_SIZE = 10

_supported_versions = (3, 4)

# Flags that are never written back; we don't produce extended headers or footers
_unwritten_tag_flags = frozenset(("extended_header", "footer"))

FrameRecord = collections.namedtuple("FrameRecord", "frameid size flags1 flags2 data")

class TagHeader:
    "The 10-byte ID3v2 tag header."
    def __init__(self, major_version=3, minor_version=0, flags=None, size=0):
        self.major_version = major_version
        self.minor_version = minor_version
        self.flags = set(flags) if flags else set()
        self.size = size

    @classmethod
    def decode(cls, data):
        if len(data) < HEADER_SIZE:
            raise TruncatedTagError("ID3v2 header is truncated")
        if data[0:3] != b"ID3":
            raise NoTagError("ID3v2 tag not found")
        try:
            size = Syncsafe.decode(data[6:10])
        except ValueError as e:
            raise TagError("Invalid ID3v2 tag size") from e
        return cls(data[3], data[4], decode_flags(data[5], tag_flags), size)

    def encode(self):
        data = bytearray(b"ID3")
        data.append(self.major_version)
        data.append(self.minor_version)
        data.append(encode_flags(self.flags, tag_flags))
        if not 0 <= self.size <= SYNCSAFE_MAX:
            raise TagError("Tag too large ({0} bytes)".format(self.size))
        data.extend(Syncsafe.encode(self.size))
        return bytes(data)

    @property
    def unsynchronisation(self):
        return "unsynchronisation" in self.flags

    @property
    def extended_header(self):
        return "extended_header" in self.flags

    @property
    def experimental(self):
        return "experimental" in self.flags

    @property
    def footer(self):
        return self.major_version == 4 and "footer" in self.flags

    @property
    def total_size(self):
        "Number of bytes the tag occupies in the file, headers included."
        return HEADER_SIZE + self.size + (HEADER_SIZE if self.footer else 0)

    def __eq__(self, other):
        return (isinstance(other, TagHeader)
                and self.major_version == other.major_version
                and self.minor_version == other.minor_version
                and self.flags == other.flags
                and self.size == other.size)

    def __repr__(self):
        return "<TagHeader: ID3v2.{0}.{1}{2}, {3} bytes>".format(
            self.major_version, self.minor_version,
            (" ({0})".format(", ".join(sorted(self.flags)))
             if self.flags else ""),
            self.size)

def parse_tag_header(source):
    """Read the tag header at the start of source.

    Returns None if source doesn't start with an ID3v2 tag.
    """
    data = fileutil.read_source(source, HEADER_SIZE)
    if data[0:3] != b"ID3":
        return None
    header = TagHeader.decode(data)
    if header.major_version not in _supported_versions:
        warn("Unsupported ID3 version: 2.{0}.{1}".format(header.major_version,
                                                         header.minor_version),
             TagWarning)
    return header

def _tag_body(data, header):
    "Return the frame area of the tag from data starting right after the tag header."
    if len(data) < header.size:
        raise TruncatedTagError("Tag claims {0} bytes, but only {1} are available"
                                .format(header.size, len(data)))
    body = data[:header.size]
    if header.unsynchronisation:
        body = Unsync.decode(body)
    return body

def _skip_extended_header(body, header):
    "Return the offset of the first frame in body.  The extended header is not decoded."
    if not header.extended_header:
        return 0
    if len(body) < 4:
        raise TruncatedTagError("Extended header is truncated")
    if header.major_version == 4:
        # Size includes itself
        length = Syncsafe.decode(body[0:4])
    else:
        length = 4 + Int8.decode(body[0:4])
    if length > len(body):
        raise TruncatedTagError("Extended header overruns the tag")
    return length

def iterate_frames(source, header=None):
    """Generate a FrameRecord for each frame in an ID3v2 tag.

    Without header, source must start with the tag header, which is read
    first.  With header (as returned by parse_tag_header), source must be
    positioned immediately after the tag header; an open file passed to
    parse_tag_header is left in exactly that position.

    A block starting with a zero byte is padding.  TruncatedTagError is raised
    when a frame header or payload extends past the end of the tag; frames
    generated before that point are still valid.
    """
    if header is None:
        data = fileutil.read_source(source)
        header = parse_tag_header(data)
        if header is None:
            return
        data = data[HEADER_SIZE:]
    else:
        data = fileutil.read_source(source, header.size)
    body = _tag_body(data, header)
    offset = _skip_extended_header(body, header)
    end = len(body)
    while offset < end:
        if body[offset] == 0:
            # Padding
            offset += FRAME_HEADER_SIZE
            continue
        if end - offset < FRAME_HEADER_SIZE:
            raise TruncatedTagError("Truncated frame header at offset {0}"
                                    .format(HEADER_SIZE + offset))
        frameid = body[offset:offset + 4].decode("iso-8859-1")
        size = Int8.decode(body[offset + 4:offset + 8])
        flags1 = body[offset + 8]
        flags2 = body[offset + 9]
        offset += FRAME_HEADER_SIZE
        if offset + size > end:
            raise TruncatedTagError("Frame {0} claims {1} bytes, but only {2} remain in the tag"
                                    .format(frameid, size, end - offset))
        yield FrameRecord(frameid, size, flags1, flags2, body[offset:offset + size])
        offset += size

def frame_from_record(record):
    if not id3.is_frame_id(record.frameid):
        warn("Unknown frame id {0!r}".format(record.frameid), FrameWarning)
    (flags, extra) = decode_frame_flags(record.flags1, record.flags2)
    return Frames.frame_from_data(record.frameid, record.data, flags, extra)

def parse(source):
    """Read the ID3v2 tag at the start of source.

    Returns (header, frames); header is None (and frames is empty) if source
    has no tag.  Frames that fail to decode are returned as ErrorFrames.
    """
    data = fileutil.read_source(source)
    header = parse_tag_header(data)
    if header is None:
        return (None, [])
    return (header, [frame_from_record(record)
                     for record in iterate_frames(data[HEADER_SIZE:], header)])

# Writing tags

def _encode_one_frame(frame):
    if not id3.is_writable_frame_id(frame.frameid):
        raise FrameError("Invalid ID3v2 frame id {0!r}".format(frame.frameid))
    framedata = frame.encode()
    try:
        (flags1, flags2) = encode_frame_flags(frame.flags, frame.extra_flags)
    except ValueError as e:
        raise FrameError("Frame {0}: {1}".format(frame.frameid, e)) from e
    data = bytearray()
    data.extend(frame.frameid.encode("iso-8859-1"))
    data.extend(Int8.encode(len(framedata), width=4))
    data.append(flags1)
    data.append(flags2)
    assert len(data) == FRAME_HEADER_SIZE
    data.extend(framedata)
    return data

def assemble(frames, header=None, padding=0):
    """Return a complete tag holding frames, in the given order.

    The version and flags are taken from header (ID3v2.3 by default).
    Extended headers and footers are never written.
    """
    if header is None:
        header = TagHeader()
    framedata = bytearray()
    for frame in frames:
        framedata.extend(_encode_one_frame(frame))
    if header.unsynchronisation:
        framedata = bytearray(Unsync.encode(framedata))
    if padding:
        framedata.extend(b"\x00" * padding)
    newheader = TagHeader(header.major_version, header.minor_version,
                          header.flags - _unwritten_tag_flags, len(framedata))
    return newheader.encode() + bytes(framedata)

def _split_audio(data):
    "Return (header, audio) for a file image; header is None for untagged data."
    header = parse_tag_header(data)
    if header is None:
        return (None, data)
    if len(data) < header.total_size:
        raise TruncatedTagError("Tag claims {0} bytes, but the file has only {1}"
                                .format(header.total_size, len(data)))
    return (header, data[header.total_size:])

def rewrite(source, frames, header=None, padding=0):
    """Return a new image of source with its tag replaced by frames.

    The existing tag (if any) is stripped; everything after it is copied
    unchanged.  The new tag keeps the version of the old one unless header
    is given.
    """
    data = fileutil.read_source(source)
    (oldheader, audio) = _split_audio(data)
    if header is None:
        header = oldheader if oldheader is not None else TagHeader()
    return assemble(frames, header, padding) + audio

def remove_tag(source):
    "Return the image of source without its ID3v2 tag."
    return _split_audio(fileutil.read_source(source))[1]

def detect_tag(source):
    """Return the position of the ID3v2 tag in source as (offset, length).

    Raises NoTagError if source has no tag.
    """
    header = parse_tag_header(source)
    if header is None:
        raise NoTagError("ID3v2 tag not found")
    return (0, header.total_size)

def read_tag(source):
    return Tag.read(source)

def decode_tag(data):
    return Tag.decode(data)

def delete_tag(filename):
    "Remove the ID3v2 tag from filename, if it has one."
    data = fileutil.read_source(filename)
    audio = remove_tag(data)
    if len(audio) != len(data):
        fileutil.write_atomic(filename, audio)


class Tag(collections.abc.MutableSequence):
    """An ID3v2 tag: a header and an ordered list of frames.

    Frames are addressed by position; frame ids are not unique within a
    tag.  replace() and remove_frames() operate on all frames sharing an id.
    """
    padding_default = 0
    default_version = (3, 0)

    def __init__(self, frames=None, header=None):
        self.header = header if header is not None else TagHeader(*self.default_version)
        self._frames = []
        if frames:
            self.extend(frames)

    @staticmethod
    def _check_frame(frame):
        if not isinstance(frame, Frames.Frame):
            raise TypeError("Not a frame: {0!r}".format(frame))
        return frame

    # MutableSequence methods
    def __getitem__(self, index):
        return self._frames[index]

    def __setitem__(self, index, frame):
        if isinstance(index, slice):
            self._frames[index] = [self._check_frame(f) for f in frame]
        else:
            self._frames[index] = self._check_frame(frame)

    def __delitem__(self, index):
        del self._frames[index]

    def __len__(self):
        return len(self._frames)

    def insert(self, index, frame):
        self._frames.insert(index, self._check_frame(frame))

    def __contains__(self, key):
        if isinstance(key, str):
            return any(frame.frameid == key for frame in self._frames)
        return key in self._frames

    def frames(self, frameid=None):
        "Return the list of frames, optionally only those with the given id."
        if frameid is None:
            return list(self._frames)
        return [frame for frame in self._frames if frame.frameid == frameid]

    def remove_frames(self, frameid):
        "Remove all frames with the given id; return the number of frames removed."
        count = len(self._frames)
        self._frames = [frame for frame in self._frames if frame.frameid != frameid]
        return count - len(self._frames)

    def replace(self, key, frame):
        """Replace frames with frame.

        If key is an index, the frame at that position is replaced.  If key
        is a frame id, all frames with that id are removed, and frame takes
        the position of the first of them (or is appended if there were none).
        """
        self._check_frame(frame)
        if isinstance(key, int):
            self._frames[key] = frame
            return
        positions = [i for (i, f) in enumerate(self._frames) if f.frameid == key]
        if not positions:
            self._frames.append(frame)
            return
        self.remove_frames(key)
        self._frames.insert(positions[0], frame)

    def __eq__(self, other):
        return (isinstance(other, Tag)
                and self.header.major_version == other.header.major_version
                and self._frames == other._frames)

    def __repr__(self):
        return "<{0}: ID3v2.{1} tag{2} with {3} frames>".format(
            type(self).__name__,
            self.header.major_version,
            (" ({0})".format(", ".join(sorted(self.header.flags)))
             if self.header.flags else ""),
            len(self._frames))

    # Reading tags
    @classmethod
    def read(cls, source):
        """Read a tag from a file, a file object or a bytes object."""
        (header, frames) = parse(source)
        if header is None:
            raise NoTagError("ID3v2 tag not found")
        return cls(frames, header)

    @classmethod
    def decode(cls, data):
        return cls.read(bytes(data))

    # Writing tags
    def encode(self, padding=None):
        if padding is None:
            padding = self.padding_default
        return assemble(self._frames, self.header, padding)

    def rewrite(self, source, padding=None):
        "Return the image of source with its tag replaced by this one."
        if padding is None:
            padding = self.padding_default
        return rewrite(source, self._frames, self.header, padding)

    def write(self, filename):
        "Replace the tag in filename with this one."
        if not fileutil.is_filename(filename):
            filename.seek(0)
        data = self.rewrite(filename)
        fileutil.write_atomic(filename, data)
