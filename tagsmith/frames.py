# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Class definitions for ID3v2 frames.

Each frame class owns the decoding and encoding of one payload shape:

    GenericFrame   opaque bytes
    TextFrame      $xx encoding, text
    URLFrame       same shape as TextFrame, holding a URL
    CommentFrame   $xx encoding, 3-byte language, description $00 (00), text
    PictureFrame   $xx encoding, MIME type $00, $xx picture type,
                   description $00 (00), picture data

frame_class() maps a frame id to the class that handles it.
"""

import abc
from warnings import warn

from tagsmith.errors import *
from tagsmith.charsets import (LATIN1, encodings, preferred_encodings,
                               resolve_indicator, get_encoding, find_terminator,
                               strip_terminators, sniff_encoding)
from tagsmith.flags import opaque_frame_flags
import tagsmith.id3 as id3

class Frame(metaclass=abc.ABCMeta):
    _fields = tuple()
    _defaults = {}
    _has_encoding = False
    _default_frameid = None

    # Raw frame flag bits without a name in tagsmith.flags, as (flags1, flags2)
    extra_flags = (0, 0)

    def __init__(self, frameid=None, flags=None, **kwargs):
        self.frameid = frameid if frameid else self._default_frameid
        if not self.frameid:
            raise TypeError("{0} requires a frame id".format(type(self).__name__))
        self.flags = set(flags) if flags else set()
        for name in self._fields:
            setattr(self, name, kwargs.pop(name, self._defaults.get(name)))
        if kwargs:
            raise TypeError("Unexpected frame fields: {0}".format(", ".join(sorted(kwargs))))

    def __setattr__(self, name, value):
        # Automatic validation on assignment
        validator = getattr(type(self), "_validate_" + name, None)
        if validator is not None:
            value = validator(self, value)
        super().__setattr__(name, value)

    def _validate_extra_flags(self, value):
        (flags1, flags2) = value
        if not (0 <= flags1 <= 0xFF and 0 <= flags2 <= 0xFF):
            raise ValueError("Invalid frame flag bits: {0!r}".format(value))
        return (flags1, flags2)

    def _validate_encoding(self, value):
        if value is None:
            return None
        return get_encoding(value)

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.frameid == other.frameid
                and self.flags == other.flags
                and self.extra_flags == other.extra_flags
                and all(getattr(self, name) == getattr(other, name)
                        for name in self._fields))

    @property
    def is_standard(self):
        return id3.is_standard_frameid(self.frameid)

    # Decoding

    @classmethod
    def decode(cls, data, frameid=None, flags=None):
        "Create a frame from its payload (the frame data without the 10-byte header)."
        frame = cls(frameid=frameid, flags=flags)
        frame._decode_fields(bytes(data))
        return frame

    @abc.abstractmethod
    def _decode_fields(self, data): pass

    def _decode_text(self, data, encoding):
        try:
            return encoding.decode(data)
        except DecodeError:
            fallback = sniff_encoding(data)
            if fallback is None or fallback is encoding:
                raise
            warn("Frame {0}: text is not valid {1}, reading it as {2}"
                 .format(self.frameid, encoding.name, fallback.name), FrameWarning)
            return fallback.decode(data)

    # Encoding

    def encode(self):
        "Return the payload of this frame as bytes."
        if not self._has_encoding:
            return bytes(self._encode_fields(None))
        if self.encoding is not None:
            try:
                return bytes(self._encode_fields(self.encoding))
            except UnicodeEncodeError:
                pass
        for encoding in preferred_encodings:
            try:
                return bytes(self._encode_fields(encoding))
            except UnicodeEncodeError:
                pass
        raise FrameError("Could not encode strings in frame {0}".format(self.frameid))

    @abc.abstractmethod
    def _encode_fields(self, encoding): pass

    # Printing

    def __repr__(self):
        args = [repr(self.frameid)]
        if self.flags:
            args.append("flags={0!r}".format(self.flags))
        if self.extra_flags != (0, 0):
            args.append("extra_flags=(0x{0:02X}, 0x{1:02X})".format(*self.extra_flags))
        for name in self._fields:
            value = getattr(self, name)
            if isinstance(value, (bytes, bytearray)):
                args.append("{0}=<{1} bytes of binary data {2!r}{3}>".format(
                        name, len(value), value[:20], "..." if len(value) > 20 else ""))
            elif name == "encoding" and value is not None:
                args.append("encoding={0!r}".format(value.name))
            else:
                args.append("{0}={1!r}".format(name, value))
        return "{0}({1})".format(type(self).__name__, ", ".join(args))

    def _str_fields(self):
        return ", ".join(repr(getattr(self, name)) for name in self._fields
                         if name != "encoding")

    def __str__(self):
        flag = " "
        if not self.is_standard: flag = "?"
        if isinstance(self, ErrorFrame): flag = "!"
        return "{0}{1}({2})".format(flag, self.frameid, self._str_fields())

class GenericFrame(Frame):
    "A frame whose payload is kept as opaque bytes."
    _fields = ("data",)
    _defaults = {"data": b""}

    def __init__(self, frameid=None, data=b"", flags=None):
        super().__init__(frameid=frameid, flags=flags, data=data)

    def _validate_data(self, value):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("Not a byte sequence")
        return bytes(value)

    def _decode_fields(self, data):
        self.data = data

    def _encode_fields(self, encoding):
        return self.data

    def _str_fields(self):
        return "{0} bytes".format(len(self.data))

class ErrorFrame(GenericFrame):
    "A frame that failed to decode; its payload is kept verbatim."
    def __init__(self, frameid, data, exception, flags=None):
        super().__init__(frameid=frameid, data=data, flags=flags)
        self.exception = exception

    def _str_fields(self):
        strs = ["ERROR"]
        if self.exception:
            strs.append(str(self.exception))
        strs.append(repr(self.data[:20]))
        return ", ".join(strs)

class TextFrame(Frame):
    "Text information frame: one string in the frame's encoding."
    _fields = ("encoding", "text")
    _defaults = {"text": ""}
    _has_encoding = True

    def __init__(self, frameid=None, text="", encoding=None, flags=None):
        super().__init__(frameid=frameid, flags=flags, encoding=encoding, text=text)

    def _validate_text(self, value):
        if not isinstance(value, str):
            raise TypeError("Not a string")
        return value

    def _decode_fields(self, data):
        if len(data) < 1:
            raise MalformedFrameError("Empty text frame {0}".format(self.frameid))
        self.encoding = resolve_indicator(data[0])
        text = strip_terminators(data[1:], self.encoding.width)
        self.text = self._decode_text(text, self.encoding)

    def _encode_fields(self, encoding):
        return bytes([encoding.indicator]) + encoding.encode(self.text)

    def _str_fields(self):
        return "{0} {1!r}".format(self.encoding.name if self.encoding else "<undef>",
                                  self.text)

class URLFrame(TextFrame):
    """URL link frame.

    Conformant W??? frames hold a bare ISO-8859-1 URL; some writers put an
    encoding byte in front of it.  Both shapes are read, and has_indicator
    records which one was found so that the frame is written back the same
    way.
    """
    _defaults = {"text": "", "encoding": LATIN1}

    def __init__(self, frameid=None, url="", encoding=LATIN1, flags=None,
                 has_indicator=True):
        super().__init__(frameid=frameid, text=url, encoding=encoding, flags=flags)
        self.has_indicator = has_indicator

    @property
    def url(self):
        return self.text

    @url.setter
    def url(self, value):
        self.text = value

    def _decode_fields(self, data):
        if len(data) > 0 and data[0] >= len(encodings):
            # No encoding byte; a URL never starts with a control character
            self.has_indicator = False
            self.encoding = LATIN1
            self.text = LATIN1.decode(strip_terminators(data, 1))
        else:
            self.has_indicator = True
            super()._decode_fields(data)

    def _encode_fields(self, encoding):
        if not self.has_indicator:
            return LATIN1.encode(self.text)
        return super()._encode_fields(encoding)

class CommentFrame(Frame):
    "Comment frame (COMM)."
    _fields = ("encoding", "language", "description", "comment")
    _defaults = {"language": "eng", "description": "", "comment": ""}
    _has_encoding = True
    _default_frameid = "COMM"

    def __init__(self, comment="", description="", language="eng",
                 encoding=None, frameid=None, flags=None):
        super().__init__(frameid=frameid, flags=flags, encoding=encoding,
                         language=language, description=description,
                         comment=comment)

    def _validate_language(self, value):
        if not isinstance(value, str):
            raise TypeError("Not a string")
        if len(value) != 3:
            raise ValueError("Language code must be three characters: {0!r}".format(value))
        return value

    def _decode_fields(self, data):
        if len(data) < 4:
            raise MalformedFrameError("Comment frame is too short ({0} bytes)".format(len(data)))
        encoding = resolve_indicator(data[0])
        self.encoding = encoding
        # The language code is always ISO-8859-1, whatever the frame encoding
        self.language = LATIN1.decode(data[1:4])
        term = find_terminator(data, 4, encoding.width)
        if term < 0:
            raise MalformedFrameError("Unterminated comment description")
        self.description = self._decode_text(data[4:term], encoding)
        text = strip_terminators(data[term + encoding.width:], encoding.width)
        self.comment = self._decode_text(text, encoding)

    def _encode_fields(self, encoding):
        language = LATIN1.encode(self.language)
        if len(language) != 3:
            raise FrameError("Invalid language code {0!r}".format(self.language))
        data = bytearray()
        data.append(encoding.indicator)
        data.extend(language)
        data.extend(encoding.encode(self.description))
        data.extend(encoding.terminator)
        data.extend(encoding.encode(self.comment))
        return data

    def _str_fields(self):
        return "[{0}] {1!r}: {2!r}".format(self.language, self.description, self.comment)

class PictureFrame(Frame):
    "Attached picture (APIC).  The picture data itself is never interpreted."
    _fields = ("encoding", "mime_type", "picture_type", "description", "data")
    _defaults = {"mime_type": "", "picture_type": 0, "description": "", "data": b""}
    _has_encoding = True
    _default_frameid = "APIC"

    def __init__(self, mime_type="", picture_type=0, description="", data=b"",
                 encoding=None, frameid=None, flags=None):
        super().__init__(frameid=frameid, flags=flags, encoding=encoding,
                         mime_type=mime_type, picture_type=picture_type,
                         description=description, data=data)

    def _validate_picture_type(self, value):
        if type(value) is not int:
            raise TypeError("Picture type must be an integer")
        if value not in range(len(id3.PICTURE_TYPES)):
            raise ValueError("Invalid picture type {0}".format(value))
        return value

    def _validate_data(self, value):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("Not a byte sequence")
        return bytes(value)

    @property
    def picture_type_name(self):
        return id3.PICTURE_TYPES[self.picture_type]

    def _decode_fields(self, data):
        if len(data) < 1:
            raise MalformedFrameError("Empty picture frame")
        encoding = resolve_indicator(data[0])
        self.encoding = encoding
        term = find_terminator(data, 1, 1)
        if term < 0:
            raise MalformedFrameError("Unterminated MIME type in picture frame")
        self.mime_type = LATIN1.decode(data[1:term])
        if term + 1 >= len(data):
            raise MalformedFrameError("Picture frame has no picture type")
        picture_type = data[term + 1]
        if picture_type >= len(id3.PICTURE_TYPES):
            raise MalformedFrameError("Invalid picture type {0}".format(picture_type))
        self.picture_type = picture_type
        start = term + 2
        term = find_terminator(data, start, encoding.width)
        if term < 0:
            raise MalformedFrameError("Unterminated picture description")
        self.description = self._decode_text(data[start:term], encoding)
        self.data = data[term + encoding.width:]

    def _encode_fields(self, encoding):
        data = bytearray()
        data.append(encoding.indicator)
        data.extend(LATIN1.encode(self.mime_type))
        data.append(0)
        data.append(self.picture_type)
        data.extend(encoding.encode(self.description))
        data.extend(encoding.terminator)
        data.extend(self.data)
        return data

    def _str_fields(self):
        return "{0}({1}), desc={2!r}, mime={3!r}: {4} bytes".format(
            self.picture_type, self.picture_type_name, self.description,
            self.mime_type, len(self.data))

def frame_class(frameid):
    "Return the frame class handling payloads of frames with the given id."
    if frameid == "APIC":
        return PictureFrame
    if frameid == "COMM":
        return CommentFrame
    if frameid.startswith("T"):
        return TextFrame
    if frameid.startswith("W"):
        return URLFrame
    return GenericFrame

def frame_from_data(frameid, data, flags=None, extra_flags=(0, 0)):
    """Decode a frame payload into the matching frame object.

    A payload that fails to decode is returned as an ErrorFrame holding the
    original bytes, so that one bad frame doesn't lose the rest of the tag.
    Payloads with format flags we don't know are kept as GenericFrames.
    """
    flags = set(flags) if flags else set()
    if flags & opaque_frame_flags or extra_flags[1]:
        frame = GenericFrame(frameid=frameid, data=data, flags=flags)
    else:
        try:
            frame = frame_class(frameid).decode(data, frameid=frameid, flags=flags)
        except (MalformedFrameError, DecodeError) as e:
            warn("Frame {0} could not be decoded: {1}".format(frameid, e), ErrorFrameWarning)
            frame = ErrorFrame(frameid, data, e, flags=flags)
    frame.extra_flags = extra_flags
    return frame
