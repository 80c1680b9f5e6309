# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import tagsmith.charsets
import tagsmith.frames
import tagsmith.tags
import tagsmith.id3

from tagsmith.errors import *
from tagsmith.charsets import LATIN1, UTF16, UTF16BE, UTF8
from tagsmith.frames import (Frame, GenericFrame, ErrorFrame, TextFrame, URLFrame,
                             CommentFrame, PictureFrame)
from tagsmith.tags import (Tag, TagHeader, FrameRecord, parse, parse_tag_header,
                           iterate_frames, assemble, rewrite, remove_tag,
                           read_tag, decode_tag, detect_tag, delete_tag)

version = (0, 1, 0)
versionstr = ".".join((str(v) for v in version))
