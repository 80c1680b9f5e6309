# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

class Error(Exception): pass

class Warning(Error, UserWarning): pass

class FrameWarning(Warning): pass
class ErrorFrameWarning(FrameWarning): pass
class TagWarning(Warning): pass

class NoTagError(Error): pass
class TagError(Error, ValueError): pass
class TruncatedTagError(TagError): pass
class FrameError(Error, ValueError): pass
class MalformedFrameError(FrameError): pass
class DecodeError(FrameError): pass

class SourceReadError(Error, OSError): pass
class SourceWriteError(Error, OSError): pass
