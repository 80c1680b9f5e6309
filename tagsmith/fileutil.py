# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""File manipulation utilities."""

import os
import os.path
import shutil
import tempfile
import signal
import threading

from contextlib import contextmanager

from tagsmith.errors import *

def is_filename(filename):
    return isinstance(filename, (str, os.PathLike))

@contextmanager
def opened(filename, mode):
    "Open filename, or do nothing if filename is already an open file object"
    if is_filename(filename):
        file = open(filename, mode)
        try:
            yield file
        finally:
            if not file.closed:
                file.close()
    else:
        yield filename

def read_source(source, length=None):
    """Return the contents of source as bytes.

    source may be a bytes-like object, a filename or a binary file object;
    file objects are read from their current position.  If length is given,
    at most length bytes are returned.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
        return data if length is None else data[:length]
    try:
        with opened(source, "rb") as file:
            return file.read() if length is None else file.read(length)
    except OSError as e:
        raise SourceReadError(e.errno, "Unable to read {0!r}: {1}"
                              .format(source, e.strerror or e)) from e

@contextmanager
def suppress_interrupt():
    """Suppress KeyboardInterrupt exceptions while the context is active.

    The suppressed interrupt (if any) is raised when the context is exited.
    Signal handlers can only be changed from the main thread; elsewhere the
    context does nothing.
    """
    if threading.current_thread() is not threading.main_thread():
        yield None
        return

    interrupted = False

    def sigint_handler(signum, frame):
        nonlocal interrupted
        interrupted = True

    s = signal.signal(signal.SIGINT, sigint_handler)
    try:
        yield None
    finally:
        signal.signal(signal.SIGINT, s)
    if interrupted:
        raise KeyboardInterrupt()

def write_atomic(filename, data):
    """Replace the contents of filename with data.

    The data is written to a temporary file in the same directory, which is
    then renamed over the original.  This prevents corruption on systems
    with atomic renames (UNIX), and reduces the window of vulnerability
    elsewhere (Windows).  KeyboardInterrupts arriving during the operation
    are deferred until it is complete.

    If filename is an open file object, it is overwritten in place.
    """
    with suppress_interrupt():
        try:
            if is_filename(filename):
                _write_atomic(os.fspath(filename), data)
            else:
                filename.seek(0)
                filename.write(data)
                filename.truncate()
        except OSError as e:
            raise SourceWriteError(e.errno, "Unable to write {0!r}: {1}"
                                   .format(filename, e.strerror or e)) from e

def _write_atomic(filename, data):
    temp = tempfile.NamedTemporaryFile(dir=os.path.dirname(os.path.abspath(filename)),
                                       prefix="tagsmith-",
                                       suffix=".tmp",
                                       delete=False)
    try:
        try:
            temp.write(data)
        finally:
            temp.close()
        if os.path.exists(filename):
            shutil.copymode(filename, temp.name)
        os.replace(temp.name, filename)
    except BaseException:
        if os.path.exists(temp.name):
            os.unlink(temp.name)
        raise
