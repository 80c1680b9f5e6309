#!/usr/bin/env python3

from setuptools import setup

setup(
    name="tagsmith",
    version="0.1.0",
    packages=["tagsmith"],
    python_requires=">=3.8",
    description="ID3v2 tag reading and rewriting in pure Python 3",
    long_description="""
tagsmith reads the ID3v2.3/ID3v2.4 tag at the start of an audio file into
a list of frames (text, URL, comment, attached picture, or opaque frames),
and regenerates a byte-exact tag from such a list, reattaching the untouched
audio data.  Frames that fail to decode are kept verbatim, so one bad frame
never loses the rest of a tag.
""",
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: Multimedia :: Sound/Audio"
        ],
    )
