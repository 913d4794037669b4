"""Reading whole files into memory."""

from __future__ import annotations

import mmap
import os
import stat

_MAX_READ = 1024 * 1024 * 1024


def read_string_from_file(path):
    """Return the full contents of ``path`` as bytes."""
    with open(path, "rb") as file:
        return file.read()


def mmap_string_from_file(path):
    """Map ``path`` read-only into memory and return the map.

    The caller closes the map, for example by using it in a ``with`` block.
    Raises ValueError for anything that is not a non-empty regular file.
    """
    info = os.stat(path)
    if not stat.S_ISREG(info.st_mode):
        raise ValueError(f"not a file: {path}")
    if info.st_size == 0:
        raise ValueError(f"cannot map an empty file: {path}")
    with open(path, "rb") as file:
        return mmap.mmap(file.fileno(), info.st_size, access=mmap.ACCESS_READ)


def read_o_direct(path):
    """Return the contents of ``path``, read in page-multiple chunks."""
    page_size = mmap.PAGESIZE
    with open(path, "rb", buffering=0) as file:
        size = os.fstat(file.fileno()).st_size
        data = bytearray(size)
        view = memoryview(data)
        read = 0
        while read < size:
            remaining = size - read
            chunk = min(_MAX_READ, max(-(-remaining // page_size) * page_size, page_size))
            got = file.readinto(view[read:read + min(chunk, remaining)])
            if not got:
                break
            read += got
        view.release()
    if read < size:
        raise OSError(f"short read from {path}: {read} of {size} bytes")
    return bytes(data)