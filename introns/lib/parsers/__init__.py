# coding: utf_8

"""
    Input handles for the GenBank flat file reader, compressed files are opened transparently.
"""
import bz2
import gzip
import io
import logging
from functools import partial

from ..utilities.file_type import filetype

logger = logging.getLogger(__name__)


def get_handle(handle, position=None):
    """
    Open a text handle over a plain, gzip or bzip2 compressed file. Open handles are returned as they are.

    :raises OSError: the file does not exist or can not be read
    """
    if not isinstance(handle, io.IOBase):
        try:
            file_type = filetype(handle)
            if str(handle).endswith(".gz") or file_type == "gzip":
                opener = gzip.open
            elif str(handle).endswith(".bz2") or file_type == "bzip2":
                opener = bz2.open
            else:
                opener = partial(open, **{"buffering": 1})
            handle = opener(handle, "rt", encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error("Cannot open file %s, I/O error(%s): %s", handle, e.errno, e.strerror)
            raise

    if position is not None:
        handle.seek(position)
    return handle
