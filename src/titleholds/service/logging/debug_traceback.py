from __future__ import annotations

import faulthandler
from collections.abc import Generator


def setup_debug_traceback(interval: int) -> Generator[None, None, None]:
    """
    Resource that dumps the traceback of every thread every `interval` seconds,
    for finding out where a stuck process is stuck.

    The dumps stop when the resource is shut down. An interval of 0 leaves
    the dumps off.
    """
    if interval <= 0:
        yield
        return

    faulthandler.dump_traceback_later(interval, repeat=True)
    try:
        yield
    finally:
        faulthandler.cancel_dump_traceback_later()
