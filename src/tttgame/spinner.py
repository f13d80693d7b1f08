"""
"Searching" indicator shown while the computer thinks.

The spinner runs on a daemon thread and only writes to its stream; the work in
the ``with`` block runs on the caller's thread and its result is never touched.
"""
from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import Iterator, TextIO

FRAMES = ("|", "/", "-", "\\")
INTERVAL = 0.1


def _spin(stream: TextIO, stop: threading.Event, label: str) -> None:
    for frame in itertools.cycle(FRAMES):
        if stop.is_set():
            break
        stream.write(f"\r{label} {frame} ")
        stream.flush()
        stop.wait(INTERVAL)
    stream.write("\r" + " " * (len(label) + 3) + "\r")
    stream.flush()


@contextmanager
def loading(stream: TextIO, enabled: bool = True, label: str = "LOADING") -> Iterator[None]:
    if not enabled:
        yield None
        return
    stop = threading.Event()
    worker = threading.Thread(target=_spin, args=(stream, stop, label), daemon=True)
    worker.start()
    try:
        yield None
    finally:
        stop.set()
        worker.join()
