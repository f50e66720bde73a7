"""Frame scheduling: run callbacks once per display refresh.

The host calls ``run_frame`` once per refresh (right after ``clock.tick``).
Callbacks requested while a frame is running land in the next frame, so a
callback that re-requests itself runs exactly once per refresh and two frames
never overlap.
"""

from __future__ import annotations

import itertools
from typing import Callable

FrameCallback = Callable[[], None]


class FrameScheduler:
    """Queue of callbacks waiting for the next display refresh.

    ``frame_count`` counts refreshes driven so far.
    """

    def __init__(self) -> None:
        self._queue: dict[int, FrameCallback] = {}
        self._batch: dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self.frame_count = 0

    @property
    def pending(self) -> int:
        return len(self._queue)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._queue[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._queue.pop(handle, None)
        self._batch.pop(handle, None)

    def run_frame(self) -> int:
        """Run every callback queued before this call. Returns how many ran."""
        self._batch, self._queue = self._queue, {}
        self.frame_count += 1
        ran = 0
        while self._batch:
            handle = next(iter(self._batch))
            callback = self._batch.pop(handle)
            callback()
            ran += 1
        return ran

    def advance(self, frames: int) -> None:
        """Run ``frames`` refreshes back to back (headless drivers, tests)."""
        for _ in range(frames):
            self.run_frame()
