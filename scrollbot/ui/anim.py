from __future__ import annotations
import time
from typing import Callable, Dict, Optional

FrameCallback = Callable[[float], None]


class FrameLoop:
    """
    requestAnimationFrame-style scheduler driven by the app's main loop.

    - request_frame(cb) -> handle; cb(timestamp_s) runs on the NEXT tick()
    - cancel_frame(handle) removes it immediately (a cancelled callback never runs,
      even if it was due in the tick currently being processed)
    - callbacks requested while a tick is running wait for the following tick
    """
    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    def now(self) -> float:
        return self._clock()

    def request_frame(self, cb: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = cb
        return handle

    def cancel_frame(self, handle: Optional[int]) -> None:
        if handle is not None:
            self._pending.pop(handle, None)

    def tick(self, timestamp: Optional[float] = None) -> int:
        """Run every callback that was pending when the tick began. Returns how many ran."""
        ts = self._clock() if timestamp is None else float(timestamp)
        due = list(self._pending.keys())
        ran = 0
        for handle in due:
            cb = self._pending.pop(handle, None)
            if cb is None:
                continue  # cancelled by an earlier callback in this tick
            cb(ts)
            ran += 1
        return ran

    @property
    def pending_count(self) -> int:
        return len(self._pending)
