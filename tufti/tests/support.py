# support.py - shared helpers for the frame-driven tests
from scrollbot.ui.anim import FrameLoop


class FakeClock:
    def __init__(self, t: float = 0.0):
        self.t = t

    def __call__(self) -> float:
        return self.t


def run_frames(frames: FrameLoop, clock: FakeClock, limit: int = 600, dt: float = 1 / 60) -> int:
    """Tick at `dt` until nothing is pending; returns the number of ticks."""
    n = 0
    while frames.pending_count and n < limit:
        clock.t += dt
        frames.tick()
        n += 1
    return n
