from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from scrollbot.ui.scroll_model import Viewport, read_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpringParams:
    tension: float = 180.0
    friction: float = 28.0
    mass: float = 1.5
    max_dt: float = 0.1               # clamp for frames after a stall / window un-minimise
    rest_displacement: float = 0.5    # px
    rest_velocity: float = 1.0        # px/s


@dataclass
class SpringState:
    velocity: float = 0.0
    last_frame_ts: Optional[float] = None
    handle: Optional[int] = None

    def reset(self) -> None:
        self.velocity = 0.0
        self.last_frame_ts = None
        self.handle = None


@dataclass(frozen=True)
class SpringStep:
    position: float
    velocity: float
    settled: bool


def spring_step(position: float, velocity: float, target: float, dt: float,
                params: SpringParams) -> SpringStep:
    """
    One semi-implicit Euler step of a damped spring pulling `position` to `target`.
    Within the rest tolerances the result snaps to the target with zero velocity.
    """
    displacement = target - position
    if abs(displacement) < params.rest_displacement and abs(velocity) < params.rest_velocity:
        return SpringStep(target, 0.0, True)

    dt = max(0.0, min(dt, params.max_dt))
    accel = (params.tension * displacement - params.friction * velocity) / params.mass
    velocity += accel * dt
    return SpringStep(position + velocity * dt, velocity, False)


class FrameScheduler(Protocol):
    def now(self) -> float: ...
    def request_frame(self, cb: Callable[[float], None]) -> int: ...
    def cancel_frame(self, handle: Optional[int]) -> None: ...


class SpringScroller:
    """
    Animates a viewport to its bottom with `spring_step`, one step per frame.

    The target is re-read every frame, so content that grows mid-flight
    (a streaming reply) keeps being chased until the spring settles.
    `on_write` fires after every offset write, standing in for the scroll
    event a browser would raise on programmatic scrolling.
    """
    def __init__(
        self,
        viewport: Callable[[], Optional[Viewport]],
        frames: FrameScheduler,
        params: Optional[SpringParams] = None,
        on_write: Optional[Callable[[], None]] = None,
    ) -> None:
        self._viewport = viewport
        self.frames = frames
        self.params = params or SpringParams()
        self.state = SpringState()
        self.on_write = on_write

    # --- public API ---------------------------------------------------------
    @property
    def animating(self) -> bool:
        return self.state.handle is not None

    def scroll_to_bottom(self) -> bool:
        """Start (or restart) the animation. Returns False when there is no viewport."""
        if self._viewport() is None:
            return False
        self.stop()
        self.state.last_frame_ts = self.frames.now()
        self.state.handle = self.frames.request_frame(self._on_frame)
        logger.debug("spring scroll started")
        return True

    def stop(self) -> None:
        """Cancel any in-flight animation. Safe to call at any time."""
        if self.state.handle is not None:
            self.frames.cancel_frame(self.state.handle)
            logger.debug("spring scroll cancelled")
        self.state.reset()

    # --- frame step ---------------------------------------------------------
    def _on_frame(self, ts: float) -> None:
        self.state.handle = None
        vp = self._viewport()
        if vp is None:
            self.state.reset()
            return

        last = self.state.last_frame_ts if self.state.last_frame_ts is not None else ts
        dt = min(max(0.0, ts - last), self.params.max_dt)
        self.state.last_frame_ts = ts

        snap = read_snapshot(vp)
        current, target = snap.scroll_offset, snap.bottom_offset
        step = spring_step(current, self.state.velocity, target, dt, self.params)

        vp.scroll_offset = step.position
        if step.settled:
            self.state.reset()
            logger.debug("spring scroll settled at %.1f", target)
        else:
            self.state.velocity = step.velocity
            self.state.handle = self.frames.request_frame(self._on_frame)
        if self.on_write:
            self.on_write()
