from __future__ import annotations
from typing import Callable, Optional, Protocol, Tuple
import pygame

from scrollbot.follow.controller import InteractionHandlers


class _HasHitTest(Protocol):
    def hit_test(self, pos: Tuple[int, int]) -> bool: ...


class InputRouter:
    """
    Gatekeeper for raw pointer input over the transcript.

    Rules:
      - Wheel while the pointer is over the region -> on_wheel
      - Finger down inside the region               -> on_touch_start
      - Any mouse button down inside the region     -> on_pointer_down
      - Everything else is not an interaction.

    route() must run before the event's own handling (scrolling, clicks) so
    an auto-scroll in flight is already stopped when the user's input lands.
    """
    def __init__(
        self,
        *,
        region: _HasHitTest,
        handlers: InteractionHandlers,
        pointer_pos: Callable[[], Tuple[int, int]] = pygame.mouse.get_pos,
        window_size: Optional[Callable[[], Tuple[int, int]]] = None,
    ) -> None:
        self.region = region
        self.handlers = handlers
        self.pointer_pos = pointer_pos
        self._window_size = window_size or _display_size

    # --- public API ---------------------------------------------------------
    def interaction_kind(self, e: pygame.event.Event) -> Optional[str]:
        if e.type == pygame.MOUSEWHEEL:
            return "wheel" if self.region.hit_test(self.pointer_pos()) else None
        if e.type == pygame.FINGERDOWN:
            w, h = self._window_size()
            pos = (int(e.x * w), int(e.y * h))  # finger coords are normalised 0..1
            return "touch" if self.region.hit_test(pos) else None
        if e.type == pygame.MOUSEBUTTONDOWN:
            return "pointer" if self.region.hit_test(e.pos) else None
        return None

    def route(self, e: pygame.event.Event) -> bool:
        """Stop any auto-scroll if `e` is a user interaction. Never consumes the event."""
        kind = self.interaction_kind(e)
        if kind == "wheel":
            self.handlers.on_wheel()
        elif kind == "touch":
            self.handlers.on_touch_start()
        elif kind == "pointer":
            self.handlers.on_pointer_down()
        return kind is not None


def _display_size() -> Tuple[int, int]:
    surf = pygame.display.get_surface()
    return surf.get_size() if surf is not None else (1, 1)
