from __future__ import annotations

from typing import Optional, Sequence
import pygame

from scrollbot.follow.controller import ScrollFollowController
from scrollbot.follow.policy import FollowAction
from scrollbot.follow.spring import FrameScheduler, SpringParams
from scrollbot.input_router import InputRouter
from scrollbot.transcript.types import Message
from scrollbot.ui.scroll_model import ScrollModel
from scrollbot.ui.scrollbar import Scrollbar
from scrollbot.ui.style import Theme
from scrollbot.ui.text_layout import FontCache
from scrollbot.ui.transcript_view import TranscriptView
from scrollbot.ui.widgets.jump_button import JumpButton


class TranscriptBox:
    """
    Thin wrapper that wires:
      - TranscriptView (layout & draw)
      - ScrollModel    (the scroll container)
      - ScrollFollowController (auto-follow + jump affordance)
      - InputRouter    (user input always beats the auto-scroll)
      - Scrollbar / JumpButton (draw)
    """
    __slots__ = (
        "rect",
        "theme",
        "fonts",
        "scroller",
        "view",
        "follow",
        "router",
        "jump",
        "wheel_pixels",
        "page_frac",
        "_messages",
        "_composing",
        "_mounted",
    )

    def __init__(
        self,
        rect: pygame.Rect,
        theme: Theme,
        fonts: FontCache,
        frames: FrameScheduler,
        *,
        messages: Sequence[Message] = (),
        threshold_px: float = 20.0,
        spring: Optional[SpringParams] = None,
        wheel_pixels: int = 40,
        page_frac: float = 0.9,
    ):
        self.rect = rect.copy()
        self.theme = theme
        self.fonts = fonts
        self.wheel_pixels = int(wheel_pixels)
        self.page_frac = float(page_frac)
        self._messages: Sequence[Message] = messages
        self._composing = False
        self._mounted = True

        self.view = TranscriptView(theme, fonts)
        self.scroller = ScrollModel()
        self.follow = ScrollFollowController(
            self.viewport, frames,
            threshold_px=threshold_px, spring=spring, messages=messages,
        )
        self.router = InputRouter(region=self, handlers=self.follow.interaction_handlers)
        self.jump = JumpButton(theme.jump_button, fonts, theme.font_path)

        # open on the newest message
        self._sync_scroll_metrics()
        self.scroller.to_bottom()
        self.follow.on_scroll()

    # ---------- scroll container ----------
    def viewport(self) -> Optional[ScrollModel]:
        """The scroll container, or None once disposed / while it has no area."""
        if not self._mounted or self.rect.w <= 0 or self.rect.h <= 0:
            return None
        self._sync_scroll_metrics()
        return self.scroller

    # ---------- transcript ----------
    def set_messages(self, messages: Sequence[Message], composing: bool = False) -> FollowAction:
        """ Call after any change to the message list (send, new reply, older page). """
        self._messages = messages
        self._composing = bool(composing)
        self._sync_scroll_metrics()
        return self.follow.update(messages, self._composing)

    def set_composing(self, composing: bool) -> None:
        self._composing = bool(composing)
        self._sync_scroll_metrics()

    def on_reply_growth(self) -> None:
        """ The trailing reply grew in place; keep it in view while following. """
        self._sync_scroll_metrics()
        if self.follow.is_at_bottom and not self.follow.animating:
            self.follow.scroll_to_bottom()

    # ---------- lifecycle ----------
    def on_resize(self, new_rect: pygame.Rect) -> None:
        was_bottom = self.follow.is_at_bottom
        self.rect = new_rect.copy()
        self.view.invalidate_layout()
        self._sync_scroll_metrics()
        if was_bottom:
            self.scroller.to_bottom()
        self.follow.on_scroll()

    def update(self, dt: float) -> None:
        self.view.update(dt)
        self._sync_scroll_metrics()
        self.jump.visible = self.follow.show_jump_to_latest
        if self.jump.visible:
            self.jump.layout(self.rect)

    def dispose(self) -> None:
        """ Release the frame callback before the panel goes away. """
        self.follow.dispose()
        self._mounted = False

    # ---------- input ----------
    def hit_test(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)

    def handle_event(self, e: pygame.event.Event) -> bool:
        # stop any auto-scroll before the input itself is applied
        self.router.route(e)

        if e.type == pygame.MOUSEWHEEL and self.hit_test(self.router.pointer_pos()):
            self.scroll(-e.y * self.wheel_pixels)
            return True
        if e.type == pygame.MOUSEMOTION:
            self.jump.on_mouse_move(e.pos)
            return False
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1 and self.jump.hit_test(e.pos):
            self.jump_to_latest()
            return True
        return False

    # ---------- scrolling ----------
    def scroll(self, dy: float) -> None:
        """ Manual scroll by dy pixels (positive = down). """
        if dy == 0:
            return
        self.follow.stop()
        self._sync_scroll_metrics()
        self.scroller.scroll(dy)
        self.follow.on_scroll()

    def page_up(self) -> None:
        self.scroll(-self.viewport_height * self.page_frac)

    def page_down(self) -> None:
        self.scroll(self.viewport_height * self.page_frac)

    def scroll_to_top(self) -> None:
        self.follow.stop()
        self.scroller.to_top()
        self.follow.on_scroll()

    def jump_to_latest(self) -> None:
        """ Animated scroll to the newest message; clears the affordance on arrival. """
        self.follow.scroll_to_bottom()

    def _sync_scroll_metrics(self) -> None:
        """ Update ScrollModel content/viewport from current layout. """
        vp = self.view.viewport_rect(self.rect)
        self.view.ensure_layout(vp.width, self._messages)
        self.scroller.viewport_h = vp.h
        self.scroller.content_h = self.view.content_height(self._messages, self._composing)
        self.scroller.clamp()

    # ---------- properties ----------
    @property
    def viewport_height(self) -> int:
        t, r, b, l = self.theme.padding
        return max(0, self.rect.h - (t + b))

    @property
    def is_at_bottom(self) -> bool:
        return self.follow.is_at_bottom

    # ---------- drawing ----------
    def draw(self, surface: pygame.Surface) -> None:
        if self.rect.w <= 0 or self.rect.h <= 0:
            return
        layer = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        viewport = self.view.viewport_rect(self.rect)

        self.view.draw_into(layer, self.rect, self._messages, self.scroller.offset, self._composing)
        Scrollbar.draw(layer, self.rect, viewport, self.scroller.content_h, self.scroller.offset, self.theme)

        surface.blit(layer, self.rect.topleft)
        self.jump.draw(surface)
