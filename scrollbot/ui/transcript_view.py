from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import math
import pygame

from scrollbot.transcript.types import Message
from scrollbot.ui.style import Theme
from scrollbot.ui.text_layout import FontCache, TextLayout


@dataclass
class _Layout:
    content_len: int                     # len(content) when laid out; streaming growth invalidates
    label: Optional[pygame.Surface]
    lines: List[pygame.Surface]
    text_h: int
    width: int                           # bubble width incl. padding
    height: int                          # label + bubble


class TranscriptView:
    """
    Pure rendering + layout cache for a list of Messages.

    Responsibilities:
    - wrap each message to its bubble width
    - compute content height (inc. Theme.entry_gap and the typing line)
    - draw bubbles clipped to the viewport at a given scroll offset
    """
    def __init__(self, theme: Theme, fonts: FontCache):
        self.theme = theme
        self.fonts = fonts
        self._wrap_w: int = -1
        self._cache: Dict[str, _Layout] = {}
        self._blink_t: float = 0.0

    # --------- public ---------
    def update(self, dt: float) -> None:
        self._blink_t += dt

    def invalidate_layout(self) -> None:
        self._wrap_w = -1
        self._cache.clear()

    def ensure_layout(self, wrap_w: int, messages: Sequence[Message]) -> None:
        """
        Lay out anything new or grown at `wrap_w`. A width change rewraps everything;
        messages no longer present are dropped from the cache.
        """
        if wrap_w != self._wrap_w:
            self._wrap_w = wrap_w
            self._cache.clear()
        live = set()
        for m in messages:
            live.add(m.id)
            lay = self._cache.get(m.id)
            if lay is None or lay.content_len != len(m.content):
                self._cache[m.id] = self._layout_message(m, wrap_w)
        for k in [k for k in self._cache if k not in live]:
            del self._cache[k]

    def content_height(self, messages: Sequence[Message], composing: bool = False) -> int:
        total = 0
        for i, m in enumerate(messages):
            total += self._cache[m.id].height
            if i < len(messages) - 1:
                total += self.theme.entry_gap
        if composing:
            if messages:
                total += self.theme.entry_gap
            total += self._font().get_linesize()
        return total

    def viewport_rect(self, widget_rect: pygame.Rect) -> pygame.Rect:
        t, r, b, l = self.theme.padding
        sb = self.theme.scrollbar
        reserve_w = max(0, sb.width + sb.margin)
        return pygame.Rect(
            l, t,
            max(0, widget_rect.w - (l + r + reserve_w)),
            max(0, widget_rect.h - (t + b))
        )

    def draw_into(self, layer: pygame.Surface, widget_rect: pygame.Rect,
                  messages: Sequence[Message], scroll_y: float, composing: bool = False) -> None:
        th = self.theme
        full = pygame.Rect(0, 0, widget_rect.w, widget_rect.h)
        pygame.draw.rect(layer, th.box_bg, full, border_radius=th.border_radius)
        pygame.draw.rect(layer, th.box_border, full, width=1, border_radius=th.border_radius)

        viewport = self.viewport_rect(widget_rect)
        self.ensure_layout(viewport.width, messages)

        prev_clip = layer.get_clip()
        layer.set_clip(viewport)

        y = viewport.y - int(round(scroll_y))
        for i, m in enumerate(messages):
            lay = self._cache[m.id]
            if y + lay.height >= viewport.y and y <= viewport.bottom:
                self._draw_bubble(layer, viewport, m, lay, y)
            y += lay.height
            if i < len(messages) - 1:
                y += th.entry_gap

        if composing:
            if messages:
                y += th.entry_gap
            self._draw_composing(layer, viewport, y)

        layer.set_clip(prev_clip)

    # --------- internals ---------
    def _font(self, bold: bool = False) -> pygame.font.Font:
        return self.fonts.get(self.theme.font_path, self.theme.font_size, bold=bold)

    def _label_font(self) -> pygame.font.Font:
        return self.fonts.get(self.theme.font_path, max(10, int(self.theme.font_size * 0.7)), bold=True)

    def _layout_message(self, m: Message, wrap_w: int) -> _Layout:
        st = self.theme.bubble(m.author.value)
        max_w = max(1, int(wrap_w * st.width_frac))
        inner_w = max(1, max_w - 2 * st.pad_x)

        layout = TextLayout(self._font(), self.theme.line_spacing)
        lines, text_h = layout.render_lines(layout.wrap(m.content, inner_w), st.text_rgb)
        if not lines:
            text_h = layout.line_height()  # empty placeholder keeps its slot while streaming starts

        label = self._label_font().render(st.label, True, st.label_rgb) if st.label else None
        label_h = label.get_height() + 2 if label else 0
        text_w = max([s.get_width() for s in lines] or [0])
        width = min(max_w, text_w + 2 * st.pad_x)
        return _Layout(len(m.content), label, lines, text_h, width, label_h + text_h + 2 * st.pad_y)

    def _draw_bubble(self, layer: pygame.Surface, viewport: pygame.Rect,
                     m: Message, lay: _Layout, y: int) -> None:
        st = self.theme.bubble(m.author.value)
        x = viewport.right - lay.width if st.align == "right" else viewport.x
        if lay.label:
            lx = viewport.right - lay.label.get_width() if st.align == "right" else viewport.x
            layer.blit(lay.label, (lx, y))
            y += lay.label.get_height() + 2

        bubble = pygame.Rect(x, y, lay.width, lay.text_h + 2 * st.pad_y)
        if st.bg_rgba[3] > 0:
            bg = pygame.Surface(bubble.size, pygame.SRCALPHA)
            pygame.draw.rect(bg, st.bg_rgba, bg.get_rect(), border_radius=st.radius)
            layer.blit(bg, bubble.topleft)

        ty = bubble.y + st.pad_y
        for surf in lay.lines:
            layer.blit(surf, (bubble.x + st.pad_x, ty))
            ty += surf.get_height() + self.theme.line_spacing

    def _draw_composing(self, layer: pygame.Surface, viewport: pygame.Rect, y: int) -> None:
        # pulse between 35% and 100% alpha, one cycle per second
        s = 0.5 * (1.0 + math.sin(2.0 * math.pi * self._blink_t))
        surf = self._font().render(self.theme.composing_text, True, self.theme.header_rgb)
        surf.set_alpha(int(90 + 165 * s))
        layer.blit(surf, (viewport.x, y))
