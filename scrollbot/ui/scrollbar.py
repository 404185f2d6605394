from __future__ import annotations

import pygame
from scrollbot.ui.style import Theme

class Scrollbar:
    """
    Stateless drawer for the transcript's vertical scrollbar.
    """
    @staticmethod
    def thumb_rect(widget_rect: pygame.Rect, viewport: pygame.Rect, content_h: float,
                   scroll_y: float, theme: Theme) -> pygame.Rect | None:
        sb = theme.scrollbar
        t, r, b, _ = theme.padding
        track_h = widget_rect.h - (t + b)
        if track_h <= 0 or sb.width <= 0 or content_h <= viewport.h:
            return None
        ratio = max(0.0, min(1.0, viewport.h / max(1.0, content_h)))
        thumb_h = max(sb.min_thumb_size, int(track_h * ratio))
        max_sc = max(1e-6, content_h - viewport.h)
        free = max(0, track_h - thumb_h)
        y = t + int(free * max(0.0, min(1.0, scroll_y / max_sc)))
        return pygame.Rect(widget_rect.w - r - sb.margin - sb.width, y, sb.width, thumb_h)

    @staticmethod
    def draw(layer: pygame.Surface, widget_rect: pygame.Rect, viewport: pygame.Rect,
             content_h: float, scroll_y: float, theme: Theme) -> None:
        sb = theme.scrollbar
        t, r, b, _ = theme.padding
        track_h = widget_rect.h - (t + b)
        if track_h <= 0 or sb.width <= 0:
            return
        thumb = Scrollbar.thumb_rect(widget_rect, viewport, content_h, scroll_y, theme)
        if thumb is None and not sb.show_when_no_overflow:
            return

        track = pygame.Rect(widget_rect.w - r - sb.margin - sb.width, t, sb.width, track_h)
        pygame.draw.rect(layer, sb.track_color, track, border_radius=sb.radius)
        pygame.draw.rect(layer, sb.thumb_color, thumb or track, border_radius=sb.radius)
