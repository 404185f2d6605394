from __future__ import annotations
from typing import Optional
import pygame

from scrollbot.ui.style import JumpButtonStyle
from scrollbot.ui.text_layout import FontCache


class JumpButton:
    """
    Floating "new messages" pill centred at the bottom of the transcript.
    Only laid out (and hit-testable) while visible.
    """
    def __init__(self, style: JumpButtonStyle, fonts: FontCache, font_path: Optional[str] = None):
        self.style = style
        self.fonts = fonts
        self.font_path = font_path
        self.visible = False
        self.hover = False
        self.rect: Optional[pygame.Rect] = None   # window coordinates

    def layout(self, panel: pygame.Rect) -> None:
        st = self.style
        font = self.fonts.get(self.font_path, st.text_size)
        w = font.size(st.label)[0] + 2 * st.pad_x
        self.rect = pygame.Rect(0, 0, w, st.h)
        self.rect.midbottom = (panel.centerx, panel.bottom - st.margin_bottom)

    def hit_test(self, pos: tuple[int, int]) -> bool:
        return bool(self.visible and self.rect and self.rect.collidepoint(pos))

    def on_mouse_move(self, pos: tuple[int, int]) -> None:
        self.hover = self.hit_test(pos)

    def draw(self, surface: pygame.Surface) -> None:
        if not self.visible or self.rect is None:
            return
        st = self.style
        pill = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        full = pill.get_rect()
        pygame.draw.rect(pill, st.hover_rgba if self.hover else st.fill_rgba, full, border_radius=st.radius)
        pygame.draw.rect(pill, st.border_rgba, full, width=1, border_radius=st.radius)
        text = self.fonts.get(self.font_path, st.text_size).render(st.label, True, st.text_rgb)
        pill.blit(text, text.get_rect(center=full.center))
        surface.blit(pill, self.rect.topleft)
