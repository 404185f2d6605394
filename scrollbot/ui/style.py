from dataclasses import dataclass, replace, field
from typing import Dict
import pygame

@dataclass
class ScrollbarStyle:
    width: int = 6
    margin: int = 8
    radius: int = 3
    min_thumb_size: int = 24
    show_when_no_overflow: bool = False
    track_color: tuple[int, int, int, int] = (255, 255, 255, 32)
    thumb_color: tuple[int, int, int, int] = (255, 255, 255, 192)
    def derive(self, **overrides): return replace(self, **overrides)

@dataclass
class BubbleStyle:
    label: str = ""
    label_rgb: tuple[int, int, int] = (150, 156, 170)
    text_rgb: tuple[int, int, int] = (237, 237, 237)
    bg_rgba: tuple[int, int, int, int] = (255, 255, 255, 16)
    pad_x: int = 10
    pad_y: int = 6
    radius: int = 10
    align: str = "left"         # "left" | "right"
    width_frac: float = 0.82    # max bubble width as a fraction of the viewport

def _default_bubbles() -> Dict[str, BubbleStyle]:
    return {
        "user": BubbleStyle(label="You", bg_rgba=(120, 160, 240, 48), align="right"),
        "assistant": BubbleStyle(label="Tufti", bg_rgba=(255, 255, 255, 18)),
        "system": BubbleStyle(label="", text_rgb=(160, 160, 170), bg_rgba=(0, 0, 0, 0), width_frac=1.0),
    }

@dataclass
class JumpButtonStyle:
    label: str = "New messages ↓"
    h: int = 34
    pad_x: int = 14
    radius: int = 17
    text_size: int = 16
    text_rgb: tuple[int, int, int] = (235, 235, 235)
    fill_rgba: tuple[int, int, int, int] = (40, 70, 140, 230)
    hover_rgba: tuple[int, int, int, int] = (60, 95, 175, 245)
    border_rgba: tuple[int, int, int, int] = (255, 255, 255, 60)
    margin_bottom: int = 14

@dataclass
class Theme:
    font_path: str | None = None
    font_size: int = 20
    text_rgb: tuple[int, int, int] = (237, 237, 237)
    box_bg: tuple[int, int, int] = (20, 22, 27)
    box_border: tuple[int, int, int] = (60, 64, 72)
    border_radius: int = 16
    padding: tuple[int, int, int, int] = (20, 24, 20, 24)
    line_spacing: int = 4
    entry_gap: int = 12
    header_rgb: tuple[int, int, int] = (150, 156, 170)
    composing_text: str = "Tufti is typing…"
    scrollbar: ScrollbarStyle = field(default_factory=ScrollbarStyle)
    bubbles: Dict[str, BubbleStyle] = field(default_factory=_default_bubbles)
    jump_button: JumpButtonStyle = field(default_factory=JumpButtonStyle)

    def derive(self, **overrides) -> "Theme":
        """ Create a variant theme without mutating the base. """
        return replace(self, **overrides)

    def bubble(self, author: str) -> BubbleStyle:
        return self.bubbles.get(author) or BubbleStyle()

def compute_centered_rect(surface: pygame.Surface, frac_w=0.7, frac_h=0.45) -> pygame.Rect:
    sw, sh = surface.get_size()
    w, h = int(sw * frac_w), int(sh * frac_h)
    return pygame.Rect((sw - w) // 2, (sh - h) // 2, w, h)
