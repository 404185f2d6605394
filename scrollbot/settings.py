from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

import yaml

from scrollbot.follow.spring import SpringParams
from scrollbot.resources import project_path
from scrollbot.ui.style import Theme, BubbleStyle

DEFAULTS_PATH = "tufti/config/defaults.yaml"

@dataclass
class WindowCfg:
    width: int = 960
    height: int = 720
    title: str = "Tufti"
    bg_rgb: tuple[int, int, int] = (14, 15, 18)

@dataclass
class PanelCfg:
    width_frac: float = 0.7
    height_frac: float = 0.86

@dataclass
class InputCfg:
    scroll_wheel_pixels: int = 40
    page_scroll_frac: float = 0.9

@dataclass
class FollowCfg:
    bottom_threshold_px: float = 20.0       # "at bottom" when closer than this to the true bottom
    spring: SpringParams = field(default_factory=SpringParams)

@dataclass
class ChatCfg:
    script_path: str = "tufti/content/script.yaml"
    history_page_size: int = 50
    backup_path: str = "tufti/data/backup.yaml"
    backup_max_messages: int = 100
    tokens_per_sec: float = 24.0            # streamed reply speed of the scripted assistant
    composing_delay_s: float = 0.6          # "typing…" before the first token

@dataclass
class AppCfg:
    fps: int = 60
    window: WindowCfg = field(default_factory=WindowCfg)
    panel: PanelCfg = field(default_factory=PanelCfg)
    input: InputCfg = field(default_factory=InputCfg)
    follow: FollowCfg = field(default_factory=FollowCfg)
    chat: ChatCfg = field(default_factory=ChatCfg)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur

def load_ui_defaults(path: str = DEFAULTS_PATH) -> Dict[str, Any]:
    """ Raw YAML mapping; empty when the file is missing. """
    p = project_path(path)
    if not p.exists():
        return {}
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data

def load_settings(path: str = DEFAULTS_PATH) -> AppCfg:
    data = load_ui_defaults(path)
    sp = SpringParams()

    return AppCfg(
        fps=int(_get(data, "fps", 60)),
        window=WindowCfg(
            width=int(_get(data, "window.width", 960)),
            height=int(_get(data, "window.height", 720)),
            title=str(_get(data, "window.title", "Tufti")),
            bg_rgb=tuple(_get(data, "window.bg_rgb", (14, 15, 18))),
        ),
        panel=PanelCfg(
            width_frac=float(_get(data, "panel.width_frac", 0.7)),
            height_frac=float(_get(data, "panel.height_frac", 0.86)),
        ),
        input=InputCfg(
            scroll_wheel_pixels=int(_get(data, "input.scroll_wheel_pixels", 40)),
            page_scroll_frac=float(_get(data, "input.page_scroll_frac", 0.9)),
        ),
        follow=FollowCfg(
            bottom_threshold_px=float(_get(data, "follow.bottom_threshold_px", 20.0)),
            spring=SpringParams(
                tension=float(_get(data, "follow.spring.tension", sp.tension)),
                friction=float(_get(data, "follow.spring.friction", sp.friction)),
                mass=float(_get(data, "follow.spring.mass", sp.mass)),
                max_dt=float(_get(data, "follow.spring.max_dt", sp.max_dt)),
                rest_displacement=float(_get(data, "follow.spring.rest_displacement", sp.rest_displacement)),
                rest_velocity=float(_get(data, "follow.spring.rest_velocity", sp.rest_velocity)),
            ),
        ),
        chat=ChatCfg(
            script_path=str(_get(data, "chat.script_path", "tufti/content/script.yaml")),
            history_page_size=int(_get(data, "chat.history_page_size", 50)),
            backup_path=str(_get(data, "chat.backup_path", "tufti/data/backup.yaml")),
            backup_max_messages=int(_get(data, "chat.backup_max_messages", 100)),
            tokens_per_sec=float(_get(data, "chat.tokens_per_sec", 24.0)),
            composing_delay_s=float(_get(data, "chat.composing_delay_s", 0.6)),
        ),
    )

def build_theme_from_defaults(defaults: Dict[str, Any]) -> Theme:
    tdata = defaults.get("theme", {}) or {}
    th = Theme()

    # core
    th.font_path     = tdata.get("font_path", th.font_path)
    th.font_size     = int(tdata.get("font_size", th.font_size))
    th.text_rgb      = tuple(tdata.get("text_rgb", th.text_rgb))
    th.box_bg        = tuple(tdata.get("box_bg", th.box_bg))
    th.box_border    = tuple(tdata.get("box_border", th.box_border))
    th.border_radius = int(tdata.get("border_radius", th.border_radius))
    th.padding       = tuple(tdata.get("padding", th.padding))
    th.line_spacing  = int(tdata.get("line_spacing", th.line_spacing))
    th.entry_gap     = int(tdata.get("entry_gap", th.entry_gap))
    th.header_rgb    = tuple(tdata.get("header_rgb", th.header_rgb))
    th.composing_text = str(tdata.get("composing_text", th.composing_text))

    # scrollbar
    sc = tdata.get("scrollbar", {}) or {}
    th.scrollbar.width                 = int(sc.get("width", th.scrollbar.width))
    th.scrollbar.margin                = int(sc.get("margin", th.scrollbar.margin))
    th.scrollbar.radius                = int(sc.get("radius", th.scrollbar.radius))
    th.scrollbar.min_thumb_size        = int(sc.get("min_thumb_size", th.scrollbar.min_thumb_size))
    th.scrollbar.show_when_no_overflow = bool(sc.get("show_when_no_overflow", th.scrollbar.show_when_no_overflow))
    th.scrollbar.track_color           = tuple(sc.get("track_color", th.scrollbar.track_color))
    th.scrollbar.thumb_color           = tuple(sc.get("thumb_color", th.scrollbar.thumb_color))

    # per-author bubbles: only override what the YAML names
    for author, raw in (tdata.get("bubbles", {}) or {}).items():
        if not isinstance(raw, dict):
            continue
        b = th.bubbles.get(author) or BubbleStyle()
        b.label      = str(raw.get("label", b.label))
        b.label_rgb  = tuple(raw.get("label_rgb", b.label_rgb))
        b.text_rgb   = tuple(raw.get("text_rgb", b.text_rgb))
        b.bg_rgba    = tuple(raw.get("bg_rgba", b.bg_rgba))
        b.pad_x      = int(raw.get("pad_x", b.pad_x))
        b.pad_y      = int(raw.get("pad_y", b.pad_y))
        b.radius     = int(raw.get("radius", b.radius))
        b.align      = str(raw.get("align", b.align))
        b.width_frac = float(raw.get("width_frac", b.width_frac))
        th.bubbles[author] = b

    # jump-to-latest button
    jb = tdata.get("jump_button", {}) or {}
    j = th.jump_button
    j.label         = str(jb.get("label", j.label))
    j.h             = int(jb.get("h", j.h))
    j.pad_x         = int(jb.get("pad_x", j.pad_x))
    j.radius        = int(jb.get("radius", j.radius))
    j.text_size     = int(jb.get("text_size", j.text_size))
    j.text_rgb      = tuple(jb.get("text_rgb", j.text_rgb))
    j.fill_rgba     = tuple(jb.get("fill_rgba", j.fill_rgba))
    j.hover_rgba    = tuple(jb.get("hover_rgba", j.hover_rgba))
    j.border_rgba   = tuple(jb.get("border_rgba", j.border_rgba))
    j.margin_bottom = int(jb.get("margin_bottom", j.margin_bottom))

    return th

