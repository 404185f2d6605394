# tufti/scenes/chat.py
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

import pygame

from scrollbot.settings import AppCfg, load_ui_defaults, build_theme_from_defaults
from scrollbot.resources import project_path
from scrollbot.follow.spring import FrameScheduler
from scrollbot.transcript.types import Author, Message, Transcript
from scrollbot.transcript.loader import load_chat_script
from scrollbot.transcript.pager import HistoryPager
from scrollbot.transcript.backup import MessageBackup
from scrollbot.transcript.stream import StreamAppender, StreamError
from scrollbot.transcript.keywords import extract_keywords
from scrollbot.ui.style import Theme, compute_centered_rect
from scrollbot.ui.text_layout import FontCache
from scrollbot.ui.widgets.transcript_box import TranscriptBox

from tufti.assistant import ScriptedAssistant

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class ChatScene:
    """
    Chat play scene.
    - Restores the last conversation from the local backup (or the newest history page)
    - Enter sends the next scripted line; the scripted assistant streams a reply back
    - L loads an older page of history above the current transcript
    - Routes wheel/keys to the transcript, which keeps itself pinned while following
    """

    def __init__(self, cfg: AppCfg, screen: pygame.Surface, frames: FrameScheduler):
        self.cfg = cfg
        self.screen = screen
        self.request_quit = False

        # ---- theme, fonts ------------------------------------------------------
        self.defaults = load_ui_defaults()
        self.theme: Theme = build_theme_from_defaults(self.defaults)
        self.fonts = FontCache()

        # ---- content -----------------------------------------------------------
        chat = cfg.chat
        script = load_chat_script(str(project_path(chat.script_path)))
        self.pager = HistoryPager(script.history, page_size=chat.history_page_size)
        self.backup = MessageBackup(project_path(chat.backup_path), chat.backup_max_messages)

        restored = self.backup.load()
        self.transcript = Transcript(restored)
        if not restored:
            self.pager.load_older(self.transcript)

        self.assistant = ScriptedAssistant(
            script.turns,
            tokens_per_sec=chat.tokens_per_sec,
            composing_delay_s=chat.composing_delay_s,
        )
        self.appender = StreamAppender(self.transcript, _new_id)
        self._waiting_reply = False

        # ---- transcript panel ---------------------------------------------------
        pn = cfg.panel
        self.box = TranscriptBox(
            compute_centered_rect(self.screen, pn.width_frac, pn.height_frac),
            self.theme,
            self.fonts,
            frames,
            messages=self.transcript.messages,
            threshold_px=cfg.follow.bottom_threshold_px,
            spring=cfg.follow.spring,
            wheel_pixels=cfg.input.scroll_wheel_pixels,
            page_frac=cfg.input.page_scroll_frac,
        )
        self._topics: List[str] = []
        self._refresh_topics()

    # --- Scene lifecycle ----------------------------------------------------
    def on_exit(self) -> None:
        self.box.dispose()
        self.backup.save(self.transcript.messages)

    # --- Loop ---------------------------------------------------------------
    def handle_event(self, e: pygame.event.Event) -> bool:
        # Transcript first: user input must stop any auto-scroll before anything else
        if self.box.handle_event(e):
            return True

        if e.type == pygame.KEYDOWN:
            if e.key == pygame.K_ESCAPE:
                self.request_quit = True
                return True
            if e.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                self.send_next()
                return True
            if e.key == pygame.K_l:
                self.load_older()
                return True
            return self._handle_scroll_key(e.key)

        if e.type == pygame.VIDEORESIZE:
            pn = self.cfg.panel
            self.screen = pygame.display.get_surface() or self.screen
            self.box.on_resize(compute_centered_rect(self.screen, pn.width_frac, pn.height_frac))
            return True

        return False

    def update(self, dt: float) -> None:
        chunk = self.assistant.update(dt)
        if chunk:
            self._apply_stream(chunk)
        self.box.update(dt)

    def draw(self, surface: pygame.Surface) -> None:
        surface.fill(self.cfg.window.bg_rgb)
        font = self.fonts.get(self.theme.font_path, max(12, int(self.theme.font_size * 0.75)))

        header = "Topics: " + ", ".join(self._topics) if self._topics else self.cfg.window.title
        surface.blit(font.render(header, True, self.theme.header_rgb), (self.box.rect.x, 8))

        self.box.draw(surface)

        hint = "Enter: send   L: older history   PgUp/PgDn/Home/End: scroll   Esc: quit"
        hs = font.render(hint, True, self.theme.header_rgb)
        surface.blit(hs, (self.box.rect.x, min(surface.get_height() - hs.get_height() - 6, self.box.rect.bottom + 6)))

    # --- chat actions -------------------------------------------------------
    def send_next(self) -> Optional[Message]:
        """Send the next scripted user line; ignored while a reply is in flight."""
        if self._waiting_reply:
            return None
        msg = self.transcript.append(Message(id=_new_id(), author=Author.USER,
                                             content=self.assistant.next_user_line()))
        self.assistant.reply_to_current()
        self._waiting_reply = True
        self.box.set_messages(self.transcript.messages, composing=True)
        self._refresh_topics()
        return msg

    def load_older(self) -> int:
        n = self.pager.load_older(self.transcript)
        if n:
            logger.info("loaded %d older messages", n)
            self.box.set_messages(self.transcript.messages, composing=self._waiting_reply)
        return n

    def _apply_stream(self, chunk: str) -> None:
        if not self.appender.composing:
            self.appender.begin()
            self.box.set_messages(self.transcript.messages, composing=True)
        try:
            added = self.appender.feed(chunk)
        except StreamError as ex:
            logger.error("reply stream failed: %s", ex)
            self.assistant.cancel()
            self.transcript.append(Message(id=_new_id(), author=Author.SYSTEM,
                                           content=f"Failed to receive reply: {ex}"))
            self._finish_reply()
            return
        if added:
            self.box.on_reply_growth()
        if not self.appender.composing:
            self._finish_reply()

    def _finish_reply(self) -> None:
        self._waiting_reply = False
        self.box.set_messages(self.transcript.messages, composing=False)
        self.backup.save(self.transcript.messages)

    def _refresh_topics(self) -> None:
        self._topics = [k.word for k in extract_keywords(self.transcript.messages)[:5]]

    # --- helpers ------------------------------------------------------------
    def _handle_scroll_key(self, key: int) -> bool:
        if key == pygame.K_PAGEUP:
            self.box.page_up()
            return True
        if key == pygame.K_PAGEDOWN:
            self.box.page_down()
            return True
        if key == pygame.K_HOME:
            self.box.scroll_to_top()
            return True
        if key == pygame.K_END:
            self.box.jump_to_latest()
            return True
        return False
