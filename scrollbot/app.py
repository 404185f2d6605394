from __future__ import annotations

import logging
import pygame

from scrollbot.settings import AppCfg
from scrollbot.ui.anim import FrameLoop

from tufti.scenes.chat import ChatScene

logger = logging.getLogger(__name__)

_WINDOW_FLAGS = pygame.RESIZABLE | pygame.DOUBLEBUF


class ChatApp:
    """
    Window + main loop hosting the chat scene.

    One iteration: pump events, tick the FrameLoop (spring scrolls advance
    here, once per displayed frame), update, draw, flip.
    """

    def __init__(self, cfg: AppCfg):
        self.cfg = cfg
        pygame.init()
        pygame.display.set_caption(cfg.window.title)
        self.screen = self._open_window(cfg.window.width, cfg.window.height)

        self.clock = pygame.time.Clock()
        self.frames = FrameLoop()
        self.scene = ChatScene(cfg, self.screen, self.frames)
        self.running = True
        logger.info("chat window opened at %dx%d", *self.screen.get_size())

    def run(self) -> None:
        try:
            while self.running and not self.scene.request_quit:
                dt = self.clock.tick(self.cfg.fps) / 1000.0
                self._pump_events()
                if not self.running:
                    break
                self.frames.tick()
                self.scene.update(dt)
                self.scene.draw(self.screen)
                pygame.display.flip()
        finally:
            # unmount first so no frame callback outlives the panel
            self.scene.on_exit()
            pygame.quit()
            logger.info("chat window closed")

    # ---------- internals ----------
    def _pump_events(self) -> None:
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self.running = False
                return
            if e.type == pygame.VIDEORESIZE:
                # the scene reads the new surface when it sees the same event
                self.screen = self._open_window(e.w, e.h)
                self.scene.screen = self.screen
            self.scene.handle_event(e)

    @staticmethod
    def _open_window(w: int, h: int) -> pygame.Surface:
        return pygame.display.set_mode((max(1, int(w)), max(1, int(h))), flags=_WINDOW_FLAGS)
