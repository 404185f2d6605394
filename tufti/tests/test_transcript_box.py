# test_transcript_box.py
import os
import unittest

import pygame

from scrollbot.follow.policy import FollowAction
from scrollbot.transcript.types import Author, Message
from scrollbot.ui.anim import FrameLoop
from scrollbot.ui.style import Theme
from scrollbot.ui.text_layout import FontCache
from scrollbot.ui.widgets.transcript_box import TranscriptBox

from tufti.tests.support import FakeClock, run_frames


def conversation(n):
    authors = (Author.USER, Author.ASSISTANT)
    return [
        Message(id=f"m{i}", author=authors[i % 2], content=f"line {i} " + "word " * (i % 7 + 3))
        for i in range(n)
    ]


class TestTranscriptBox(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        pygame.display.init()
        pygame.font.init()

    @classmethod
    def tearDownClass(cls):
        pygame.quit()

    def setUp(self):
        self.clock = FakeClock()
        self.frames = FrameLoop(clock=self.clock)
        self.msgs = conversation(30)
        self.box = TranscriptBox(pygame.Rect(0, 0, 400, 240), Theme(), FontCache(), self.frames,
                                 messages=self.msgs)
        self.box.router.pointer_pos = lambda: (10, 10)

    def wheel(self, y):
        return self.box.handle_event(pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=y))

    def test_opens_on_newest_message(self):
        self.assertGreater(self.box.scroller.max(), 0)
        self.assertEqual(self.box.scroller.offset, self.box.scroller.max())
        self.assertTrue(self.box.is_at_bottom)

    def test_wheel_leaves_bottom_and_new_reply_shows_jump(self):
        self.assertTrue(self.wheel(1))
        self.assertFalse(self.box.is_at_bottom)
        offset = self.box.scroller.offset

        msgs = self.msgs + [Message(id="r1", author=Author.ASSISTANT, content="new reply")]
        self.assertIs(self.box.set_messages(msgs), FollowAction.SHOW_JUMP)
        self.box.update(0.0)
        self.assertTrue(self.box.jump.visible)
        self.assertEqual(self.box.scroller.offset, offset)

        click = pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=self.box.jump.rect.center, button=1)
        self.assertTrue(self.box.handle_event(click))
        run_frames(self.frames, self.clock)
        self.box.update(0.0)
        self.assertTrue(self.box.is_at_bottom)
        self.assertFalse(self.box.jump.visible)
        self.assertEqual(self.box.scroller.offset, self.box.scroller.max())

    def test_wheel_stops_running_animation(self):
        self.box.scroll_to_top()
        self.box.jump_to_latest()
        self.clock.t += 1 / 60
        self.frames.tick()
        self.assertTrue(self.box.follow.animating)
        self.wheel(1)
        self.assertFalse(self.box.follow.animating)
        self.assertEqual(self.frames.pending_count, 0)

    def test_streaming_growth_stays_pinned(self):
        reply = Message(id="r1", author=Author.ASSISTANT)
        msgs = self.msgs + [reply]
        self.assertIs(self.box.set_messages(msgs, composing=True), FollowAction.SCROLL)
        run_frames(self.frames, self.clock)

        reply.content = "token " * 80
        self.box.on_reply_growth()
        self.assertTrue(self.box.follow.animating)
        run_frames(self.frames, self.clock)
        self.assertEqual(self.box.scroller.offset, self.box.scroller.max())

    def test_growth_while_reading_does_not_move(self):
        self.box.scroll_to_top()
        reply = Message(id="r1", author=Author.ASSISTANT)
        self.box.set_messages(self.msgs + [reply], composing=True)
        reply.content = "token " * 80
        self.box.on_reply_growth()
        self.assertFalse(self.box.follow.animating)
        self.assertEqual(self.box.scroller.offset, 0.0)

    def test_older_page_keeps_offset(self):
        self.box.scroll_to_top()
        self.box.scroll(120)
        offset = self.box.scroller.offset
        older = [Message(id=f"o{i}", author=Author.USER, content="older") for i in range(5)]
        self.assertIs(self.box.set_messages(older + self.msgs), FollowAction.NONE)
        self.assertEqual(self.box.scroller.offset, offset)

    def test_dispose_releases_frame(self):
        self.box.scroll_to_top()
        self.box.jump_to_latest()
        self.box.dispose()
        self.assertIsNone(self.box.viewport())
        self.assertEqual(self.frames.pending_count, 0)

    def test_draw_smoke(self):
        surface = pygame.Surface((640, 480))
        self.box.set_composing(True)
        self.box.update(0.25)
        self.box.draw(surface)


if __name__ == "__main__":
    unittest.main()
