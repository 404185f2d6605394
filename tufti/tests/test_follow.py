# test_follow.py
import unittest

from scrollbot.follow.arrival import Arrival, ArrivalClassifier, ArrivalKind, classify_arrival
from scrollbot.follow.controller import ScrollFollowController
from scrollbot.follow.policy import FollowAction, decide
from scrollbot.follow.tracker import FollowState, ScrollTracker
from scrollbot.transcript.types import Author, Message
from scrollbot.ui.anim import FrameLoop
from scrollbot.ui.scroll_model import ScrollModel, ScrollSnapshot, read_snapshot

from tufti.tests.support import FakeClock, run_frames

U, A, S = Author.USER, Author.ASSISTANT, Author.SYSTEM


def msg(i, author=U):
    return Message(id=str(i), author=author, content=f"message {i}")


class TestScrollTracker(unittest.TestCase):
    def test_threshold_is_strict(self):
        state = FollowState()
        tracker = ScrollTracker(state, threshold_px=20)
        self.assertTrue(tracker.on_scroll(ScrollModel(1000, 500, 481)))     # 19px away
        self.assertFalse(tracker.on_scroll(ScrollModel(1000, 500, 480)))    # 20px away
        self.assertFalse(state.is_at_bottom)

    def test_short_content_counts_as_bottom(self):
        tracker = ScrollTracker(FollowState())
        self.assertTrue(tracker.on_scroll(ScrollModel(300, 500, 0)))

    def test_reaching_bottom_clears_pending(self):
        state = FollowState(is_at_bottom=False, pending_new_messages=True)
        tracker = ScrollTracker(state)
        tracker.on_scroll(ScrollModel(1000, 500, 100))
        self.assertTrue(state.pending_new_messages)
        tracker.on_scroll(ScrollModel(1000, 500, 500))
        self.assertFalse(state.pending_new_messages)
        self.assertTrue(state.is_at_bottom)

    def test_configurable_threshold(self):
        tracker = ScrollTracker(FollowState(), threshold_px=50)
        self.assertTrue(tracker.on_scroll(ScrollModel(1000, 500, 460)))

    def test_missing_viewport_keeps_state(self):
        state = FollowState(is_at_bottom=False)
        self.assertFalse(ScrollTracker(state).on_scroll(None))
        self.assertFalse(state.is_at_bottom)

    def test_snapshot_bottom_offset(self):
        snap = read_snapshot(ScrollModel(1000, 400, 120))
        self.assertEqual(snap, ScrollSnapshot(120.0, 1000.0, 400.0))
        self.assertEqual(snap.bottom_offset, 600.0)
        self.assertEqual(snap.distance_from_bottom, 480.0)
        self.assertEqual(ScrollSnapshot(0.0, 300.0, 500.0).bottom_offset, 0.0)
        self.assertIsNone(read_snapshot(None))


class TestArrivalClassifier(unittest.TestCase):
    def test_kinds(self):
        self.assertIs(classify_arrival([], "1", False).kind, ArrivalKind.EMPTY)
        self.assertIs(classify_arrival([msg(1)], None, False).kind, ArrivalKind.NEW_TRAILING)
        self.assertIs(classify_arrival([msg(0), msg(1)], "1", False).kind, ArrivalKind.HISTORY_PREPEND)

    def test_seeded_from_initial_messages(self):
        c = ArrivalClassifier([msg(1), msg(2, A)])
        self.assertEqual(c.previous_last_id, "2")
        self.assertIs(c.classify([msg(1), msg(2, A)]).kind, ArrivalKind.HISTORY_PREPEND)

    def test_empty_keeps_previous_id(self):
        c = ArrivalClassifier([msg(1)])
        self.assertIs(c.classify([]).kind, ArrivalKind.EMPTY)
        self.assertEqual(c.previous_last_id, "1")

    def test_new_trailing_carries_author_and_composing(self):
        c = ArrivalClassifier([msg(1)])
        a = c.classify([msg(1), msg(2, A)], composing=True)
        self.assertEqual(a, Arrival(ArrivalKind.NEW_TRAILING, A, True))
        self.assertEqual(c.previous_last_id, "2")


class TestPolicy(unittest.TestCase):
    def test_only_new_trailing_moves(self):
        for kind in (ArrivalKind.EMPTY, ArrivalKind.HISTORY_PREPEND):
            for author in (U, A, S, None):
                for bottom in (True, False):
                    self.assertIs(decide(Arrival(kind, author, True), bottom), FollowAction.NONE)

    def test_user_always_scrolls(self):
        for bottom in (True, False):
            self.assertIs(decide(Arrival(ArrivalKind.NEW_TRAILING, U), bottom), FollowAction.SCROLL)

    def test_assistant_follows_only_at_bottom(self):
        a = Arrival(ArrivalKind.NEW_TRAILING, A)
        self.assertIs(decide(a, True), FollowAction.SCROLL)
        self.assertIs(decide(a, False), FollowAction.SHOW_JUMP)

    def test_composing_counts_as_assistant_activity(self):
        a = Arrival(ArrivalKind.NEW_TRAILING, S, composing=True)
        self.assertIs(decide(a, True), FollowAction.SCROLL)
        self.assertIs(decide(a, False), FollowAction.SHOW_JUMP)

    def test_system_message_alone_is_ignored(self):
        a = Arrival(ArrivalKind.NEW_TRAILING, S)
        self.assertIs(decide(a, True), FollowAction.NONE)
        self.assertIs(decide(a, False), FollowAction.NONE)


class TestScrollFollowController(unittest.TestCase):
    def make(self, content_h, offset, messages, viewport_h=500):
        self.clock = FakeClock()
        self.frames = FrameLoop(clock=self.clock)
        self.vp = ScrollModel(content_h, viewport_h, offset)
        self.holder = {"vp": self.vp}
        ctl = ScrollFollowController(lambda: self.holder["vp"], self.frames, messages=messages)
        ctl.on_scroll()
        return ctl

    def advance(self, n):
        for _ in range(n):
            self.clock.t += 1 / 60
            self.frames.tick()

    def test_new_assistant_message_at_bottom_settles_at_bottom(self):
        msgs = [msg(1, U), msg(2, A)]
        ctl = self.make(1000, 500, msgs)
        self.assertTrue(ctl.is_at_bottom)

        msgs = msgs + [msg(3, A)]
        self.vp.content_h = 1200
        self.assertIs(ctl.update(msgs), FollowAction.SCROLL)
        run_frames(self.frames, self.clock)

        self.assertEqual(self.vp.offset, 700.0)
        self.assertTrue(ctl.is_at_bottom)
        self.assertFalse(ctl.show_jump_to_latest)
        self.assertFalse(ctl.animating)

    def test_prepend_never_moves_the_view(self):
        for offset in (0.0, 250.0, 1500.0):
            msgs = [msg(1), msg(2, A)]
            ctl = self.make(2000, offset, msgs)
            self.vp.content_h = 2600
            older = [msg("a"), msg("b", A)] + msgs
            self.assertIs(ctl.update(older), FollowAction.NONE)
            self.assertIs(ctl.update(older, composing=True), FollowAction.NONE)
            self.assertEqual(self.frames.pending_count, 0)
            self.assertEqual(self.vp.offset, offset)
            self.assertFalse(ctl.show_jump_to_latest)

    def test_in_place_growth_is_not_an_arrival(self):
        reply = msg(2, A)
        ctl = self.make(1000, 0, [msg(1), reply])
        reply.content += " and more"
        self.vp.content_h = 1100
        self.assertIs(ctl.update([msg(1), reply], composing=True), FollowAction.NONE)
        self.assertEqual(self.frames.pending_count, 0)

    def test_user_message_scrolls_from_anywhere(self):
        msgs = [msg(1, A)]
        ctl = self.make(2000, 0, msgs)
        self.assertFalse(ctl.is_at_bottom)
        self.vp.content_h = 2100
        self.assertIs(ctl.update(msgs + [msg(2, U)]), FollowAction.SCROLL)
        run_frames(self.frames, self.clock)
        self.assertEqual(self.vp.offset, 1600.0)
        self.assertTrue(ctl.is_at_bottom)

    def test_assistant_while_reading_history_shows_jump(self):
        msgs = [msg(1), msg(2, A)]
        ctl = self.make(2000, 100, msgs)
        self.vp.content_h = 2200
        self.assertIs(ctl.update(msgs + [msg(3, A)]), FollowAction.SHOW_JUMP)
        self.assertEqual(self.vp.offset, 100.0)
        self.assertEqual(self.frames.pending_count, 0)
        self.assertTrue(ctl.show_jump_to_latest)

        # user scrolls down by hand; reaching the bottom clears the affordance
        self.vp.to_bottom()
        ctl.on_scroll()
        self.assertFalse(ctl.show_jump_to_latest)

    def test_jump_to_latest_clears_affordance_on_arrival(self):
        msgs = [msg(1), msg(2, A)]
        ctl = self.make(2000, 100, msgs)
        ctl.update(msgs + [msg(3, A)])
        ctl.scroll_to_bottom()
        run_frames(self.frames, self.clock)
        self.assertTrue(ctl.is_at_bottom)
        self.assertFalse(ctl.show_jump_to_latest)

    def test_reply_during_send_animation_keeps_following(self):
        msgs = [msg(1, A)]
        ctl = self.make(2000, 0, msgs)
        msgs = msgs + [msg(2, U)]
        self.vp.content_h = 2100
        ctl.update(msgs)
        # placeholder reply lands before the first frame has run
        msgs = msgs + [msg(3, A)]
        self.vp.content_h = 2200
        self.assertIs(ctl.update(msgs, composing=True), FollowAction.SCROLL)
        self.assertFalse(ctl.show_jump_to_latest)
        run_frames(self.frames, self.clock)
        self.assertEqual(self.vp.offset, 1700.0)

    def test_user_interaction_stops_the_animation(self):
        for handler in ("on_wheel", "on_touch_start", "on_pointer_down"):
            msgs = [msg(1, A)]
            ctl = self.make(5000, 0, msgs)
            ctl.update(msgs + [msg(2, U)])
            self.advance(3)
            self.assertTrue(ctl.animating)
            frozen = self.vp.offset

            getattr(ctl.interaction_handlers, handler)()
            self.assertFalse(ctl.animating)
            self.assertEqual(self.frames.pending_count, 0)
            self.advance(5)
            self.assertEqual(self.vp.offset, frozen)

            # the user's own scroll is not fought
            self.vp.scroll(-40)
            ctl.on_scroll()
            self.advance(5)
            self.assertEqual(self.vp.offset, max(0.0, frozen - 40))

    def test_empty_updates_do_nothing(self):
        ctl = self.make(1000, 0, [])
        for _ in range(3):
            self.assertIs(ctl.update([]), FollowAction.NONE)
            self.assertIs(ctl.update([], composing=True), FollowAction.NONE)
        self.assertEqual(self.frames.pending_count, 0)
        self.assertEqual(self.vp.offset, 0.0)

    def test_repeat_update_is_idempotent(self):
        msgs = [msg(1), msg(2, A)]
        ctl = self.make(2000, 0, [msg(1)])
        self.assertIs(ctl.update(msgs), FollowAction.SHOW_JUMP)
        self.assertIs(ctl.update(msgs), FollowAction.NONE)

    def test_missing_viewport(self):
        ctl = self.make(1000, 0, [msg(1)])
        self.holder["vp"] = None
        self.assertIs(ctl.update([msg(1), msg(2, U)]), FollowAction.SCROLL)
        self.assertFalse(ctl.animating)
        self.assertEqual(self.frames.pending_count, 0)
        self.assertFalse(ctl.on_scroll())

    def test_dispose_mid_flight(self):
        msgs = [msg(1, A)]
        ctl = self.make(5000, 0, msgs)
        ctl.update(msgs + [msg(2, U)])
        self.advance(2)
        ctl.dispose()
        ctl.dispose()
        self.assertEqual(self.frames.pending_count, 0)
        self.assertFalse(ctl.animating)


if __name__ == "__main__":
    unittest.main()
