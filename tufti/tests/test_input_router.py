# test_input_router.py
import unittest

import pygame

from scrollbot.follow.controller import InteractionHandlers
from scrollbot.input_router import InputRouter


class Region:
    def __init__(self, rect):
        self.rect = rect

    def hit_test(self, pos):
        return self.rect.collidepoint(pos)


class TestInputRouter(unittest.TestCase):
    def setUp(self):
        self.calls = []
        handlers = InteractionHandlers(
            on_wheel=lambda: self.calls.append("wheel"),
            on_touch_start=lambda: self.calls.append("touch"),
            on_pointer_down=lambda: self.calls.append("pointer"),
        )
        self.pointer = (50, 50)
        self.router = InputRouter(
            region=Region(pygame.Rect(0, 0, 100, 100)),
            handlers=handlers,
            pointer_pos=lambda: self.pointer,
            window_size=lambda: (1000, 1000),
        )

    def test_wheel_over_region(self):
        self.assertTrue(self.router.route(pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=-1)))
        self.pointer = (500, 500)
        self.assertFalse(self.router.route(pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=1)))
        self.assertEqual(self.calls, ["wheel"])

    def test_finger_uses_normalised_coordinates(self):
        inside = pygame.event.Event(pygame.FINGERDOWN, x=0.05, y=0.05, touch_id=0, finger_id=0)
        outside = pygame.event.Event(pygame.FINGERDOWN, x=0.5, y=0.05, touch_id=0, finger_id=0)
        self.assertEqual(self.router.interaction_kind(inside), "touch")
        self.assertIsNone(self.router.interaction_kind(outside))
        self.router.route(inside)
        self.assertEqual(self.calls, ["touch"])

    def test_any_button_inside(self):
        for button in (1, 2, 3):
            self.router.route(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(10, 10), button=button))
        self.router.route(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(150, 10), button=1))
        self.assertEqual(self.calls, ["pointer"] * 3)

    def test_other_events_are_not_interactions(self):
        for e in (
            pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 10), rel=(1, 1), buttons=(0, 0, 0)),
            pygame.event.Event(pygame.MOUSEBUTTONUP, pos=(10, 10), button=1),
            pygame.event.Event(pygame.KEYDOWN, key=pygame.K_PAGEUP, mod=0),
        ):
            self.assertFalse(self.router.route(e))
        self.assertEqual(self.calls, [])


if __name__ == "__main__":
    unittest.main()
