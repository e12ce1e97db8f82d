import unittest

import numpy as np

from overlay_kit.types import ScreenBox
from overlay_kit.visualize import draw_screen_boxes


def _box(left, top, width, height) -> ScreenBox:
    return ScreenBox(
        left=left,
        top=top,
        width=width,
        height=height,
        label="A 90%",
        confidence=0.9,
        class_id=0,
        class_name="A",
        anchor_x=left,
        anchor_y=top - 20,
    )


class TestDrawScreenBoxes(unittest.TestCase):
    def test_draws_on_copy(self) -> None:
        img = np.zeros((200, 200, 3), dtype=np.uint8)
        out = draw_screen_boxes(img, [_box(50, 60, 80, 100)])
        self.assertEqual(out.shape, img.shape)
        self.assertEqual(int(img.sum()), 0)
        # Box edge in red (BGR)
        self.assertEqual(tuple(int(v) for v in out[100, 50]), (0, 0, 255))

    def test_offscreen_box_does_not_raise(self) -> None:
        img = np.zeros((50, 50, 3), dtype=np.uint8)
        out = draw_screen_boxes(img, [_box(-30, -40, 200, 10), _box(400, 400, 5, 5)])
        self.assertEqual(out.shape, img.shape)

    def test_rejects_non_bgr(self) -> None:
        with self.assertRaises(ValueError):
            draw_screen_boxes(np.zeros((10, 10), dtype=np.uint8), [])
        with self.assertRaises(TypeError):
            draw_screen_boxes(None, [])


if __name__ == "__main__":
    unittest.main()
