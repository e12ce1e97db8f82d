from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from .types import ScreenBox


def draw_screen_boxes(
    image_bgr: np.ndarray,
    boxes: Iterable[ScreenBox],
    *,
    color: Tuple[int, int, int] = (0, 0, 255),
    box_thickness: int = 3,
    font_scale: float = 0.5,
    font_thickness: int = 1,
    text_padding: int = 4,
) -> np.ndarray:
    """
    Draw screen boxes + their labels on an OpenCV BGR image and return a copy.

    The image is treated as the rendering surface: box coordinates are pixels in it.
    Boxes are not clipped, OpenCV simply drops the parts outside the image.
    Each label sits on a filled band whose top-left corner is the box's label anchor.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_screen_boxes(). Install with `pip install opencv-python`.") from e

    if image_bgr is None or not hasattr(image_bgr, "shape"):
        raise TypeError("image_bgr must be a NumPy array (BGR).")
    if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

    out = image_bgr.copy()

    for box in boxes:
        x1, y1, x2, y2 = (int(round(v)) for v in box.as_xyxy())
        cv2.rectangle(out, (x1, y1), (x2, y2), color, thickness=box_thickness)

        (tw, th), baseline = cv2.getTextSize(box.label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thickness)
        ax, ay = int(round(box.anchor_x)), int(round(box.anchor_y))
        band_bottom = max(y1, ay + th + baseline)

        cv2.rectangle(out, (ax, ay), (ax + tw + 2 * text_padding, band_bottom), color, thickness=-1)
        cv2.putText(
            out,
            box.label,
            (ax + text_padding, band_bottom - baseline),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            (255, 255, 255),
            thickness=font_thickness,
            lineType=cv2.LINE_AA,
        )

    return out
