"""
Model space -> screen space mapping for overlay boxes.

Three transforms compose per detection: undo the letterbox, correct the sensor
orientation, then scale into the fitted preview. Nothing here clamps; boxes that fall
partly outside the preview keep their true geometry.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple

from .letterbox import LetterboxGeometry, PreviewFit
from .types import Detection, ScreenBox


DEFAULT_LABEL_HEIGHT = 20.0


class OrientationPolicy(str, Enum):
    # Sensor stream already matches the display orientation.
    DIRECT = "direct"
    # Sensor stream is rotated 90 degrees and horizontally mirrored relative to the display.
    ROTATE_MIRROR = "rotate-mirror"


_PLATFORM_POLICIES = {
    "ios": OrientationPolicy.DIRECT,
    "android": OrientationPolicy.ROTATE_MIRROR,
}


def policy_for_platform(platform: str) -> OrientationPolicy:
    key = platform.strip().lower()
    if key not in _PLATFORM_POLICIES:
        raise ValueError(f"No orientation policy for platform {platform!r}; expected one of {sorted(_PLATFORM_POLICIES)}")
    return _PLATFORM_POLICIES[key]


def parse_orientation(value: object) -> OrientationPolicy:
    if isinstance(value, OrientationPolicy):
        return value
    if not isinstance(value, str):
        raise ValueError(f"orientation must be a string, got {type(value).__name__}")
    try:
        return OrientationPolicy(value.strip().lower())
    except ValueError as exc:
        allowed = [p.value for p in OrientationPolicy]
        raise ValueError(f"Unknown orientation {value!r}; expected one of {allowed}") from exc


@dataclass(frozen=True)
class SizeCorrection:
    """
    Multipliers applied to the final box extents. The defaults compensate for the
    boxes coming out visibly small on the preview.
    """

    width: float = 1.1
    height: float = 1.25

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError("size correction multipliers must be > 0")


class NormalizedBox(NamedTuple):
    x: float
    y: float
    width: float
    height: float


def unletterbox(detection: Detection, letterbox: LetterboxGeometry) -> NormalizedBox:
    """
    Strip letterbox padding and normalise to the sensor frame ([0, 1] when inside it).

    The padded axis is shifted by its offset and divided by the content size; the
    other axis is divided by the model input size.
    """

    s = letterbox.model_size
    if letterbox.padded_axis == "x":
        return NormalizedBox(
            x=(detection.x - letterbox.offset_x) / letterbox.content_width,
            y=detection.y / s,
            width=detection.width / letterbox.content_width,
            height=detection.height / s,
        )
    return NormalizedBox(
        x=detection.x / s,
        y=(detection.y - letterbox.offset_y) / letterbox.content_height,
        width=detection.width / s,
        height=detection.height / letterbox.content_height,
    )


def orient(box: NormalizedBox, policy: OrientationPolicy) -> NormalizedBox:
    if policy is OrientationPolicy.DIRECT:
        return box
    if policy is OrientationPolicy.ROTATE_MIRROR:
        return NormalizedBox(x=1.0 - box.y, y=box.x, width=box.height, height=box.width)
    raise ValueError(f"Unsupported orientation policy: {policy!r}")


def format_label(detection: Detection) -> str:
    # Halves round up (12.5 -> 13); confidences are never negative
    percent = math.floor(detection.confidence * 100 + 0.5)
    return f"{detection.class_name} {percent}%"


def map_to_screen(
    detection: Detection,
    letterbox: LetterboxGeometry,
    preview: PreviewFit,
    policy: OrientationPolicy,
    size_correction: SizeCorrection = SizeCorrection(),
    label_height: float = DEFAULT_LABEL_HEIGHT,
) -> ScreenBox:
    screen = orient(unletterbox(detection, letterbox), policy)

    center_x = screen.x * preview.width + preview.offset_x
    center_y = screen.y * preview.height + preview.offset_y
    width = screen.width * preview.width * size_correction.width
    height = screen.height * preview.height * size_correction.height

    left = center_x - width / 2
    top = center_y - height / 2

    return ScreenBox(
        left=left,
        top=top,
        width=width,
        height=height,
        label=format_label(detection),
        confidence=detection.confidence,
        class_id=detection.class_id,
        class_name=detection.class_name,
        anchor_x=left,
        anchor_y=top - label_height,
    )


def map_detections(
    detections: Iterable[Detection],
    letterbox: LetterboxGeometry,
    preview: PreviewFit,
    policy: OrientationPolicy,
    size_correction: SizeCorrection = SizeCorrection(),
    label_height: float = DEFAULT_LABEL_HEIGHT,
) -> List[ScreenBox]:
    return [
        map_to_screen(det, letterbox, preview, policy, size_correction=size_correction, label_height=label_height)
        for det in detections
    ]
