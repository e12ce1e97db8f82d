from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Detection:
    """
    Single decoded detection in model space (centre form).

    `class_name` is always `labels[class_id]` for the label list used to decode it.
    """

    x: float
    y: float
    width: float
    height: float
    confidence: float
    class_id: int
    class_name: str

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        half_w = self.width / 2
        half_h = self.height / 2
        return self.x - half_w, self.y - half_h, self.x + half_w, self.y + half_h


@dataclass(frozen=True)
class ScreenBox:
    """
    Screen-space rectangle (top-left form) plus the label drawn above it.
    """

    left: float
    top: float
    width: float
    height: float
    label: str
    confidence: float
    class_id: int
    class_name: str
    anchor_x: float
    anchor_y: float

    def as_ltwh(self) -> Tuple[float, float, float, float]:
        return self.left, self.top, self.width, self.height

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.left, self.top, self.left + self.width, self.top + self.height
