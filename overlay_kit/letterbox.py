from dataclasses import dataclass
from typing import Tuple


DEFAULT_MODEL_SIZE = 640.0


@dataclass(frozen=True)
class LetterboxGeometry:
    """
    Where the camera content sits inside the square model input.

    Exactly one axis is padded: the content fills the other axis and is centred on
    the padded one. A square sensor is an X-padding of zero.
    """

    model_size: float
    padded_axis: str
    content_width: float
    content_height: float
    offset_x: float
    offset_y: float

    def __post_init__(self) -> None:
        if not self.model_size > 0:
            raise ValueError("model_size must be > 0")
        if self.padded_axis not in ("x", "y"):
            raise ValueError(f"padded_axis must be 'x' or 'y', got {self.padded_axis!r}")
        if not (self.content_width > 0 and self.content_height > 0):
            raise ValueError("letterbox content must have a positive size")
        if self.content_width > self.model_size or self.content_height > self.model_size:
            raise ValueError("letterbox content must fit inside the model input")

        # The unpadded axis spans the whole model input
        if self.padded_axis == "x":
            full_content, full_offset = self.content_height, self.offset_y
        else:
            full_content, full_offset = self.content_width, self.offset_x
        if full_content != self.model_size or full_offset != 0:
            raise ValueError(
                f"only the {self.padded_axis} axis may be padded; the other axis must have "
                f"content {self.model_size} and offset 0"
            )
        if not self.padded_offset >= 0:
            raise ValueError("letterbox offset must be >= 0")

    @property
    def padded_offset(self) -> float:
        return self.offset_x if self.padded_axis == "x" else self.offset_y

    @property
    def pad(self) -> Tuple[float, float]:
        """(dw, dh) padding on the left/top edge."""
        return self.offset_x, self.offset_y


def letterbox_geometry(sensor_aspect_ratio: float, model_size: float = DEFAULT_MODEL_SIZE) -> LetterboxGeometry:
    """
    Letterbox layout for a sensor frame of `width / height == sensor_aspect_ratio`
    squeezed into a `model_size` square.
    """

    if not model_size > 0:
        raise ValueError("model_size must be > 0")
    if not sensor_aspect_ratio > 0:
        raise ValueError(f"sensor_aspect_ratio must be > 0, got {sensor_aspect_ratio!r}")

    s = float(model_size)
    if sensor_aspect_ratio > 1.0:
        # Landscape: full width, bars top/bottom
        content_h = s / sensor_aspect_ratio
        return LetterboxGeometry(
            model_size=s,
            padded_axis="y",
            content_width=s,
            content_height=content_h,
            offset_x=0.0,
            offset_y=(s - content_h) / 2,
        )

    # Portrait or square: full height, bars left/right
    content_w = s * sensor_aspect_ratio
    return LetterboxGeometry(
        model_size=s,
        padded_axis="x",
        content_width=content_w,
        content_height=s,
        offset_x=(s - content_w) / 2,
        offset_y=0.0,
    )


@dataclass(frozen=True)
class PreviewFit:
    """Camera preview rectangle inside the rendering surface."""

    width: float
    height: float
    offset_x: float = 0.0
    offset_y: float = 0.0


def fit_preview(camera_aspect_ratio: float, surface_size: Tuple[float, float]) -> PreviewFit:
    """
    Fit a preview of `camera_aspect_ratio` (width / height) inside `surface_size`
    (width, height), preserving aspect ratio and centring on the slack axis.
    """

    if not camera_aspect_ratio > 0:
        raise ValueError(f"camera_aspect_ratio must be > 0, got {camera_aspect_ratio!r}")
    surface_w, surface_h = (float(v) for v in surface_size)
    if not (surface_w > 0 and surface_h > 0):
        raise ValueError(f"surface_size must be positive, got {surface_size!r}")

    preview_w = surface_w
    preview_h = surface_w / camera_aspect_ratio

    if preview_h > surface_h:
        # Too tall: fit by height, centre horizontally
        preview_h = surface_h
        preview_w = surface_h * camera_aspect_ratio
        return PreviewFit(width=preview_w, height=preview_h, offset_x=(surface_w - preview_w) / 2)

    return PreviewFit(width=preview_w, height=preview_h, offset_y=(surface_h - preview_h) / 2)
