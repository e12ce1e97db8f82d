from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .config import OverlayConfig, load_overlay_config
from .letterbox import LetterboxGeometry, PreviewFit, fit_preview, letterbox_geometry
from .mapper import map_detections
from .postprocess import YoloPostprocessor
from .tensor import BufferLike
from .types import Detection, ScreenBox


LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def find_project_root(
    start: Optional[PathLike] = None,
    markers: Sequence[str] = ("pyproject.toml", ".git"),
) -> Path:
    """
    Best-effort project root discovery, used to resolve relative config paths.
    """

    p = Path(start) if start is not None else Path.cwd()
    p = p.resolve()

    # If a file is provided, start from its directory.
    if p.is_file():
        p = p.parent

    for parent in (p, *p.parents):
        for m in markers:
            if (parent / m).exists():
                return parent
    return p


def resolve_path(path: PathLike, root: Optional[PathLike] = "auto") -> Path:
    """
    Resolve `path` to an absolute Path.

    - Absolute paths are returned as-is.
    - Relative paths are resolved against:
      - `root` if provided
      - project root (auto) otherwise
    """

    p = Path(path)
    if p.is_absolute():
        return p

    if root == "auto" or root is None:
        base = find_project_root()
    else:
        base = Path(root).resolve()

    return (base / p).resolve()


@dataclass(frozen=True)
class FrameLayout:
    letterbox: LetterboxGeometry
    preview: PreviewFit


class OverlayPipeline:
    """
    Per-frame pipeline: decode -> suppress -> map to screen.

    Stateless between frames. Calling the pipeline never raises for bad frame data;
    a failing frame is logged and yields no boxes.
    """

    def __init__(self, cfg: OverlayConfig):
        self.cfg = cfg
        self.post = YoloPostprocessor(cfg.post_config())

    def layout(
        self,
        camera_aspect_ratio: float,
        surface_size: Tuple[float, float],
        sensor_aspect_ratio: Optional[float] = None,
    ) -> FrameLayout:
        # The model input is letterboxed from the same stream the preview shows unless told otherwise
        sensor = camera_aspect_ratio if sensor_aspect_ratio is None else sensor_aspect_ratio
        return FrameLayout(
            letterbox=letterbox_geometry(sensor, self.cfg.model_size),
            preview=fit_preview(camera_aspect_ratio, surface_size),
        )

    def detect(self, preds: BufferLike) -> List[Detection]:
        return self.post.process(preds)

    def to_screen(self, detections: Sequence[Detection], layout: FrameLayout) -> List[ScreenBox]:
        return map_detections(
            detections,
            layout.letterbox,
            layout.preview,
            self.cfg.orientation,
            size_correction=self.cfg.size_correction,
            label_height=self.cfg.label_height,
        )

    def __call__(
        self,
        preds: BufferLike,
        *,
        camera_aspect_ratio: float,
        surface_size: Tuple[float, float],
        sensor_aspect_ratio: Optional[float] = None,
    ) -> List[ScreenBox]:
        try:
            layout = self.layout(camera_aspect_ratio, surface_size, sensor_aspect_ratio)
            return self.to_screen(self.detect(preds), layout)
        except Exception:
            LOGGER.exception("Overlay post-processing failed; dropping this frame's detections")
            return []


def load_pipeline(config_path: PathLike, *, root: Optional[PathLike] = "auto") -> OverlayPipeline:
    """
    Create a pipeline from an overlay config JSON file.

    Typical usage:
        pipe = load_pipeline("configs/overlay.json")  # resolves from project root by default
    """

    resolved = resolve_path(config_path, root=root)
    cfg = load_overlay_config(resolved)
    LOGGER.info(
        "Loaded overlay config %s: %d labels, orientation=%s",
        resolved,
        len(cfg.labels),
        cfg.orientation.value,
    )
    return OverlayPipeline(cfg)
