"""
Detector output -> on-screen overlay helpers.

Decodes a flat YOLO-style output tensor, suppresses duplicate boxes and maps the
survivors from the square model input onto a camera preview. Works on plain
sequences or NumPy arrays; OpenCV is only needed for `draw_screen_boxes`.
"""

from .types import Detection, ScreenBox
from .tensor import FeatureMajorTensor
from .letterbox import LetterboxGeometry, PreviewFit, fit_preview, letterbox_geometry
from .nms import NMSConfig, iou, nms, suppress
from .postprocess import YoloPostConfig, YoloPostprocessor, decode
from .mapper import OrientationPolicy, SizeCorrection, map_detections, map_to_screen, policy_for_platform
from .config import OverlayConfig, load_overlay_config
from .runtime import OverlayPipeline, load_pipeline, find_project_root, resolve_path
from .metadata import load_labels
from .visualize import draw_screen_boxes

__all__ = [
    "Detection",
    "ScreenBox",
    "FeatureMajorTensor",
    "LetterboxGeometry",
    "PreviewFit",
    "fit_preview",
    "letterbox_geometry",
    "NMSConfig",
    "iou",
    "nms",
    "suppress",
    "YoloPostConfig",
    "YoloPostprocessor",
    "decode",
    "OrientationPolicy",
    "SizeCorrection",
    "map_detections",
    "map_to_screen",
    "policy_for_platform",
    "OverlayConfig",
    "load_overlay_config",
    "OverlayPipeline",
    "load_pipeline",
    "find_project_root",
    "resolve_path",
    "load_labels",
    "draw_screen_boxes",
]
