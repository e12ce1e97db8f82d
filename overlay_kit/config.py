from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .letterbox import DEFAULT_MODEL_SIZE
from .mapper import DEFAULT_LABEL_HEIGHT, OrientationPolicy, SizeCorrection, parse_orientation, policy_for_platform
from .metadata import load_labels
from .nms import DEFAULT_IOU_THRESHOLD
from .postprocess import DEFAULT_CONF_THRESHOLD, DEFAULT_NUM_DETECTIONS, YoloPostConfig


@dataclass(frozen=True)
class OverlayConfig:
    labels: Tuple[str, ...]
    conf_threshold: float = DEFAULT_CONF_THRESHOLD
    iou_threshold: float = DEFAULT_IOU_THRESHOLD
    num_detections: int = DEFAULT_NUM_DETECTIONS
    model_size: float = DEFAULT_MODEL_SIZE
    orientation: OrientationPolicy = OrientationPolicy.DIRECT
    size_correction: SizeCorrection = field(default_factory=SizeCorrection)
    label_height: float = DEFAULT_LABEL_HEIGHT
    apply_nms: bool = True
    max_detections: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.labels:
            raise ValueError("labels must not be empty")
        if any(not isinstance(label, str) for label in self.labels):
            raise ValueError("labels must be strings")
        if not self.conf_threshold >= 0:
            raise ValueError("conf_threshold must be >= 0")
        if not self.iou_threshold >= 0:
            raise ValueError("iou_threshold must be >= 0")
        if self.num_detections <= 0:
            raise ValueError("num_detections must be > 0")
        if not self.model_size > 0:
            raise ValueError("model_size must be > 0")
        if not self.label_height >= 0:
            raise ValueError("label_height must be >= 0")
        if self.max_detections is not None and self.max_detections < 1:
            raise ValueError("max_detections must be >= 1 when set")
        if not isinstance(self.orientation, OrientationPolicy):
            raise ValueError(f"orientation must be an OrientationPolicy, got {self.orientation!r}")

    def post_config(self) -> YoloPostConfig:
        return YoloPostConfig(
            labels=self.labels,
            conf_threshold=self.conf_threshold,
            iou_threshold=self.iou_threshold,
            num_detections=self.num_detections,
            max_detections=self.max_detections,
            apply_nms=self.apply_nms,
        )


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _parse_size_correction(value: Any) -> SizeCorrection:
    if not isinstance(value, dict):
        raise ValueError("size_correction must be an object with 'width'/'height'")
    unknown = sorted(set(value.keys()) - {"width", "height"})
    if unknown:
        raise ValueError(f"Unknown size_correction keys: {unknown}")
    defaults = SizeCorrection()
    width = _require_number(value, "width") if "width" in value else defaults.width
    height = _require_number(value, "height") if "height" in value else defaults.height
    return SizeCorrection(width=width, height=height)


def load_overlay_config(path: Path) -> OverlayConfig:
    """
    Read an overlay config JSON file.

    Labels come either inline (`labels`) or from a `metadata` file path, resolved
    relative to the config file. Orientation is either `orientation`
    ("direct" / "rotate-mirror") or a `platform` name ("ios" / "android").
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Overlay config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid overlay config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Overlay config must be a JSON object")

    allowed = {
        "labels",
        "metadata",
        "conf_threshold",
        "iou_threshold",
        "num_detections",
        "model_size",
        "orientation",
        "platform",
        "size_correction",
        "label_height",
        "apply_nms",
        "max_detections",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown overlay config keys: {unknown}")

    if ("labels" in payload) == ("metadata" in payload):
        raise ValueError("Overlay config must set exactly one of 'labels' or 'metadata'")
    if "labels" in payload:
        labels = payload["labels"]
        if not isinstance(labels, list) or not all(isinstance(item, str) for item in labels):
            raise ValueError("labels must be a list of strings")
    else:
        metadata = payload["metadata"]
        if not isinstance(metadata, str) or not metadata.strip():
            raise ValueError("metadata must be a non-empty string")
        metadata_path = Path(metadata)
        if not metadata_path.is_absolute():
            metadata_path = path.parent / metadata_path
        labels = load_labels(metadata_path)

    if "orientation" in payload and "platform" in payload:
        raise ValueError("Use either 'orientation' or 'platform', not both.")
    orientation = OrientationPolicy.DIRECT
    if "orientation" in payload:
        orientation = parse_orientation(payload["orientation"])
    elif "platform" in payload:
        platform = payload["platform"]
        if not isinstance(platform, str):
            raise ValueError("platform must be a string")
        orientation = policy_for_platform(platform)

    kwargs: Dict[str, Any] = {}
    for key in ("conf_threshold", "iou_threshold", "model_size", "label_height"):
        if key in payload:
            kwargs[key] = _require_number(payload, key)
    if "num_detections" in payload:
        kwargs["num_detections"] = _require_int(payload, "num_detections")
    if payload.get("max_detections") is not None:
        kwargs["max_detections"] = _require_int(payload, "max_detections")
    if "apply_nms" in payload:
        if not isinstance(payload["apply_nms"], bool):
            raise ValueError("apply_nms must be a boolean")
        kwargs["apply_nms"] = payload["apply_nms"]
    if "size_correction" in payload:
        kwargs["size_correction"] = _parse_size_correction(payload["size_correction"])

    return OverlayConfig(labels=tuple(labels), orientation=orientation, **kwargs)
