from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .types import Detection


DEFAULT_IOU_THRESHOLD = 0.45


@dataclass(frozen=True)
class NMSConfig:
    iou_threshold: float = DEFAULT_IOU_THRESHOLD
    # None keeps every surviving box.
    max_detections: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.iou_threshold >= 0:
            raise ValueError("iou_threshold must be >= 0")
        if self.max_detections is not None and self.max_detections < 1:
            raise ValueError("max_detections must be >= 1 when set")


def iou(a: Detection, b: Detection) -> float:
    """
    Intersection-over-union of two centre-form boxes. Zero-area unions give 0.0.
    """

    ax1, ay1, ax2, ay2 = a.as_xyxy()
    bx1, by1, bx2, by2 = b.as_xyxy()

    inter_w = max(0.0, min(ax2, bx2) - max(ax1, bx1))
    inter_h = max(0.0, min(ay2, by2) - max(ay1, by1))
    inter = inter_w * inter_h

    union = (ax2 - ax1) * (ay2 - ay1) + (bx2 - bx1) * (by2 - by1) - inter
    if union <= 0:
        return 0.0
    return inter / union


def _iou_one_to_many(box: np.ndarray, others: np.ndarray) -> np.ndarray:
    xx1 = np.maximum(box[0], others[:, 0])
    yy1 = np.maximum(box[1], others[:, 1])
    xx2 = np.minimum(box[2], others[:, 2])
    yy2 = np.minimum(box[3], others[:, 3])

    inter = np.maximum(0.0, xx2 - xx1) * np.maximum(0.0, yy2 - yy1)
    area = (box[2] - box[0]) * (box[3] - box[1])
    areas = (others[:, 2] - others[:, 0]) * (others[:, 3] - others[:, 1])
    union = area + areas - inter
    return np.divide(inter, union, out=np.zeros_like(inter), where=union > 0)


def nms_indices(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig) -> np.ndarray:
    """
    Greedy NumPy NMS. Expects boxes shape (N,4) in xyxy and scores shape (N,).
    Returns indices of boxes to keep, highest score first.

    Equal scores keep their input order (stable sort). A box is dropped only when its
    IoU with a kept box is strictly greater than the threshold.
    """

    boxes = np.asarray(boxes, dtype=np.float64).reshape(-1, 4)
    scores = np.asarray(scores, dtype=np.float64).reshape(-1)
    if boxes.shape[0] == 0:
        return np.empty((0,), dtype=np.int64)

    order = np.argsort(-scores, kind="stable")
    keep: List[int] = []

    while order.size > 0:
        if cfg.max_detections is not None and len(keep) >= cfg.max_detections:
            break
        i = int(order[0])
        keep.append(i)

        overlap = _iou_one_to_many(boxes[i], boxes[order[1:]])
        inds = np.where(overlap <= cfg.iou_threshold)[0]
        order = order[inds + 1]

    return np.array(keep, dtype=np.int64)


def nms(detections: Sequence[Detection], cfg: NMSConfig) -> List[Detection]:
    """
    Class-agnostic greedy suppression: boxes of different classes still suppress each other.
    """

    if not detections:
        return []
    boxes = np.array([det.as_xyxy() for det in detections], dtype=np.float64)
    scores = np.array([det.confidence for det in detections], dtype=np.float64)
    return [detections[i] for i in nms_indices(boxes, scores, cfg)]


def suppress(detections: Sequence[Detection], iou_threshold: float) -> List[Detection]:
    return nms(detections, NMSConfig(iou_threshold=iou_threshold))
