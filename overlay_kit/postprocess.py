from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .nms import DEFAULT_IOU_THRESHOLD, NMSConfig, nms
from .tensor import BufferLike, FeatureMajorTensor
from .types import Detection


LOGGER = logging.getLogger(__name__)

NUM_BOX_FEATURES = 4
DEFAULT_NUM_DETECTIONS = 8400
DEFAULT_CONF_THRESHOLD = 0.25


def decode(
    tensor: Union[FeatureMajorTensor, BufferLike],
    num_detections: int,
    labels: Sequence[str],
    conf_threshold: float,
) -> List[Detection]:
    """
    Decode a feature-major `[1, 4 + C, A]` output into candidate detections.

    Per anchor slot the box is `(cx, cy, w, h)` from features 0..3 and the class is the
    first strictly-highest of the C score rows. Slots whose best score is not strictly
    above `conf_threshold` are dropped. Output keeps slot order.

    A buffer of the wrong length is decoded anyway: missing values read as 0.0.
    """

    labels = list(labels)
    if not labels:
        raise ValueError("labels must not be empty")
    if not conf_threshold >= 0:
        raise ValueError(f"conf_threshold must be >= 0, got {conf_threshold!r}")

    num_features = NUM_BOX_FEATURES + len(labels)
    if isinstance(tensor, FeatureMajorTensor):
        view = tensor
        if view.num_features != num_features or view.num_detections != num_detections:
            raise ValueError(
                f"Tensor declared as ({view.num_features}, {view.num_detections}), "
                f"expected ({num_features}, {num_detections}) for {len(labels)} labels"
            )
    else:
        view = FeatureMajorTensor(tensor, num_features, num_detections)

    if not view.size_matches:
        LOGGER.warning(
            "Output size mismatch. Got %d, expected %d (1 * %d * %d)",
            view.data.size,
            view.expected_size,
            num_features,
            num_detections,
        )

    p = view.as_matrix()
    boxes = p[0:NUM_BOX_FEATURES, :]  # (4, A) as cx, cy, w, h
    # NaN never beats the running maximum, same as a zero score
    class_scores = np.nan_to_num(p[NUM_BOX_FEATURES:, :], nan=0.0, posinf=np.inf, neginf=-np.inf)

    # argmax returns the first maximum, so the lowest class id wins ties
    class_ids = np.argmax(class_scores, axis=0)
    scores = class_scores[class_ids, np.arange(class_scores.shape[1])]

    # The scan starts from (score 0.0, class 0): nothing non-positive can win
    not_positive = ~(scores > 0.0)
    class_ids[not_positive] = 0
    scores[not_positive] = 0.0

    detections = [
        Detection(
            x=float(boxes[0, i]),
            y=float(boxes[1, i]),
            width=float(boxes[2, i]),
            height=float(boxes[3, i]),
            confidence=float(scores[i]),
            class_id=int(class_ids[i]),
            class_name=labels[int(class_ids[i])],
        )
        for i in np.nonzero(scores > conf_threshold)[0]
    ]

    if detections:
        first = detections[0]
        LOGGER.debug("%d detections: %s %.0f%%", len(detections), first.class_name, first.confidence * 100)
    return detections


@dataclass(frozen=True)
class YoloPostConfig:
    """
    Decode + suppression settings for one detector export.
    """

    labels: Tuple[str, ...]
    conf_threshold: float = DEFAULT_CONF_THRESHOLD
    iou_threshold: float = DEFAULT_IOU_THRESHOLD
    num_detections: int = DEFAULT_NUM_DETECTIONS
    # None keeps every box that survives suppression.
    max_detections: Optional[int] = None
    # If False, skip NMS and only keep the top `max_detections` by score.
    apply_nms: bool = True

    def __post_init__(self) -> None:
        if not self.labels:
            raise ValueError("labels must not be empty")
        if not self.conf_threshold >= 0:
            raise ValueError("conf_threshold must be >= 0")
        if not self.iou_threshold >= 0:
            raise ValueError("iou_threshold must be >= 0")
        if self.num_detections <= 0:
            raise ValueError("num_detections must be > 0")
        if self.max_detections is not None and self.max_detections < 1:
            raise ValueError("max_detections must be >= 1 when set")

    @property
    def num_classes(self) -> int:
        return len(self.labels)

    @property
    def num_features(self) -> int:
        return NUM_BOX_FEATURES + self.num_classes


class YoloPostprocessor:
    """
    Raw output buffer -> final detections in model space.

    Layout supported (per image): `(4 + C, A)` feature-major, e.g. 11 x 8400 for a
    seven-class export, flattened or not.
    """

    def __init__(self, cfg: YoloPostConfig):
        self.cfg = cfg

    def process(self, preds: BufferLike) -> List[Detection]:
        candidates = decode(preds, self.cfg.num_detections, self.cfg.labels, self.cfg.conf_threshold)
        if not candidates:
            return []

        if self.cfg.apply_nms:
            return nms(candidates, NMSConfig(iou_threshold=self.cfg.iou_threshold, max_detections=self.cfg.max_detections))
        return self._select_topk(candidates)

    def _select_topk(self, detections: List[Detection]) -> List[Detection]:
        ranked = sorted(detections, key=lambda det: det.confidence, reverse=True)
        if self.cfg.max_detections is None:
            return ranked
        return ranked[: self.cfg.max_detections]
