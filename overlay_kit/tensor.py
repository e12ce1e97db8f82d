from __future__ import annotations

import logging
from typing import Sequence, Union

import numpy as np


LOGGER = logging.getLogger(__name__)

BufferLike = Union[np.ndarray, Sequence[float]]


class FeatureMajorTensor:
    """
    Read-only view over a flattened `[1, num_features, num_detections]` detector output.

    Element `(feature, detection)` lives at `feature * num_detections + detection`, i.e.
    `as_matrix()[feature, detection]`. The buffer length is not trusted: a short buffer
    is tolerated and every element past its end reads as 0.0.
    """

    def __init__(self, buffer: BufferLike, num_features: int, num_detections: int) -> None:
        if num_features <= 0:
            raise ValueError("num_features must be > 0")
        if num_detections <= 0:
            raise ValueError("num_detections must be > 0")

        self.data = np.asarray(buffer, dtype=np.float64).ravel()
        self.num_features = int(num_features)
        self.num_detections = int(num_detections)

    @property
    def expected_size(self) -> int:
        return self.num_features * self.num_detections

    @property
    def size_matches(self) -> bool:
        return self.data.size == self.expected_size

    def as_matrix(self) -> np.ndarray:
        """
        Return the buffer as a `(num_features, num_detections)` array.

        Missing trailing elements are zero-filled; surplus elements are ignored.
        """

        expected = self.expected_size
        if self.data.size >= expected:
            return self.data[:expected].reshape(self.num_features, self.num_detections)

        LOGGER.warning(
            "Output buffer too short: %d of %d elements present, zero-filling the rest",
            self.data.size,
            expected,
        )
        padded = np.zeros(expected, dtype=np.float64)
        padded[: self.data.size] = self.data
        return padded.reshape(self.num_features, self.num_detections)
