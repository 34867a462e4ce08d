from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np


@dataclass
class SegmentHypothesis:
    """
    Endpoint model of a line segment in pixel coordinates.
    (x1, y1) is the first endpoint and (x2, y2) the second; the order is meaningful.
    """
    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_vector(cls, vec):
        v = np.asarray(vec, dtype=float).reshape(4)
        return cls(float(v[0]), float(v[1]), float(v[2]), float(v[3]))

    def as_vector(self):
        return np.array([self.x1, self.y1, self.x2, self.y2], dtype=float)

    @property
    def length(self):
        return float(np.hypot(self.x2 - self.x1, self.y2 - self.y1))

    def copy(self):
        return SegmentHypothesis(self.x1, self.y1, self.x2, self.y2)


@dataclass
class ImagePatch:
    """Pixel patch around an image point with its sub-pixel offset."""
    patch: np.ndarray
    offset: np.ndarray = field(default_factory=lambda: np.zeros(2))
    offset_cov: np.ndarray = field(default_factory=lambda: np.zeros((2, 2)))

    def copy(self):
        return ImagePatch(self.patch.copy(), self.offset.copy(), self.offset_cov.copy())


class AppearanceKind(Enum):
    SEGMENT = "segment"
    IMAGE_PATCH = "image_patch"


class Appearance:
    """
    Visual signature of a landmark or candidate, either a segment hypothesis or an image patch.

    The concrete payload is recovered through as_segment() / as_patch(), which
    return None when the appearance holds the other kind.
    """
    def __init__(self, kind, payload):
        if kind is AppearanceKind.SEGMENT and not isinstance(payload, SegmentHypothesis):
            raise TypeError("A segment appearance needs a SegmentHypothesis")
        if kind is AppearanceKind.IMAGE_PATCH and not isinstance(payload, ImagePatch):
            raise TypeError("An image patch appearance needs an ImagePatch")
        self._kind = kind
        self._payload = payload

    @classmethod
    def segment(cls, hypothesis=None):
        if hypothesis is None:
            hypothesis = SegmentHypothesis(0.0, 0.0, 0.0, 0.0)
        return cls(AppearanceKind.SEGMENT, hypothesis.copy())

    @classmethod
    def image_patch(cls, patch):
        return cls(AppearanceKind.IMAGE_PATCH, patch)

    @property
    def kind(self):
        return self._kind

    def as_segment(self) -> Optional[SegmentHypothesis]:
        if self._kind is AppearanceKind.SEGMENT:
            return self._payload
        return None

    def as_patch(self) -> Optional[ImagePatch]:
        if self._kind is AppearanceKind.IMAGE_PATCH:
            return self._payload
        return None

    def set_hypothesis(self, hypothesis):
        """
        Replaces the segment hypothesis with a copy of the given one.

        Args:
            hypothesis: SegmentHypothesis to store.
        """
        if self._kind is not AppearanceKind.SEGMENT:
            raise TypeError(f"Cannot set a segment hypothesis on a {self._kind.value} appearance")
        self._payload = hypothesis.copy()

    def __repr__(self):
        return f"Appearance({self._kind.value}, {self._payload!r})"
