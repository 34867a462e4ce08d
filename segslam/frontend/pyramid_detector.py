import logging
from abc import ABC, abstractmethod

import cv2
import numpy as np

from segslam.core.appearance import SegmentHypothesis
from segslam.utils.lsd import detect_segments, line_normal, orient_like, overlap_ratio, to_gray

logger = logging.getLogger(__name__)

# Pyramid levels are not built below this size (pixels).
MIN_LEVEL_SIZE = 16


class SegmentDetectorBackend(ABC):
    """Capability finding a new segment inside a region of an image."""

    @abstractmethod
    def detect_in(self, image, feature, roi=None) -> bool:
        """
        Fills feature with a segment found in image.

        Args:
            image: Gray or BGR uint8 array.
            feature: FeatureSegment receiving the measured endpoints and hypothesis.
            roi: Optional ConvexRoi bounding the search.

        Returns:
            True if a segment was found.
        """
        ...


class PyramidSegmentDetector(SegmentDetectorBackend):
    """
    Coarse-to-fine segment detector.

    The most salient segment is chosen on the coarsest pyramid level, where
    only long structures survive, then followed down the pyramid and snapped
    onto the matching segment of each finer level.
    """
    def __init__(self, params):
        """
        Args:
            params: DetectorParams giving pyramid depth, minimum length and refine radius.
        """
        self.params = params

    def build_pyramid(self, gray):
        pyramid = [gray]
        for _ in range(1, self.params.hierarchy_level):
            h, w = pyramid[-1].shape[:2]
            if min(h, w) // 2 < MIN_LEVEL_SIZE:
                break
            pyramid.append(cv2.pyrDown(pyramid[-1]))
        return pyramid

    def detect_in(self, image, feature, roi=None):
        h, w = image.shape[:2]
        if roi is not None:
            x0, y0, x1, y1 = roi.clip(image.shape)
        else:
            x0, y0, x1, y1 = 0, 0, w, h
        if x1 <= x0 or y1 <= y0:
            return False

        crop = np.ascontiguousarray(to_gray(image)[y0:y1, x0:x1])
        pyramid = self.build_pyramid(crop)
        top = len(pyramid) - 1
        scale = 2 ** top

        seg = None
        for cand in detect_segments(pyramid[top], min_length=self.params.min_length / scale):
            full = cand * scale + np.array([x0, y0, x0, y0])
            if roi is None or roi.contains((full[0] + full[2]) / 2, (full[1] + full[3]) / 2):
                seg = cand
                break
        if seg is None:
            return False

        for level in range(top - 1, -1, -1):
            seg = self._refine(seg * 2, pyramid[level])

        seg = seg + np.array([x0, y0, x0, y0])
        feature.measurement.x[:] = seg
        feature.appearance.set_hypothesis(SegmentHypothesis.from_vector(seg))
        logger.debug("Detected segment %s over %d level(s)", seg, len(pyramid))
        return True

    def _refine(self, seg, level_img):
        """
        Replaces seg by the segment of level_img lying on the same line, if any.
        """
        n = line_normal(seg)
        if n is None:
            return seg
        d = (seg[2:4] - seg[0:2]) / np.linalg.norm(seg[2:4] - seg[0:2])

        best, best_err = seg, np.inf
        for cand in detect_segments(level_img):
            cand = orient_like(cand, seg)
            cn = line_normal(cand)
            if cn is None:
                continue
            # parallel within ~10 degrees
            cd = (cand[2:4] - cand[0:2]) / np.linalg.norm(cand[2:4] - cand[0:2])
            if np.dot(cd, d) < 0.985:
                continue
            err = max(abs(np.dot(cn, seg[0:2] - cand[0:2])), abs(np.dot(cn, seg[2:4] - cand[0:2])))
            if err > self.params.refine_radius or overlap_ratio(cand, seg) < 0.5:
                continue
            if err < best_err:
                best, best_err = cand, err
        return best
