import logging
from abc import ABC, abstractmethod

import numpy as np
from scipy.spatial.distance import mahalanobis

from segslam.core.appearance import SegmentHypothesis
from segslam.utils.lsd import detect_segments, line_normal, orient_like, overlap_ratio

logger = logging.getLogger(__name__)


class SegmentsSet:
    """Ordered collection of segment hypotheses exchanged with a tracker."""

    def __init__(self):
        self._segments = []

    def add_segment(self, hypothesis):
        self._segments.append(hypothesis)

    def count(self):
        return len(self._segments)

    def segment_at(self, index):
        return self._segments[index]

    def __len__(self):
        return len(self._segments)

    def __iter__(self):
        return iter(self._segments)


class SegmentTracker(ABC):
    """Capability finding known segments again in a new image."""

    @abstractmethod
    def track_segment(self, image, set_in, predictor, set_out, roi=None):
        """
        Appends to set_out the segments of image that correspond to the ones in set_in.

        Args:
            image: Gray or BGR uint8 array.
            set_in: SegmentsSet of hypotheses to track.
            predictor: SegmentPredictor giving the expected position of each hypothesis.
            set_out: SegmentsSet receiving the matched segments, best first.
            roi: Optional ConvexRoi bounding the search.
        """
        ...


class LsdSegmentTracker(SegmentTracker):
    """
    Gated nearest-line tracker built on the Line Segment Detector.

    For every tracked hypothesis, the segments detected around its prediction
    go through a consensus radius, a Mahalanobis gate, a relevance gate and an
    overlap score. The candidate closest in Mahalanobis distance wins.
    """
    def __init__(self, params):
        """
        Args:
            params: MatcherParams giving search size, radius, gates and measurement noise.
        """
        self.params = params

    def track_segment(self, image, set_in, predictor, set_out, roi=None):
        for hypothesis in set_in:
            best = self._track_one(image, hypothesis, predictor, roi)
            if best is not None:
                set_out.add_segment(best)

    def _search_window(self, image, predicted, roi):
        r = self.params.low_innov
        pts = predicted.as_vector().reshape(2, 2)
        x0, y0 = np.floor(pts.min(axis=0) - r).astype(int)
        x1, y1 = np.ceil(pts.max(axis=0) + r).astype(int)
        h, w = image.shape[:2]
        x0, y0, x1, y1 = max(x0, 0), max(y0, 0), min(x1, w), min(y1, h)
        if roi is not None:
            rx0, ry0, rx1, ry1 = roi.clip(image.shape)
            x0, y0, x1, y1 = max(x0, rx0), max(y0, ry0), min(x1, rx1), min(y1, ry1)
        return int(x0), int(y0), int(x1), int(y1)

    def _track_one(self, image, hypothesis, predictor, roi):
        predicted, cov = predictor.predict(hypothesis)
        if predicted.length == 0:
            logger.debug("Degenerate prediction %s, nothing to track", predicted)
            return None
        if cov is None:
            cov = self.params.low_innov ** 2 * np.eye(4)

        x0, y0, x1, y1 = self._search_window(image, predicted, roi)
        if x1 <= x0 or y1 <= y0:
            return None
        candidates = detect_segments(image[y0:y1, x0:x1], offset=(x0, y0))

        if roi is not None:
            candidates = [c for c in candidates
                          if roi.contains((c[0] + c[2]) / 2, (c[1] + c[3]) / 2)]
        candidates = candidates[:self.params.max_search_size]

        exp = predicted.as_vector()
        best, best_dist = None, np.inf
        for cand in candidates:
            cand = orient_like(cand, exp)
            dist = self._gate(cand, exp, cov)
            if dist is None or dist >= best_dist:
                continue
            if overlap_ratio(cand, exp) < self.params.threshold:
                continue
            best, best_dist = cand, dist

        logger.debug("Tracked %s among %d candidates: %s", hypothesis, len(candidates),
                     "match" if best is not None else "no match")
        if best is None:
            return None
        return SegmentHypothesis.from_vector(best)

    def _gate(self, cand, exp, cov):
        """
        Returns the Mahalanobis distance of the predicted endpoints to the
        candidate line, or None if the candidate is rejected.
        """
        n = line_normal(cand)
        if n is None:
            return None
        L1 = cand[0:2]
        residual = np.array([np.dot(n, exp[0:2] - L1), np.dot(n, exp[2:4] - L1)])

        # first consensus: both predicted endpoints near the line
        if np.any(np.abs(residual) > self.params.low_innov):
            return None

        exp_var = np.array([n @ cov[0:2, 0:2] @ n, n @ cov[2:4, 2:4] @ n])
        S = exp_var + self.params.meas_var
        dist = mahalanobis(residual, np.zeros(2), np.diag(1.0 / S))
        if dist > self.params.mahalanobis_th:
            return None

        # an expectation already much sharper than the measurement gains nothing from it
        if np.sqrt(np.mean(exp_var)) / self.params.meas_std < self.params.relevance_th:
            return None
        return dist
