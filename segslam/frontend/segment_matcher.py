import logging

from segslam.config import MatcherParams
from segslam.frontend.predictor import SegmentPredictor
from segslam.frontend.projection import project_extremities
from segslam.frontend.segment_tracker import LsdSegmentTracker, SegmentsSet

logger = logging.getLogger(__name__)


class SegmentMatcher:
    def __init__(self, params=None, tracker=None, predictor=None):
        """
        Matches a known segment landmark in a new frame.

        :param params: MatcherParams; defaults are used when omitted.
        :param tracker: SegmentTracker doing the correspondence search. Defaults to an
                        LsdSegmentTracker configured with the same params.
        :param predictor: SegmentPredictor the filter fills with its expectation before matching.

        One matcher serves one thread: the predictor holds per-call state.
        """
        self.params = params if params is not None else MatcherParams()
        self.tracker = tracker if tracker is not None else LsdSegmentTracker(self.params)
        self.predictor = predictor if predictor is not None else SegmentPredictor()

    def match(self, raw, target_app, roi, measure, app):
        """
        Searches the target segment in the image and writes the result.

        On success the measurement receives the corrected endpoints, the
        configured std and match_score = 1, and app receives the matched
        segment. Otherwise only match_score is set, to 0.

        :param raw: RawImage of the current frame.
        :param target_app: Appearance holding the landmark's segment hypothesis.
        :param roi: ConvexRoi bounding the search, or None.
        :param measure: Measurement to fill.
        :param app: Appearance receiving the matched segment.
        """
        target = target_app.as_segment()
        if target is None or app.as_segment() is None:
            logger.warning("Segment matcher needs segment appearances, got %s and %s",
                           target_app.kind.value, app.kind.value)
            measure.match_score = 0
            return

        set_in, set_out = SegmentsSet(), SegmentsSet()
        set_in.add_segment(target)
        try:
            self.tracker.track_segment(raw.img, set_in, self.predictor, set_out, roi=roi)
        except Exception:
            # any tracker failure is reported through the score only
            logger.warning("Segment tracking failed", exc_info=True)
            measure.match_score = 0
            return

        if set_out.count() > 0:
            matched = set_out.segment_at(0)
            predicted, _ = self.predictor.predict(target)
            measure.std = self.params.meas_std
            measure.x[:] = project_extremities(matched.as_vector(), predicted.as_vector())
            measure.match_score = 1
            app.set_hypothesis(matched)
        else:
            measure.match_score = 0
        logger.debug("match_score %d for %s", measure.match_score, target)
