from segslam.config import FrontendConfig, load_config
from segslam.frontend.segment_detector import SegmentDetector
from segslam.frontend.segment_matcher import SegmentMatcher


class SegSlamFrontend:
    """
    Segment front-end coordinating matching and detection for the filter.
    """

    def __init__(self, config=None, desc_factory=None, tracker=None, detector=None):
        """
        Initialize the front-end.

        Args:
            config: FrontendConfig; defaults are used when omitted.
            desc_factory: DescriptorFactory for new landmarks (optional).
            tracker: SegmentTracker replacing the default one (optional).
            detector: SegmentDetectorBackend replacing the default one (optional).
        """
        self.config = config if config is not None else FrontendConfig()
        self.matcher = SegmentMatcher(self.config.matcher, tracker=tracker)
        self.detector = SegmentDetector(self.config.detector, desc_factory=desc_factory,
                                        detector=detector)

    @classmethod
    def from_config(cls, path, **kwargs):
        """Builds a front-end from a YAML configuration file."""
        return cls(load_config(path), **kwargs)

    def match_observation(self, raw, obs, roi=None):
        """
        Match the landmark of an observation in a new frame.

        Args:
            raw: RawImage of the current frame.
            obs: Observation holding the expectation and predicted appearance.
            roi: ConvexRoi bounding the search (optional).

        Returns:
            True if the landmark was matched; obs.measurement and
            obs.observed_appearance then hold the result.
        """
        self.matcher.predictor.set_expectation(obs.expectation)
        try:
            self.matcher.match(raw, obs.predicted_appearance, roi,
                               obs.measurement, obs.observed_appearance)
        finally:
            self.matcher.predictor.clear()
        return obs.measurement.match_score == 1

    def detect(self, raw, roi=None):
        """Search a new segment candidate, see SegmentDetector.detect()."""
        return self.detector.detect(raw, roi)

    def initialize_observation(self, feature, obs):
        """Fill the observation of a newly created landmark from its candidate."""
        self.detector.fill_data_obs(feature, obs)
