import logging

from segslam.config import DetectorParams
from segslam.core.descriptor import SegmentDescriptorFactory
from segslam.core.feature import FeatureSegment
from segslam.frontend.observation_builder import ObservationBuilder
from segslam.frontend.pyramid_detector import PyramidSegmentDetector

logger = logging.getLogger(__name__)


class SegmentDetector:
    def __init__(self, params=None, desc_factory=None, detector=None):
        """
        Detects new segments to initialize landmarks.

        Parameters:
          - params: DetectorParams (pyramid depth, measurement noise).
          - desc_factory: DescriptorFactory used when a candidate becomes an observation.
          - detector: SegmentDetectorBackend doing the search. Defaults to a
                      PyramidSegmentDetector configured with the same params.

        Detection only measures the segment. Extracting what the landmark keeps
        is left to fill_data_obs(), so candidates the map rejects cost nothing more.
        """
        self.params = params if params is not None else DetectorParams()
        self.desc_factory = desc_factory if desc_factory is not None else SegmentDescriptorFactory()
        self.detector = detector if detector is not None else PyramidSegmentDetector(self.params)
        self.builder = ObservationBuilder(self.desc_factory)

    def detect(self, raw, roi):
        """
        Searches a new segment inside the region.

        Parameters:
          - raw: RawImage of the current frame.
          - roi: ConvexRoi bounding the search, or None for the whole image.

        Returns:
          - (True, FeatureSegment) with measurement std set to meas_std, or
          - (False, None) if nothing was found.
        """
        feature = FeatureSegment(meas_std=self.params.meas_std)
        try:
            ret = self.detector.detect_in(raw.img, feature, roi)
        except Exception:
            logger.warning("Segment detection failed", exc_info=True)
            ret = False

        logger.debug("returning %s", ret)
        if not ret:
            return False, None
        return True, feature

    def fill_data_obs(self, feature, obs):
        """Fills a new observation from an accepted candidate, see ObservationBuilder."""
        self.builder.fill_data_obs(feature, obs)
