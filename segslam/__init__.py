"""
segslam: segment front-end for segment-based visual SLAM.

Matches known line-segment landmarks in new frames and detects new segment
candidates for landmark initialization.

The package is organized into several modules:
- core: Data structures (RawImage, ConvexRoi, Measurement, Appearance, Observation)
- frontend: Segment matching, detection and observation building
- utils: Line segment detection helpers
"""

from segslam.config import DetectorParams, FrontendConfig, MatcherParams, load_config
from segslam.core.raw_image import ConvexRoi, RawImage
from segslam.frontend.observation_builder import ObservationBuilder
from segslam.frontend.projection import project_extremities
from segslam.frontend.segment_detector import SegmentDetector
from segslam.frontend.segment_matcher import SegmentMatcher
from segslam.system import SegSlamFrontend

__version__ = '0.1.0'

__all__ = [
    'ConvexRoi',
    'DetectorParams',
    'FrontendConfig',
    'MatcherParams',
    'ObservationBuilder',
    'RawImage',
    'SegSlamFrontend',
    'SegmentDetector',
    'SegmentMatcher',
    'load_config',
    'project_extremities',
]
