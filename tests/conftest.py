import os
import sys

import cv2
import numpy as np
import pytest

# Make the package importable without installing it
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from segslam.core.appearance import SegmentHypothesis
from segslam.core.descriptor import DescriptorFactory, SegmentDescriptor
from segslam.core.raw_image import RawImage
from segslam.frontend.pyramid_detector import SegmentDetectorBackend
from segslam.frontend.segment_tracker import SegmentTracker


class FakeTracker(SegmentTracker):
    """Returns a fixed list of segments and records what it was asked."""

    def __init__(self, results=()):
        self.results = [SegmentHypothesis.from_vector(r) for r in results]
        self.calls = []

    def track_segment(self, image, set_in, predictor, set_out, roi=None):
        self.calls.append((image, list(set_in), predictor, roi))
        for r in self.results:
            set_out.add_segment(r)


class RaisingTracker(SegmentTracker):
    def track_segment(self, image, set_in, predictor, set_out, roi=None):
        raise cv2.error("tracker failure")


class BrokenTracker(SegmentTracker):
    def track_segment(self, image, set_in, predictor, set_out, roi=None):
        raise RuntimeError("tracker internal failure")


class FakeDetectorBackend(SegmentDetectorBackend):
    """Finds the given segment, or nothing when segment is None."""

    def __init__(self, segment=None):
        self.segment = segment
        self.calls = 0

    def detect_in(self, image, feature, roi=None):
        self.calls += 1
        if self.segment is None:
            return False
        feature.measurement.x[:] = self.segment
        feature.appearance.set_hypothesis(SegmentHypothesis.from_vector(self.segment))
        return True


class BrokenDetectorBackend(SegmentDetectorBackend):
    def __init__(self, error):
        self.error = error

    def detect_in(self, image, feature, roi=None):
        raise self.error


class CountingDescriptorFactory(DescriptorFactory):
    def __init__(self):
        self.created = []

    def create_descriptor(self):
        desc = SegmentDescriptor(len(self.created))
        self.created.append(desc)
        return desc


def edge_image(width=200, height=200, edge_y=100, dark=30, bright=220):
    """Dark upper part, bright lower part: one horizontal step edge near edge_y - 0.5."""
    img = np.full((height, width), dark, dtype=np.uint8)
    cv2.rectangle(img, (0, edge_y), (width - 1, height - 1), bright, -1)
    return img


@pytest.fixture
def edge_raw():
    return RawImage(edge_image())


@pytest.fixture
def blank_raw():
    return RawImage(np.full((200, 200), 128, dtype=np.uint8))


@pytest.fixture
def desc_factory():
    return CountingDescriptorFactory()
