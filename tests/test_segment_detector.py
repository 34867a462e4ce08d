"""
Unit tests for segment detection and observation building
"""

import numpy as np
import pytest

from conftest import BrokenDetectorBackend, CountingDescriptorFactory, FakeDetectorBackend, edge_image
from segslam.config import DetectorParams
from segslam.core.appearance import Appearance, ImagePatch, SegmentHypothesis
from segslam.core.descriptor import SegmentDescriptorFactory
from segslam.core.feature import FeatureSegment
from segslam.core.observation import Landmark, Observation, Sensor
from segslam.core.raw_image import ConvexRoi, RawImage
from segslam.frontend.observation_builder import ObservationBuilder
from segslam.frontend.pyramid_detector import PyramidSegmentDetector
from segslam.frontend.segment_detector import SegmentDetector


def new_observation(landmark_id=0):
    return Observation(Landmark(landmark_id), Sensor(0))


class TestDetectWithTestDoubles:

    def test_success_presets_std(self, edge_raw):
        detector = SegmentDetector(DetectorParams(meas_std=0.75),
                                   detector=FakeDetectorBackend([1, 2, 30, 2]))
        ok, feature = detector.detect(edge_raw, None)
        assert ok is True
        assert feature.measurement.std == 0.75
        np.testing.assert_array_equal(feature.measurement.x, [1, 2, 30, 2])
        assert feature.appearance.as_segment() == SegmentHypothesis(1, 2, 30, 2)

    def test_failure_returns_no_feature(self, edge_raw):
        detector = SegmentDetector(detector=FakeDetectorBackend(None))
        ok, feature = detector.detect(edge_raw, None)
        assert ok is False
        assert feature is None

    @pytest.mark.parametrize("error", [RuntimeError("detector internal failure"), ValueError("bad window")])
    def test_backend_exception_returns_no_feature(self, edge_raw, error):
        detector = SegmentDetector(detector=BrokenDetectorBackend(error))
        ok, feature = detector.detect(edge_raw, None)
        assert ok is False
        assert feature is None

    def test_detection_creates_no_descriptor(self, edge_raw, desc_factory):
        detector = SegmentDetector(desc_factory=desc_factory,
                                   detector=FakeDetectorBackend([1, 2, 30, 2]))
        detector.detect(edge_raw, None)
        assert desc_factory.created == []


class TestPyramidDetector:

    def test_detects_step_edge(self, edge_raw):
        detector = SegmentDetector(DetectorParams(hierarchy_level=3, meas_std=1.5))
        ok, feature = detector.detect(edge_raw, None)
        assert ok
        assert feature.measurement.std == 1.5
        hyp = feature.appearance.as_segment()
        assert abs(hyp.y1 - 99.5) < 3.0
        assert abs(hyp.y2 - 99.5) < 3.0
        assert hyp.length > 50
        np.testing.assert_allclose(feature.measurement.x, hyp.as_vector())

    @pytest.mark.parametrize("levels", [1, 2])
    def test_shallow_pyramids(self, edge_raw, levels):
        detector = SegmentDetector(DetectorParams(hierarchy_level=levels))
        ok, feature = detector.detect(edge_raw, None)
        assert ok
        assert abs(feature.appearance.as_segment().y1 - 99.5) < 3.0

    def test_segments_shorter_than_min_length_are_ignored(self, edge_raw):
        ok, feature = SegmentDetector(DetectorParams(min_length=500)).detect(edge_raw, None)
        assert not ok
        assert feature is None

    def test_uniform_image_has_no_segment(self, blank_raw):
        ok, feature = SegmentDetector().detect(blank_raw, None)
        assert not ok
        assert feature is None

    def test_roi_without_structure(self, edge_raw):
        ok, _ = SegmentDetector().detect(edge_raw, ConvexRoi.from_rect(0, 0, 200, 60))
        assert not ok

    def test_roi_outside_image(self, edge_raw):
        ok, _ = SegmentDetector().detect(edge_raw, ConvexRoi.from_rect(300, 300, 50, 50))
        assert not ok

    def test_detection_inside_roi(self):
        raw = RawImage(edge_image(width=320, height=240, edge_y=150))
        roi = ConvexRoi.from_rect(100, 120, 120, 60)
        ok, feature = SegmentDetector().detect(raw, roi)
        assert ok
        hyp = feature.appearance.as_segment()
        assert abs(hyp.y1 - 149.5) < 3.0
        for x in (hyp.x1, hyp.x2):
            assert 95 <= x <= 225

    def test_deterministic(self, edge_raw):
        detector = SegmentDetector()
        first = detector.detect(edge_raw, None)[1].measurement.x.copy()
        second = detector.detect(edge_raw, None)[1].measurement.x.copy()
        np.testing.assert_array_equal(first, second)

    def test_pyramid_stops_at_small_levels(self):
        backend = PyramidSegmentDetector(DetectorParams(hierarchy_level=10))
        pyramid = backend.build_pyramid(np.zeros((64, 64), dtype=np.uint8))
        assert [p.shape for p in pyramid] == [(64, 64), (32, 32), (16, 16)]


class TestObservationBuilder:

    def make_feature(self, vec=(1, 2, 30, 2)):
        feature = FeatureSegment()
        feature.measurement.x[:] = vec
        feature.appearance.set_hypothesis(SegmentHypothesis.from_vector(vec))
        return feature

    def test_copies_hypothesis_by_value(self, desc_factory):
        feature = self.make_feature()
        obs = new_observation()
        ObservationBuilder(desc_factory).fill_data_obs(feature, obs)

        assert obs.observed_appearance.as_segment() == SegmentHypothesis(1, 2, 30, 2)
        feature.appearance.as_segment().x1 = 500.0
        feature.appearance.set_hypothesis(SegmentHypothesis(9, 9, 9, 9))
        assert obs.observed_appearance.as_segment() == SegmentHypothesis(1, 2, 30, 2)

    def test_attaches_new_descriptor(self, desc_factory):
        obs = new_observation()
        ObservationBuilder(desc_factory).fill_data_obs(self.make_feature(), obs)
        assert obs.landmark.descriptor is desc_factory.created[0]

    def test_descriptors_are_never_reused(self):
        builder = ObservationBuilder(SegmentDescriptorFactory())
        feature = self.make_feature()
        descriptors = []
        for i in range(5):
            obs = new_observation(i)
            builder.fill_data_obs(feature, obs)
            descriptors.append(obs.landmark.descriptor)
        assert len({id(d) for d in descriptors}) == 5
        assert len({d.id for d in descriptors}) == 5

    def test_detector_delegates_to_builder(self, edge_raw):
        factory = CountingDescriptorFactory()
        detector = SegmentDetector(desc_factory=factory,
                                   detector=FakeDetectorBackend([1, 2, 30, 2]))
        ok, feature = detector.detect(edge_raw, None)
        obs = new_observation()
        detector.fill_data_obs(feature, obs)
        assert obs.landmark.descriptor is factory.created[0]
        assert obs.observed_appearance.as_segment() == SegmentHypothesis(1, 2, 30, 2)

    def test_patch_feature_is_rejected(self, desc_factory):
        feature = FeatureSegment()
        feature.appearance = Appearance.image_patch(ImagePatch(np.zeros((5, 5), dtype=np.uint8)))
        with pytest.raises(TypeError):
            ObservationBuilder(desc_factory).fill_data_obs(feature, new_observation())
        assert desc_factory.created == []
