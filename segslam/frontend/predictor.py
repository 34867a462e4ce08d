from segslam.core.appearance import SegmentHypothesis


class SegmentPredictor:
    """
    Tells the tracker where a segment is expected in the current frame.

    The filter sets an expectation before each match. Without one the tracked
    hypothesis is assumed not to have moved and no covariance is known.
    """
    def __init__(self):
        self.expectation = None

    def set_expectation(self, expectation):
        """
        Args:
            expectation: Expectation holding predicted endpoints and covariance, or None.
        """
        self.expectation = expectation

    def clear(self):
        self.expectation = None

    def predict(self, hypothesis):
        """
        Args:
            hypothesis: SegmentHypothesis of the tracked landmark.

        Returns:
            (predicted SegmentHypothesis, 4x4 covariance or None)
        """
        if self.expectation is None:
            return hypothesis.copy(), None
        return SegmentHypothesis.from_vector(self.expectation.x), self.expectation.P
