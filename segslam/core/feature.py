from segslam.core.appearance import Appearance
from segslam.core.measurement import Measurement


class FeatureSegment:
    """
    A detected segment candidate awaiting acceptance by the map.

    It bundles the measured endpoints with a segment appearance. The appearance
    carries the hypothesis only; anything more expensive is extracted once the
    candidate is turned into an observation.
    """
    def __init__(self, meas_std=1.0):
        self.measurement = Measurement(4, std=meas_std)
        self.appearance = Appearance.segment()
