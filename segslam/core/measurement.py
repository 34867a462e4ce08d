import numpy as np


class Measurement:
    """
    A segment measurement produced by the matcher or the detector.

    - x: endpoints (x1, y1, x2, y2); indices 0/1 are the first endpoint, 2/3 the second.
    - std: isotropic noise std deviation, always positive.
    - match_score: 1 when the measurement was accepted, 0 otherwise.
    """
    def __init__(self, size=4, std=1.0):
        self.x = np.zeros(size)
        self._std = None
        self.std = std
        self.match_score = 0

    @property
    def std(self):
        return self._std

    @std.setter
    def std(self, value):
        if value <= 0:
            raise ValueError("Measurement std must be positive")
        self._std = float(value)

    @property
    def var(self):
        return self._std ** 2

    @property
    def P(self):
        """Measurement covariance matrix."""
        return self.var * np.eye(len(self.x))

    def __repr__(self):
        return f"Measurement(x={self.x.tolist()}, std={self._std}, match_score={self.match_score})"


class Expectation:
    """
    The filter's prediction of a segment measurement: endpoints and their covariance.
    """
    def __init__(self, x, P=None):
        """
        Args:
            x: Predicted endpoints (x1, y1, x2, y2).
            P: 4x4 covariance of the prediction, or None if the filter provides none.
        """
        self.x = np.asarray(x, dtype=float).reshape(4)
        if P is not None:
            P = np.asarray(P, dtype=float)
            if P.shape != (4, 4):
                raise ValueError("Expectation covariance must be 4x4")
        self.P = P
