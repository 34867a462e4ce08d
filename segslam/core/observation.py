from dataclasses import dataclass, field
from typing import Optional

from segslam.core.appearance import Appearance
from segslam.core.descriptor import Descriptor
from segslam.core.measurement import Expectation, Measurement


@dataclass
class Sensor:
    """Camera producing the observed frames."""
    id: int
    name: str = "camera"


class Landmark:
    """
    A map entity whose state is estimated by the filter.
    The front-end only attaches its descriptor.
    """
    def __init__(self, id, descriptor=None):
        self.id = id
        self.descriptor = descriptor

    def set_descriptor(self, descriptor: Descriptor):
        """
        Attach the descriptor used to recognise this landmark.

        Args:
            descriptor: Descriptor created for this landmark.
        """
        self.descriptor = descriptor

    def __repr__(self):
        return f"Landmark(id={self.id}, descriptor={self.descriptor!r})"


@dataclass
class Observation:
    """
    Links a landmark, the sensor that sees it and the measurement taken in the current frame.

    - expectation: filter prediction used to search and correct the measurement.
    - predicted_appearance: appearance searched for in the frame.
    - observed_appearance: appearance found in the frame, or given by the initial detection.
    """
    landmark: Landmark
    sensor: Sensor
    measurement: Measurement = field(default_factory=Measurement)
    expectation: Optional[Expectation] = None
    predicted_appearance: Appearance = field(default_factory=Appearance.segment)
    observed_appearance: Appearance = field(default_factory=Appearance.segment)
