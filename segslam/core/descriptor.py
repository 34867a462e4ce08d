import itertools
from abc import ABC, abstractmethod


class Descriptor:
    """
    Identity token attached to a landmark once it is observed.
    Two descriptors are the same only if they are the same object.
    """
    def __init__(self, id):
        self.id = id

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id})"


class SegmentDescriptor(Descriptor):
    """Descriptor of a segment landmark."""


class DescriptorFactory(ABC):
    """Capability creating a fresh descriptor on every call."""

    @abstractmethod
    def create_descriptor(self) -> Descriptor:
        ...


class SegmentDescriptorFactory(DescriptorFactory):
    def __init__(self, first_id=0):
        """
        Args:
            first_id: Id given to the first descriptor; later ones count up from it.
        """
        self._ids = itertools.count(first_id)

    def create_descriptor(self):
        return SegmentDescriptor(next(self._ids))
