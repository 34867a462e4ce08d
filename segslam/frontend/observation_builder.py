class ObservationBuilder:
    """
    Turns an accepted segment candidate into the data of a new observation.
    """
    def __init__(self, desc_factory):
        """
        Args:
            desc_factory: DescriptorFactory creating the descriptor of each new landmark.
        """
        self.desc_factory = desc_factory

    def fill_data_obs(self, feature, obs):
        """
        Copies the candidate's appearance into the observation and gives its landmark a new descriptor.

        Args:
            feature: FeatureSegment returned by a successful detection.
            obs: Observation of the landmark created for that candidate.
        """
        self._materialize_appearance(feature, obs)
        obs.landmark.set_descriptor(self.desc_factory.create_descriptor())

    @staticmethod
    def _materialize_appearance(feature, obs):
        # Only the hypothesis is copied, image patch data is not carried over.
        src = feature.appearance.as_segment()
        if src is None:
            raise TypeError("Feature does not carry a segment appearance")
        if obs.observed_appearance.as_segment() is None:
            raise TypeError("Observation does not hold a segment appearance")
        obs.observed_appearance.set_hypothesis(src)
