"""
Configuration classes for the segment front-end.

Parameters are grouped per processor. Each group validates itself on
construction so a degenerate value never reaches a measurement.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import yaml


class ConfigurationError(ValueError):
    """Raised when a parameter group is inconsistent."""


def _from_mapping(cls, data):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")
    return cls(**data)


@dataclass(frozen=True)
class MatcherParams:
    """Segment matcher configuration."""
    max_search_size: int = 100   # candidates examined per tracked segment
    low_innov: float = 10.0      # search region radius for first consensus (pixels)
    threshold: float = 0.5       # minimum covered fraction of the predicted segment
    mahalanobis_th: float = 3.0  # Mahalanobis distance for outlier rejection
    relevance_th: float = 0.1    # minimum expectation/measurement std ratio
    meas_std: float = 1.0        # measurement noise std deviation (pixels)

    def __post_init__(self):
        if self.meas_std <= 0:
            raise ConfigurationError("meas_std must be positive")
        if self.max_search_size <= 0:
            raise ConfigurationError("max_search_size must be positive")
        if self.low_innov <= 0:
            raise ConfigurationError("low_innov must be positive")
        for name in ("threshold", "mahalanobis_th", "relevance_th"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")

    @property
    def meas_var(self):
        return self.meas_std ** 2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatcherParams":
        return _from_mapping(cls, data)


@dataclass(frozen=True)
class DetectorParams:
    """Hierarchical segment detector configuration."""
    hierarchy_level: int = 3     # number of pyramid levels, 1 = full resolution only
    meas_std: float = 1.0        # measurement noise std deviation (pixels)
    min_length: float = 10.0     # shortest accepted segment at full resolution (pixels)
    refine_radius: float = 2.0   # endpoint tolerance when refining on a finer level (pixels)

    def __post_init__(self):
        if self.meas_std <= 0:
            raise ConfigurationError("meas_std must be positive")
        if self.hierarchy_level < 1:
            raise ConfigurationError("hierarchy_level must be at least 1")
        if self.min_length < 0 or self.refine_radius < 0:
            raise ConfigurationError("min_length and refine_radius must not be negative")

    @property
    def meas_var(self):
        return self.meas_std ** 2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectorParams":
        return _from_mapping(cls, data)


@dataclass(frozen=True)
class FrontendConfig:
    """Top-level configuration grouping all processor parameters."""
    matcher: MatcherParams = field(default_factory=MatcherParams)
    detector: DetectorParams = field(default_factory=DetectorParams)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FrontendConfig":
        data = dict(data or {})
        matcher = data.pop("matcher", None) or {}
        detector = data.pop("detector", None) or {}
        if data:
            raise ConfigurationError(
                f"Unknown configuration sections: {', '.join(sorted(data))}")
        return cls(matcher=MatcherParams.from_dict(matcher),
                   detector=DetectorParams.from_dict(detector))


def load_config(path) -> FrontendConfig:
    """
    Load a front-end configuration from a YAML file.

    Args:
        path: Path to a YAML file with optional ``matcher`` and ``detector`` sections.

    Returns:
        FrontendConfig with defaults for every missing key.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return FrontendConfig.from_dict(data)
