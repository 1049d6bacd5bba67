"""
Configuration for topology analysis.

Selects which stages run, the connectivity and labeling strategy, and how
raw input values are binarised.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from ..labeling.models import Connectivity, LabelingMethod


@dataclass
class TopologyConfig:
    """
    Configuration for analyze_topology.

    Attributes:
        connectivity: 4 or 8 neighbourhood for component labeling
        labeling_method: "flood_fill" or "two_pass"
        label_components: Whether to run connected component labeling
        extract_contours: Whether to run border following
        foreground_threshold: Input values strictly above this are foreground
    """
    connectivity: Union[Connectivity, int, str] = Connectivity.EIGHT
    labeling_method: Union[LabelingMethod, str] = LabelingMethod.FLOOD_FILL
    label_components: bool = True
    extract_contours: bool = True
    foreground_threshold: int = 0

    def __post_init__(self):
        """Validate configuration values."""
        self._validate()

    def _validate(self):
        """Validate all configuration values."""
        # Normalise enum-like fields given as plain values
        self.connectivity = Connectivity.parse(self.connectivity)
        try:
            self.labeling_method = LabelingMethod(self.labeling_method)
        except ValueError:
            raise ValueError(
                f"labeling_method must be one of "
                f"{[m.value for m in LabelingMethod]}, got {self.labeling_method!r}"
            ) from None

        if self.foreground_threshold < 0:
            raise ValueError(
                f"foreground_threshold must be >= 0, got {self.foreground_threshold}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "connectivity": int(self.connectivity.value),
            "labeling_method": self.labeling_method.value,
            "label_components": self.label_components,
            "extract_contours": self.extract_contours,
            "foreground_threshold": self.foreground_threshold,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TopologyConfig":
        """Create from dictionary (e.g., from YAML config)."""
        return cls(
            connectivity=data.get("connectivity", Connectivity.EIGHT),
            labeling_method=data.get("labeling_method", LabelingMethod.FLOOD_FILL),
            label_components=data.get("label_components", True),
            extract_contours=data.get("extract_contours", True),
            foreground_threshold=data.get("foreground_threshold", 0),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "TopologyConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("topology", data))

    @classmethod
    def default(cls) -> "TopologyConfig":
        """Create default configuration."""
        return cls()
