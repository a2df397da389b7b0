"""Save and load detection settings."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import yaml

from .maxima import DEFAULT_THRESHOLD


@dataclass
class HoughConfig:
    """Tunable parameters of a line detection run."""

    n_theta: int = 180
    threshold: int = DEFAULT_THRESHOLD
    foreground: str = "white"
    num_peaks: Optional[int] = None
    coarsen_factor: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HoughConfig":
        """Create a config from a dictionary, ignoring unknown keys."""
        num_peaks = data.get("num_peaks")
        return cls(
            n_theta=int(data.get("n_theta", 180)),
            threshold=int(data.get("threshold", DEFAULT_THRESHOLD)),
            foreground=str(data.get("foreground", "white")),
            num_peaks=None if num_peaks is None else int(num_peaks),
            coarsen_factor=int(data.get("coarsen_factor", 1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def save_config(config, filename="hough.yaml"):
    """Save detection settings to YAML."""
    with open(filename, "w") as f:
        yaml.dump(config.to_dict(), f)


def load_config(filename="hough.yaml"):
    """Load detection settings from YAML."""
    with open(filename, "r") as f:
        data = yaml.safe_load(f)
    return HoughConfig.from_dict(data or {})
