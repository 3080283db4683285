"""Matching weight configuration.

Weights are plain constants by default but can be externalized to a
JSON or YAML file for experimentation.
"""

import json
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator


class MatchingWeights(BaseModel):
    """Points per criterion plus the bonus/penalty caps.

    The four base weights must sum to 100 so that a full match on every
    criterion already reaches the top of the scale.
    """

    model_config = {"frozen": True}

    sector: float = 35
    region: float = 25
    size: float = 20
    goal: float = 20
    bonus_max: float = 10
    penalty_max: float = -20
    version: str = "1.0"

    @field_validator("sector", "region", "size", "goal")
    @classmethod
    def weight_range(cls, v: float) -> float:
        """Ensure base weights are between 0 and 100."""
        if not 0 <= v <= 100:
            raise ValueError(f"Weight must be between 0 and 100, got {v}")
        return v

    @field_validator("bonus_max")
    @classmethod
    def bonus_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"bonus_max must be >= 0, got {v}")
        return v

    @field_validator("penalty_max")
    @classmethod
    def penalty_not_positive(cls, v: float) -> float:
        if v > 0:
            raise ValueError(f"penalty_max must be <= 0, got {v}")
        return v

    def model_post_init(self, __context) -> None:
        """Validate that base weights sum to 100."""
        total = self.base_total
        if abs(total - 100) > 0.001:
            raise ValueError(
                f"Base weights must sum to 100, got {total:g}. "
                f"(S:{self.sector:g}, R:{self.region:g}, "
                f"D:{self.size:g}, G:{self.goal:g})"
            )

    @property
    def base_total(self) -> float:
        return self.sector + self.region + self.size + self.goal

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "sector": self.sector,
            "region": self.region,
            "size": self.size,
            "goal": self.goal,
            "bonus_max": self.bonus_max,
            "penalty_max": self.penalty_max,
            "version": self.version,
        }


DEFAULT_WEIGHTS = MatchingWeights()


def load_weights(filepath: Optional[str] = None) -> MatchingWeights:
    """Load matching weights from file or return defaults.

    Supports JSON and YAML formats.

    Args:
        filepath: Optional path to weights configuration file

    Returns:
        MatchingWeights instance

    Raises:
        FileNotFoundError: If filepath provided but doesn't exist
        ValueError: If weights are invalid or the format is unsupported
    """

    if not filepath:
        return DEFAULT_WEIGHTS

    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Weights file not found: {filepath}")

    if path.suffix == ".json":
        with open(path, "r") as f:
            data = json.load(f)
    elif path.suffix in [".yaml", ".yml"]:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}. Use .json, .yaml, or .yml")

    return MatchingWeights(**(data or {}))


def save_weights(weights: MatchingWeights, filepath: str) -> None:
    """Save matching weights to file.

    Args:
        weights: MatchingWeights instance to save
        filepath: Path to save to (extension determines format)
    """

    path = Path(filepath)
    data = weights.to_dict()

    if path.suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    elif path.suffix in [".yaml", ".yml"]:
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")
