from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

ROOT = Path(__file__).resolve().parents[1]

DEFAULT_SEVERITY_TABLE: dict[str, float] = {
    "assault": 5.25,
    "theft": 3.40,
    "fire": 3.40,
    "car accident": 5.80,
    "blocked lane": 2.20,
    "flood": 6.60,
    "kidnapping": 2.00,
    "animal attack": 3.00,
    "robbery": 1.80,
}


class ScoreWeights(BaseModel):
    """Weights of the four normalized factors in the composite score."""
    count: float = Field(0.20, ge=0)
    compact: float = Field(0.24, ge=0)
    severity: float = Field(0.38, ge=0)
    recency: float = Field(0.18, ge=0)

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoreWeights":
        total = self.count + self.compact + self.severity + self.recency
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Score weights must sum to 1.0, got {total}")
        return self


class HazardSettings(BaseModel):
    """Tunables for clustering and scoring incident reports."""
    radius_m: float = Field(235.0, gt=0)
    min_cluster_size: int = Field(2, ge=1)
    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    count_saturation: float = Field(10.0, gt=0)
    weighted_count_cap: float = Field(8.0, gt=0)
    # None means "same as radius_m"
    compact_saturation_m: Optional[float] = Field(None, gt=0)
    recency_saturation_days: float = Field(30.0, gt=0)

    decay_base: float = Field(0.37, gt=0, le=1)
    decay_period_days: int = Field(8, ge=1)
    weight_floor: float = Field(0.05, gt=0, le=1)
    max_severity: float = Field(10.0, gt=0)
    default_severity: float = Field(1.0, ge=0)
    severity_table: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_SEVERITY_TABLE))

    fallback_thresholds: tuple[float, float] = (0.33, 0.66)
    tier_quantiles: tuple[float, float] = (0.33, 0.66)

    timestamp_format: str = "%Y-%m-%dT%H:%M:%S"
    input_path: Path = ROOT / "raw_data" / "incidents.csv"
    output_path: Path = ROOT / "outputs" / "hazard_clusters.csv"

    @model_validator(mode="after")
    def _check_pairs(self) -> "HazardSettings":
        low, high = self.fallback_thresholds
        if low > high:
            raise ValueError("fallback_thresholds must be ordered (low, high)")
        q1, q2 = self.tier_quantiles
        if not (0 <= q1 <= q2 <= 1):
            raise ValueError("tier_quantiles must satisfy 0 <= q1 <= q2 <= 1")
        return self

    @property
    def compact_saturation(self) -> float:
        return self.compact_saturation_m if self.compact_saturation_m is not None else self.radius_m


def load_settings(path: Path) -> HazardSettings:
    """Load settings from JSON file."""
    data = json.loads(path.read_text())
    return HazardSettings.model_validate(data)
