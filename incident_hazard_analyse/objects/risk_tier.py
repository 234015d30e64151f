from dataclasses import dataclass


class RiskTier:
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RiskThresholds:
    """Tier boundaries for one scoring pass (low < t1 <= medium < t2 <= high)."""

    t1: float
    t2: float

    def classify(self, score: float) -> str:
        if score < self.t1:
            return RiskTier.LOW
        if score < self.t2:
            return RiskTier.MEDIUM
        return RiskTier.HIGH
