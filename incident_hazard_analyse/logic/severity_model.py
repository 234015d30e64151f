import math
from datetime import datetime

from incident_hazard_analyse.hazard_settings import HazardSettings
from incident_hazard_analyse.objects.incident_point import IncidentPoint
from incident_hazard_analyse.utility.timestamps import check_same_convention

SECONDS_PER_DAY = 86400.0


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like the reporting app does (0.25 -> 0.3), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class SeverityModel:
    """Category severities with decay for resolved incidents.

    Explanation:
    Active reports keep their category's base severity. Resolved reports lose
    severity in steps: every full decay period (8 days by default) since the
    status change multiplies it by the decay base (0.37). Point weights are the
    normalized effective severity clamped to [weight_floor, 1].
    """

    def __init__(self, settings: HazardSettings):
        """Build the lookup table from settings (keys matched case-insensitively)."""
        self.settings = settings
        self.severity_table = {key.strip().lower(): value for key, value in settings.severity_table.items()}

    def base_severity(self, category: str) -> float:
        """Base severity for a category, default_severity if unknown."""
        return self.severity_table.get((category or "").strip().lower(), self.settings.default_severity)

    def effective_severity(self, point: IncidentPoint, now: datetime) -> float:
        """Severity after decay, rounded to one decimal.

        Args:
            point: Incident to evaluate.
            now: Reference time of the scoring pass.

        Returns:
            Effective severity; resolved points without timestamp do not decay.
        """
        base = self.base_severity(point.category)
        if not point.is_resolved or point.timestamp is None:
            return round_half_up(base)
        check_same_convention(now, point.timestamp)
        days_since = max(0, math.floor((now - point.timestamp).total_seconds() / SECONDS_PER_DAY))
        periods = days_since // self.settings.decay_period_days
        return round_half_up(base * self.settings.decay_base ** periods)

    def point_weight(self, point: IncidentPoint, now: datetime) -> float:
        """Normalized effective severity clamped to [weight_floor, 1]."""
        normalized = self.effective_severity(point, now) / self.settings.max_severity
        return min(max(normalized, self.settings.weight_floor), 1.0)

    @staticmethod
    def age_days(point: IncidentPoint, now: datetime) -> float:
        """Fractional days since the point's timestamp (0 if absent or in the future)."""
        if point.timestamp is None:
            return 0.0
        check_same_convention(now, point.timestamp)
        return max(0.0, (now - point.timestamp).total_seconds() / SECONDS_PER_DAY)
