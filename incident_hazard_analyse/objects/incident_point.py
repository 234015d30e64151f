from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from incident_hazard_analyse.utility.great_circle import GreatCircle


class IncidentStatus:
    ACTIVE = "active"
    RESOLVED = "resolved"

    @staticmethod
    def parse(value: Optional[str]) -> str:
        """Only "resolved" decays; pending/verified/unknown reports count as active."""
        if value is not None and value.strip().lower() == IncidentStatus.RESOLVED:
            return IncidentStatus.RESOLVED
        return IncidentStatus.ACTIVE


@dataclass(frozen=True)
class IncidentPoint:
    """One geolocated incident report.

    The timestamp is the occurrence time, or the status change time for a
    resolved report. Severity and weight are derived per scoring pass by
    SeverityModel and never stored here.
    """

    id: str
    lat: float
    lng: float
    category: str
    status: str = IncidentStatus.ACTIVE
    timestamp: Optional[datetime] = None

    def __post_init__(self) -> None:
        GreatCircle.check_coordinate(self.lat, self.lng)
        object.__setattr__(self, "status", IncidentStatus.parse(self.status))

    @property
    def coordinate(self) -> tuple[float, float]:
        return self.lat, self.lng

    @property
    def is_resolved(self) -> bool:
        return self.status == IncidentStatus.RESOLVED
