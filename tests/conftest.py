from datetime import datetime, timedelta

import pytest

from incident_hazard_analyse.hazard_settings import HazardSettings
from incident_hazard_analyse.logic.severity_model import SeverityModel
from incident_hazard_analyse.objects.incident_point import IncidentPoint


@pytest.fixture
def now():
    return datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def settings():
    return HazardSettings()


@pytest.fixture
def severity_model(settings):
    return SeverityModel(settings)


@pytest.fixture
def make_point(now):
    """Factory for incident points; age_days sets the timestamp relative to now."""
    counter = iter(range(1_000_000))

    def _make(lat=0.0, lng=0.0, category="Flood", status="active", age_days=0.0, point_id=None, timestamp=...):
        if timestamp is ...:
            timestamp = now - timedelta(days=age_days)
        return IncidentPoint(
            id=point_id if point_id is not None else f"p{next(counter)}",
            lat=lat,
            lng=lng,
            category=category,
            status=status,
            timestamp=timestamp,
        )

    return _make
