from math import radians, sin, cos, asin, sqrt, isfinite

EARTH_RADIUS_M = 6371000.0


class InvalidCoordinate(ValueError):
    """Raised when a latitude/longitude is NaN or infinite."""


class GreatCircle:
    """Surface distances between WGS84 coordinates."""

    @staticmethod
    def check_coordinate(lat: float, lng: float) -> None:
        """Raise InvalidCoordinate unless both values are finite numbers."""
        if not (isfinite(lat) and isfinite(lng)):
            raise InvalidCoordinate(f"Invalid latitude or longitude: ({lat}, {lng})")

    @staticmethod
    def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """Great-circle distance between two lat/lng points in meters.

        Args:
            lat1: Latitude of the first point.
            lng1: Longitude of the first point.
            lat2: Latitude of the second point.
            lng2: Longitude of the second point.

        Returns:
            Distance in meters on a sphere of radius 6 371 000 m.

        Raises:
            InvalidCoordinate: If any input is not finite.
        """
        GreatCircle.check_coordinate(lat1, lng1)
        GreatCircle.check_coordinate(lat2, lng2)
        dlat = radians(lat2 - lat1)
        dlng = radians(lng2 - lng1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
        return 2 * EARTH_RADIUS_M * asin(min(1.0, sqrt(a)))
