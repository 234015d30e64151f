from typing import Iterable


class BBox:
    """Axis-aligned viewport in WGS84.

    Explanation:
    Stores north/south/east/west limits; used to restrict an incident set to the
    area currently shown before clustering.
    """

    north: float
    south: float
    east: float
    west: float

    def __init__(self, north: float, south: float, east: float, west: float) -> None:
        """Create a bounding box.

        Args:
            north: Northern latitude.
            south: Southern latitude.
            east: Eastern longitude.
            west: Western longitude.
        """
        if south > north or west > east:
            raise ValueError(f"Inverted bounding box: north={north}, south={south}, east={east}, west={west}")
        self.north = north
        self.south = south
        self.east = east
        self.west = west

    @classmethod
    def from_points(cls, coordinates: Iterable[tuple[float, float]], pad: float = 0.0) -> "BBox":
        """Smallest box around (lat, lng) coordinates, widened by pad degrees."""
        coordinates = list(coordinates)
        if not coordinates:
            raise ValueError("Cannot build a bounding box from no coordinates.")
        lats = [lat for lat, _ in coordinates]
        lngs = [lng for _, lng in coordinates]
        return cls(north=max(lats) + pad, south=min(lats) - pad, east=max(lngs) + pad, west=min(lngs) - pad)

    def contains_point(self, lat: float, lng: float, tol: float = 0.0) -> bool:
        """Check if lat/lng lies inside this box (boundary included).

        Args:
            lat: Latitude.
            lng: Longitude.
            tol: Margin of error.

        Returns:
            True if point is inside or on the boundary.
        """
        return (
            self.west - tol <= lng <= self.east + tol
            and self.south - tol <= lat <= self.north + tol
        )

    def __str__(self) -> str:
        return f"BBox(north={self.north}, south={self.south}, east={self.east}, west={self.west})"
