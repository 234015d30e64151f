from typing import Iterable

from shapely import Point, Polygon

from incident_hazard_analyse.objects.incident_point import IncidentPoint


class IncidentCluster:
    """Proximity cluster of incident points with centroid and hazard ring.

    Explanation:
    Encapsulates the members of one connected group, the centroid (lng/lat), the ring
    polygon of the clustering radius around it, and the max member distance.
    """

    center: Point
    members: tuple[IncidentPoint, ...]
    buffer: Polygon
    max_distance_m: float

    def __init__(self, center: Point, members: Iterable[IncidentPoint], buffer: Polygon, max_distance_m: float):
        """Create an incident cluster container.

        Args:
            center: Cluster centroid (lng/lat).
            members: Incident points belonging to the cluster, stored as a tuple.
            buffer: Ring polygon around the centroid in WGS84.
            max_distance_m: Max distance (meters) from centroid to any member point.
        """
        self.center = center
        self.members = tuple(members)
        self.buffer = buffer
        self.max_distance_m = max_distance_m

    @property
    def center_lat(self) -> float:
        return self.center.y

    @property
    def center_lng(self) -> float:
        return self.center.x

    @property
    def count(self) -> int:
        return len(self.members)

    def member_ids(self) -> list[str]:
        return [point.id for point in self.members]
