from typing import Sequence

from shapely import Point, Polygon

from incident_hazard_analyse.objects.incident_cluster import IncidentCluster
from incident_hazard_analyse.objects.incident_point import IncidentPoint
from incident_hazard_analyse.utility.great_circle import GreatCircle
from incident_hazard_analyse.utility.local_projection import LocalProjection


class DisjointSet:
    """Union-find over indices 0..n-1 with path compression."""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, idx: int) -> int:
        root = idx
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[idx] != root:
            self.parent[idx], idx = root, self.parent[idx]
        return root

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a != root_b:
            self.parent[root_b] = root_a


class ProximityClusterer:
    """Single-linkage clustering of incident points by great-circle distance.

    Explanation:
    Every pair within radius_m (inclusive) is linked, clusters are the connected
    components, so A-B and B-C within radius chain A and C together even when
    A-C is farther apart. Components smaller than min_size are dropped.
    Pair comparison is O(n^2), sized for one viewport's incidents.
    """

    def __init__(self, radius_m: float = 235.0, min_size: int = 2):
        """Configure clustering.

        Args:
            radius_m: Link distance between two points (meters).
            min_size: Smallest component kept as a cluster.
        """
        if radius_m <= 0:
            raise ValueError(f"radius_m must be positive, got {radius_m}")
        if min_size < 1:
            raise ValueError(f"min_size must be at least 1, got {min_size}")
        self.radius_m = radius_m
        self.min_size = min_size

    def cluster(self, points: Sequence[IncidentPoint]) -> list[IncidentCluster]:
        """Group points into proximity clusters.

        Args:
            points: Incident points of the current pass.

        Returns:
            Clusters ordered by the first input index of their members.
        """
        n = len(points)
        if n == 0 or n < self.min_size:
            return []

        components = DisjointSet(n)
        for i in range(n):
            for j in range(i + 1, n):
                dist = GreatCircle.haversine_m(points[i].lat, points[i].lng, points[j].lat, points[j].lng)
                if dist <= self.radius_m:
                    components.union(i, j)

        bins: dict[int, list[IncidentPoint]] = {}
        for i in range(n):
            bins.setdefault(components.find(i), []).append(points[i])

        return [self._build_cluster(members) for members in bins.values() if len(members) >= self.min_size]

    def _build_cluster(self, members: list[IncidentPoint]) -> IncidentCluster:
        """Compute centroid, ring polygon and max distance for one component."""
        coordinates = [point.coordinate for point in members]
        projection = LocalProjection(coordinates)
        center_lat, center_lng = projection.centroid(coordinates)
        centroid = Point(center_lng, center_lat)

        max_dist = max(
            GreatCircle.haversine_m(point.lat, point.lng, center_lat, center_lng) for point in members
        )

        ring_local = Point(*projection.to_local(center_lat, center_lng)).buffer(self.radius_m)
        ring_coords = []
        for x, y in ring_local.exterior.coords:
            lat, lng = projection.to_geographic(x, y)
            ring_coords.append((lng, lat))
        buffer = Polygon(ring_coords)

        return IncidentCluster(centroid, members, buffer, max_dist)
