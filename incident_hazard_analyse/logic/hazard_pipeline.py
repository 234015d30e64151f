from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Sequence

from incident_hazard_analyse.hazard_settings import HazardSettings
from incident_hazard_analyse.logic.cluster_scorer import ClusterScorer
from incident_hazard_analyse.logic.proximity_clustering import ProximityClusterer
from incident_hazard_analyse.logic.severity_model import SeverityModel
from incident_hazard_analyse.objects.bbox import BBox
from incident_hazard_analyse.objects.incident_point import IncidentPoint
from incident_hazard_analyse.objects.scored_cluster import ScoredCluster
from incident_hazard_analyse.utility.great_circle import GreatCircle
from incident_hazard_analyse.utility.run_sequence import RunSequence


@dataclass(frozen=True)
class PointSeverity:
    base: float
    effective: float
    weight: float


@dataclass
class HazardResult:
    """Output of one pass: scored clusters and severities of every input point."""

    clusters: list[ScoredCluster]
    point_severities: dict[str, PointSeverity] = field(default_factory=dict)

    def locate_cluster(self, lat: float, lng: float, radius_m: float) -> Optional[ScoredCluster]:
        """First cluster with a member within radius_m of (lat, lng), else None."""
        for cluster in self.clusters:
            if any(GreatCircle.haversine_m(p.lat, p.lng, lat, lng) <= radius_m for p in cluster.members):
                return cluster
        return None


class HazardPipeline:
    """Filter, cluster and score incident reports for one point in time."""

    def __init__(self, settings: Optional[HazardSettings] = None):
        self.settings = settings or HazardSettings()
        self.severity_model = SeverityModel(self.settings)
        self.clusterer = ProximityClusterer(self.settings.radius_m, self.settings.min_cluster_size)
        self.scorer = ClusterScorer(self.settings, self.severity_model)
        self.sequence = RunSequence()

    def run(
        self,
        points: Sequence[IncidentPoint],
        now: datetime,
        bbox: Optional[BBox] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> HazardResult:
        """Run severity, clustering and scoring over a snapshot of incidents.

        Args:
            points: Incident snapshot.
            now: Reference time; never read from the clock here.
            bbox: Optional viewport; points outside are ignored.
            categories: Optional category filter (case-insensitive).

        Returns:
            HazardResult with scored clusters and per-point severities.

        Raises:
            ValueError: If two input points share an id.
        """
        self.check_unique_ids(points)
        selected = self.filter_points(points, bbox=bbox, categories=categories)
        severities = {
            p.id: PointSeverity(
                base=self.severity_model.base_severity(p.category),
                effective=self.severity_model.effective_severity(p, now),
                weight=self.severity_model.point_weight(p, now),
            )
            for p in selected
        }
        clusters = self.clusterer.cluster(selected)
        return HazardResult(clusters=self.scorer.score(clusters, now), point_severities=severities)

    def run_latest(
        self,
        points: Sequence[IncidentPoint],
        now: datetime,
        bbox: Optional[BBox] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> Optional[HazardResult]:
        """Like run, but returns None when another run_latest call started meanwhile.

        Lets a caller that re-scores on every data update share one pipeline
        between threads and only apply the newest pass.
        """
        token = self.sequence.issue()
        result = self.run(points, now, bbox=bbox, categories=categories)
        return result if self.sequence.is_current(token) else None

    @staticmethod
    def check_unique_ids(points: Sequence[IncidentPoint]) -> None:
        """Raise ValueError naming the ids used by more than one point."""
        seen: set[str] = set()
        duplicates: set[str] = set()
        for p in points:
            if p.id in seen:
                duplicates.add(p.id)
            seen.add(p.id)
        if duplicates:
            raise ValueError(f"Duplicate incident ids: {sorted(duplicates)}")

    @staticmethod
    def filter_points(
        points: Sequence[IncidentPoint],
        bbox: Optional[BBox] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> list[IncidentPoint]:
        """Keep points inside bbox whose category is in categories (None or empty = no filter)."""
        wanted = {c.strip().lower() for c in categories or ()} or None
        return [
            p
            for p in points
            if (bbox is None or bbox.contains_point(p.lat, p.lng))
            and (wanted is None or (p.category or "").strip().lower() in wanted)
        ]
