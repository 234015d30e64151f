from incident_hazard_analyse.objects.incident_cluster import IncidentCluster


class ScoredCluster(IncidentCluster):
    """Incident cluster enriched with weighted statistics and a risk tier.

    Explanation:
    Extends IncidentCluster with the aggregates the composite score is built
    from, the score itself and the tier derived from the current population.
    """

    weighted_count: float
    avg_distance_m: float
    avg_severity: float
    avg_age_days: float
    score: float
    tier: str

    def __init__(
        self,
        cluster: IncidentCluster,
        weighted_count: float,
        avg_distance_m: float,
        avg_severity: float,
        avg_age_days: float,
        score: float,
        tier: str,
    ):
        """Copy base cluster and attach scoring results.

        Args:
            cluster: Base cluster to enrich.
            weighted_count: Sum of point weights, capped.
            avg_distance_m: Weighted mean member distance to the centroid (meters).
            avg_severity: Weighted mean effective severity (0-10).
            avg_age_days: Weighted mean member age in days.
            score: Composite score in [0, 1].
            tier: RiskTier value.
        """
        super().__init__(
            center=cluster.center,
            members=cluster.members,
            buffer=cluster.buffer,
            max_distance_m=cluster.max_distance_m,
        )
        self.weighted_count = weighted_count
        self.avg_distance_m = avg_distance_m
        self.avg_severity = avg_severity
        self.avg_age_days = avg_age_days
        self.score = score
        self.tier = tier

    def __repr__(self) -> str:
        return (
            f"ScoredCluster(center=({self.center_lat:.6f}, {self.center_lng:.6f}), count={self.count}, "
            f"score={self.score:.3f}, tier={self.tier})"
        )
