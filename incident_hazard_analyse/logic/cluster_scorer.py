import math
from datetime import datetime
from typing import Sequence

from incident_hazard_analyse.hazard_settings import HazardSettings
from incident_hazard_analyse.logic.severity_model import SeverityModel
from incident_hazard_analyse.objects.incident_cluster import IncidentCluster
from incident_hazard_analyse.objects.risk_tier import RiskThresholds
from incident_hazard_analyse.objects.scored_cluster import ScoredCluster
from incident_hazard_analyse.utility.great_circle import GreatCircle


class ClusterScorer:
    """Score clusters and bucket them into risk tiers.

    Explanation:
    Each member contributes with its point weight to a capped count, the mean
    distance to the centroid, the mean effective severity and the mean age.
    The four values are normalized to [0, 1] and combined with fixed weights.
    Tier thresholds come from the score distribution of the clusters scored
    together, so tiers are relative to the current population.
    """

    def __init__(self, settings: HazardSettings, severity_model: SeverityModel):
        self.settings = settings
        self.severity_model = severity_model

    def score(self, clusters: Sequence[IncidentCluster], now: datetime) -> list[ScoredCluster]:
        """Score all clusters of one pass.

        Args:
            clusters: Clusters from ProximityClusterer.
            now: Reference time for decay and age.

        Returns:
            ScoredCluster list in input order.
        """
        stats = [self._cluster_stats(cluster, now) for cluster in clusters]
        thresholds = self.thresholds([s["score"] for s in stats])
        return [
            ScoredCluster(cluster=cluster, tier=thresholds.classify(s["score"]), **s)
            for cluster, s in zip(clusters, stats)
        ]

    def _cluster_stats(self, cluster: IncidentCluster, now: datetime) -> dict:
        """Weighted aggregates and composite score for one cluster."""
        weights = [self.severity_model.point_weight(p, now) for p in cluster.members]
        weight_sum = sum(weights)

        weighted_count = min(weight_sum, self.settings.weighted_count_cap)
        avg_distance = sum(
            w * GreatCircle.haversine_m(p.lat, p.lng, cluster.center_lat, cluster.center_lng)
            for p, w in zip(cluster.members, weights)
        ) / weight_sum
        avg_severity = sum(
            w * self.severity_model.effective_severity(p, now) for p, w in zip(cluster.members, weights)
        ) / weight_sum
        avg_age_days = sum(
            w * SeverityModel.age_days(p, now) for p, w in zip(cluster.members, weights)
        ) / weight_sum

        return {
            "weighted_count": weighted_count,
            "avg_distance_m": avg_distance,
            "avg_severity": avg_severity,
            "avg_age_days": avg_age_days,
            "score": self.composite_score(weighted_count, avg_distance, avg_severity, avg_age_days),
        }

    def composite_score(
        self, weighted_count: float, avg_distance_m: float, avg_severity: float, avg_age_days: float
    ) -> float:
        """Weighted sum of the normalized count, compactness, severity and recency."""
        s = self.settings
        norm_count = min(weighted_count / s.count_saturation, 1.0)
        norm_compact = max(0.0, 1.0 - avg_distance_m / s.compact_saturation)
        norm_severity = min(max(avg_severity / s.max_severity, 0.0), 1.0)
        norm_recency = max(0.0, 1.0 - min(avg_age_days / s.recency_saturation_days, 1.0))
        w = s.weights
        score = (
            w.count * norm_count
            + w.compact * norm_compact
            + w.severity * norm_severity
            + w.recency * norm_recency
        )
        return min(max(score, 0.0), 1.0)

    def thresholds(self, scores: Sequence[float]) -> RiskThresholds:
        """Derive (t1, t2) from the score distribution.

        Fewer than two scores use the fixed fallback, two scores use themselves,
        more use the scores at the configured quantile indices.
        """
        ordered = sorted(scores)
        n = len(ordered)
        if n < 2:
            t1, t2 = self.settings.fallback_thresholds
        elif n == 2:
            t1, t2 = ordered
        else:
            q1, q2 = self.settings.tier_quantiles
            t1 = ordered[min(math.floor(n * q1), n - 1)]
            t2 = ordered[min(math.floor(n * q2), n - 1)]
            if t2 < t1:
                t1, t2 = t2, t1
        return RiskThresholds(t1=t1, t2=t2)
