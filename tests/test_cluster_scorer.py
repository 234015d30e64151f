import pytest

from incident_hazard_analyse.hazard_settings import HazardSettings
from incident_hazard_analyse.logic.cluster_scorer import ClusterScorer
from incident_hazard_analyse.logic.proximity_clustering import ProximityClusterer
from incident_hazard_analyse.logic.severity_model import SeverityModel
from incident_hazard_analyse.objects.risk_tier import RiskThresholds, RiskTier

TIER_RANK = {RiskTier.LOW: 0, RiskTier.MEDIUM: 1, RiskTier.HIGH: 2}


@pytest.fixture
def scorer(settings, severity_model):
    return ClusterScorer(settings, severity_model)


@pytest.fixture
def clusterer(settings):
    return ProximityClusterer(settings.radius_m, settings.min_cluster_size)


class TestScoring:
    """Weighted aggregates and composite score."""

    def test_three_flood_reports_on_equator(self, scorer, clusterer, make_point, now):
        points = [make_point(lng=0.0), make_point(lng=0.0005), make_point(lng=0.0011)]
        scored = scorer.score(clusterer.cluster(points), now)

        assert len(scored) == 1
        cluster = scored[0]
        assert cluster.count == 3
        assert cluster.weighted_count == pytest.approx(1.98)
        assert cluster.avg_distance_m == pytest.approx(42.0, abs=0.1)
        assert cluster.avg_severity == pytest.approx(6.6)
        assert cluster.avg_age_days == pytest.approx(0.0)
        assert cluster.score == pytest.approx(0.6675, abs=1e-3)
        assert cluster.tier == RiskTier.HIGH

    def test_weighted_count_is_capped(self, scorer, clusterer, make_point, now):
        points = [make_point(lat=0.00001 * i) for i in range(20)]
        cluster = scorer.score(clusterer.cluster(points), now)[0]
        assert cluster.count == 20
        assert cluster.weighted_count == 8.0

    def test_decayed_members_weigh_less(self, scorer, clusterer, make_point, now):
        fresh = make_point(lng=0.0, category="Assault")
        decayed = make_point(lng=0.001, category="Assault", status="resolved", age_days=400)
        cluster = scorer.score(clusterer.cluster([fresh, decayed]), now)[0]
        # weights 0.53 and 0.05
        assert cluster.avg_severity == pytest.approx(0.53 * 5.3 / 0.58)
        assert cluster.avg_age_days == pytest.approx(0.05 * 400 / 0.58)

    def test_recency_saturates_after_30_days(self, scorer):
        old = scorer.composite_score(2.0, 50.0, 5.0, 30.0)
        older = scorer.composite_score(2.0, 50.0, 5.0, 90.0)
        assert old == pytest.approx(older)

    def test_compactness_never_negative(self, scorer):
        far = scorer.composite_score(2.0, 10_000.0, 5.0, 0.0)
        farther = scorer.composite_score(2.0, 50_000.0, 5.0, 0.0)
        assert far == pytest.approx(farther)

    def test_score_bounds(self, scorer, clusterer, make_point, now):
        categories = ["Theft", "Flood", "Car Accident", "Robbery", "Unknown"]
        points = []
        for i, category in enumerate(categories * 4):
            status = "resolved" if i % 3 == 0 else "verified"
            points.append(make_point(lat=0.01 * (i % 5), lng=0.0003 * i, category=category, status=status, age_days=7 * i))
        for cluster in scorer.score(clusterer.cluster(points), now):
            assert 0.0 <= cluster.score <= 1.0

    def test_extremes_stay_in_unit_interval(self, scorer):
        assert scorer.composite_score(100.0, 0.0, 50.0, 0.0) <= 1.0
        assert scorer.composite_score(0.0, 1e9, -5.0, 1e9) >= 0.0

    def test_empty_input(self, scorer, now):
        assert scorer.score([], now) == []


class TestThresholds:
    """Adaptive tier boundaries."""

    def test_no_or_single_cluster_uses_fallback(self, scorer):
        assert scorer.thresholds([]) == RiskThresholds(0.33, 0.66)
        assert scorer.thresholds([0.9]) == RiskThresholds(0.33, 0.66)

    def test_two_clusters_use_their_scores(self, scorer):
        thresholds = scorer.thresholds([0.7, 0.2])
        assert thresholds == RiskThresholds(0.2, 0.7)
        assert thresholds.classify(0.2) == RiskTier.MEDIUM
        assert thresholds.classify(0.7) == RiskTier.HIGH

    def test_quantile_indices(self, scorer):
        scores = [0.9, 0.1, 0.5, 0.3, 0.7, 0.2]
        # n=6: floor(1.98)=1 -> 0.2, floor(3.96)=3 -> 0.5
        assert scorer.thresholds(scores) == RiskThresholds(0.2, 0.5)

    def test_three_clusters(self, scorer):
        assert scorer.thresholds([0.1, 0.5, 0.9]) == RiskThresholds(0.1, 0.5)

    def test_classify(self):
        thresholds = RiskThresholds(0.3, 0.6)
        assert thresholds.classify(0.29) == RiskTier.LOW
        assert thresholds.classify(0.3) == RiskTier.MEDIUM
        assert thresholds.classify(0.59) == RiskTier.MEDIUM
        assert thresholds.classify(0.6) == RiskTier.HIGH

    def test_tier_monotonic_in_own_score(self, scorer):
        others = [0.2, 0.4, 0.6, 0.8]
        previous = -1
        for step in range(101):
            own = step / 100
            tier = scorer.thresholds(others + [own]).classify(own)
            assert TIER_RANK[tier] >= previous
            previous = TIER_RANK[tier]

    def test_raising_severity_never_lowers_tier(self, scorer, clusterer, make_point, now):
        def population(category):
            points = []
            for i, other in enumerate(["Robbery", "Theft", "Assault", "Flood"]):
                lat = 0.1 * (i + 1)
                points += [make_point(lat=lat, category=other), make_point(lat=lat, lng=0.0005, category=other)]
            points += [make_point(category=category), make_point(lng=0.0005, category=category)]
            return scorer.score(clusterer.cluster(points), now)

        previous = -1
        for category in ["Unknown", "Robbery", "Theft", "Assault", "Car Accident", "Flood"]:
            own = population(category)[-1]
            assert TIER_RANK[own.tier] >= previous
            previous = TIER_RANK[own.tier]

    def test_tiers_relative_to_population(self, scorer, clusterer, make_point, now):
        pair = [make_point(category="Theft"), make_point(lng=0.0005, category="Theft")]
        alone = scorer.score(clusterer.cluster(pair), now)[0]

        stronger = []
        for i in range(3):
            stronger += [make_point(lat=0.1 * (i + 1), category="Flood"), make_point(lat=0.1 * (i + 1), lng=0.0002, category="Flood")]
        together = scorer.score(clusterer.cluster(pair + stronger), now)[0]

        assert alone.score == pytest.approx(together.score)
        assert alone.tier == RiskTier.MEDIUM
        assert together.tier == RiskTier.LOW


def test_custom_weights_change_score(make_point, now):
    settings = HazardSettings(weights={"count": 0.0, "compact": 0.0, "severity": 1.0, "recency": 0.0})
    scorer = ClusterScorer(settings, SeverityModel(settings))
    points = [make_point(lng=0.0), make_point(lng=0.0005)]
    cluster = scorer.score(ProximityClusterer().cluster(points), now)[0]
    assert cluster.score == pytest.approx(0.66)
