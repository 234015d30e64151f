from pathlib import Path
from typing import Sequence

import polars as pl

from incident_hazard_analyse.objects.scored_cluster import ScoredCluster

CLUSTER_FRAME_SCHEMA = {
    "cluster": pl.Int64,
    "center_lat": pl.Float64,
    "center_lng": pl.Float64,
    "count": pl.Int64,
    "weighted_count": pl.Float64,
    "avg_distance_m": pl.Float64,
    "max_distance_m": pl.Float64,
    "avg_severity": pl.Float64,
    "avg_age_days": pl.Float64,
    "score": pl.Float64,
    "tier": pl.Utf8,
    "member_ids": pl.Utf8,
}


def clusters_to_frame(clusters: Sequence[ScoredCluster]) -> pl.DataFrame:
    """One row per scored cluster; member ids joined with ';'."""
    rows = [
        {
            "cluster": idx,
            "center_lat": cluster.center_lat,
            "center_lng": cluster.center_lng,
            "count": cluster.count,
            "weighted_count": cluster.weighted_count,
            "avg_distance_m": cluster.avg_distance_m,
            "max_distance_m": cluster.max_distance_m,
            "avg_severity": cluster.avg_severity,
            "avg_age_days": cluster.avg_age_days,
            "score": cluster.score,
            "tier": cluster.tier,
            "member_ids": ";".join(cluster.member_ids()),
        }
        for idx, cluster in enumerate(clusters, start=1)
    ]
    return pl.DataFrame(rows, schema=CLUSTER_FRAME_SCHEMA)


def write_clusters_csv(clusters: Sequence[ScoredCluster], output: Path) -> Path:
    """Write the cluster table to CSV, creating the parent folder."""
    output.parent.mkdir(parents=True, exist_ok=True)
    clusters_to_frame(clusters).write_csv(output)
    print(f"Wrote {len(clusters):,} clusters to {output}")
    return output
