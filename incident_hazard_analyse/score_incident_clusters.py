#!/usr/bin/env python3
"""
Cluster incident reports from a CSV export and score them into risk tiers.
Reads tunables from hazard_settings.json, prints a cluster summary and writes
one row per cluster to CSV for the map layer.
"""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from incident_hazard_analyse.hazard_settings import HazardSettings, load_settings
from incident_hazard_analyse.logic.hazard_pipeline import HazardPipeline, HazardResult
from incident_hazard_analyse.utility.export_clusters import write_clusters_csv
from incident_hazard_analyse.utility.load_incidents import LoadIncidentData
from incident_hazard_analyse.utility.timestamps import as_naive_utc

DEFAULT_SETTINGS = Path(__file__).with_name("hazard_settings.json")


def print_summary(result: HazardResult) -> None:
    """Print one line per cluster, highest score first."""
    ranked = sorted(result.clusters, key=lambda c: c.score, reverse=True)
    print(f"Hazard clusters: {len(ranked):,} from {len(result.point_severities):,} incidents")
    for idx, cluster in enumerate(ranked, start=1):
        print(
            f"#{idx} {cluster.tier.upper():<6} score={cluster.score:.3f} "
            f"at ({cluster.center_lat:.6f}, {cluster.center_lng:.6f}) | incidents: {cluster.count} "
            f"| avg. severity: {cluster.avg_severity:.1f} / 10 | avg. spread: {cluster.avg_distance_m:.0f} m "
            f"| avg. age: {cluster.avg_age_days:.1f} days"
        )


def score_incident_file(
    settings: HazardSettings,
    input_path: Path,
    output_path: Path,
    now: datetime,
    categories: Optional[Sequence[str]] = None,
) -> HazardResult:
    """Load incidents, run the pipeline, print the summary and write the cluster table."""
    points = LoadIncidentData(input_path, settings.timestamp_format).load_incidents(categories=categories)
    result = HazardPipeline(settings).run(points, now)

    print_summary(result)
    write_clusters_csv(result.clusters, output_path)
    return result


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse arguments and score the configured incident file."""
    parser = argparse.ArgumentParser(description="Cluster incident reports and assign risk tiers.")
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS, help="Settings JSON file")
    parser.add_argument("--input", type=Path, default=None, help="Incident CSV (overrides settings)")
    parser.add_argument("--output", type=Path, default=None, help="Cluster CSV (overrides settings)")
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Reference time in ISO format; offsets are converted to UTC (default: current local time)",
    )
    parser.add_argument("--category", action="append", default=None, help="Only keep this category (repeatable)")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings) if args.settings.exists() else HazardSettings()
    score_incident_file(
        settings,
        input_path=args.input or settings.input_path,
        output_path=args.output or settings.output_path,
        now=as_naive_utc(args.now) or datetime.now(),
        categories=args.category,
    )


if __name__ == "__main__":
    main()
