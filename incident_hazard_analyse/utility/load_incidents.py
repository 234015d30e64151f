from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import polars as pl

from incident_hazard_analyse.objects.bbox import BBox
from incident_hazard_analyse.objects.incident_point import IncidentPoint
from incident_hazard_analyse.utility.timestamps import as_naive_utc


class LoadIncidentData:
    """Load incident reports from CSV into IncidentPoints."""

    INCIDENT_SCHEMA = {
        "id": pl.Utf8,
        "latitude": pl.Utf8,
        "longitude": pl.Utf8,
        "category": pl.Utf8,
        "status": pl.Utf8,
        "timestamp": pl.Utf8,
    }

    def __init__(self, csv_path: Path, timestamp_format: str = "%Y-%m-%dT%H:%M:%S") -> None:
        """Configure the incident loader.

        Args:
            csv_path: CSV with id/latitude/longitude/category/status/timestamp columns.
            timestamp_format: strptime format of the timestamp column.
        """
        self.csv_path = csv_path
        self.timestamp_format = timestamp_format

    def _timestamp_expr(self) -> pl.Expr:
        """Parse the timestamp column; offsets (%z) are converted to naive UTC."""
        expr = pl.col("timestamp").str.strip_chars().str.strptime(pl.Datetime, self.timestamp_format, strict=False)
        if "%z" in self.timestamp_format:
            expr = expr.dt.convert_time_zone("UTC").dt.replace_time_zone(None)
        return expr

    def load_incidents(
        self,
        min_datetime: Optional[datetime] = None,
        max_datetime: Optional[datetime] = None,
        bbox: Optional[BBox] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> List[IncidentPoint]:
        """Load incidents, optionally restricted to a time window, BBox and categories.

        Rows with empty or unparsable coordinates are dropped. Rows without a
        timestamp are kept and never fall out of the time window. Rows without
        an id get "row-<n>" from their 1-based data row number in the file.

        Args:
            min_datetime: Lower bound (inclusive) for timestamp.
            max_datetime: Upper bound (inclusive) for timestamp.
            bbox: Optional BBox to spatially filter incidents.
            categories: Optional categories to keep (case-insensitive).

        Returns:
            List of IncidentPoint.

        Raises:
            FileNotFoundError: If the CSV does not exist.
            InvalidCoordinate: If a row carries NaN/inf coordinates.
        """
        if not self.csv_path.exists():
            raise FileNotFoundError(f"Incident data missing: {self.csv_path}")

        scan = pl.scan_csv(self.csv_path, schema_overrides=self.INCIDENT_SCHEMA, null_values=[""])
        scan = scan.with_columns(
            [
                pl.col("latitude").str.strip_chars().str.replace(",", ".").cast(pl.Float64, strict=False),
                pl.col("longitude").str.strip_chars().str.replace(",", ".").cast(pl.Float64, strict=False),
                pl.col("category").fill_null("").str.strip_chars(),
                self._timestamp_expr(),
            ]
        ).with_row_index("row", offset=1)
        total = scan.select(pl.len()).collect().item()

        filter_expr = pl.col("latitude").is_not_null() & pl.col("longitude").is_not_null()
        min_datetime, max_datetime = as_naive_utc(min_datetime), as_naive_utc(max_datetime)
        if min_datetime is not None:
            filter_expr = filter_expr & (pl.col("timestamp").is_null() | (pl.col("timestamp") >= min_datetime))
        if max_datetime is not None:
            filter_expr = filter_expr & (pl.col("timestamp").is_null() | (pl.col("timestamp") <= max_datetime))
        if bbox is not None:
            filter_expr = (
                filter_expr
                & (pl.col("latitude") >= bbox.south)
                & (pl.col("latitude") <= bbox.north)
                & (pl.col("longitude") >= bbox.west)
                & (pl.col("longitude") <= bbox.east)
            )
        wanted = sorted({c.strip().lower() for c in categories or ()})
        if wanted:
            filter_expr = filter_expr & pl.col("category").str.to_lowercase().is_in(wanted)

        incidents = scan.filter(filter_expr).collect()
        points = [
            IncidentPoint(
                id=row["id"] if row["id"] is not None else f"row-{row['row']}",
                lat=row["latitude"],
                lng=row["longitude"],
                category=row["category"],
                status=row["status"],
                timestamp=row["timestamp"],
            )
            for row in incidents.iter_rows(named=True)
        ]

        print(f"Loaded incidents: {len(points):,} of {total:,} rows from {self.csv_path.name}")
        return points
