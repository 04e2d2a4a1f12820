"""CSV export of metric snapshots and drone measurements."""

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union
import csv

from drone import Drone
from metrics import MetricsSnapshot

PathLike = Union[str, Path]

METRICS_HEADER = [
    'time_s', 'field_coverage_pct', 'live_anomalies',
    'roaming_drones', 'charging_drones', 'visited_pct',
]
MEASUREMENTS_HEADER = ['drone_id', 'time_s', 'intensity', 'x', 'y']


def export_metrics_to_csv(snapshots: Iterable[MetricsSnapshot], path: PathLike) -> int:
    """
    Write metric snapshots to a CSV file.

    Percentages are written with two decimals, time with one. I/O errors
    propagate to the caller.

    Returns:
        Number of data rows written
    """
    rows = 0
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(METRICS_HEADER)
        for snapshot in snapshots:
            writer.writerow([
                f"{snapshot.time:.1f}",
                f"{snapshot.field_coverage_fraction * 100.0:.2f}",
                f"{snapshot.live_anomaly_count:d}",
                f"{snapshot.roaming_drones:d}",
                f"{snapshot.charging_drones:d}",
                f"{snapshot.visited_fraction * 100.0:.2f}",
            ])
            rows += 1
    return rows


def export_measurements_to_csv(drones: Sequence[Drone], path: PathLike) -> int:
    """
    Write every measurement currently held by the drones to a CSV file.

    Measurements already uploaded at base are gone from the drones and are
    not exported.

    Returns:
        Number of data rows written
    """
    rows = 0
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(MEASUREMENTS_HEADER)
        for drone in drones:
            for m in drone.measurements:
                writer.writerow([
                    f"{drone.id:d}",
                    f"{m.timestamp:.1f}",
                    f"{m.intensity:.3f}",
                    f"{m.x:.1f}",
                    f"{m.y:.1f}",
                ])
                rows += 1
    return rows


def generate_timestamp(now: Optional[datetime] = None) -> str:
    """Timestamp for export filenames, e.g. 20240131_235959."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
