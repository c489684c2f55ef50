"""Metrics tracking and export for repeated packing trials.

Provides dataclasses for tracking per-trial and per-batch metrics and
utilities for exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
import statistics
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

TRIAL_FIELDS = [
    "trial_id", "batch_id", "container_shape", "volume_fraction",
    "sa_to_vol", "sphere_count", "runtime_seconds", "finished_at",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TrialMetrics:
    """Metrics for a single packing trial.

    Attributes:
        trial_id: Index of the trial within its batch.
        batch_id: Batch identifier this trial belongs to.
        container_shape: "cylinder" or "cuboid".
        volume_fraction: Packing efficiency achieved (0-1).
        sa_to_vol: Volume to surface area ratio of the input population.
        sphere_count: Placed spheres (cuboid runs only).
        runtime_seconds: Wall time of the trial.
        finished_at: Timestamp when the trial finished.
    """

    trial_id: int
    batch_id: str
    container_shape: str
    volume_fraction: float
    sa_to_vol: float
    sphere_count: Optional[int]
    runtime_seconds: float
    finished_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamp.

        Example:
            >>> tm = TrialMetrics(0, "batch_001", "cuboid", 0.31, 1.6, 812, 2.5)
            >>> tm.to_dict()["volume_fraction"]
            0.31
        """
        d = asdict(self)
        d["finished_at"] = self.finished_at.isoformat()
        return d


@dataclass
class BatchMetrics:
    """Aggregate metrics for a batch of trials over one distribution.

    Attributes:
        batch_id: Unique identifier for the batch.
        label: Human readable name, usually the input file stem.
        container_shape: Container shape used for every trial.
        total_trials: Number of trials requested.
        completed_trials: Number of trials that packed successfully.
        avg_volume_fraction: Mean volume fraction over completed trials.
        median_volume_fraction: Median volume fraction.
        min_volume_fraction: Lowest volume fraction.
        max_volume_fraction: Highest volume fraction.
        stdev_volume_fraction: Sample standard deviation (0 below two trials).
        runtime_seconds: Total runtime in seconds.
        errors_count: Trials that failed to pack.
        started_at: Batch start timestamp.
        completed_at: Batch completion timestamp (None if running).
        trial_metrics: Per-trial metrics.
    """

    batch_id: str
    label: str
    container_shape: str
    total_trials: int = 0
    completed_trials: int = 0
    avg_volume_fraction: float = 0.0
    median_volume_fraction: float = 0.0
    min_volume_fraction: float = 0.0
    max_volume_fraction: float = 0.0
    stdev_volume_fraction: float = 0.0
    runtime_seconds: float = 0.0
    errors_count: int = 0
    started_at: datetime = field(default_factory=_now)
    completed_at: datetime | None = None
    trial_metrics: list[TrialMetrics] = field(default_factory=list)

    def add_trial(self, trial: TrialMetrics) -> None:
        """Add a completed trial and refresh the statistics.

        Example:
            >>> bm = BatchMetrics("batch_001", "al_ap", "cuboid", total_trials=5)
            >>> bm.add_trial(TrialMetrics(0, "batch_001", "cuboid", 0.3, 1.6, 800, 2.0))
            >>> bm.completed_trials
            1
        """
        self.trial_metrics.append(trial)
        self.completed_trials += 1
        self._recalculate_stats()

    def record_error(self) -> None:
        """Increment error counter."""
        self.errors_count += 1

    def mark_complete(self) -> None:
        """Mark batch as complete and calculate final runtime."""
        self.completed_at = _now()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def _recalculate_stats(self) -> None:
        fractions = [t.volume_fraction for t in self.trial_metrics]
        if not fractions:
            return
        self.avg_volume_fraction = statistics.fmean(fractions)
        self.median_volume_fraction = statistics.median(fractions)
        self.min_volume_fraction = min(fractions)
        self.max_volume_fraction = max(fractions)
        self.stdev_volume_fraction = statistics.stdev(fractions) if len(fractions) > 1 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["trial_metrics"] = [t.to_dict() for t in self.trial_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to dictionary without per-trial details."""
        d = self.to_dict()
        del d["trial_metrics"]
        return d


def export_to_json(metrics: BatchMetrics, output_path: Path | str, include_trials: bool = True) -> None:
    """Export batch metrics to a JSON file.

    Args:
        metrics: BatchMetrics instance to export.
        output_path: Path to output JSON file.
        include_trials: If True, include per-trial metrics. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_trials else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: BatchMetrics, output_path: Path | str) -> None:
    """Export per-trial metrics to a CSV file (header only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=TRIAL_FIELDS)
        writer.writeheader()
        for trial in metrics.trial_metrics:
            writer.writerow(trial.to_dict())


def format_summary(metrics: BatchMetrics) -> str:
    """Generate human-readable summary of batch metrics.

    Example:
        >>> bm = BatchMetrics("batch_001", "al_ap", "cylinder", total_trials=1)
        >>> "Batch: batch_001" in format_summary(bm)
        True
    """
    lines = [
        "=" * 60,
        f"Batch: {metrics.batch_id}",
        f"Distribution: {metrics.label}",
        f"Container: {metrics.container_shape}",
        "=" * 60,
        f"Trials: {metrics.completed_trials}/{metrics.total_trials}",
        "",
        "Volume Fraction:",
        f"  Average: {metrics.avg_volume_fraction:.4f}",
        f"  Median:  {metrics.median_volume_fraction:.4f}",
        f"  Min:     {metrics.min_volume_fraction:.4f}",
        f"  Max:     {metrics.max_volume_fraction:.4f}",
        f"  Stdev:   {metrics.stdev_volume_fraction:.4f}",
        "",
        f"Runtime: {metrics.runtime_seconds:.1f} seconds",
        f"Errors: {metrics.errors_count}",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
