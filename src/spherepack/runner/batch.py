"""Repeated packing trials over one distribution."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from spherepack.algorithms.engine import PackingEngine
from spherepack.core.distribution import SphereDistribution, load_distribution
from spherepack.core.errors import PackingError, SpherePackError
from spherepack.logging_config import setup_logging
from spherepack.monitoring.metrics import (
    BatchMetrics,
    TrialMetrics,
    export_to_csv,
    export_to_json,
    format_summary,
)
from spherepack.monitoring.telegram_notifier import (
    format_batch_start,
    format_error,
    format_final_summary,
    format_trial_milestone,
    send_telegram,
)
from spherepack.runner.config import CONTAINER_SHAPES, SimulationConfig, load_config
from spherepack.runner.simulation import simulate

logger = logging.getLogger(__name__)


class BatchRunner:
    """
    Runs the same distribution through several independent trials.

    Packing is stochastic, so a single run says little about a distribution.
    Trials run sequentially; each gets its own random stream spawned from
    ``config.seed``. Trials that fail to pack are counted as errors, any
    other error ends the batch.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        results_dir: Path | str = "results",
        send_telegram_updates: bool = False,
        engine: Optional[PackingEngine] = None,
        milestone_every: int = 5,
    ):
        """
        Initialize batch runner.

        Args:
            config: Simulation settings shared by all trials.
            results_dir: Directory to save results (default: "results")
            send_telegram_updates: Whether to send Telegram notifications
            engine: Packing engine (built from config if None)
            milestone_every: Send a progress message every N trials
        """
        self.config = config or SimulationConfig()
        self.results_dir = Path(results_dir)
        self.send_telegram_updates = send_telegram_updates
        self.engine = engine
        self.milestone_every = milestone_every

    async def run_batch(
        self,
        distribution: SphereDistribution,
        trials: int = 10,
        label: str = "distribution",
    ) -> BatchMetrics:
        """
        Run *trials* simulations and collect metrics.

        Flow:
            1. Create batch ID and metrics, send start notification
            2. For each trial: simulate, record metrics or error
            3. Mark complete, save JSON/CSV, send final summary
        """
        if trials < 1:
            raise ValueError(f"trials must be >= 1, got {trials}")

        shape = self.config.container.shape
        batch_id = f"batch_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{label}"
        metrics = BatchMetrics(
            batch_id=batch_id,
            label=label,
            container_shape=shape,
            total_trials=trials,
        )

        await self._notify(format_batch_start(label, trials, shape, len(distribution)))

        streams = np.random.SeedSequence(self.config.seed).spawn(trials)
        for trial_id, stream in enumerate(streams):
            started = time.perf_counter()
            try:
                output = simulate(
                    distribution,
                    config=self.config,
                    engine=self.engine,
                    rng=np.random.default_rng(stream),
                )
            except PackingError as exc:
                logger.warning("Trial %d failed: %s", trial_id, exc)
                metrics.record_error()
                await self._notify(format_error(type(exc).__name__, str(exc), {"trial": trial_id}))
                continue

            metrics.add_trial(TrialMetrics(
                trial_id=trial_id,
                batch_id=batch_id,
                container_shape=shape,
                volume_fraction=output.volume_fraction,
                sa_to_vol=output.sa_to_vol,
                sphere_count=output.sphere_count,
                runtime_seconds=time.perf_counter() - started,
            ))
            logger.info("Trial %d/%d: volume fraction %.4f",
                        trial_id + 1, trials, output.volume_fraction)

            if (trial_id + 1) % self.milestone_every == 0:
                await self._notify(format_trial_milestone(
                    trials_completed=trial_id + 1,
                    total_trials=trials,
                    avg_volume_fraction=metrics.avg_volume_fraction,
                ))

        metrics.mark_complete()
        self._save_results(metrics)

        await self._notify(format_final_summary(
            label=label,
            completed_trials=metrics.completed_trials,
            total_trials=trials,
            avg_volume_fraction=metrics.avg_volume_fraction,
            runtime_seconds=metrics.runtime_seconds,
            errors=metrics.errors_count,
        ))
        return metrics

    async def _notify(self, message: str) -> None:
        if self.send_telegram_updates:
            await send_telegram(message)

    def _save_results(self, metrics: BatchMetrics) -> None:
        json_path = self.results_dir / f"{metrics.batch_id}.json"
        csv_path = self.results_dir / f"{metrics.batch_id}_trials.csv"
        export_to_json(metrics, json_path)
        export_to_csv(metrics, csv_path)
        logger.info("Saved results to %s and %s", json_path, csv_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spherepack-batch",
        description="Run repeated packing trials for one sphere distribution",
    )
    parser.add_argument("input", help="Input JSON file with the sphere distribution")
    parser.add_argument("--trials", type=int, default=10, help="Number of trials (default: 10)")
    parser.add_argument("--results-dir", default="results", help="Output directory (default: results)")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--container", choices=CONTAINER_SHAPES, default=None,
                        help="Container shape, overrides the configuration file")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the random source, overrides the configuration file")
    parser.add_argument("--telegram", action="store_true",
                        help="Send progress to Telegram (needs TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID)")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
        config = load_config(args.config) if args.config else SimulationConfig()
        config = config.with_overrides(shape=args.container, seed=args.seed)
        distribution = load_distribution(args.input)
        runner = BatchRunner(
            config=config,
            results_dir=args.results_dir,
            send_telegram_updates=args.telegram,
        )
        metrics = asyncio.run(runner.run_batch(
            distribution,
            trials=args.trials,
            label=Path(args.input).stem,
        ))
    except (SpherePackError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(format_summary(metrics))
    return 0 if metrics.completed_trials else 1


if __name__ == "__main__":
    sys.exit(main())
