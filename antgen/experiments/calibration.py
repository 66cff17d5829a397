"""Wall-clock calibration of the tour-planning runtime estimate.

The estimate reads its two constants from a :class:`CalibrationConstants`
record. Calibration times real greedy and 2-opt runs on random point sets,
rescales both constants so the estimate matches the measurements, and saves
the new record as JSON next to a Parquet table of the raw trials.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from antgen.config.constants import QUICK_CALIBRATION_TEST_SIZES, TWO_OPT_ITERATION_CAP
from antgen.config.types import CalibrationConfig, CalibrationConstants
from antgen.domain.metric import Point, ToroidalMetric
from antgen.domain.tour import plan_tour
from antgen.io.paths import calibration_constants_path, calibration_results_path
from antgen.io.persistence import load_calibration_constants, save_calibration_constants
from antgen.io.schemas import CALIBRATION_RESULTS_SCHEMA

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Runtime estimate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuntimeEstimate:
    estimated_ms: float
    greedy_ms: float
    two_opt_ms: float
    iterations: int
    complexity: str


def estimate_runtime(
    num_points: int, constants: CalibrationConstants | None = None
) -> RuntimeEstimate:
    """Predict greedy + 2-opt wall time for *num_points* painted cells."""
    if num_points < 0:
        raise ValueError("num_points must be >= 0")
    constants = constants or CalibrationConstants()
    iterations = min(num_points, TWO_OPT_ITERATION_CAP)
    greedy_ms = num_points * num_points * constants.greedy_constant
    two_opt_ms = num_points * num_points * iterations * constants.two_opt_constant
    if num_points < 100:
        complexity = "Low"
    elif num_points < 500:
        complexity = "Medium"
    else:
        complexity = "High"
    return RuntimeEstimate(
        estimated_ms=round(greedy_ms + two_opt_ms, 2),
        greedy_ms=round(greedy_ms, 2),
        two_opt_ms=round(two_opt_ms, 2),
        iterations=iterations,
        complexity=complexity,
    )


def classify_hardware(mean_ratio: float) -> str:
    """Bucket the mean actual/estimated ratio into a performance class."""
    if mean_ratio < 0.5:
        return "High-performance system (much faster than baseline)"
    if mean_ratio < 1.5:
        return "Standard performance system (close to baseline)"
    if mean_ratio < 3:
        return "Lower performance system (slower than baseline)"
    return "Very low performance system (much slower than baseline)"


# ---------------------------------------------------------------------------
# Calibrator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalibrationTrial:
    """Averaged measurements for one point count."""

    num_points: int
    iterations: int
    actual_ms: float
    estimated_ms: float
    greedy_ms: float
    two_opt_ms: float


class TspCalibrator:
    """Measure tour-planning time and fit the estimate constants to it."""

    def __init__(
        self,
        config: CalibrationConfig | None = None,
        baseline: CalibrationConstants | None = None,
    ) -> None:
        self.config = config or CalibrationConfig()
        self.baseline = baseline or CalibrationConstants()
        self.results: list[CalibrationTrial] = []
        self.optimized: CalibrationConstants | None = None
        self.greedy_scale = 1.0
        self.two_opt_scale = 1.0
        self._rng = random.Random(self.config.seed)
        self._metric = ToroidalMetric(cols=self.config.grid_size, rows=self.config.grid_size)

    def generate_test_points(self, num_points: int) -> list[Point]:
        size = self.config.grid_size
        return [
            Point(self._rng.randrange(size), self._rng.randrange(size)) for _ in range(num_points)
        ]

    def run_calibration_test(
        self, num_points: int, iterations: int | None = None
    ) -> CalibrationTrial:
        iterations = iterations or self.config.iterations
        logger.info("Testing with %d points...", num_points)
        start = Point(0, 0)
        end = Point(self.config.grid_size - 1, self.config.grid_size - 1)
        totals: list[float] = []
        greedy: list[float] = []
        two_opt: list[float] = []
        for _ in range(iterations):
            plan = plan_tour(self.generate_test_points(num_points), start, end, self._metric)
            totals.append(plan.total_ms)
            greedy.append(plan.greedy_ms)
            two_opt.append(plan.two_opt_ms)
        trial = CalibrationTrial(
            num_points=num_points,
            iterations=iterations,
            actual_ms=sum(totals) / len(totals),
            estimated_ms=estimate_runtime(num_points, self.baseline).estimated_ms,
            greedy_ms=sum(greedy) / len(greedy),
            two_opt_ms=sum(two_opt) / len(two_opt),
        )
        self.results.append(trial)
        logger.info("  Actual: %.2fms, Estimated: %.2fms", trial.actual_ms, trial.estimated_ms)
        return trial

    def run_calibration(self, test_sizes: tuple[int, ...] | None = None) -> CalibrationConstants:
        """Run every size in turn, pausing between sizes, then fit constants."""
        for size in test_sizes or self.config.test_sizes:
            self.run_calibration_test(size)
            if self.config.delay_seconds > 0:
                time.sleep(self.config.delay_seconds)
        return self.calculate_optimal_constants()

    def calculate_optimal_constants(self) -> CalibrationConstants:
        """Scale each baseline constant by measured / estimated time."""
        if not self.results:
            raise ValueError("no calibration results; run a calibration test first")
        sum_actual_greedy = 0.0
        sum_estimated_greedy = 0.0
        sum_actual_two_opt = 0.0
        sum_estimated_two_opt = 0.0
        for trial in self.results:
            n = trial.num_points
            sum_actual_greedy += trial.greedy_ms
            sum_estimated_greedy += n * n * self.baseline.greedy_constant
            sum_actual_two_opt += trial.two_opt_ms
            sum_estimated_two_opt += (
                n * n * min(n, TWO_OPT_ITERATION_CAP) * self.baseline.two_opt_constant
            )
        # timer resolution can report zero for tiny inputs; keep the baseline then
        self.greedy_scale = (
            sum_actual_greedy / sum_estimated_greedy
            if sum_estimated_greedy > 0 and sum_actual_greedy > 0
            else 1.0
        )
        self.two_opt_scale = (
            sum_actual_two_opt / sum_estimated_two_opt
            if sum_estimated_two_opt > 0 and sum_actual_two_opt > 0
            else 1.0
        )
        self.optimized = CalibrationConstants(
            greedy_constant=self.baseline.greedy_constant * self.greedy_scale,
            two_opt_constant=self.baseline.two_opt_constant * self.two_opt_scale,
            schema_version=self.baseline.schema_version,
        )
        return self.optimized

    def mean_ratio(self) -> float:
        ratios = [t.actual_ms / t.estimated_ms for t in self.results if t.estimated_ms > 0]
        return sum(ratios) / len(ratios) if ratios else 1.0

    def report(self) -> list[str]:
        """Human-readable calibration report, one line per entry."""
        lines = ["=== CALIBRATION REPORT ===", "Points\tActual(ms)\tEstimated(ms)\tRatio"]
        for trial in self.results:
            ratio = trial.actual_ms / trial.estimated_ms if trial.estimated_ms > 0 else float("nan")
            lines.append(
                f"{trial.num_points}\t{trial.actual_ms:.2f}\t\t"
                f"{trial.estimated_ms:.2f}\t\t{ratio:.2f}"
            )
        if self.optimized is not None:
            lines.append(
                f"Greedy constant: {self.optimized.greedy_constant:.4e} "
                f"(scale: {self.greedy_scale:.3f})"
            )
            lines.append(
                f"2-opt constant: {self.optimized.two_opt_constant:.4e} "
                f"(scale: {self.two_opt_scale:.3f})"
            )
        lines.append(f"Hardware: {classify_hardware(self.mean_ratio())}")
        return lines

    def write_results(self, out_dir: Path) -> tuple[Path, Path | None]:
        """Persist raw trials to Parquet and fitted constants to JSON."""
        out_dir = Path(out_dir)
        results_path = calibration_results_path(out_dir)
        results_path.parent.mkdir(parents=True, exist_ok=True)
        columns: dict[str, list[int | float]] = {
            "num_points": [t.num_points for t in self.results],
            "iterations": [t.iterations for t in self.results],
            "actual_ms": [t.actual_ms for t in self.results],
            "estimated_ms": [t.estimated_ms for t in self.results],
            "greedy_ms": [t.greedy_ms for t in self.results],
            "two_opt_ms": [t.two_opt_ms for t in self.results],
        }
        pq.write_table(
            pa.Table.from_pydict(columns, schema=CALIBRATION_RESULTS_SCHEMA), results_path
        )
        constants_path = None
        if self.optimized is not None:
            constants_path = save_calibration_constants(
                self.optimized, calibration_constants_path(out_dir)
            )
        return results_path, constants_path


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_sizes(raw_sizes: str) -> tuple[int, ...]:
    """Parse comma-delimited positive point counts."""
    parts = [part.strip() for part in raw_sizes.split(",") if part.strip()]
    if not parts:
        raise ValueError("sizes must not be empty")
    sizes: list[int] = []
    for part in parts:
        try:
            value = int(part)
        except ValueError as exc:
            raise ValueError("sizes must contain integers") from exc
        if value < 1:
            raise ValueError("sizes values must be >= 1")
        sizes.append(value)
    return tuple(sizes)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calibrate the tour-planning runtime estimate")
    parser.add_argument("--sizes", type=str, default=None, help="Comma-separated point counts")
    parser.add_argument("--quick", action="store_true", help="Use a short list of small sizes")
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument("--delay", type=float, default=None, help="Seconds between sizes")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument(
        "--baseline",
        type=Path,
        default=None,
        help="calibration.json to start from (defaults to built-in constants)",
    )
    parser.add_argument("--out-dir", type=Path, default=Path("data/calibration"))
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for calibration runs."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    defaults = CalibrationConfig()
    try:
        if args.sizes is not None:
            sizes = _parse_sizes(args.sizes)
        elif args.quick:
            sizes = QUICK_CALIBRATION_TEST_SIZES
        else:
            sizes = defaults.test_sizes
        config = CalibrationConfig(
            test_sizes=sizes,
            iterations=args.iterations if args.iterations is not None else defaults.iterations,
            delay_seconds=args.delay if args.delay is not None else defaults.delay_seconds,
            seed=args.seed,
            out_dir=args.out_dir,
        )
        baseline = load_calibration_constants(args.baseline)
    except (ValueError, json.JSONDecodeError) as exc:
        parser.error(str(exc))

    calibrator = TspCalibrator(config=config, baseline=baseline)
    constants = calibrator.run_calibration()
    for line in calibrator.report():
        logger.info(line)
    results_path, constants_path = calibrator.write_results(config.out_dir)

    summary = {
        "sizes": list(config.test_sizes),
        "greedy_constant": constants.greedy_constant,
        "two_opt_constant": constants.two_opt_constant,
        "results_path": str(results_path),
        "constants_path": str(constants_path),
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
