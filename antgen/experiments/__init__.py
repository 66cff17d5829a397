"""Experiment orchestration: compile CLI and runtime calibration."""

from antgen.experiments.calibration import (
    RuntimeEstimate,
    TspCalibrator,
    classify_hardware,
    estimate_runtime,
)

__all__ = ["RuntimeEstimate", "TspCalibrator", "classify_hardware", "estimate_runtime"]
