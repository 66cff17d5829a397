"""Domain layer: grid geometry, tours, rule programs and replay."""

from antgen.domain.grid import GridContext
from antgen.domain.metric import Displacement, Move, Point, ToroidalMetric, delta
from antgen.domain.palette import convert_hex, convert_image, convert_rgb
from antgen.domain.program import (
    EPILOGUE_TABLE,
    CompileResult,
    Rule,
    RuleProgram,
    compile_grid,
    compile_tour,
    parse_heading,
)
from antgen.domain.replay import HaltReason, ReplayResult, replay_program
from antgen.domain.tour import (
    TourPlan,
    TwoOptStats,
    construct_greedy_tour,
    expand_moves,
    plan_tour,
    two_opt,
)

__all__ = [
    "CompileResult",
    "Displacement",
    "EPILOGUE_TABLE",
    "GridContext",
    "HaltReason",
    "Move",
    "Point",
    "ReplayResult",
    "Rule",
    "RuleProgram",
    "ToroidalMetric",
    "TourPlan",
    "TwoOptStats",
    "compile_grid",
    "compile_tour",
    "construct_greedy_tour",
    "convert_hex",
    "convert_image",
    "convert_rgb",
    "delta",
    "expand_moves",
    "parse_heading",
    "plan_tour",
    "replay_program",
    "two_opt",
]
