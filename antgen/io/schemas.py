"""Arrow schema definitions and version stamps for persisted artifacts.

All column contracts for rule tables and calibration results are
centralised here so that writers and readers agree on them.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

PROGRAM_SCHEMA_VERSION = 1
CALIBRATION_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Rule program
# ---------------------------------------------------------------------------

RULE_TABLE_SCHEMA = pa.schema(
    [
        ("state", pa.int64()),
        ("rule_index", pa.int64()),
        ("write_color", pa.int64()),
        ("move", pa.string()),
        ("next_state", pa.int64()),
    ]
)

# ---------------------------------------------------------------------------
# Calibration
# ---------------------------------------------------------------------------

CALIBRATION_RESULTS_SCHEMA = pa.schema(
    [
        ("num_points", pa.int64()),
        ("iterations", pa.int64()),
        ("actual_ms", pa.float64()),
        ("estimated_ms", pa.float64()),
        ("greedy_ms", pa.float64()),
        ("two_opt_ms", pa.float64()),
    ]
)
