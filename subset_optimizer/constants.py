"""Package‑wide constants and demo rows."""

from typing import Any

# Meet-in-the-middle keeps each half at 2**6 = 64 subsets for this limit.
MAX_CANDIDATES = 12

DEFAULT_LOG_LEVEL = "WARNING"

# Read by the CLI only; the library never consults the environment.
WORKERS_ENV_VAR = "SUBSET_OPTIMIZER_WORKERS"

DEMO_ROWS: list[dict[str, Any]] = [
    {"target": 10, "candidates": [1, 2, 3, 4, 5, 6]},
    {"target": 5, "candidates": [10, 15, 20]},
    {"target": 15, "candidates": [5, 10, 3, 7]},
    {"target": 10, "candidates": [3, 3, 4, 4, 5]},
    {"target": 10, "candidates": []},
    {"target": 10, "candidates": [7]},
    {"target": 5, "candidates": [7]},
]

__all__ = [
    "MAX_CANDIDATES",
    "DEFAULT_LOG_LEVEL",
    "WORKERS_ENV_VAR",
    "DEMO_ROWS",
]
