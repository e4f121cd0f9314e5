"""
SWAPSIM execution layer.

This package contains:
- estimators: ExecutionEstimator with LiveProbe and HeuristicEstimator
- simulator: SwapSimulator, the engine's public entry point
"""

from execution.estimators import (
    ExecutionEstimator,
    HeuristicEstimator,
    LiveProbe,
)
from execution.simulator import (
    SwapSimulator,
    failure_from_error,
    validate_request,
)

__all__ = [
    # Estimators
    "ExecutionEstimator",
    "HeuristicEstimator",
    "LiveProbe",
    # Simulator
    "SwapSimulator",
    "failure_from_error",
    "validate_request",
]
