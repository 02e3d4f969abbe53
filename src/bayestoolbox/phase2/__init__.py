"""Phase II designs for binary outcomes."""

from .monitoring import oc_table, operating_characteristics, simulate_trial
from .predictive import (
    DesignParameters,
    FutureScenario,
    InterimObservation,
    StoppingBoundary,
    boundary_table,
    compare_priors,
    future_scenarios,
    predictive_grid,
    predictive_probability,
    should_stop,
    stopping_boundaries,
)

__all__ = [
    "DesignParameters",
    "FutureScenario",
    "InterimObservation",
    "StoppingBoundary",
    "boundary_table",
    "compare_priors",
    "future_scenarios",
    "oc_table",
    "operating_characteristics",
    "predictive_grid",
    "predictive_probability",
    "should_stop",
    "simulate_trial",
    "stopping_boundaries",
]
