""" Operating characteristics of predictive stopping boundaries by simulation.

Each simulated trial draws a true event rate (fixed, or from a design prior),
enrols patients one at a time up to n_max and checks the observed event count
against the stopping boundary at every look. The aggregates describe how often
the design stops early, how often it ends up declaring the arm unacceptable and
how many patients it uses on average.
"""

import logging
from collections import OrderedDict
from functools import partial

import numpy as np

from bayestoolbox.core.simulation import extract_sim_data, run_sims, sim_parameter_space
from bayestoolbox.core.stats import check_beta_shape
from bayestoolbox.errors import InvalidParameterError
from bayestoolbox.phase2.predictive import stopping_boundaries
from bayestoolbox.utils import (
    ParameterSpace,
    atomic_to_json,
    get_proportion_confint_report,
)

logger = logging.getLogger(__name__)


def _check_truth(true_rate, design_prior):
    if (true_rate is None) == (design_prior is None):
        raise InvalidParameterError("Specify exactly one of true_rate and design_prior")
    if true_rate is not None and not 0 <= true_rate <= 1:
        raise InvalidParameterError(f"true_rate must be in [0, 1], got {true_rate}")
    if design_prior is not None:
        check_beta_shape(*design_prior)


def simulate_trial(design, boundaries, rng, true_rate=None, design_prior=None):
    """Simulates one monitored trial.

    Args:
        design: The DesignParameters of the trial.
        boundaries: StoppingBoundary list, usually from ``stopping_boundaries``.
        rng: A ``numpy.random.Generator``.
        true_rate: The true event rate. Mutually exclusive with design_prior.
        design_prior: (a, b) of a Beta distribution from which the true event
            rate is drawn.

    Returns:
        A JSON-able dict with keys TrueRate, NEnrolled, Events, StopLook,
        EarlyStop and Unacceptable. StopLook is the index into ``boundaries``
        of the look that stopped the trial, or None.
    """
    _check_truth(true_rate, design_prior)
    if design_prior is not None:
        true_rate = rng.beta(*design_prior)
    outcomes = rng.binomial(1, true_rate, size=design.n_max)
    events = np.concatenate([[0], np.cumsum(outcomes)])

    stop_look = None
    n_enrolled = design.n_max
    for i, boundary in enumerate(boundaries):
        if boundary.triggers(events[boundary.n]):
            stop_look = i
            n_enrolled = boundary.n
            break

    sim = OrderedDict()
    sim["TrueRate"] = atomic_to_json(true_rate)
    sim["NEnrolled"] = int(n_enrolled)
    sim["Events"] = atomic_to_json(events[n_enrolled])
    sim["StopLook"] = stop_look
    sim["EarlyStop"] = stop_look is not None and n_enrolled < design.n_max
    sim["Unacceptable"] = stop_look is not None
    return sim


def summarise_trials(sims, num_looks, alpha=0.05):
    """Aggregates simulated trials into operating characteristics.

    Args:
        sims: List of dicts returned by ``simulate_trial``.
        num_looks: Number of looks in the boundary schedule.
        alpha: Significance level for the Monte Carlo confidence intervals.

    Returns:
        An ordered dict with NumSims, ProbEarlyStop, ProbUnacceptable,
        ExpectedN, StopDist and the Wilson intervals of the two
        probabilities.
    """
    num_sims = len(sims)
    if num_sims == 0:
        raise InvalidParameterError("Cannot summarise an empty list of simulations")
    early = sum(1 for x in sims if x["EarlyStop"])
    unacceptable = sum(1 for x in sims if x["Unacceptable"])
    stop_counts = np.zeros(num_looks)
    for x in sims:
        if x["StopLook"] is not None:
            stop_counts[x["StopLook"]] += 1

    to_return = OrderedDict()
    to_return["NumSims"] = num_sims
    to_return["ProbEarlyStop"] = early / num_sims
    to_return["ProbUnacceptable"] = unacceptable / num_sims
    to_return["ExpectedN"] = float(np.mean([x["NEnrolled"] for x in sims]))
    to_return["StopDist"] = [float(x) for x in stop_counts / num_sims]
    to_return["ProbEarlyStopCI"] = get_proportion_confint_report(
        early, num_sims, alpha=alpha
    )
    to_return["ProbUnacceptableCI"] = get_proportion_confint_report(
        unacceptable, num_sims, alpha=alpha
    )
    return to_return


def operating_characteristics(
    design,
    n_sims,
    true_rate=None,
    design_prior=None,
    seed=None,
    boundaries=None,
    alpha=0.05,
):
    """Estimates the operating characteristics of a design by simulation.

    Args:
        design: The DesignParameters of the trial.
        n_sims: Number of trials to simulate.
        true_rate: Fixed true event rate.
        design_prior: (a, b) Beta distribution to draw a true rate from for
            each simulated trial.
        seed: Seed for ``numpy.random.default_rng``.
        boundaries: Precomputed stopping boundaries. Computed from ``design``
            when omitted.
        alpha: Significance level for the Monte Carlo confidence intervals.

    Returns:
        The ordered dict produced by ``summarise_trials``.
    """
    if n_sims < 1:
        raise InvalidParameterError(f"n_sims must be positive, got {n_sims}")
    _check_truth(true_rate, design_prior)
    if boundaries is None:
        boundaries = stopping_boundaries(design)
    logger.info(
        "Simulating %s trials, true_rate=%s, design_prior=%s",
        n_sims,
        true_rate,
        design_prior,
    )
    rng = np.random.default_rng(seed)
    sims = run_sims(
        simulate_trial,
        n1=1,
        n2=n_sims,
        design=design,
        boundaries=boundaries,
        rng=rng,
        true_rate=true_rate,
        design_prior=design_prior,
    )
    return summarise_trials(sims, len(boundaries), alpha=alpha)


def oc_table(design, true_rates, n_sims, seed=None, boundaries=None):
    """Operating characteristics over a range of true event rates.

    Args:
        design: The DesignParameters of the trial.
        true_rates: Iterable of true event rates.
        n_sims: Number of simulated trials per rate.
        seed: Seed for ``numpy.random.default_rng``.
        boundaries: Precomputed stopping boundaries.

    Returns:
        pandas.DataFrame indexed by TrueRate with columns ProbEarlyStop,
        ProbUnacceptable and ExpectedN.
    """
    if n_sims < 1:
        raise InvalidParameterError(f"n_sims must be positive, got {n_sims}")
    if boundaries is None:
        boundaries = stopping_boundaries(design)
    ps = ParameterSpace({"true_rate": list(true_rates)})
    for rate in ps["true_rate"]:
        _check_truth(rate, None)
    rng = np.random.default_rng(seed)
    sim_func = partial(simulate_trial, design, boundaries, rng)
    sims = sim_parameter_space(sim_func, ps, n1=n_sims)

    func_map = OrderedDict(
        [
            ("ProbEarlyStop", lambda s, p: np.mean([x["EarlyStop"] for x in s])),
            ("ProbUnacceptable", lambda s, p: np.mean([x["Unacceptable"] for x in s])),
            ("ExpectedN", lambda s, p: np.mean([x["NEnrolled"] for x in s])),
        ]
    )
    df = extract_sim_data(sims, ps, func_map, var_map={"TrueRate": "true_rate"})
    df.index = df.index.get_level_values("TrueRate")
    return df
