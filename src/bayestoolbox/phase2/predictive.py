""" Predictive-probability stopping boundaries for single-arm binary monitoring.

An arm's event rate p has a conjugate Beta(a_prior, b_prior) prior. After r
events in n patients the posterior is Beta(a_prior + r, b_prior + n - r) and the
number of events S among the m = n_max - n patients still to come is
Beta-Binomial(m, a_prior + r, b_prior + n - r).

A future outcome s is *non-safe* when the end-of-trial posterior puts more than
theta_nonsafe of its mass above p_max. The predictive probability

    PP(n, r) = sum_s P(S = s) * 1[Pr(p > p_max | r + s events in n_max) > theta_nonsafe]

is the chance that the trial will end up declaring the arm non-safe. The trial
stops at an interim look when PP(n, r) > theta_stop, and the stopping boundary
at n is the smallest r for which that happens.

"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from bayestoolbox.core.stats import (
    PMF_SUM_TOLERANCE,
    beta_binomial_pmf,
    beta_tail_prob,
    check_beta_shape,
    check_probability,
)
from bayestoolbox.errors import (
    InvalidObservationError,
    InvalidParameterError,
    NumericInstabilityError,
)

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 6


def _is_int(x):
    return isinstance(x, (int, np.integer)) and not isinstance(x, (bool, np.bool_))


@dataclass(frozen=True)
class DesignParameters:
    """Prior, sample sizes and decision thresholds of a monitored arm.

    Attributes:
        a_prior: First shape parameter of the Beta prior on the event rate.
        b_prior: Second shape parameter of the Beta prior on the event rate.
        n_interim: Sample size at the first interim look.
        n_max: Maximum sample size.
        n_increase: Number of patients between consecutive looks.
        p_max: Event rate regarded as excessive.
        theta_nonsafe: Posterior probability of p > p_max above which a final
            outcome is declared non-safe.
        theta_stop: Predictive probability of a non-safe outcome above which
            the trial stops.

    Raises:
        InvalidParameterError: If any value is out of range.
    """

    a_prior: float
    b_prior: float
    n_interim: int
    n_max: int
    n_increase: int
    p_max: float
    theta_nonsafe: float
    theta_stop: float

    def __post_init__(self):
        check_beta_shape(self.a_prior, self.b_prior)
        for label in ("p_max", "theta_nonsafe", "theta_stop"):
            value = getattr(self, label)
            if not 0 <= value <= 1:
                raise InvalidParameterError(f"{label} must be in [0, 1], got {value}")
        for label in ("n_interim", "n_max", "n_increase"):
            if not _is_int(getattr(self, label)):
                raise InvalidParameterError(
                    f"{label} must be an integer, got {getattr(self, label)!r}"
                )
        if self.n_max < 1:
            raise InvalidParameterError(f"n_max must be positive, got {self.n_max}")
        if not 1 <= self.n_interim <= self.n_max:
            raise InvalidParameterError(
                f"n_interim must be in [1, n_max={self.n_max}], got {self.n_interim}"
            )
        if self.n_increase < 1:
            raise InvalidParameterError(
                f"n_increase must be positive, got {self.n_increase}"
            )

    @property
    def prior_mean(self) -> float:
        return self.a_prior / (self.a_prior + self.b_prior)

    @property
    def prior_ess(self) -> float:
        """Effective sample size of the prior, a + b."""
        return self.a_prior + self.b_prior

    def look_sizes(self) -> List[int]:
        """Sample sizes at which the trial is analysed.

        Returns:
            n_interim, n_interim + n_increase, ... up to and always including
            n_max.
        """
        looks = list(range(self.n_interim, self.n_max, self.n_increase))
        looks.append(self.n_max)
        return looks

    def posterior(self, n: int, r: int) -> Tuple[float, float]:
        """Shape parameters of the posterior after r events in n patients."""
        return self.a_prior + r, self.b_prior + n - r

    def with_prior(self, a: float, b: float) -> "DesignParameters":
        """Returns a copy of the design with a different analysis prior."""
        return replace(self, a_prior=a, b_prior=b)


@dataclass(frozen=True)
class InterimObservation:
    """Patients enrolled (n) and events observed (r) at a look."""

    n: int
    r: int

    def validate(self, design: DesignParameters) -> "InterimObservation":
        if not (_is_int(self.n) and _is_int(self.r)):
            raise InvalidObservationError(self.n, self.r, design.n_max)
        if not 0 <= self.r <= self.n <= design.n_max:
            raise InvalidObservationError(self.n, self.r, design.n_max)
        return self

    def remaining(self, design: DesignParameters) -> int:
        return design.n_max - self.n


@dataclass(frozen=True)
class FutureScenario:
    """One possible future: s events among the m patients still to enrol."""

    m: int
    s: int
    probability: float
    tail_probability: float
    non_safe: bool


@dataclass(frozen=True)
class StoppingBoundary:
    """Smallest event count r_min that stops the trial at sample size n.

    ``r_min`` is None when no event count at this look is high enough.
    """

    n: int
    r_min: Optional[int]

    def triggers(self, r: int) -> bool:
        return self.r_min is not None and r >= self.r_min


def _scenario_arrays(design, n, r):
    obs = InterimObservation(n, r).validate(design)
    m = obs.remaining(design)
    a_post, b_post = design.posterior(n, r)
    s = np.arange(m + 1)
    probs = beta_binomial_pmf(m, a_post, b_post)
    tails = beta_tail_prob(design.p_max, a_post + s, b_post + m - s)
    return s, probs, tails


def future_scenarios(
    design: DesignParameters, observation: InterimObservation
) -> Iterator[FutureScenario]:
    """Enumerates the future outcomes of a trial from an interim look.

    Args:
        design: The trial design.
        observation: The data observed so far.

    Yields:
        FutureScenario for s = 0, 1, ..., n_max - n.
    """
    s, probs, tails = _scenario_arrays(design, observation.n, observation.r)
    m = len(s) - 1
    for s_i, prob, tail in zip(s, probs, tails):
        tail = check_probability(tail, f"Pr(p > {design.p_max})")
        yield FutureScenario(
            m=m,
            s=int(s_i),
            probability=float(prob),
            tail_probability=tail,
            non_safe=bool(tail > design.theta_nonsafe),
        )


def predictive_probability(
    design: DesignParameters, n: int, r: int, decimals: Optional[int] = DEFAULT_DECIMALS
) -> float:
    """Calculates the predictive probability of a non-safe final outcome.

    Args:
        design: The trial design.
        n: Patients enrolled so far.
        r: Events observed so far.
        decimals: Places to round the result to; None for no rounding.

    Returns:
        PP(n, r), a probability in [0, 1]. When n == n_max this is 1.0 if the
        final posterior already exceeds theta_nonsafe and 0.0 otherwise.

    Raises:
        InvalidObservationError: If not 0 <= r <= n <= n_max.
        NumericInstabilityError: If the computation leaves [0, 1].
    """
    s, probs, tails = _scenario_arrays(design, n, r)
    if not np.all(np.isfinite(tails)):
        raise NumericInstabilityError(
            f"Non-finite posterior tail probability at n={n}, r={r}"
        )
    non_safe = tails > design.theta_nonsafe
    pp = float(probs[non_safe].sum())
    if 1.0 < pp <= 1.0 + PMF_SUM_TOLERANCE:
        pp = 1.0
    return check_probability(pp, f"PP({n}, {r})", decimals=decimals)


def should_stop(
    design: DesignParameters, n: int, r: int, decimals: Optional[int] = DEFAULT_DECIMALS
) -> bool:
    """Tells whether the trial stops after r events in n patients."""
    return predictive_probability(design, n, r, decimals=decimals) > design.theta_stop


def _looks(design, looks):
    if looks is None:
        return design.look_sizes()
    looks = list(looks)
    for n in looks:
        InterimObservation(n, 0).validate(design)
    return looks


def predictive_grid(
    design: DesignParameters,
    looks: Optional[Sequence[int]] = None,
    decimals: Optional[int] = DEFAULT_DECIMALS,
) -> pd.DataFrame:
    """Calculates PP(n, r) for every look n and every r in 0..n.

    Args:
        design: The trial design.
        looks: Sample sizes to evaluate. Defaults to ``design.look_sizes()``.
        decimals: Places to round PP to; None for no rounding.

    Returns:
        pandas.DataFrame with columns n, r, m, pp and stop.
    """
    rows = []
    for n in _looks(design, looks):
        for r in range(n + 1):
            pp = predictive_probability(design, n, r, decimals=decimals)
            rows.append((n, r, design.n_max - n, pp, pp > design.theta_stop))
    dat = OrderedDict()
    for i, col in enumerate(["n", "r", "m", "pp", "stop"]):
        dat[col] = [row[i] for row in rows]
    return pd.DataFrame(dat)


def stopping_boundaries(
    design: DesignParameters,
    looks: Optional[Sequence[int]] = None,
    decimals: Optional[int] = DEFAULT_DECIMALS,
) -> List[StoppingBoundary]:
    """Calculates the stopping boundary at each look.

    PP(n, r) is non-decreasing in r, so the search over r stops at the first
    triggering value.

    Args:
        design: The trial design.
        looks: Sample sizes to evaluate. Defaults to ``design.look_sizes()``.
        decimals: Places to round PP to before comparing with theta_stop.

    Returns:
        A list of StoppingBoundary, one per look, in look order.
    """
    logger.debug("Computing stopping boundaries for %s", design)
    boundaries = []
    for n in _looks(design, looks):
        r_min = None
        for r in range(n + 1):
            if should_stop(design, n, r, decimals=decimals):
                r_min = r
                break
        logger.debug("n=%s: r_min=%s", n, r_min)
        boundaries.append(StoppingBoundary(n=n, r_min=r_min))
    return boundaries


def boundary_table(
    design: DesignParameters,
    looks: Optional[Sequence[int]] = None,
    decimals: Optional[int] = DEFAULT_DECIMALS,
) -> pd.DataFrame:
    """Stopping boundaries as a DataFrame with columns n and r_min.

    ``r_min`` uses the nullable Int64 dtype; looks with no boundary are <NA>.
    """
    boundaries = stopping_boundaries(design, looks=looks, decimals=decimals)
    return pd.DataFrame(
        {
            "n": [b.n for b in boundaries],
            "r_min": pd.array([b.r_min for b in boundaries], dtype="Int64"),
        }
    )


def compare_priors(
    design: DesignParameters,
    priors: Dict[str, Tuple[float, float]],
    looks: Optional[Sequence[int]] = None,
    decimals: Optional[int] = DEFAULT_DECIMALS,
) -> pd.DataFrame:
    """Stopping boundaries of one design under several analysis priors.

    Args:
        design: The trial design. Its own prior is ignored.
        priors: Map of scenario name to (a, b), e.g.
            ``{"skeptical": (2.4, 9.6), "neutral": (0.6, 5.4)}``.
        looks: Sample sizes to evaluate. Defaults to ``design.look_sizes()``.
        decimals: Places to round PP to before comparing with theta_stop.

    Returns:
        pandas.DataFrame indexed by n with one r_min column per scenario.
    """
    looks = _looks(design, looks)
    columns = OrderedDict()
    for name, (a, b) in priors.items():
        table = boundary_table(design.with_prior(a, b), looks=looks, decimals=decimals)
        columns[name] = table["r_min"].array
    return pd.DataFrame(columns, index=pd.Index(looks, name="n"))
