""" Beta and Beta-Binomial routines used by the conjugate binary designs. """

import numpy as np
from scipy.stats import beta, betabinom

from bayestoolbox.errors import InvalidParameterError, NumericInstabilityError

PMF_SUM_TOLERANCE = 1e-6


def check_beta_shape(a, b):
    """Raises InvalidParameterError unless a and b are finite and positive."""
    for label, value in (("a", a), ("b", b)):
        if not np.isfinite(value) or value <= 0:
            raise InvalidParameterError(
                f"Beta shape parameter {label} must be positive and finite, got {value}"
            )


def check_probability(value, label="probability", decimals=None):
    """Validates a computed probability.

    Args:
        value: The probability to check.
        label: Description used in the error message.
        decimals: If given, the value is rounded to this many places first.

    Returns:
        The (possibly rounded) probability as a float.

    Raises:
        NumericInstabilityError: If the value is NaN, infinite, or lies
            outside [0, 1].
    """
    value = float(value)
    if decimals is not None:
        value = round(value, decimals)
    if not np.isfinite(value) or value < 0.0 or value > 1.0:
        raise NumericInstabilityError(f"{label} = {value} is not a valid probability")
    return value


def beta_tail_prob(x, a, b):
    """Calculates Pr(p > x) for p ~ Beta(a, b).

    Evaluated as one minus the regularised incomplete beta function, i.e.
    ``1 - beta.cdf(x, a, b)``.

    Args:
        x: The threshold. Scalar or array.
        a: The first shape parameter. Scalar or array.
        b: The second shape parameter. Scalar or array.

    Returns:
        The upper tail probability, with the same shape as the broadcast
        arguments.
    """
    return 1 - beta.cdf(x, a, b)


def beta_binomial_pmf(m, a, b):
    """Probability masses of a Beta-Binomial(m, a, b) variable over 0..m.

    Args:
        m: The number of trials.
        a: The first shape parameter of the mixing Beta distribution.
        b: The second shape parameter of the mixing Beta distribution.

    Returns:
        numpy.ndarray of length m + 1.

    Raises:
        InvalidParameterError: For a negative ``m`` or a bad shape.
        NumericInstabilityError: If the masses do not sum to one.
    """
    if m < 0:
        raise InvalidParameterError(f"Number of trials must be non-negative, got {m}")
    check_beta_shape(a, b)
    s = np.arange(m + 1)
    probs = betabinom.pmf(s, m, a, b)
    total = probs.sum()
    if not np.all(np.isfinite(probs)) or abs(total - 1) > PMF_SUM_TOLERANCE:
        raise NumericInstabilityError(
            f"Beta-Binomial({m}, {a}, {b}) masses sum to {total}, not 1"
        )
    return probs


def beta_from_mean_ess(mean, ess):
    """Finds the Beta distribution with a given mean and effective sample size.

    The effective sample size of Beta(a, b) is a + b, so a prior worth ``ess``
    patients centred on ``mean`` is Beta(mean * ess, (1 - mean) * ess).

    Args:
        mean: The prior mean, strictly between 0 and 1.
        ess: The effective sample size, positive.

    Returns:
        A tuple (a, b).

    Examples:
        >>> a, b = beta_from_mean_ess(0.2, 12)
        >>> round(a, 6), round(b, 6)
        (2.4, 9.6)
    """
    if not 0 < mean < 1:
        raise InvalidParameterError(f"Prior mean must be in (0, 1), got {mean}")
    if ess <= 0:
        raise InvalidParameterError(f"Effective sample size must be positive, got {ess}")
    return mean * ess, (1 - mean) * ess
