import numpy as np
import pytest
from scipy.stats import beta

from bayestoolbox.core import stats
from bayestoolbox.core.stats import (
    beta_binomial_pmf,
    beta_from_mean_ess,
    beta_tail_prob,
    check_beta_shape,
    check_probability,
)
from bayestoolbox.errors import InvalidParameterError, NumericInstabilityError


def test_beta_tail_prob_matches_cdf():
    assert np.isclose(beta_tail_prob(0.2, 2.4, 9.6), 1 - beta.cdf(0.2, 2.4, 9.6))


def test_beta_tail_prob_known_values():
    # Posterior tails at the final look of the skeptical design
    assert np.isclose(beta_tail_prob(0.2, 2.4 + 5, 9.6 + 19), 0.500382, atol=1e-4)
    assert np.isclose(beta_tail_prob(0.2, 2.4 + 6, 9.6 + 18), 0.661295, atol=1e-4)


def test_beta_tail_prob_vectorised():
    s = np.arange(5)
    tails = beta_tail_prob(0.2, 3 + s, 10 - s)
    assert tails.shape == (5,)
    assert np.all(np.diff(tails) > 0)


def test_beta_tail_prob_at_support_ends():
    assert beta_tail_prob(0.0, 2, 3) == 1
    assert beta_tail_prob(1.0, 2, 3) == 0


@pytest.mark.parametrize("m,a,b", [(0, 1, 1), (12, 5.4, 17.6), (30, 0.1, 0.1)])
def test_beta_binomial_pmf_sums_to_one(m, a, b):
    probs = beta_binomial_pmf(m, a, b)
    assert len(probs) == m + 1
    assert np.all(probs >= 0)
    assert np.isclose(probs.sum(), 1, atol=1e-6)


def test_beta_binomial_uniform_prior_is_discrete_uniform():
    probs = beta_binomial_pmf(9, 1, 1)
    assert np.allclose(probs, 0.1)


def test_beta_binomial_pmf_rejects_bad_input():
    with pytest.raises(InvalidParameterError):
        beta_binomial_pmf(-1, 1, 1)
    with pytest.raises(InvalidParameterError):
        beta_binomial_pmf(5, 0, 1)


def test_beta_binomial_pmf_detects_bad_masses(monkeypatch):
    class BrokenBetaBinom:
        @staticmethod
        def pmf(s, m, a, b):
            return np.ones(len(s))

    monkeypatch.setattr(stats, "betabinom", BrokenBetaBinom)
    with pytest.raises(NumericInstabilityError):
        beta_binomial_pmf(4, 1, 1)


@pytest.mark.parametrize("a,b", [(0, 1), (1, -2), (np.nan, 1), (1, np.inf)])
def test_check_beta_shape(a, b):
    with pytest.raises(InvalidParameterError):
        check_beta_shape(a, b)


def test_check_probability():
    assert check_probability(0.1234567, decimals=3) == 0.123
    assert check_probability(1.0000000001, decimals=6) == 1.0
    for bad in (np.nan, np.inf, -0.01, 1.01):
        with pytest.raises(NumericInstabilityError):
            check_probability(bad)


def test_beta_from_mean_ess():
    a, b = beta_from_mean_ess(0.2, 12)
    assert np.isclose(a, 2.4)
    assert np.isclose(b, 9.6)
    a, b = beta_from_mean_ess(0.1, 6)
    assert np.isclose(a, 0.6)
    assert np.isclose(b, 5.4)


@pytest.mark.parametrize("mean,ess", [(0, 5), (1, 5), (0.5, 0), (0.5, -2)])
def test_beta_from_mean_ess_rejects(mean, ess):
    with pytest.raises(InvalidParameterError):
        beta_from_mean_ess(mean, ess)
