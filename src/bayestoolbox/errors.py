"""Exceptions raised by bayestoolbox.

Configuration problems subclass ``ValueError`` so callers that already guard
against bad input keep working; numerical breakdowns subclass
``ArithmeticError``.
"""


class BayesToolboxError(Exception):
    """Base class for all bayestoolbox errors."""


class InvalidParameterError(BayesToolboxError, ValueError):
    """A design parameter or configuration value is out of range."""


class InvalidObservationError(BayesToolboxError, ValueError):
    """An interim observation is inconsistent with the design."""

    def __init__(self, n, r, n_max):
        self.n = n
        self.r = r
        self.n_max = n_max
        super().__init__(
            f"Invalid observation: r={r} events in n={n} patients "
            f"(require 0 <= r <= n <= n_max={n_max})"
        )


class NumericInstabilityError(BayesToolboxError, ArithmeticError):
    """A computed probability is not finite or falls outside [0, 1]."""
