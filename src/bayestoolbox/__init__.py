"""Bayesian clinical trial design routines."""

__all__ = [
    "config",
    "core",
    "errors",
    "phase2",
    "utils",
]

__version__ = "0.1.0"

import logging

# Attach a NullHandler to avoid logging warnings on import
logging.getLogger(__name__).addHandler(logging.NullHandler())
