"""Designs described as JSON documents or plain mappings.

A document carries the sample sizes and thresholds of a design and, either as
``a_prior``/``b_prior`` or as a ``priors`` section, the analysis prior(s)::

    {
      "n_interim": 12, "n_max": 24, "n_increase": 6,
      "p_max": 0.2, "theta_nonsafe": 0.6, "theta_stop": 0.8,
      "priors": {"skeptical": {"a": 2.4, "b": 9.6},
                 "neutral": {"mean": 0.1, "ess": 6}}
    }

Named priors give either the Beta shape parameters ``a``/``b`` or a prior
``mean`` with an effective sample size ``ess``.
"""

import json
import logging
from collections import OrderedDict

from bayestoolbox.core.stats import beta_from_mean_ess
from bayestoolbox.errors import InvalidParameterError
from bayestoolbox.phase2.predictive import DEFAULT_DECIMALS, DesignParameters

logger = logging.getLogger(__name__)

DESIGN_KEYS = ("n_interim", "n_max", "n_increase", "p_max", "theta_nonsafe", "theta_stop")
INT_KEYS = ("n_interim", "n_max", "n_increase")

DEFAULT_PRIORS = OrderedDict([("skeptical", (2.4, 9.6)), ("neutral", (0.6, 5.4))])


def load_config(path):
    """Reads a JSON design document.

    Raises:
        InvalidParameterError: If the file cannot be read or is not a JSON
            object.
    """
    try:
        with open(path) as f:
            doc = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidParameterError(f"Cannot read design config {path}: {e}") from e
    if not isinstance(doc, dict):
        raise InvalidParameterError(f"Design config {path} must hold a JSON object")
    logger.debug("Loaded design config from %s", path)
    return doc


def _as_int(key, value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"{key} must be an integer, got {value!r}")
    return value


def _as_float(key, value):
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{key} must be a number, got {value!r}") from e


def _prior_from_entry(name, entry):
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return _as_float(name, entry[0]), _as_float(name, entry[1])
    if not isinstance(entry, dict):
        raise InvalidParameterError(f"Prior {name!r} must be a mapping, got {entry!r}")
    if "a" in entry and "b" in entry:
        return _as_float(name, entry["a"]), _as_float(name, entry["b"])
    if "mean" in entry and "ess" in entry:
        return beta_from_mean_ess(
            _as_float(name, entry["mean"]), _as_float(name, entry["ess"])
        )
    raise InvalidParameterError(f"Prior {name!r} needs a/b or mean/ess, got {entry!r}")


def priors_from_dict(doc):
    """Named analysis priors of a design document.

    Returns:
        OrderedDict of scenario name to (a, b). ``DEFAULT_PRIORS`` when the
        document has no ``priors`` section.
    """
    if "priors" not in doc:
        return OrderedDict(DEFAULT_PRIORS)
    entries = doc["priors"]
    if not isinstance(entries, dict) or not entries:
        raise InvalidParameterError("priors must be a non-empty mapping")
    return OrderedDict(
        (name, _prior_from_entry(name, entry)) for name, entry in entries.items()
    )


def decimals_from_dict(doc):
    decimals = doc.get("decimals", DEFAULT_DECIMALS)
    if decimals is None:
        return None
    return _as_int("decimals", decimals)


def design_from_dict(doc, prior=None):
    """Builds DesignParameters from a design document.

    Args:
        doc: Mapping with the keys in ``DESIGN_KEYS`` and a prior.
        prior: Name of the entry in ``priors`` to use as the analysis prior.
            When omitted, ``a_prior``/``b_prior`` are used if present, and
            otherwise the first named prior.

    Returns:
        DesignParameters.

    Raises:
        InvalidParameterError: If a key is missing, a value is malformed or
            the named prior does not exist.
    """
    missing = [key for key in DESIGN_KEYS if key not in doc]
    if missing:
        raise InvalidParameterError(f"Design config is missing {', '.join(missing)}")
    kwargs = {
        key: _as_int(key, doc[key]) if key in INT_KEYS else _as_float(key, doc[key])
        for key in DESIGN_KEYS
    }

    if prior is not None:
        priors = priors_from_dict(doc)
        if prior not in priors:
            raise InvalidParameterError(
                f"Unknown prior {prior!r}; choose from {', '.join(priors)}"
            )
        a, b = priors[prior]
    elif "a_prior" in doc and "b_prior" in doc:
        a = _as_float("a_prior", doc["a_prior"])
        b = _as_float("b_prior", doc["b_prior"])
    else:
        a, b = next(iter(priors_from_dict(doc).values()))

    return DesignParameters(a_prior=a, b_prior=b, **kwargs)
