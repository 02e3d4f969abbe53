from collections import OrderedDict
from copy import copy
from itertools import product

import numpy as np


def filter_list_of_dicts(list_of_dicts, filter_dict):
    """Filters a list of dictionaries based on a filter dictionary.

    Args:
        list_of_dicts: A list of dictionaries to filter.
        filter_dict: A dictionary of key-value pairs to filter by.
            Only exact matches are retained.

    Returns:
        A new list of dictionaries containing only the filtered items.
    """
    for key, val in filter_dict.items():
        # In JSON, tuples are masked as lists. In this filter, we treat them as equivalent:
        if isinstance(val, (tuple)):
            list_of_dicts = [
                x for x in list_of_dicts if x[key] == val or x[key] == list(val)
            ]
        else:
            list_of_dicts = [x for x in list_of_dicts if x[key] == val]
    return list_of_dicts


def atomic_to_json(obj):
    """Converts an object to a JSON-friendly format.

    Note:
        numpy scalars (``np.int64``, ``np.bool_``, ...) are not serialisable
        by the ``json`` module, so they are unwrapped to Python scalars.

    Args:
        obj: The object to convert.

    Returns:
        The object in a JSON-serializable format.
    """

    if isinstance(obj, np.generic):
        return obj.item()
    else:
        return obj


def _create_conf_int_report(conf_int, alpha, method_name):
    report = OrderedDict()
    report["Lower"] = conf_int[0]
    report["Upper"] = conf_int[1]
    report["Alpha"] = alpha
    report["Method"] = method_name
    return report


def get_proportion_confint_report(num_successes, num_trials, alpha=0.05):
    """Gets the Wilson score interval for a binomial proportion.

    Used to attach Monte Carlo error to simulated operating characteristics.

    Args:
        num_successes: The number of successes.
        num_trials: The total number of trials.
        alpha: The significance level (e.g., 0.05 for a 95% CI).

    Returns:
        An ordered dictionary with keys Lower, Upper, Alpha and Method.
    """

    from statsmodels.stats.proportion import proportion_confint

    conf_int = proportion_confint(
        num_successes, num_trials, alpha=alpha, method="wilson"
    )
    return _create_conf_int_report([float(x) for x in conf_int], alpha, "Wilson")


class ParameterSpace:
    """A class to handle combinations of parameters in simulations.

    Examples:
        >>> ps = ParameterSpace({"true_rate": [0.1, 0.2]})
        >>> ps.add("prior", ["skeptical", "neutral"])
        >>> int(ps.size())
        4
    """

    def __init__(self, vals_map=None):
        self.vals_map = OrderedDict()
        if vals_map:
            for label, values in vals_map.items():
                self.add(label, values)

    def add(self, label, values):
        """Adds a parameter and its possible values.

        Args:
            label: The name of the parameter.
            values: A list of possible values for the parameter.
        """

        self.vals_map[label] = list(values)

    def get_cyclical_iterator(self, limit=-1):
        """Gets an iterator to cycle through all parameter permutations.

        Args:
            limit: The maximum number of permutations to iterate through. If -1,
                the iterator will cycle forever.

        Returns:
            An iterable object that yields parameter permutations.
        """

        return _ParameterSpaceIter(self, limit)

    def keys(self):
        return self.vals_map.keys()

    def dimensions(self):
        """Gets the number of values for each parameter.

        Returns:
            A numpy array containing the number of values for each parameter.
        """

        return np.array([len(y) for x, y in self.vals_map.items()])

    def size(self):
        """Gets the total size of the parameter space.

        The size is the product of the number of values for each parameter.
        """

        return int(np.prod(self.dimensions()))

    def __getitem__(self, key):
        return self.vals_map[key]


class _ParameterSpaceIter:

    def __init__(self, parameter_space, limit):
        self.limit = limit
        self.cursor = 0
        self.vals_map = copy(parameter_space.vals_map)
        self.labels = list(self.vals_map.keys())
        num_options = [len(parameter_space[label]) for label in self.labels]
        self.paths = list(product(*[range(x) for x in num_options]))

    def __iter__(self):
        return self

    def __next__(self):
        if 0 < self.limit <= self.cursor:
            raise StopIteration()
        path = self.paths[self.cursor % len(self.paths)]
        param_map = {}
        for j, label in enumerate(self.labels):
            param_map[label] = self.vals_map[label][path[j]]
        self.cursor += 1
        return param_map
