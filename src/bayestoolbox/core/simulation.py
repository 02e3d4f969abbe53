import itertools
import json
import logging
from datetime import datetime

from bayestoolbox.utils import filter_list_of_dicts

logger = logging.getLogger(__name__)


def _dump(sims, out_file):
    try:
        with open(out_file, "w") as outfile:
            json.dump(sims, outfile)
    except OSError as e:
        logger.error("Error writing: %s", e)


def run_sims(sim_func, n1=1, n2=1, out_file=None, **kwargs):
    """Runs simulations using a delegate function.

    Note:
        - A total of `n1 * n2` simulations are performed.
        - `sim_func` is expected to return a JSON-able object.
        - If `out_file` is provided, the results are saved after each batch.

    Args:
        sim_func: The delegate function to call for each simulation.
        n1: The number of batches.
        n2: The number of iterations per batch.
        out_file: The location of the file for incremental saving.
        **kwargs: Keyword arguments to pass to `sim_func`.

    Returns:
        A list of simulation results.
    """

    sims = []
    for j in range(n1):
        sims += [sim_func(**kwargs) for i in range(n2)]
        if out_file:
            _dump(sims, out_file)
        logger.info("Batch %s finished at %s, %s sims", j, datetime.now(), len(sims))
    return sims


def sim_parameter_space(sim_func, ps, n1=1, n2=None, out_file=None):
    """Runs simulations over a parameter space.

    Note:
        - A total of `n1 * n2` simulations are performed.
        - `sim_func` is expected to return a JSON-able object.
        - If `out_file` is provided, the results are saved after each batch.

    Args:
        sim_func: The function to call for each simulation. Parameters are
            provided via `ps` as unpacked keyword arguments.
        ps: The ParameterSpace to explore.
        n1: The number of batches.
        n2: The number of iterations per batch. If not provided, it defaults
            to the size of the parameter space, so that every batch visits
            each combination once.
        out_file: The location of the file for incremental saving.

    Returns:
        A list of simulation results.
    """

    if not n2 or n2 <= 0:
        n2 = ps.size()

    sims = []
    params_iterator = ps.get_cyclical_iterator()
    for j in range(n1):
        sims += [sim_func(**next(params_iterator)) for i in range(n2)]
        if out_file:
            _dump(sims, out_file)
        logger.info("Batch %s finished at %s, %s sims", j, datetime.now(), len(sims))
    return sims


def extract_sim_data(sims, ps, func_map, var_map=None, return_type="dataframe"):
    """Extracts and summarizes a list of simulations.

    This method partitions simulations into subsets based on the parameter
    space, and then applies a collection of summary functions to each subset.

    Args:
        sims: A list of simulations (likely in JSON format).
        ps: The parameter space used to filter the simulations.
        func_map: A map of item names to functions that take a list of sims
            and a parameter map, and return a summary statistic.
        var_map: A map from variable names in the simulation JSON to argument
            names in the parameter space.
        return_type: The desired return type. Can be 'dataframe' (default)
            or 'tuple'.

    Returns:
        A pandas DataFrame or a tuple of lists containing the summarized data.
    """

    if var_map is None:
        var_map = {var_name: var_name for var_name in ps.keys()}
    var_names = list(var_map.keys())

    z = [(var_name, ps[var_map[var_name]]) for var_name in var_names]
    labels, val_arrays = zip(*z)
    param_combinations = list(itertools.product(*val_arrays))
    index_tuples = []
    row_tuples = []
    for param_combo in param_combinations:
        these_params = dict(zip(labels, param_combo))
        these_sims = filter_list_of_dicts(sims, these_params)
        if len(these_sims):
            these_metrics = {
                label: func(these_sims, these_params)
                for label, func in func_map.items()
            }
            index_tuples.append(param_combo)
            row_tuples.append(these_metrics)

    import pandas as pd

    if len(row_tuples):
        if return_type == "dataframe":
            return pd.DataFrame(
                row_tuples, pd.MultiIndex.from_tuples(index_tuples, names=var_names)
            )
        else:
            return row_tuples, index_tuples
    else:
        if return_type == "dataframe":
            return pd.DataFrame(columns=list(func_map.keys()))
        else:
            return [], []
