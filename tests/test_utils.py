import json

import numpy as np
import pytest

from bayestoolbox.utils import (
    ParameterSpace,
    atomic_to_json,
    filter_list_of_dicts,
    get_proportion_confint_report,
)


def test_filter_list_of_dicts():
    list_of_dicts = [
        {"a": 1, "b": 2},
        {"a": 1, "b": 3},
        {"a": 2, "b": 2},
    ]
    assert filter_list_of_dicts(list_of_dicts, {"a": 1}) == [
        {"a": 1, "b": 2},
        {"a": 1, "b": 3},
    ]
    assert filter_list_of_dicts(list_of_dicts, {"a": 1, "b": 2}) == [{"a": 1, "b": 2}]


def test_filter_list_of_dicts_tuples_match_lists():
    sims = [{"prior": [2.4, 9.6]}, {"prior": [0.6, 5.4]}]
    assert filter_list_of_dicts(sims, {"prior": (2.4, 9.6)}) == [{"prior": [2.4, 9.6]}]


def test_json_helpers():
    assert isinstance(atomic_to_json(np.int64(3)), int)
    assert isinstance(atomic_to_json(np.bool_(True)), bool)
    assert atomic_to_json("x") == "x"
    json.dumps([atomic_to_json(x) for x in np.array([1.5, 2.5])])


def test_proportion_confint_report():
    report = get_proportion_confint_report(30, 100)
    assert list(report.keys()) == ["Lower", "Upper", "Alpha", "Method"]
    assert report["Lower"] < 0.3 < report["Upper"]
    assert report["Alpha"] == 0.05
    assert report["Method"] == "Wilson"
    narrower = get_proportion_confint_report(30, 100, alpha=0.2)
    assert report["Lower"] < narrower["Lower"] < narrower["Upper"] < report["Upper"]


class TestParameterSpace:
    @pytest.fixture
    def ps(self):
        ps = ParameterSpace({"true_rate": [0.1, 0.2, 0.3]})
        ps.add("prior", ["skeptical", "neutral"])
        return ps

    def test_size_and_dimensions(self, ps):
        assert ps.size() == 6
        assert list(ps.dimensions()) == [3, 2]
        assert list(ps.keys()) == ["true_rate", "prior"]
        assert ps["prior"] == ["skeptical", "neutral"]

    def test_cyclical_iterator_with_limit(self, ps):
        combos = list(ps.get_cyclical_iterator(limit=6))
        assert len(combos) == 6
        assert combos[0] == {"true_rate": 0.1, "prior": "skeptical"}
        assert combos[1] == {"true_rate": 0.1, "prior": "neutral"}
        assert len({tuple(c.items()) for c in combos}) == 6

    def test_cyclical_iterator_wraps(self, ps):
        it = ps.get_cyclical_iterator()
        first = [next(it) for _ in range(6)]
        second = [next(it) for _ in range(6)]
        assert first == second
