import json

import pytest

from bayestoolbox.main import main

DESIGN_ARGS = [
    "--a-prior", "2.4",
    "--b-prior", "9.6",
    "--n-interim", "6",
    "--n-max", "24",
    "--n-increase", "6",
    "--p-max", "0.2",
    "--theta-nonsafe", "0.6",
    "--theta-stop", "0.8",
]


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "design.json"
    path.write_text(
        json.dumps(
            {
                "n_interim": 6,
                "n_max": 24,
                "n_increase": 6,
                "p_max": 0.2,
                "theta_nonsafe": 0.6,
                "theta_stop": 0.8,
                "priors": {
                    "skeptical": {"a": 2.4, "b": 9.6},
                    "neutral": {"a": 0.6, "b": 5.4},
                },
            }
        )
    )
    return str(path)


def test_boundary_table_from_flags(capsys):
    assert main(DESIGN_ARGS) == 0
    out = capsys.readouterr().out
    assert "r_min" in out
    lines = out.strip().splitlines()
    assert lines[2].split()[-2:] == ["12", "4"]


def test_compare_from_config(capsys, config_file):
    assert main(["--config", config_file, "--compare"]) == 0
    out = capsys.readouterr().out
    assert "skeptical" in out and "neutral" in out


def test_flags_override_config(capsys, config_file):
    assert main(["--config", config_file, "--theta-stop", "1.0"]) == 0
    out = capsys.readouterr().out
    assert "<NA>" in out


def test_grid(capsys):
    assert main(DESIGN_ARGS + ["--grid", "--decimals", "-1"]) == 0
    out = capsys.readouterr().out
    assert "pp" in out and "stop" in out


def test_simulate(capsys):
    assert main(DESIGN_ARGS + ["--simulate", "50", "--true-rate", "0.3", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "Prob. early stop" in out
    assert "Expected sample size" in out


def test_simulate_requires_true_rate(capsys):
    assert main(DESIGN_ARGS + ["--simulate", "10"]) == 2
    assert "--true-rate" in capsys.readouterr().err


def test_invalid_design_reported(capsys):
    args = DESIGN_ARGS + ["--a-prior", "-1"]
    assert main(args) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_config_reported(capsys, tmp_path):
    assert main(["--config", str(tmp_path / "nope.json")]) == 2
    assert "Cannot read design config" in capsys.readouterr().err


def test_malformed_prior_in_config_reported(capsys, tmp_path):
    path = tmp_path / "design.json"
    path.write_text(
        json.dumps(
            {
                "n_interim": 6,
                "n_max": 24,
                "n_increase": 6,
                "p_max": 0.2,
                "theta_nonsafe": 0.6,
                "theta_stop": 0.8,
                "priors": {"neutral": {"mean": "low", "ess": 6}},
            }
        )
    )
    assert main(["--config", str(path)]) == 2
    assert "error:" in capsys.readouterr().err
