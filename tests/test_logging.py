import logging

import bayestoolbox
from bayestoolbox.core.simulation import run_sims
from bayestoolbox.phase2.predictive import DesignParameters, stopping_boundaries


def dummy_sim():
    return {"ok": True}


def test_package_logger_has_null_handler():
    logger = logging.getLogger(bayestoolbox.__name__)
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_stopping_boundaries_log(caplog):
    design = DesignParameters(2.4, 9.6, 12, 24, 12, 0.2, 0.6, 0.8)
    with caplog.at_level(logging.DEBUG, logger="bayestoolbox.phase2.predictive"):
        stopping_boundaries(design)
    messages = [record.getMessage() for record in caplog.records]
    assert any("n=12: r_min=4" in m for m in messages)


def test_run_sims_logs(caplog):
    with caplog.at_level(logging.INFO):
        run_sims(dummy_sim, n1=2, n2=1)
    assert sum(record.levelno == logging.INFO for record in caplog.records) == 2
