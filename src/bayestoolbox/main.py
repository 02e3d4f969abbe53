"""Command-line entry point for predictive stopping boundaries."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import (
    DESIGN_KEYS,
    decimals_from_dict,
    design_from_dict,
    load_config,
    priors_from_dict,
)
from .errors import BayesToolboxError
from .phase2.monitoring import operating_characteristics
from .phase2.predictive import boundary_table, compare_priors, predictive_grid

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute Bayesian predictive-probability stopping boundaries."
    )
    parser.add_argument("--config", help="JSON file describing the design.")
    parser.add_argument("--prior", help="Name of the prior in the config to use.")
    parser.add_argument("--a-prior", type=float, help="Beta prior shape a.")
    parser.add_argument("--b-prior", type=float, help="Beta prior shape b.")
    parser.add_argument("--n-interim", type=int, help="Sample size at the first look.")
    parser.add_argument("--n-max", type=int, help="Maximum sample size.")
    parser.add_argument("--n-increase", type=int, help="Patients between looks.")
    parser.add_argument("--p-max", type=float, help="Excessive event rate.")
    parser.add_argument(
        "--theta-nonsafe", type=float, help="Posterior threshold for non-safety."
    )
    parser.add_argument(
        "--theta-stop", type=float, help="Predictive threshold for stopping."
    )
    parser.add_argument(
        "--decimals",
        type=int,
        help="Decimal places PP is rounded to before comparison (negative: none).",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Print one boundary column per prior in the config.",
    )
    parser.add_argument(
        "--grid", action="store_true", help="Print the full PP(n, r) grid."
    )
    parser.add_argument(
        "--simulate",
        type=int,
        default=0,
        metavar="N",
        help="Simulate N trials and print operating characteristics.",
    )
    parser.add_argument(
        "--true-rate", type=float, default=None, help="True event rate to simulate."
    )
    parser.add_argument("--seed", type=int, default=None, help="Simulation seed.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress.")
    return parser


def _design_doc(args):
    doc = load_config(args.config) if args.config else {}
    for key in DESIGN_KEYS + ("a_prior", "b_prior"):
        value = getattr(args, key)
        if value is not None:
            doc[key] = value
    if args.decimals is not None:
        doc["decimals"] = args.decimals if args.decimals >= 0 else None
    return doc


def run(args) -> None:
    doc = _design_doc(args)
    design = design_from_dict(doc, prior=args.prior)
    decimals = decimals_from_dict(doc)
    logger.info("Design: %s", design)

    if args.compare:
        table = compare_priors(design, priors_from_dict(doc), decimals=decimals)
    else:
        table = boundary_table(design, decimals=decimals)
    print(table.to_string())  # noqa: T201

    if args.grid:
        print()  # noqa: T201
        print(predictive_grid(design, decimals=decimals).to_string(index=False))  # noqa: T201

    if args.simulate > 0:
        if args.true_rate is None:
            raise BayesToolboxError("--simulate requires --true-rate")
        oc = operating_characteristics(
            design, args.simulate, true_rate=args.true_rate, seed=args.seed
        )
        print()  # noqa: T201
        print(f"Prob. early stop: {oc['ProbEarlyStop']:.4f}")  # noqa: T201
        print(f"Prob. unacceptable: {oc['ProbUnacceptable']:.4f}")  # noqa: T201
        print(f"Expected sample size: {oc['ExpectedN']:.2f}")  # noqa: T201


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments and print the boundary table."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO)
    try:
        run(args)
    except BayesToolboxError as e:
        print(f"error: {e}", file=sys.stderr)  # noqa: T201
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
