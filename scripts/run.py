#!/usr/bin/env python3
"""Entry point: apply an update stream to the non-adjacent sum index."""

from __future__ import annotations

import argparse

from indepset.driver.runner import run_from_config
from indepset.utils.config import load_config
from indepset.utils.problems import load_problem, problem_from_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sum the best non-adjacent subset after each point update",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  python scripts/run.py --problem configs/problems/example.yaml
  python scripts/run.py --preset configs/presets/stress.yaml
  python scripts/run.py --set problem.n=10 --set driver.verify=true
  python scripts/run.py --problem configs/problems/example.yaml --set driver.modulus=7
""",
    )
    parser.add_argument(
        "--config",
        default="configs/default.yaml",
        help="Path to base config (default: configs/default.yaml)",
    )
    parser.add_argument("--preset", default=None, help="Path to preset config override")
    parser.add_argument(
        "--problem",
        default=None,
        help="YAML file with 'weights' and 'updates'; generated from config if omitted",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        dest="overrides",
        metavar="KEY=VALUE",
        help="Override config values (e.g. --set driver.modulus=998244353)",
    )
    parser.add_argument(
        "--answers", action="store_true", help="Also print the answer after every update"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    config = load_config(
        default_path=args.config,
        preset_path=args.preset,
        overrides=args.overrides,
    )

    if args.problem:
        problem = load_problem(args.problem)
        print(f"Problem: {args.problem}")
    else:
        problem = problem_from_config(config)
        print(f"Problem: generated (seed={config.get('seed')})")
    print(f"Weights: {len(problem.weights)}  Updates: {len(problem.updates)}")
    print(f"Modulus: {config['driver']['modulus']}")

    result = run_from_config(problem, config)

    if args.answers:
        for step, answer in enumerate(result.answers, start=1):
            print(f"  step {step}: {answer}")
    print(f"Total: {result.total}")


if __name__ == "__main__":
    main()
