"""Unified command-line interface for the youBot kinematics toolkit.

The parser definitions are delegated to the individual CLI modules under
``youbot_kin.cli`` so the entry point stays lightweight.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from youbot_kin.cli import fk, ik


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="youbot-kin", description="youBot kinematics CLI")
    parser.add_argument("--config", help="YAML robot configuration (DH table, limits, IK options)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fk.register_subparsers(sub)
    ik.register_subparsers(sub)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
