"""CLI wiring for inverse-kinematics helpers."""

from __future__ import annotations

import argparse
import math
from math import degrees

import numpy as np

from youbot_kin.cli.utils import format_pose, robot_config, to_radians
from youbot_kin.core.models import JointAngles, PoseVector
from youbot_kin.model.dh_params import DHParamsNum
from youbot_kin.solvers.fk_solver import forward
from youbot_kin.solvers.ik_solver import (
    GeometricSolution,
    IKOptions,
    IKOutcome,
    NoSolution,
    NumericSolution,
    solve_ik,
)
from youbot_kin.solvers.metrics import pose_errors


def _build_ik_options(args: argparse.Namespace, base: IKOptions) -> IKOptions:
    overrides = {
        "max_iter": args.max_iter,
        "lambda_dls": args.lmbda,
        "tol_pos": args.tol_pos,
        "tol_rot": None if args.tol_rot_deg is None else math.radians(args.tol_rot_deg),
    }
    return base._replace(**{k: v for k, v in overrides.items() if v is not None})


def _collect_seeds(args: argparse.Namespace, dof: int) -> list[JointAngles]:
    rows = getattr(args, "seed", None) or []
    if any(len(row) != dof for row in rows):
        raise SystemExit(f"--seed expects {dof} values per entry")
    if args.deg:
        return [JointAngles.from_degrees(row) for row in rows]
    return [JointAngles.from_sequence(row) for row in rows]


def _print_outcome(target: PoseVector, outcome: IKOutcome, dh: DHParamsNum) -> int:
    print("Target:")
    print(format_pose(target.as_array()))

    if isinstance(outcome, NoSolution):
        print(f"\nNo solution found ({outcome.reason}).")
        if outcome.best_angles is not None:
            print(f"Best candidate: pos_err={outcome.pos_err:.3e} mm, rot_err={degrees(outcome.rot_err):.4f} deg")
        print("Try adjusting seeds or tolerances.")
        return 1

    q = JointAngles.from_sequence(outcome.angles)
    if isinstance(outcome, GeometricSolution):
        print(f"\nGeometric solution (branch {outcome.branch})")
    elif isinstance(outcome, NumericSolution):
        print(f"\nNumeric solution: iters={outcome.iterations}")

    ok, pose = forward(q.as_list(), dh)
    if ok and pose is not None:
        pe, re = pose_errors(pose, target.as_array())
        print(f"  pos_err={pe:.3e} mm, rot_err={degrees(re):.4f} deg")
    print("  q (rad):", [round(v, 6) for v in q.radians])
    print("  q (deg):", [round(v, 3) for v in q.as_degrees()])
    return 0


def _solve(args: argparse.Namespace, target: PoseVector) -> int:
    config = robot_config(args)
    options = _build_ik_options(args, config.ik)
    seeds = _collect_seeds(args, config.dh.dof)
    outcome = solve_ik(
        target.as_array(),
        config.dh,
        config.limits,
        options,
        geometric=config.geometric and not args.numeric_only,
        seeds=[s.as_list() for s in seeds] or None,
    )
    return _print_outcome(target, outcome, config.dh)


def cmd_ik_solve(args: argparse.Namespace) -> int:
    x, y, z, roll, pitch, yaw = (float(v) for v in args.target)
    roll, pitch, yaw = to_radians((roll, pitch, yaw), args.deg)
    return _solve(args, PoseVector(x, y, z, roll, pitch, yaw))


def cmd_ik_from_q(args: argparse.Namespace) -> int:
    config = robot_config(args)
    q = to_radians(args.q, args.deg)
    ok, pose = forward(q, config.dh)
    if not ok or pose is None:
        raise SystemExit(f"--q expects {config.dh.dof} joint angles")
    print("q (deg):", [round(degrees(v), 3) for v in q])
    return _solve(args, PoseVector.from_sequence(np.asarray(pose)))


def _add_ik_common_arguments(parser: argparse.ArgumentParser, deg_help: str) -> None:
    parser.add_argument("--deg", action="store_true", help=deg_help)
    parser.add_argument(
        "--seed",
        nargs="+",
        type=float,
        action="append",
        help="optional initial seed(s) q1..qN (repeatable)",
    )
    parser.add_argument("--numeric-only", action="store_true", help="skip the closed-form branch")
    parser.add_argument("--max-iter", type=int, default=None)
    parser.add_argument("--lmbda", type=float, default=None, help="damping λ")
    parser.add_argument("--tol-pos", type=float, default=None, help="pos tol (mm)")
    parser.add_argument("--tol-rot-deg", type=float, default=None, help="rot tol (deg)")


def register_subparsers(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    ik = subparsers.add_parser("ik", help="inverse kinematics helpers")
    ik_sub = ik.add_subparsers(dest="ik_command", required=True)

    ik_solve = ik_sub.add_parser("solve", help="inverse kinematics for a TCP pose vector")
    ik_solve.add_argument(
        "--target",
        nargs=6,
        type=float,
        required=True,
        metavar=("x", "y", "z", "roll", "pitch", "yaw"),
        help="x y z (mm) and roll pitch yaw (rad by default)",
    )
    _add_ik_common_arguments(ik_solve, "interpret roll/pitch/yaw and --seed in degrees")
    ik_solve.set_defaults(func=cmd_ik_solve)

    ik_from_q = ik_sub.add_parser("from-q", help="build the target from joint angles, then solve")
    ik_from_q.add_argument("--q", nargs="+", type=float, required=True, help="joint angles q1..qN")
    _add_ik_common_arguments(ik_from_q, "interpret --q/--seed in degrees")
    ik_from_q.set_defaults(func=cmd_ik_from_q)
