"""CLI wiring for forward-kinematics utilities."""

from __future__ import annotations

import argparse
import math
from collections.abc import Iterator, Sequence
from itertools import islice

import numpy as np
import sympy as sp

from youbot_kin.cli.utils import format_pose, pprint_matrix, robot_config, to_radians
from youbot_kin.model.dh_params import youbot_5R
from youbot_kin.model.presets import PRESETS_DEG
from youbot_kin.solvers.fk_solver import fk_numeric, fk_standard, forward
from youbot_kin.solvers.numerical_checker import NumericCheckResult, check_numeric_once


def _generate_symbolic_matrices(
    a: Sequence[sp.Expr | float],
    alpha: Sequence[sp.Expr | float],
    d: Sequence[sp.Expr | float],
    theta: Sequence[sp.Expr | float],
    rest: dict[sp.Symbol, float],
    evaluate: bool,
) -> list[sp.Matrix]:
    matrices = [
        fk_standard(a[: i + 1], alpha[: i + 1], d[: i + 1], theta[: i + 1])
        for i in range(len(a))
    ]
    if evaluate:
        return [sp.N(T.subs(rest), 6) for T in matrices]
    return matrices


def cmd_fk_symbolic(args: argparse.Namespace) -> int:
    th_syms, params = youbot_5R()
    a, alpha, d, theta = params["a"], params["alpha"], params["d"], params["theta"]
    rest = {s: 0.0 for s in th_syms}

    if args.steps:
        print("Stepwise T0i (evaluated at rest unless --no-eval):")
        for i, T in enumerate(_generate_symbolic_matrices(a, alpha, d, theta, rest, args.eval)):
            print(f"\nT0{i + 1}:")
            pprint_matrix(T)
        return 0

    T05 = fk_standard(a, alpha, d, theta)
    print("Symbolic T05:")
    pprint_matrix(T05)
    if args.eval:
        print("\nT05 at rest (rad=0):")
        pprint_matrix(sp.N(T05.subs(rest), 6))  # type: ignore[no-untyped-call]
    return 0


def _collect_qs(args: argparse.Namespace, dof: int) -> list[list[float]]:
    qs: list[list[float]] = []
    for idx in args.preset or ():
        if not 1 <= idx <= len(PRESETS_DEG):
            raise SystemExit(f"--preset index out of range: {idx}")
        qs.append(to_radians(PRESETS_DEG[idx - 1], deg=True))
    for row in args.q or ():
        if len(row) != dof:
            raise SystemExit(f"--q expects {dof} values per entry")
        qs.append(to_radians(row, args.deg))
    if not qs:
        raise SystemExit("Provide --preset or --q …")
    return qs


def cmd_fk_eval(args: argparse.Namespace) -> int:
    config = robot_config(args)
    qs = _collect_qs(args, config.dh.dof)

    for i, q in enumerate(qs, 1):
        ok, pose = forward(q, config.dh)
        if not ok or pose is None:
            print(f"\nCase {i}: forward kinematics rejected {q}")
            return 1
        print(f"\nCase {i}: q (deg) = {[round(math.degrees(v), 3) for v in q]}")
        pprint_matrix(sp.Matrix(np.round(fk_numeric(q, config.dh), 6).tolist()))
        print(format_pose(pose))
    return 0


def _generate_random_checks(T0n: sp.Matrix, th_syms: Sequence[sp.Symbol], rng: np.random.Generator) -> Iterator[NumericCheckResult]:
    while True:
        subs = {s: float(v) for s, v in zip(th_syms, rng.uniform(-math.pi, math.pi, len(th_syms)))}
        result = check_numeric_once(T0n, subs)
        if abs(math.cos(result.pitch)) < 1e-6:
            continue
        yield result


def cmd_fk_check(args: argparse.Namespace) -> int:
    th_syms, params = youbot_5R()
    T05 = fk_standard(params["a"], params["alpha"], params["d"], params["theta"])
    rng = np.random.default_rng(args.seed)

    worst = 0.0
    for i, result in enumerate(islice(_generate_random_checks(T05, th_syms, rng), args.count)):
        print(f"\nSample {i + 1}:")
        print("RPY (rad):", result.roll, result.pitch, result.yaw)
        print(f"||R-Rrec||_F = {result.err_F:.3e},  ||R-Rrec||_inf = {result.err_inf:.3e}")
        sp.pprint(result.delta)  # type: ignore[operator]
        worst = max(worst, result.err_inf)
    return 0 if worst < 1e-9 else 1


def cmd_fk_dh(args: argparse.Namespace) -> int:
    dh = robot_config(args).dh
    print("a:", [float(v) for v in dh.a])
    print("alpha (deg):", [round(math.degrees(v), 6) for v in dh.alpha])
    print("d:", [float(v) for v in dh.d])
    print("theta offset (deg):", [round(math.degrees(v), 6) for v in dh.theta_offset])
    return 0


def register_subparsers(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    fk = subparsers.add_parser("fk", help="forward kinematics utilities")
    fk_sub = fk.add_subparsers(dest="fk_command", required=True)

    fk_symbolic = fk_sub.add_parser("symbolic", help="show symbolic T05 or stepwise T0i")
    fk_symbolic.add_argument("--steps", action="store_true", help="show T01..T05")
    fk_symbolic.add_argument(
        "--no-eval", dest="eval", action="store_false", help="do not eval at rest"
    )
    fk_symbolic.set_defaults(func=cmd_fk_symbolic, eval=True)

    fk_eval = fk_sub.add_parser("eval", help="evaluate T05 and the TCP pose vector for angles")
    fk_eval.add_argument("--preset", type=int, nargs="*", help=f"use preset 1..{len(PRESETS_DEG)} (deg)")
    fk_eval.add_argument("--q", nargs="+", type=float, action="append", help="custom angles q1..qN")
    fk_eval.add_argument("--deg", action="store_true", help="interpret --q in degrees")
    fk_eval.set_defaults(func=cmd_fk_eval)

    fk_check = fk_sub.add_parser("check", help="random RPY round-trip checks avoiding gimbal lock")
    fk_check.add_argument("--count", type=int, default=5)
    fk_check.add_argument("--seed", type=int, default=0)
    fk_check.set_defaults(func=cmd_fk_check)

    fk_dh = fk_sub.add_parser("dh", help="print DH parameters")
    fk_dh.set_defaults(func=cmd_fk_dh)
