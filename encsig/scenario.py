# -*- coding: utf-8 -*-
"""
scenario.py  (build a challenge, break it)
------------------------------------------
Commands:
  python -m encsig.scenario run       --message pwn -v
  python -m encsig.scenario run       --curve TOY101 --message 42
  python -m encsig.scenario challenge --out keys/challenge.json --message pwn
  python -m encsig.scenario solve     --challenge keys/challenge.json
  python -m encsig.scenario challenge --out keys/blob.json --pick 3
  python -m encsig.scenario solve     --challenge keys/blob.json --candidates

`run` exits 0 only when the recovered plaintext equals the one encrypted.
`--pick i` encrypts MESSAGE_SPACE[i]; `--candidates` answers with the index.
"""

from __future__ import annotations

import argparse
from typing import Union

from . import scheme, serialize, solver
from .errors import EncsigError

Plaintext = Union[int, bytes]


def parse_message(text: str) -> Plaintext:
    """Decimal digits -> int scalar, anything else -> UTF-8 bytes."""
    if text.isascii() and text.isdecimal():
        return int(text)
    return text.encode("utf-8")


def show(m: Plaintext) -> str:
    if isinstance(m, bytes):
        return m.decode("utf-8", errors="replace")
    return str(m)


def _debug(w: solver.SolverWitness) -> None:
    print(f"[SOLVER-DBG] c = H(C1) = {w.c}")
    for row in w.rows:
        terms = " + ".join(f"{a}*{u}" for a, u in zip(row.coeffs, solver.UNKNOWNS) if a)
        print(f"[SOLVER-DBG] row: {terms or '0'}")
    print(f"[SOLVER-DBG] isolated B^m = {w.pairings['B^m']}")


def _challenge(args: argparse.Namespace, m: Plaintext) -> scheme.Challenge:
    try:
        params = scheme.setup(curve=args.curve, k=args.k, domain_bits=args.domain_bits)
    except ValueError as e:
        raise SystemExit(f"[SCHEME] setup FAILED: {e}")
    try:
        ch = scheme.make_challenge(params, m)
    except EncsigError as e:
        raise SystemExit(f"[SCHEME] challenge FAILED ({type(e).__name__}): {e}")
    print(f"[SCHEME] challenge built on {params.curve} (k={params.k}, domain=2^{params.domain_bits})")
    return ch


def cmd_run(args: argparse.Namespace) -> None:
    m = parse_message(args.message)
    ch = _challenge(args, m)

    ok = scheme.verify(ch.params, ch.pk1, ch.pk2, ch.c1, ch.c2, ch.sigma)
    print(f"[VERIFY] result={'PASS' if ok else 'FAIL'}")

    try:
        if args.verbose:
            _debug(solver.isolate_message(ch))
        got = solver.recover(ch, as_bytes=isinstance(m, bytes))
    except EncsigError as e:
        raise SystemExit(f"[SOLVER] recovery FAILED ({type(e).__name__}): {e}")

    print(f"[SOLVER] recovered plaintext: {show(got)}")
    if got != m:
        raise SystemExit(f"[SCENARIO] MISMATCH: encrypted {show(m)!r}, recovered {show(got)!r}")
    print("[SCENARIO] match")


def cmd_challenge(args: argparse.Namespace) -> None:
    if args.pick is not None:
        m: Plaintext = solver.MESSAGE_SPACE[args.pick]
        args.domain_bits = max(args.domain_bits, 64)
    else:
        m = parse_message(args.message)
    ch = _challenge(args, m)
    serialize.save_json(args.out, serialize.dump_challenge(ch))
    print(f"[SCHEME] challenge -> {args.out}")


def cmd_solve(args: argparse.Namespace) -> None:
    ch = serialize.load_challenge(serialize.load_json(args.challenge))
    try:
        if args.verbose:
            _debug(solver.isolate_message(ch))
        if args.candidates:
            idx = solver.match_candidates(ch)
            print(f"[SOLVER] msg found = MESSAGE_SPACE[{idx}] = {solver.MESSAGE_SPACE[idx]}")
            return
        got = solver.recover(ch, as_bytes=args.bytes)
    except EncsigError as e:
        raise SystemExit(f"[SOLVER] recovery FAILED ({type(e).__name__}): {e}")
    print(f"[SOLVER] recovered plaintext: {show(got)}")


def main() -> None:
    ap = argparse.ArgumentParser(
        description="One-time ElGamal + BLS encrypt-then-sign, and its pairing attack"
    )
    sub = ap.add_subparsers(dest="cmd")

    def scheme_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--curve", default=scheme.DEFAULT_CURVE,
                       help=f"Charm curve or TOY<p> (default: {scheme.DEFAULT_CURVE})")
        p.add_argument("--k", type=int, default=scheme.DEFAULT_K,
                       help=f"Scheme constant k (default: {scheme.DEFAULT_K})")
        p.add_argument("--domain-bits", type=int, default=scheme.DEFAULT_DOMAIN_BITS,
                       help="Plaintext encoding domain is [0, 2^bits)")
        p.add_argument("--message", default="pwn",
                       help="Decimal scalar or short UTF-8 string (default: pwn)")
        p.add_argument("-v", "--verbose", action="store_true", help="Print solver diagnostics")

    # --- run ---
    s0 = sub.add_parser("run", help="Build one challenge and recover its plaintext")
    scheme_args(s0)
    s0.set_defaults(func=cmd_run)

    # --- challenge ---
    s1 = sub.add_parser("challenge", help="Write a challenge JSON")
    scheme_args(s1)
    s1.add_argument("--pick", type=int, choices=range(len(solver.MESSAGE_SPACE)),
                    help="Encrypt MESSAGE_SPACE[i] instead of --message")
    s1.add_argument("--out", required=True, help="Output path")
    s1.set_defaults(func=cmd_challenge)

    # --- solve ---
    s2 = sub.add_parser("solve", help="Recover the plaintext of a challenge JSON")
    s2.add_argument("--challenge", required=True, help="Challenge JSON path")
    s2.add_argument("--bytes", action="store_true", help="Decode the scalar as a byte string")
    s2.add_argument("--candidates", action="store_true",
                    help="Report the matching MESSAGE_SPACE index")
    s2.add_argument("-v", "--verbose", action="store_true", help="Print solver diagnostics")
    s2.set_defaults(func=cmd_solve)

    args = ap.parse_args()
    if args.cmd is None:
        args = ap.parse_args(["run"])
    args.func(args)


if __name__ == "__main__":
    main()
