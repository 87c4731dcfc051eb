# -*- coding: utf-8 -*-
"""
solver.py  (plaintext recovery without the secret key)
------------------------------------------------------
Write every public pairing as a power of the base  B = e(g1, h),
h = H_G2(C1 || C2), and read its exponent as a linear form over Fr in the
unknowns  x = (m, mask, sk)  where  mask = sk·r  is the ElGamal blinding
exponent (pk1^r = C1^sk = g1^{sk·r}):

  encryption    e(C2, h)                      = B^{ m + mask }
  binding       e(C1, sigma) · e(C1, pk2)^-c  = B^{ k·mask }
  verification  e(g1, sigma) · e(g1, pk2)^-c  = B^{ k·sk }

The pk2 correction is stripped with public values only, because
e(C1, pk2^c) = e(g1, g2)^{c·mask} can be recomputed from C1 and pk2.
Gauss-Jordan elimination on the coefficient rows (right-hand sides combined
in GT) cancels the sk-bearing mask and leaves  B^m.  On the toy backend m
is then one field division; on a real curve it is a bounded search over
the encoding domain, or a match against a known message space.

If k == 0 (mod q) the binding row vanishes, the mask cannot be cancelled,
and eliminate() raises AttackInapplicable instead of guessing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence

from .encoding import Plaintext, decode_scalar, domain_bound, encode_plaintext
from .errors import AttackInapplicable, DecodeError, EncodingError
from .scheme import Challenge, check, ciphertext_hash, correction_exponent

UNKNOWNS = ("m", "mask", "sk")

# Plaintexts of the original "encrypt + sign" puzzle.
MESSAGE_SPACE = (
    390183091831,
    4987238947234982,
    84327489279482,
    8492374892742,
    5894274824234,
    4982748927426,
    48248927348927427,
    489274982749828,
    99084321987189371,
    8427489729843712893,
)


# ============================================================
# Witness
# ============================================================

@dataclass
class Row:
    coeffs: List[int]   # over Fr, indexed like UNKNOWNS
    rhs: Any            # GT element equal to B^{<coeffs, x>}


@dataclass
class SolverWitness:
    h: Any                       # H_G2(C1 || C2)
    c: int                       # H_Fr(C1)
    base: Any                    # B = e(g1, h)
    pairings: Dict[str, Any] = field(default_factory=dict)
    rows: List[Row] = field(default_factory=list)


def build_witness(ch: Challenge) -> SolverWitness:
    params = ch.params
    b = params.backend
    q = params.order
    k = params.k

    h = ciphertext_hash(params, ch.c1, ch.c2)
    c = correction_exponent(params, ch.c1)
    neg_c = (-c) % q

    pairings = {
        "e(g1,h)":     b.pair(params.g1, h),
        "e(C2,h)":     b.pair(ch.c2, h),
        "e(C1,sigma)": b.pair(ch.c1, ch.sigma),
        "e(C1,pk2)":   b.pair(ch.c1, ch.pk2),
        "e(g1,sigma)": b.pair(params.g1, ch.sigma),
        "e(g1,pk2)":   b.pair(params.g1, ch.pk2),
    }

    rows = [
        Row([1, 1, 0], pairings["e(C2,h)"]),
        Row([0, k, 0], pairings["e(C1,sigma)"] * (pairings["e(C1,pk2)"] ** neg_c)),
        Row([0, 0, k], pairings["e(g1,sigma)"] * (pairings["e(g1,pk2)"] ** neg_c)),
    ]
    return SolverWitness(h=h, c=c, base=pairings["e(g1,h)"], pairings=pairings, rows=rows)


# ============================================================
# Elimination over Fr with GT right-hand sides
# ============================================================

def eliminate(rows: Sequence[Row], target: int, order: int) -> Any:
    """
    Reduce the system to row echelon form and return B^{x_target}.

    Row operations act on coefficients mod `order` and on the right-hand
    sides in GT:  row_i -= f·row_j  is  rhs_i * rhs_j^{-f}.
    Raises AttackInapplicable if x_target is not determined by the rows.
    """
    if not rows:
        raise AttackInapplicable("empty equation system")
    n = len(rows[0].coeffs)
    work = [Row([a % order for a in r.coeffs], r.rhs) for r in rows]

    pivots: Dict[int, int] = {}   # col -> row
    cur = 0
    for col in range(n):
        piv = next((i for i in range(cur, len(work)) if work[i].coeffs[col] != 0), None)
        if piv is None:
            continue
        work[cur], work[piv] = work[piv], work[cur]

        inv = pow(work[cur].coeffs[col], -1, order)
        work[cur] = Row([(a * inv) % order for a in work[cur].coeffs], work[cur].rhs ** inv)

        for i in range(len(work)):
            f = work[i].coeffs[col]
            if i == cur or f == 0:
                continue
            work[i] = Row(
                [(a - f * p) % order for a, p in zip(work[i].coeffs, work[cur].coeffs)],
                work[i].rhs * (work[cur].rhs ** ((-f) % order)),
            )
        pivots[col] = cur
        cur += 1

    if target not in pivots:
        raise AttackInapplicable(f"{UNKNOWNS[target]} has no pivot: the rows are dependent")
    row = work[pivots[target]]
    if any(a != 0 for j, a in enumerate(row.coeffs) if j != target):
        free = [UNKNOWNS[j] for j, a in enumerate(row.coeffs) if j != target and a != 0]
        raise AttackInapplicable(f"cannot eliminate {', '.join(free)} from the m equation")
    return row.rhs


# ============================================================
# Recover
# ============================================================

def isolate_message(ch: Challenge, verify_first: bool = True) -> SolverWitness:
    """Run the elimination; witness.pairings["B^m"] holds the isolated term."""
    if verify_first:
        check(ch.params, ch.pk1, ch.pk2, ch.c1, ch.c2, ch.sigma)
    w = build_witness(ch)
    w.pairings["B^m"] = eliminate(w.rows, UNKNOWNS.index("m"), ch.params.order)
    return w


def recover(ch: Challenge, as_bytes: bool = False, verify_first: bool = True) -> Plaintext:
    """
    Plaintext of `ch` from public material only.

    Raises VerificationFailed (tampered challenge), AttackInapplicable
    (degenerate k) or DecodeError (scalar outside the encoding domain).
    """
    params = ch.params
    w = isolate_message(ch, verify_first=verify_first)
    bound = domain_bound(params.order, params.domain_bits)
    x = params.backend.discrete_log(w.base, w.pairings["B^m"], bound)
    if x is None:
        raise DecodeError(f"no plaintext below {bound} matches the isolated term")
    return decode_scalar(x, params.order, params.domain_bits, as_bytes=as_bytes)


def match_candidates(ch: Challenge, candidates: Iterable[Plaintext] = MESSAGE_SPACE,
                     verify_first: bool = True) -> int:
    """
    Index of the candidate whose B^{m_i} equals the isolated term.
    Candidates outside the encoding domain cannot have been encrypted and are skipped.
    """
    params = ch.params
    w = isolate_message(ch, verify_first=verify_first)
    target = params.backend.serialize(w.pairings["B^m"])
    for i, cand in enumerate(candidates):
        try:
            x = encode_plaintext(cand, params.order, params.domain_bits)
        except EncodingError:
            continue
        if params.backend.serialize(w.base ** x) == target:
            return i
    raise DecodeError("no candidate matches the isolated term")


def recover_many(challenges: Iterable[Challenge], as_bytes: bool = False) -> List[Plaintext]:
    return [recover(ch, as_bytes=as_bytes) for ch in challenges]
