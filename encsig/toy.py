# -*- coding: utf-8 -*-
"""
toy.py  (exponent-level stand-in for a pairing group)
-----------------------------------------------------
Every group G1, G2, GT is Z/pZ, and an element is stored as its exponent
with respect to a generator:

  g^a * g^b   ->  a + b  (mod p)
  (g^a)^n     ->  a * n  (mod p)
  e(g^a, g^b) ->  a * b  (mod p)

Bilinearity holds by construction, so any algebra written against the real
provider runs unchanged here.  Discrete logarithms are free: reading `x`
out of `base^x` is one field division, which keeps small worked examples
(p = 101) checkable by hand.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from typing import Optional

G1, G2, GT = "G1", "G2", "GT"

# trial division in _is_prime stays below 2^16 steps
MAX_TOY_MODULUS = 1 << 32


@dataclass(frozen=True)
class ToyElement:
    group: str
    value: int
    p: int

    def _same(self, other: "ToyElement") -> None:
        if not isinstance(other, ToyElement) or other.group != self.group or other.p != self.p:
            raise TypeError(f"cannot combine {self.group} element with {other!r}")

    def __mul__(self, other: "ToyElement") -> "ToyElement":
        self._same(other)
        return ToyElement(self.group, (self.value + other.value) % self.p, self.p)

    def __pow__(self, n: int) -> "ToyElement":
        return ToyElement(self.group, (self.value * int(n)) % self.p, self.p)

    def __repr__(self) -> str:
        return f"{self.group}^{self.value} (mod {self.p})"


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    i = 2
    while i * i <= n:
        if n % i == 0:
            return False
        i += 1
    return True


class ToyBackend:
    """Toy pairing provider over Z/pZ; generators are the exponent 1."""

    def __init__(self, p: int = 101):
        if p >= MAX_TOY_MODULUS:
            raise ValueError(f"toy modulus must be below 2^32, got {p}")
        if not _is_prime(p):
            raise ValueError(f"toy modulus must be prime, got {p}")
        self.p = p
        self.name = f"TOY{p}"
        self.order = p

    # -- elements -----------------------------------------------------------

    def element(self, group: str, value: int) -> ToyElement:
        return ToyElement(group, int(value) % self.p, self.p)

    def generator(self, group: str) -> ToyElement:
        return self.element(group, 1)

    def random_scalar(self) -> int:
        return secrets.randbelow(self.p - 1) + 1

    def pair(self, a: ToyElement, b: ToyElement) -> ToyElement:
        if a.group != G1 or b.group != G2:
            raise TypeError(f"pair() expects (G1, G2), got ({a.group}, {b.group})")
        return self.element(GT, a.value * b.value)

    # -- hashing ------------------------------------------------------------

    def _digest(self, data: bytes, label: bytes) -> int:
        return int.from_bytes(hashlib.sha256(label + data).digest(), "big")

    def hash_to_g2(self, data: bytes) -> ToyElement:
        # never the identity: e(g1, h) has to stay a usable base
        return self.element(G2, self._digest(data, b"G2:") % (self.p - 1) + 1)

    def hash_to_scalar(self, data: bytes) -> int:
        return self._digest(data, b"ZR:") % self.p

    # -- bytes --------------------------------------------------------------

    def serialize(self, x: ToyElement) -> bytes:
        return f"{x.group}:{x.value}".encode("ascii")

    def deserialize(self, b: bytes) -> ToyElement:
        group, _, value = b.decode("ascii").partition(":")
        if group not in (G1, G2, GT) or not value.isdigit():
            raise ValueError(f"not a toy element: {b!r}")
        return self.element(group, int(value))

    # -- discrete log -------------------------------------------------------

    def discrete_log(self, base: ToyElement, target: ToyElement, bound: int) -> Optional[int]:
        """x = target / base in Z/pZ; None if base is the identity or x >= bound."""
        if base.value == 0:
            return None
        x = (target.value * pow(base.value, -1, self.p)) % self.p
        return x if x < bound else None
