# -*- coding: utf-8 -*-
"""
backend.py  (pairing arithmetic provider on top of Charm)
---------------------------------------------------------
Thin wrapper around Charm's PairingGroup.  Scalars are handled as plain
Python ints (reduced mod the group order) so the solver's linear algebra
over Fr is backend-independent; group elements keep Charm's operators:

  P * Q      group operation (G1, G2, GT)
  P ** n     scalar multiplication / exponentiation
  pair(P, Q) bilinear map G1 x G2 -> GT

Groups are named "G1", "G2", "GT" in calls, exactly as in toy.ToyBackend.
"""

from __future__ import annotations

from math import isqrt
from typing import Any, Dict, Optional

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

DEFAULT_CURVE = "BN254"

_GROUPS = {"G1": G1, "G2": G2, "GT": GT}


class PairingBackend:
    """Charm pairing group exposed through the provider surface the scheme uses."""

    def __init__(self, curve: str = DEFAULT_CURVE):
        self.name = curve
        self.group = PairingGroup(curve)
        self.order = int(self.group.order())

    def generator(self, group: str) -> Any:
        # Charm exposes no canonical generator; a uniformly sampled element
        # generates the prime-order group and is stored in SchemeParams.
        return self.group.random(_GROUPS[group])

    def random_scalar(self) -> int:
        while True:
            x = int(self.group.random(ZR)) % self.order
            if x != 0:
                return x

    def pair(self, a: Any, b: Any) -> Any:
        return pair(a, b)

    def hash_to_g2(self, data: bytes) -> Any:
        return self.group.hash(data, G2)

    def hash_to_scalar(self, data: bytes) -> int:
        return int(self.group.hash(data, ZR)) % self.order

    def serialize(self, x: Any) -> bytes:
        return self.group.serialize(x)

    def deserialize(self, b: bytes) -> Any:
        return self.group.deserialize(b)

    def discrete_log(self, base: Any, target: Any, bound: int) -> Optional[int]:
        """
        Baby-step giant-step in GT: x in [0, bound) with base**x == target,
        or None.  Table keys are the serialized GT elements.
        """
        m = isqrt(max(bound, 1) - 1) + 1
        table: Dict[bytes, int] = {}
        cur = base ** 0
        for j in range(m):
            table.setdefault(self.serialize(cur), j)
            cur = cur * base

        giant = base ** (self.order - m % self.order)   # base^{-m}
        gamma = target
        for i in range(m):
            j = table.get(self.serialize(gamma))
            if j is not None:
                x = i * m + j
                return x if x < bound else None
            gamma = gamma * giant
        return None
