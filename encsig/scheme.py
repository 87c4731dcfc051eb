# -*- coding: utf-8 -*-
"""
scheme.py  (one-time ElGamal + BLS encrypt-then-sign)
-----------------------------------------------------
Public parameters:  (G, g1, g2, k, domain_bits)

  KeyGen      sk <- Fr*,  pk1 = g1^sk,  pk2 = g2^sk
  Encrypt     C1 = g1^r,  C2 = g1^m · pk1^r               (r fresh, m in the exponent)
  Sign        h  = H_G2(C1 || C2),  c = H_Fr(C1)
              sigma = h^{k·sk} · pk2^c                      (sigma in G2)
  Verify      e(g1, sigma) == e(pk1, h)^k · e(g1, pk2)^c

The binding hash h ties sigma to the exact (C1, C2) pair, so any change to
the ciphertext after signing makes Verify fail.  It does not hide m: see
solver.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .encoding import Plaintext, encode_plaintext
from .errors import VerificationFailed
from .toy import ToyBackend

DEFAULT_CURVE = "BN254"
DEFAULT_K = 3
DEFAULT_DOMAIN_BITS = 32

TAG_CT = b"encsig/ct/"
TAG_CORR = b"encsig/corr/"


def get_backend(curve: str = DEFAULT_CURVE) -> Any:
    """TOY<p> -> toy provider over Z/pZ; anything else is a Charm curve name."""
    if curve.upper().startswith("TOY"):
        digits = curve[3:]
        if not digits:
            return ToyBackend()
        if not (digits.isascii() and digits.isdecimal()):
            raise ValueError(f"toy curve must be named TOY<prime>, got {curve!r}")
        return ToyBackend(int(digits))
    try:
        from .backend import PairingBackend
    except ImportError as e:
        raise RuntimeError(
            "Missing dependency: install Charm (pip install charm-crypto-framework)."
        ) from e
    return PairingBackend(curve)


# ============================================================
# Dataclasses
# ============================================================

@dataclass(frozen=True)
class SchemeParams:
    backend: Any
    g1: Any
    g2: Any
    k: int
    domain_bits: int = DEFAULT_DOMAIN_BITS

    @property
    def curve(self) -> str:
        return self.backend.name

    @property
    def order(self) -> int:
        return self.backend.order


@dataclass(frozen=True)
class PublicKey:
    pk1: Any   # G1
    pk2: Any   # G2


class KeyPair:
    """
    Owner of the secret scalar.  Use as a context manager: sk is dropped
    when the block exits and the pair can no longer sign.
    """

    def __init__(self, sk: int, pk1: Any, pk2: Any):
        self._sk: Optional[int] = sk
        self.pk1 = pk1
        self.pk2 = pk2

    @property
    def sk(self) -> Optional[int]:
        return self._sk

    @property
    def public(self) -> PublicKey:
        return PublicKey(self.pk1, self.pk2)

    def wipe(self) -> None:
        self._sk = None

    def __enter__(self) -> "KeyPair":
        return self

    def __exit__(self, *exc) -> None:
        self.wipe()

    def __repr__(self) -> str:
        state = "wiped" if self._sk is None else "live"
        return f"KeyPair(pk1={self.pk1!r}, sk=<{state}>)"


@dataclass(frozen=True)
class Ciphertext:
    c1: Any   # g1^r
    c2: Any   # g1^m · pk1^r


@dataclass(frozen=True)
class Challenge:
    """Everything an outsider sees: parameters, public key, ciphertext, signature."""
    params: SchemeParams
    pk1: Any
    pk2: Any
    c1: Any
    c2: Any
    sigma: Any

    @property
    def ciphertext(self) -> Ciphertext:
        return Ciphertext(self.c1, self.c2)


# ============================================================
# Setup
# ============================================================

def setup(curve: str = DEFAULT_CURVE, k: int = DEFAULT_K,
          domain_bits: int = DEFAULT_DOMAIN_BITS) -> SchemeParams:
    backend = get_backend(curve)
    if domain_bits < 1:
        raise ValueError("domain_bits must be >= 1")
    return SchemeParams(
        backend=backend,
        g1=backend.generator("G1"),
        g2=backend.generator("G2"),
        k=int(k) % backend.order,
        domain_bits=domain_bits,
    )


def ciphertext_hash(params: SchemeParams, c1: Any, c2: Any) -> Any:
    """h = H_G2(C1 || C2)"""
    b = params.backend
    return b.hash_to_g2(TAG_CT + b.serialize(c1) + b"|" + b.serialize(c2))


def correction_exponent(params: SchemeParams, c1: Any) -> int:
    """c = H_Fr(C1)"""
    b = params.backend
    return b.hash_to_scalar(TAG_CORR + b.serialize(c1))


# ============================================================
# KeyGen / Encrypt / Sign / Verify
# ============================================================

def keygen(params: SchemeParams, sk: Optional[int] = None) -> KeyPair:
    """
    sk uniform in Fr \\ {0} unless given (fixed worked examples).
    pk1 = g1^sk,  pk2 = g2^sk
    """
    q = params.order
    if sk is None:
        sk = params.backend.random_scalar()
    sk = int(sk) % q
    if sk == 0:
        raise ValueError("secret key must be non-zero mod q")
    return KeyPair(sk, params.g1 ** sk, params.g2 ** sk)


def encrypt(params: SchemeParams, pk1: Any, m: Plaintext,
            r: Optional[int] = None) -> Ciphertext:
    """C1 = g1^r,  C2 = g1^m · pk1^r"""
    q = params.order
    x = encode_plaintext(m, q, params.domain_bits)
    if r is None:
        r = params.backend.random_scalar()
    r = int(r) % q
    if r == 0:
        raise ValueError("blinding factor r must be non-zero mod q")
    g1 = params.g1
    return Ciphertext(c1=g1 ** r, c2=(g1 ** x) * (pk1 ** r))


def sign(params: SchemeParams, sk: int, c1: Any, c2: Any) -> Any:
    """sigma = h^{k·sk} · pk2^c  with  h = H_G2(C1||C2),  c = H_Fr(C1)"""
    if sk is None:
        raise ValueError("secret key has been wiped")
    q = params.order
    h = ciphertext_hash(params, c1, c2)
    c = correction_exponent(params, c1)
    pk2 = params.g2 ** sk
    return (h ** ((params.k * sk) % q)) * (pk2 ** c)


def verify(params: SchemeParams, pk1: Any, pk2: Any, c1: Any, c2: Any, sigma: Any) -> bool:
    """e(g1, sigma) == e(pk1, h)^k · e(g1, pk2)^c"""
    b = params.backend
    h = ciphertext_hash(params, c1, c2)
    c = correction_exponent(params, c1)
    lhs = b.pair(params.g1, sigma)
    rhs = (b.pair(pk1, h) ** params.k) * (b.pair(params.g1, pk2) ** c)
    return lhs == rhs


def check(params: SchemeParams, pk1: Any, pk2: Any, c1: Any, c2: Any, sigma: Any) -> None:
    if not verify(params, pk1, pk2, c1, c2, sigma):
        raise VerificationFailed("e(g1, sigma) != e(pk1, h)^k · e(g1, pk2)^c")


def encrypt_and_sign(params: SchemeParams, keypair: KeyPair, m: Plaintext,
                     r: Optional[int] = None) -> Challenge:
    """One-shot: encrypt m under the pair's own pk1 and sign the ciphertext."""
    ct = encrypt(params, keypair.pk1, m, r=r)
    sigma = sign(params, keypair.sk, ct.c1, ct.c2)
    return Challenge(params=params, pk1=keypair.pk1, pk2=keypair.pk2,
                     c1=ct.c1, c2=ct.c2, sigma=sigma)


def make_challenge(params: SchemeParams, m: Plaintext, sk: Optional[int] = None,
                   r: Optional[int] = None) -> Challenge:
    """KeyGen + Encrypt + Sign; the secret key does not outlive this call."""
    with keygen(params, sk=sk) as kp:
        return encrypt_and_sign(params, kp, m, r=r)
