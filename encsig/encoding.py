# -*- coding: utf-8 -*-
"""
encoding.py  (plaintext <-> scalar)
-----------------------------------
Domain: 0 <= m < min(q, 2**domain_bits).

  int   -> itself
  bytes -> int.from_bytes(b"\\x01" + data, "big")

The 0x01 marker keeps leading zero bytes, so the bytes map is injective
and invertible on everything it produces.
"""

from __future__ import annotations

from typing import Union

from .errors import DecodeError, EncodingError

Plaintext = Union[int, bytes]

_MARKER = b"\x01"


def domain_bound(order: int, domain_bits: int) -> int:
    return min(order, 1 << domain_bits)


def encode_plaintext(m: Plaintext, order: int, domain_bits: int) -> int:
    if isinstance(m, (bytes, bytearray)):
        x = int.from_bytes(_MARKER + bytes(m), "big")
    elif isinstance(m, int) and not isinstance(m, bool):
        x = m
    else:
        raise EncodingError(f"unsupported plaintext type: {type(m).__name__}")

    if not 0 <= x < domain_bound(order, domain_bits):
        raise EncodingError(
            f"plaintext out of range: needs 0 <= m < min(q, 2^{domain_bits})"
        )
    return x


def decode_scalar(x: int, order: int, domain_bits: int, as_bytes: bool = False) -> Plaintext:
    if not 0 <= x < domain_bound(order, domain_bits):
        raise DecodeError(f"scalar {x} outside the encoding domain")
    if not as_bytes:
        return x

    raw = x.to_bytes((x.bit_length() + 7) // 8, "big")
    if not raw.startswith(_MARKER):
        raise DecodeError(f"scalar {x} carries no byte-string marker")
    return raw[len(_MARKER):]
