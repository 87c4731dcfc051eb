# -*- coding: utf-8 -*-
"""
serialize.py  (challenge <-> JSON)
----------------------------------
Group elements become {"__elem__": base64(backend.serialize(x))}; the curve
name, k and domain_bits travel alongside so the reader can rebuild the
scheme parameters before decoding any element.
"""

from __future__ import annotations

import base64
import json
import os
from typing import Any, Dict

from .scheme import Challenge, SchemeParams, get_backend

_ELEMENTS = ("g1", "g2", "pk1", "pk2", "c1", "c2", "sigma")


def _b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def _b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))

def save_json(path: str, obj: Any) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)

def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def dump_challenge(ch: Challenge) -> Dict[str, Any]:
    b = ch.params.backend
    values = {
        "g1": ch.params.g1, "g2": ch.params.g2,
        "pk1": ch.pk1, "pk2": ch.pk2,
        "c1": ch.c1, "c2": ch.c2, "sigma": ch.sigma,
    }
    blob: Dict[str, Any] = {
        "scheme":      "encsig",
        "curve":       ch.params.curve,
        "k":           ch.params.k,
        "domain_bits": ch.params.domain_bits,
    }
    for name in _ELEMENTS:
        blob[name] = {"__elem__": _b64e(b.serialize(values[name]))}
    return blob


def load_challenge(blob: Dict[str, Any]) -> Challenge:
    if blob.get("scheme") != "encsig":
        raise ValueError(f"not an encsig challenge: scheme={blob.get('scheme')!r}")
    missing = [name for name in _ELEMENTS if name not in blob]
    if missing:
        raise ValueError(f"challenge is missing {missing}")

    backend = get_backend(blob["curve"])
    el = {name: backend.deserialize(_b64d(blob[name]["__elem__"])) for name in _ELEMENTS}
    params = SchemeParams(
        backend=backend,
        g1=el["g1"],
        g2=el["g2"],
        k=int(blob["k"]) % backend.order,
        domain_bits=int(blob["domain_bits"]),
    )
    return Challenge(params=params, pk1=el["pk1"], pk2=el["pk2"],
                     c1=el["c1"], c2=el["c2"], sigma=el["sigma"])
