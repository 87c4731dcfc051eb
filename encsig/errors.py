# -*- coding: utf-8 -*-
"""
errors.py  (typed failures of the scheme and of the attack)
-----------------------------------------------------------
Every error is terminal for the call that raised it.  All computations are
deterministic, so retrying with the same inputs reproduces the same error.
"""


class EncsigError(ValueError):
    """Base class for all encsig failures."""


class EncodingError(EncsigError):
    """Plaintext cannot be represented as a scalar of the encoding domain."""


class DecodeError(EncsigError):
    """Recovered scalar does not decode to a valid plaintext."""


class VerificationFailed(EncsigError):
    """Pairing check on (C1, C2, sigma) did not hold: corrupted or forged challenge."""


class AttackInapplicable(EncsigError):
    """Elimination hit a non-invertible coefficient (degenerate scheme constants)."""
