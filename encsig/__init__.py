# -*- coding: utf-8 -*-
"""
encsig: a one-time ElGamal + BLS encrypt-then-sign scheme over pairing
groups, and the algebraic attack that reads its plaintexts back.
"""

from .errors import (
    AttackInapplicable,
    DecodeError,
    EncodingError,
    EncsigError,
    VerificationFailed,
)
from .scheme import (
    Challenge,
    Ciphertext,
    KeyPair,
    PublicKey,
    SchemeParams,
    check,
    encrypt,
    encrypt_and_sign,
    keygen,
    make_challenge,
    setup,
    sign,
    verify,
)
from .solver import MESSAGE_SPACE, SolverWitness, match_candidates, recover, recover_many

__version__ = "0.1.0"
