import dataclasses

import pytest

from encsig import scheme, solver
from encsig.errors import AttackInapplicable, DecodeError, EncodingError, VerificationFailed


def toy_params(p=101, k=3, domain_bits=32):
    return scheme.setup(curve=f"TOY{p}", k=k, domain_bits=domain_bits)


def test_worked_example_p101():
    params = toy_params()
    ch = scheme.make_challenge(params, 42, sk=7, r=13)

    # exponents: pk1 = 7, C1 = 13, C2 = 42 + 7*13 = 133 = 32 (mod 101)
    assert ch.pk1.value == 7
    assert ch.c1.value == 13
    assert ch.c2.value == 32

    assert scheme.verify(params, ch.pk1, ch.pk2, ch.c1, ch.c2, ch.sigma)
    assert solver.recover(ch) == 42


@pytest.mark.parametrize("m", [0, 1, 42, 100])
def test_recover_across_domain(m):
    params = toy_params()
    ch = scheme.make_challenge(params, m)
    assert solver.recover(ch) == m


def test_recover_is_deterministic():
    params = toy_params(p=1000003)
    ch = scheme.make_challenge(params, 31337)
    w1 = solver.isolate_message(ch)
    w2 = solver.isolate_message(ch)
    assert w1.pairings == w2.pairings
    assert solver.recover(ch) == solver.recover(ch) == 31337


def test_recover_bytes():
    params = toy_params(p=1000003)
    ch = scheme.make_challenge(params, b"\xab")
    assert solver.recover(ch, as_bytes=True) == b"\xab"


def test_tampered_ciphertext_fails_verify():
    params = toy_params(p=1000003)
    with scheme.keygen(params) as kp:
        ch = scheme.encrypt_and_sign(params, kp, 1234)
        pk1 = kp.pk1

    for s in (1, 2, 5, 77, 1000):
        c1 = ch.c1 * (params.g1 ** s)
        c2 = ch.c2 * (pk1 ** s)
        assert not scheme.verify(params, ch.pk1, ch.pk2, c1, c2, ch.sigma)

    bumped = dataclasses.replace(ch, c2=ch.c2 * params.g1)
    assert not scheme.verify(params, bumped.pk1, bumped.pk2, bumped.c1, bumped.c2, bumped.sigma)
    with pytest.raises(VerificationFailed):
        solver.recover(bumped)


def test_degenerate_k_is_reported():
    params = toy_params(k=0)
    ch = scheme.make_challenge(params, 42, sk=7, r=13)

    # the degenerate signature still verifies; the failure is the attack's
    assert scheme.verify(params, ch.pk1, ch.pk2, ch.c1, ch.c2, ch.sigma)
    with pytest.raises(AttackInapplicable):
        solver.recover(ch)


def test_k_multiple_of_order_is_degenerate():
    params = toy_params(k=101)
    assert params.k == 0
    ch = scheme.make_challenge(params, 5)
    with pytest.raises(AttackInapplicable):
        solver.recover(ch)


def test_keypair_is_wiped_after_scope():
    params = toy_params()
    with scheme.keygen(params, sk=7) as kp:
        assert kp.sk == 7
        ch = scheme.encrypt_and_sign(params, kp, 9)
    assert kp.sk is None
    assert "wiped" in repr(kp)
    with pytest.raises(ValueError):
        scheme.encrypt_and_sign(params, kp, 9)

    # the public half still works and the ciphertext is still breakable
    assert kp.public.pk1 == ch.pk1
    assert solver.recover(ch) == 9


def test_plaintext_outside_domain():
    params = toy_params()
    with pytest.raises(EncodingError):
        scheme.make_challenge(params, 101)
    with pytest.raises(EncodingError):
        scheme.make_challenge(params, b"pwn")


def test_recovered_scalar_outside_domain():
    params = toy_params(domain_bits=7)
    ch = scheme.make_challenge(params, 100)
    narrowed = dataclasses.replace(ch, params=dataclasses.replace(params, domain_bits=4))
    with pytest.raises(DecodeError):
        solver.recover(narrowed)

    with pytest.raises(DecodeError):
        solver.recover(ch, as_bytes=True)


def test_zero_randomness_rejected():
    params = toy_params()
    with pytest.raises(ValueError):
        scheme.keygen(params, sk=101)
    with scheme.keygen(params) as kp:
        with pytest.raises(ValueError):
            scheme.encrypt(params, kp.pk1, 3, r=0)


def test_match_candidates():
    params = toy_params()
    ch = scheme.make_challenge(params, 42)
    assert solver.match_candidates(ch, [5, 77, 42, 13]) == 2
    with pytest.raises(DecodeError):
        solver.match_candidates(ch, [1, 2, 3])


def test_recover_many():
    params = toy_params(p=1000003)
    msgs = [3, 99, 4242, 999999]
    chs = [scheme.make_challenge(params, m) for m in msgs]
    assert solver.recover_many(chs) == msgs


def test_match_candidates_skips_out_of_domain():
    params = toy_params()
    ch = scheme.make_challenge(params, 42)
    assert solver.match_candidates(ch, [5, 1000, b"pwn", 42]) == 3


def test_match_candidates_default_message_space_misses():
    params = toy_params(p=1000003)
    ch = scheme.make_challenge(params, 31337)
    with pytest.raises(DecodeError):
        solver.match_candidates(ch)


@pytest.mark.parametrize("curve", ["TOYabc", "TOY-7", "TOY²", "TOY100"])
def test_bad_toy_curve_names(curve):
    with pytest.raises(ValueError):
        scheme.setup(curve=curve)


def test_large_toy_modulus_rejected_quickly():
    with pytest.raises(ValueError, match="below 2"):
        scheme.setup(curve="TOY2305843009213693951")
