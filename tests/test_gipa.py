"""
Tests for the GIPA recursion of TIPP and MIPP.

Every test runs the prover on a fresh transcript and replays it on another
fresh transcript with the same label, the way the verifier does.
"""

import dataclasses

import pytest
from charm.toolbox.pairinggroup import ZR, G1, G2, GT

from snarkpack.commit import pair_commit, single_g1_commit
from snarkpack.errors import InvalidInputError
from snarkpack.gipa import gipa_mipp, gipa_tipp, verify_gipa_mipp, verify_gipa_tipp
from snarkpack.kzg import evaluate_product_form, vkey_scales, wkey_scales
from snarkpack.srs import setup_fake_srs
from snarkpack.transcript import Transcript, argument_transcript
from snarkpack.utils import log2, multiexp_g1, pair_prod, structured_scalar_power

LABEL = b"gipa-test"


@pytest.fixture(scope="module")
def known_srs(group):
    alpha = group.random(ZR)
    beta = group.random(ZR)
    return setup_fake_srs(group, 8, alpha=alpha, beta=beta), alpha, beta


def _tipp_instance(group, srs, n):
    prover_srs, _ = srs.specialize(n)
    a = [group.random(G1) for _ in range(n)]
    b = [group.random(G2) for _ in range(n)]
    com = pair_commit(prover_srs.vkey, prover_srs.wkey, a, b, group)
    return prover_srs, a, b, com, pair_prod(a, b, group)


def _mipp_instance(group, srs, n):
    prover_srs, _ = srs.specialize(n)
    c = [group.random(G1) for _ in range(n)]
    r_vec = structured_scalar_power(n, group.random(ZR), group)
    com = single_g1_commit(prover_srs.vkey, c, group)
    return prover_srs, c, r_vec, com, multiexp_g1(c, r_vec, group)


@pytest.mark.parametrize("n", [1, 2, 4, 8])
def test_tipp_completeness(group, known_srs, n):
    srs, _, _ = known_srs
    prover_srs, a, b, com, ip = _tipp_instance(group, srs, n)

    gipa, challenges = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)
    ok, replayed = verify_gipa_tipp(gipa, com, ip, Transcript(group, LABEL))

    assert ok
    assert replayed == challenges
    assert gipa.rounds == log2(n)
    assert gipa.nproofs == n


@pytest.mark.parametrize("n", [1, 2, 4, 8])
def test_mipp_completeness(group, known_srs, n):
    srs, _, _ = known_srs
    prover_srs, c, r_vec, com, agg = _mipp_instance(group, srs, n)

    gipa, challenges = gipa_mipp(c, r_vec, prover_srs.vkey, Transcript(group, LABEL), group)
    ok, replayed = verify_gipa_mipp(gipa, com, agg, Transcript(group, LABEL))

    assert ok
    assert replayed == challenges
    assert len(gipa.comms) == len(gipa.z_vec) == log2(n)


def test_single_entry_is_trivial(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, a, b, _, _ = _tipp_instance(group, srs, 1)

    gipa, challenges = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)

    assert challenges == []
    assert gipa.comms == ()
    assert gipa.final_a == a[0]
    assert gipa.final_b == b[0]
    assert gipa.final_vkey == (prover_srs.vkey.a[0], prover_srs.vkey.b[0])


def test_final_keys_are_key_polynomials(group, known_srs):
    """The folded keys equal the key polynomials evaluated at the SRS secrets."""
    srs, alpha, beta = known_srs
    n = 8
    prover_srs, a, b, _, _ = _tipp_instance(group, srs, n)
    r = group.random(ZR)
    r_inv = [x ** -1 for x in structured_scalar_power(n, r, group)]

    gipa, challenges = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey.scale(r_inv),
                                 Transcript(group, LABEL), group)

    g = srs.g_alpha_powers[0]
    h = srs.h_alpha_powers[0]
    v_scales = vkey_scales(challenges)
    w_scales = wkey_scales(challenges, r)
    assert gipa.final_vkey == (h ** evaluate_product_form(v_scales, alpha, group),
                               h ** evaluate_product_form(v_scales, beta, group))
    assert gipa.final_wkey == (g ** ((alpha ** n) * evaluate_product_form(w_scales, alpha, group)),
                               g ** ((beta ** n) * evaluate_product_form(w_scales, beta, group)))


def test_mipp_final_r_is_folded_randomness(group, known_srs):
    srs, _, _ = known_srs
    n = 8
    prover_srs, _ = srs.specialize(n)
    c = [group.random(G1) for _ in range(n)]
    r = group.random(ZR)

    gipa, challenges = gipa_mipp(c, structured_scalar_power(n, r, group), prover_srs.vkey,
                                 Transcript(group, LABEL), group)

    assert gipa.final_r == evaluate_product_form(vkey_scales(challenges), r, group)


def test_tipp_rejects_wrong_product(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, a, b, com, ip = _tipp_instance(group, srs, 4)
    gipa, _ = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)

    ok, _ = verify_gipa_tipp(gipa, com, ip * group.random(GT), Transcript(group, LABEL))
    assert not ok


def test_tipp_rejects_tampered_round(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, a, b, com, ip = _tipp_instance(group, srs, 4)
    gipa, _ = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)

    (zl, zr), rest = gipa.z_vec[0], gipa.z_vec[1:]
    tampered = dataclasses.replace(gipa, z_vec=((zr, zl),) + rest)

    ok, _ = verify_gipa_tipp(tampered, com, ip, Transcript(group, LABEL))
    assert not ok


def test_mipp_rejects_tampered_final(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, c, r_vec, com, agg = _mipp_instance(group, srs, 4)
    gipa, _ = gipa_mipp(c, r_vec, prover_srs.vkey, Transcript(group, LABEL), group)

    tampered = dataclasses.replace(gipa, final_c=gipa.final_c * group.random(G1))

    ok, _ = verify_gipa_mipp(tampered, com, agg, Transcript(group, LABEL))
    assert not ok


def test_transcript_label_matters(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, a, b, com, ip = _tipp_instance(group, srs, 4)
    gipa, _ = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)

    ok, _ = verify_gipa_tipp(gipa, com, ip, Transcript(group, b"another-label"))
    assert not ok


def test_challenges_depend_on_claimed_product(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, a, b, _, ip = _tipp_instance(group, srs, 4)
    r = group.random(ZR)

    _, honest = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey,
                          argument_transcript(group, LABEL, r, ip), group)
    _, other = gipa_tipp(a, b, prover_srs.vkey, prover_srs.wkey,
                         argument_transcript(group, LABEL, r, ip * group.random(GT)), group)

    assert not honest[0] == other[0]


def test_challenges_depend_on_claimed_aggregate(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, c, r_vec, _, agg = _mipp_instance(group, srs, 4)
    r = group.random(ZR)

    _, honest = gipa_mipp(c, r_vec, prover_srs.vkey, argument_transcript(group, LABEL, r, agg), group)
    _, other = gipa_mipp(c, r_vec, prover_srs.vkey,
                         argument_transcript(group, LABEL, r, agg * group.random(G1)), group)

    assert not honest[0] == other[0]


def test_length_mismatch_rejected(group, known_srs):
    srs, _, _ = known_srs
    prover_srs, a, b, _, _ = _tipp_instance(group, srs, 4)

    with pytest.raises(InvalidInputError):
        gipa_tipp(a, b[:2], prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)
    with pytest.raises(InvalidInputError):
        gipa_tipp(a[:3], b[:3], prover_srs.vkey, prover_srs.wkey, Transcript(group, LABEL), group)
