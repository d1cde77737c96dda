"""
Tests for the pair commitment scheme.
"""

import pytest
from charm.toolbox.pairinggroup import ZR, G1, G2, pair

from snarkpack.commit import VKey, WKey, pair_commit, single_g1_commit
from snarkpack.errors import InvalidInputError


@pytest.fixture(scope="module")
def keys(generic_srs):
    prover_srs, _ = generic_srs.specialize(4)
    return prover_srs.vkey, prover_srs.wkey


@pytest.fixture(scope="module")
def vectors(group):
    a = [group.random(G1) for _ in range(4)]
    b = [group.random(G2) for _ in range(4)]
    return a, b


def test_pair_commit_matches_definition(group, keys, vectors):
    vkey, wkey = keys
    a, b = vectors

    t, u = pair_commit(vkey, wkey, a, b, group)

    expected_t = pair(a[0], vkey.a[0]) * pair(wkey.a[0], b[0])
    expected_u = pair(a[0], vkey.b[0]) * pair(wkey.b[0], b[0])
    for i in range(1, 4):
        expected_t *= pair(a[i], vkey.a[i]) * pair(wkey.a[i], b[i])
        expected_u *= pair(a[i], vkey.b[i]) * pair(wkey.b[i], b[i])
    assert t == expected_t
    assert u == expected_u


def test_pair_commit_is_homomorphic_over_halves(group, keys, vectors):
    vkey, wkey = keys
    a, b = vectors
    vk_l, vk_r = vkey.split(2)
    wk_l, wk_r = wkey.split(2)

    full = pair_commit(vkey, wkey, a, b, group)
    left = pair_commit(vk_l, wk_l, a[:2], b[:2], group)
    right = pair_commit(vk_r, wk_r, a[2:], b[2:], group)

    assert full[0] == left[0] * right[0]
    assert full[1] == left[1] * right[1]


def test_single_g1_commit(group, keys, vectors):
    vkey, _ = keys
    a, _ = vectors

    t, u = single_g1_commit(vkey, a, group)

    assert t == pair(a[0], vkey.a[0]) * pair(a[1], vkey.a[1]) * pair(a[2], vkey.a[2]) * pair(a[3], vkey.a[3])
    assert u == pair(a[0], vkey.b[0]) * pair(a[1], vkey.b[1]) * pair(a[2], vkey.b[2]) * pair(a[3], vkey.b[3])


def test_commit_binds_to_order(group, keys, vectors):
    vkey, wkey = keys
    a, b = vectors
    swapped = [a[1], a[0]] + a[2:]

    assert not pair_commit(vkey, wkey, a, b, group) == pair_commit(vkey, wkey, swapped, b, group)


def test_wkey_scale_keeps_commitment(group, keys, vectors):
    """Scaling w by s^{-1} and B by s leaves the commitment unchanged."""
    vkey, wkey = keys
    a, b = vectors
    s = [group.random(ZR) for _ in range(4)]
    s_inv = [x ** -1 for x in s]

    plain = pair_commit(vkey, wkey, a, b, group)
    rescaled = pair_commit(vkey, wkey.scale(s_inv), a, [bi ** si for bi, si in zip(b, s)], group)

    assert plain == rescaled


def test_key_compress(group, keys):
    vkey, _ = keys
    left, right = vkey.split(2)
    x = group.random(ZR)

    folded = left.compress(right, x)

    assert len(folded) == 2
    assert folded.a[0] == left.a[0] * (right.a[0] ** x)
    assert folded.b[1] == left.b[1] * (right.b[1] ** x)


def test_length_mismatch_rejected(group, keys, vectors):
    vkey, wkey = keys
    a, b = vectors

    with pytest.raises(InvalidInputError):
        pair_commit(vkey, wkey, a, b[:2], group)
    with pytest.raises(InvalidInputError):
        pair_commit(vkey, wkey, a[:2], b[:2], group)
    with pytest.raises(InvalidInputError):
        single_g1_commit(vkey, a[:2], group)


def test_non_power_of_two_rejected(group, vectors):
    a, b = vectors
    vkey = VKey([group.random(G2) for _ in range(3)], [group.random(G2) for _ in range(3)])
    wkey = WKey([group.random(G1) for _ in range(3)], [group.random(G1) for _ in range(3)])

    with pytest.raises(InvalidInputError, match="power of two"):
        pair_commit(vkey, wkey, a[:3], b[:3], group)


def test_key_vectors_must_match():
    with pytest.raises(InvalidInputError):
        VKey([1, 2], [1])
