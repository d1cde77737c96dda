"""
GIPA: Generalized Inner Product Argument
========================================

Recursive halving argument shared by TIPP and MIPP.

Each round splits the witness and keys in half, sends the cross
commitments (T_L, U_L), (T_R, U_R) and cross products (Z_L, Z_R), derives a
challenge x from the transcript and folds:

TIPP (Z = ∏ e(A_i, B_i)):
    T_L = COM(v_L, w_R; A_R, B_L)      T_R = COM(v_R, w_L; A_L, B_R)
    Z_L = ∏ e(A_R, B_L)                Z_R = ∏ e(A_L, B_R)
    A' = A_L + x·A_R      B' = B_L + x^{-1}·B_R
    v' = v_L + x^{-1}·v_R  w' = w_L + x·w_R

MIPP (Z = Σ r_i · C_i):
    T_L = COM(v_L; C_R)    T_R = COM(v_R; C_L)
    Z_L = Σ r_L · C_R      Z_R = Σ r_R · C_L
    C' = C_L + x·C_R       r' = r_L + x^{-1}·r_R      v' = v_L + x^{-1}·v_R

With these folds every claim X ∈ {T, U, Z} evolves as
    X' = X_L^{x} · X · X_R^{x^{-1}}
which is all the verifier needs to replay the recursion from the transcript.

Round boundaries are strictly sequential since each challenge depends on all
previous transcript data.
"""

import logging
from typing import List

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, pair

from .commit import Output, VKey, WKey, pair_commit, single_g1_commit
from .errors import InvalidInputError
from .proof import GipaMIPP, GipaTIPP
from .transcript import Transcript
from .utils import compress, compress_scalars, is_power_of_two, multiexp_g1, pair_prod

logger = logging.getLogger(__name__)

TIPP_ROUND = b"tipp-round"
TIPP_CHALLENGE = b"tipp-x"
MIPP_ROUND = b"mipp-round"
MIPP_CHALLENGE = b"mipp-x"


def _check_witness(n: int, *vectors):
    if not is_power_of_two(n):
        raise InvalidInputError(f"GIPA input length {n} is not a power of two")
    for v in vectors:
        if len(v) != n:
            raise InvalidInputError(f"GIPA inputs must have same length: {len(v)} != {n}")


def gipa_tipp(a: List[G1], b: List[G2], vkey: VKey, wkey: WKey,
              transcript: Transcript, group: PairingGroup):
    """
    Run GIPA for the TIPP relation.

    Parameters
    ----------
    a : List[G1]
        The A vector
    b : List[G2]
        The B vector (already rescaled by r^i by the caller)
    vkey : VKey
        The v commitment key
    wkey : WKey
        The w commitment key (already rescaled by r^{-i} by the caller)
    transcript : Transcript
        Fiat-Shamir transcript, advanced in place
    group : PairingGroup
        The pairing group

    Returns
    -------
    tuple
        (GipaTIPP, challenges) with challenges in round order.
    """
    _check_witness(len(a), b, vkey, wkey)

    m_a, m_b = list(a), list(b)
    comms, z_vec, challenges = [], [], []

    while len(m_a) > 1:
        split = len(m_a) // 2
        a_left, a_right = m_a[:split], m_a[split:]
        b_left, b_right = m_b[:split], m_b[split:]
        vk_left, vk_right = vkey.split(split)
        wk_left, wk_right = wkey.split(split)

        tab_l = pair_commit(vk_left, wk_right, a_right, b_left, group)
        tab_r = pair_commit(vk_right, wk_left, a_left, b_right, group)
        zab_l = pair_prod(a_right, b_left, group)
        zab_r = pair_prod(a_left, b_right, group)

        transcript.append(TIPP_ROUND, tab_l[0], tab_l[1], tab_r[0], tab_r[1], zab_l, zab_r)
        c = transcript.challenge(TIPP_CHALLENGE)
        c_inv = c ** -1

        m_a = compress(m_a, split, c)
        m_b = compress(m_b, split, c_inv)
        vkey = vk_left.compress(vk_right, c_inv)
        wkey = wk_left.compress(wk_right, c)

        comms.append((tab_l, tab_r))
        z_vec.append((zab_l, zab_r))
        challenges.append(c)
        logger.debug("tipp round %d done, %d entries left", len(challenges), len(m_a))

    gipa = GipaTIPP(
        comms=tuple(comms),
        z_vec=tuple(z_vec),
        final_a=m_a[0],
        final_b=m_b[0],
        final_vkey=vkey.first(),
        final_wkey=wkey.first(),
    )
    return gipa, challenges


def gipa_mipp(c: List[G1], r_vec: List[ZR], vkey: VKey,
              transcript: Transcript, group: PairingGroup):
    """
    Run GIPA for the MIPP relation Z = Σ r_i · C_i.

    Returns
    -------
    tuple
        (GipaMIPP, challenges) with challenges in round order.
    """
    _check_witness(len(c), r_vec, vkey)

    m_c, m_r = list(c), list(r_vec)
    comms, z_vec, challenges = [], [], []

    while len(m_c) > 1:
        split = len(m_c) // 2
        c_left, c_right = m_c[:split], m_c[split:]
        r_left, r_right = m_r[:split], m_r[split:]
        vk_left, vk_right = vkey.split(split)

        tc_l = single_g1_commit(vk_left, c_right, group)
        tc_r = single_g1_commit(vk_right, c_left, group)
        zc_l = multiexp_g1(c_right, r_left, group)
        zc_r = multiexp_g1(c_left, r_right, group)

        transcript.append(MIPP_ROUND, tc_l[0], tc_l[1], tc_r[0], tc_r[1], zc_l, zc_r)
        x = transcript.challenge(MIPP_CHALLENGE)
        x_inv = x ** -1

        m_c = compress(m_c, split, x)
        m_r = compress_scalars(m_r, split, x_inv)
        vkey = vk_left.compress(vk_right, x_inv)

        comms.append((tc_l, tc_r))
        z_vec.append((zc_l, zc_r))
        challenges.append(x)
        logger.debug("mipp round %d done, %d entries left", len(challenges), len(m_c))

    gipa = GipaMIPP(
        comms=tuple(comms),
        z_vec=tuple(z_vec),
        final_c=m_c[0],
        final_r=m_r[0],
        final_vkey=vkey.first(),
    )
    return gipa, challenges


def _fold(left, current, right, x: ZR, x_inv: ZR):
    return (left ** x) * current * (right ** x_inv)


def verify_gipa_tipp(gipa: GipaTIPP, com_ab: Output, ip_ab, transcript: Transcript):
    """
    Replay the TIPP recursion from the transcript.

    Parameters
    ----------
    gipa : GipaTIPP
        The transcript sent by the prover
    com_ab : Output
        The commitment to A and B
    ip_ab : GT
        The claimed pairing product
    transcript : Transcript
        Fiat-Shamir transcript in the same state the prover started from

    Returns
    -------
    tuple
        (ok, challenges). ``ok`` is True iff the folded commitment and
        product match the final values carried by the transcript.
    """
    t, u = com_ab
    z = ip_ab
    challenges = []

    for (tab_l, tab_r), (zab_l, zab_r) in zip(gipa.comms, gipa.z_vec):
        transcript.append(TIPP_ROUND, tab_l[0], tab_l[1], tab_r[0], tab_r[1], zab_l, zab_r)
        x = transcript.challenge(TIPP_CHALLENGE)
        x_inv = x ** -1

        t = _fold(tab_l[0], t, tab_r[0], x, x_inv)
        u = _fold(tab_l[1], u, tab_r[1], x, x_inv)
        z = _fold(zab_l, z, zab_r, x, x_inv)
        challenges.append(x)

    final_a, final_b = gipa.final_a, gipa.final_b
    (v1, v2), (w1, w2) = gipa.final_vkey, gipa.final_wkey

    ok_z = z == pair(final_a, final_b)
    ok_t = t == pair(final_a, v1) * pair(w1, final_b)
    ok_u = u == pair(final_a, v2) * pair(w2, final_b)
    if not (ok_z and ok_t and ok_u):
        logger.info("tipp final check failed (z=%s, t=%s, u=%s)", ok_z, ok_t, ok_u)
    return ok_z and ok_t and ok_u, challenges


def verify_gipa_mipp(gipa: GipaMIPP, com_c: Output, agg_c, transcript: Transcript):
    """
    Replay the MIPP recursion from the transcript.

    The check on Z uses the ``final_r`` carried by the transcript; the caller
    must separately check it against the value derived from r.
    """
    t, u = com_c
    z = agg_c
    challenges = []

    for (tc_l, tc_r), (zc_l, zc_r) in zip(gipa.comms, gipa.z_vec):
        transcript.append(MIPP_ROUND, tc_l[0], tc_l[1], tc_r[0], tc_r[1], zc_l, zc_r)
        x = transcript.challenge(MIPP_CHALLENGE)
        x_inv = x ** -1

        t = _fold(tc_l[0], t, tc_r[0], x, x_inv)
        u = _fold(tc_l[1], u, tc_r[1], x, x_inv)
        z = _fold(zc_l, z, zc_r, x, x_inv)
        challenges.append(x)

    final_c = gipa.final_c
    v1, v2 = gipa.final_vkey

    ok_z = z == final_c ** gipa.final_r
    ok_t = t == pair(final_c, v1)
    ok_u = u == pair(final_c, v2)
    if not (ok_z and ok_t and ok_u):
        logger.info("mipp final check failed (z=%s, t=%s, u=%s)", ok_z, ok_t, ok_u)
    return ok_z and ok_t and ok_u, challenges
