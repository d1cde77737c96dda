"""
Proof Aggregation (prover side)
===============================

aggregate_proofs turns n Groth16 proofs into one AggregateProof:

1. Commit to A, B (com_ab) and to C (com_c).
2. Derive r from the commitments and the caller's transcript bytes.
3. ip_ab = ∏ e(A_i, B_i^{r^i}), agg_c = Σ r^i · C_i.
4. TIPP on (A, B^{r}) with w-key rescaled by r^{-i}; the rescaling keeps
   com_ab valid for the rescaled vectors.
5. MIPP on (C, r_vec).
6. KZG openings of the final commitment keys.

The prover is deterministic: identical inputs give byte-identical proofs.
"""

import logging
from typing import List

from charm.toolbox.pairinggroup import ZR

from .commit import WKey, pair_commit, single_g1_commit
from .errors import InvalidInputError
from .gipa import gipa_mipp, gipa_tipp
from .groth16 import Proof
from .kzg import prove_vkey_opening, prove_wkey_opening, vkey_scales, wkey_scales
from .proof import AggregateProof, MIPPProof, TIPPProof
from .srs import ProverSRS
from .transcript import Transcript, argument_transcript, derive_randomness
from .utils import inverse_all, is_power_of_two, multiexp_g1, pair_prod, scale_vector, structured_scalar_power

logger = logging.getLogger(__name__)

TIPP_LABEL = b"snarkpack-tipp"
MIPP_LABEL = b"snarkpack-mipp"


def tipp_kzg_point(transcript: Transcript, gipa) -> ZR:
    transcript.append(b"tipp-final", gipa.final_a, gipa.final_b,
                      gipa.final_vkey[0], gipa.final_vkey[1],
                      gipa.final_wkey[0], gipa.final_wkey[1])
    return transcript.challenge(b"tipp-kzg")


def mipp_kzg_point(transcript: Transcript, gipa) -> ZR:
    transcript.append(b"mipp-final", gipa.final_c, gipa.final_r,
                      gipa.final_vkey[0], gipa.final_vkey[1])
    return transcript.challenge(b"mipp-kzg")


def prove_tipp(srs: ProverSRS, a: list, b_r: list, wkey_r_inv: WKey, r: ZR, ip_ab) -> TIPPProof:
    """
    Prove ∏ e(A_i, B_i^{r^i}) = ip_ab together with the final key openings.

    Parameters
    ----------
    srs : ProverSRS
        The specialized prover SRS
    a : list
        The A vector
    b_r : list
        B_i^{r^i}
    wkey_r_inv : WKey
        The w-key rescaled by r^{-i}
    r : ZR
        The randomness
    ip_ab : GT
        The claimed pairing product, bound into the transcript

    Returns
    -------
    TIPPProof
    """
    group = srs.group
    transcript = argument_transcript(group, TIPP_LABEL, r, ip_ab)
    gipa, challenges = gipa_tipp(a, b_r, srs.vkey, wkey_r_inv, transcript, group)

    z = tipp_kzg_point(transcript, gipa)
    vkey_opening = prove_vkey_opening(srs.h_alpha_powers, srs.h_beta_powers,
                                      vkey_scales(challenges), z, group)
    wkey_opening = prove_wkey_opening(srs.g_alpha_powers, srs.g_beta_powers,
                                      wkey_scales(challenges, r), srs.n, z, group)
    return TIPPProof(gipa=gipa, vkey_opening=vkey_opening, wkey_opening=wkey_opening)


def prove_mipp(srs: ProverSRS, c: list, r_vec: list, r: ZR, agg_c) -> MIPPProof:
    """Prove Σ r^i · C_i = agg_c together with the final v-key opening."""
    group = srs.group
    transcript = argument_transcript(group, MIPP_LABEL, r, agg_c)
    gipa, challenges = gipa_mipp(c, r_vec, srs.vkey, transcript, group)

    z = mipp_kzg_point(transcript, gipa)
    vkey_opening = prove_vkey_opening(srs.h_alpha_powers, srs.h_beta_powers,
                                      vkey_scales(challenges), z, group)
    return MIPPProof(gipa=gipa, vkey_opening=vkey_opening)


def aggregate_proofs(srs: ProverSRS, proofs: List[Proof], transcript_include: bytes = b"") -> AggregateProof:
    """
    Aggregate n Groth16 proofs.

    Parameters
    ----------
    srs : ProverSRS
        Prover SRS specialized for exactly len(proofs) proofs
    proofs : List[Proof]
        The Groth16 proofs; their number must be a power of two (see
        ``groth16.pad_proofs``)
    transcript_include : bytes
        Caller-chosen bytes bound into the randomness; the verifier must
        pass the same bytes

    Returns
    -------
    AggregateProof

    Raises
    ------
    InvalidInputError
        If the number of proofs is not a power of two or does not match the SRS.
    """
    n = len(proofs)
    if not is_power_of_two(n):
        raise InvalidInputError(f"cannot aggregate {n} proofs: not a power of two")
    if srs.n != n:
        raise InvalidInputError(f"SRS specialized for {srs.n} proofs, got {n}")

    group = srs.group
    a = [p.a for p in proofs]
    b = [p.b for p in proofs]
    c = [p.c for p in proofs]

    com_ab = pair_commit(srs.vkey, srs.wkey, a, b, group)
    com_c = single_g1_commit(srs.vkey, c, group)

    r = derive_randomness(group, transcript_include, n, com_ab, com_c)
    r_vec = structured_scalar_power(n, r, group)
    r_inv = inverse_all(r_vec)

    b_r = scale_vector(b, r_vec)
    ip_ab = pair_prod(a, b_r, group)
    agg_c = multiexp_g1(c, r_vec, group)

    wkey_r_inv = srs.wkey.scale(r_inv)

    proof_ab = prove_tipp(srs, a, b_r, wkey_r_inv, r, ip_ab)
    proof_c = prove_mipp(srs, c, r_vec, r, agg_c)

    logger.info("aggregated %d proofs (%d GIPA rounds)", n, proof_ab.gipa.rounds)
    return AggregateProof(
        com_ab=com_ab,
        com_c=com_c,
        ip_ab=ip_ab,
        agg_c=agg_c,
        proof_ab=proof_ab,
        proof_c=proof_c,
    )


def check_commitment_rescaling(srs: ProverSRS, proofs: List[Proof], r: ZR) -> bool:
    """
    Debug helper: com_ab computed with (w^{r^{-i}}, B^{r^i}) equals the one
    computed with (w, B).
    """
    group = srs.group
    r_vec = structured_scalar_power(len(proofs), r, group)
    a = [p.a for p in proofs]
    b = [p.b for p in proofs]
    plain = pair_commit(srs.vkey, srs.wkey, a, b, group)
    rescaled = pair_commit(srs.vkey, srs.wkey.scale(inverse_all(r_vec)), a, scale_vector(b, r_vec), group)
    return plain == rescaled
