"""
Aggregate Proof Verification
============================

verify_aggregate_proof accepts an AggregateProof iff

1. both GIPA transcripts have log2(n) rounds for n = number of public
   input vectors,
2. the TIPP transcript replays from com_ab and ip_ab to its final values,
3. the MIPP transcript replays from com_c and agg_c to its final values,
   and its final_r equals the value derived from r,
4. the KZG openings show the final keys are the key polynomials evaluated
   at the SRS secrets,
5. the aggregated Groth16 equation holds:

   ip_ab = e(α, β)^{Σ r^i} · e(IC_0^{Σ r^i} · ∏_j IC_j^{Σ_i r^i x_{i,j}}, γ) · e(agg_c, δ)

Verification is binary. Any failed check yields False; the reason is logged.
"""

import logging
from typing import List

from charm.toolbox.pairinggroup import PairingGroup, ZR, pair

from .errors import InvalidInputError
from .gipa import verify_gipa_mipp, verify_gipa_tipp
from .groth16 import VerifyingKey, check_public_inputs
from .groups import scalar
from .kzg import evaluate_product_form, verify_vkey_opening, verify_wkey_opening, vkey_scales, wkey_scales
from .proof import AggregateProof, MIPPProof, TIPPProof
from .prover import MIPP_LABEL, TIPP_LABEL, mipp_kzg_point, tipp_kzg_point
from .srs import VerifierSRS
from .transcript import argument_transcript, derive_randomness
from .utils import is_power_of_two, log2, structured_scalar_power

logger = logging.getLogger(__name__)


def verify_tipp(vk_srs: VerifierSRS, proof: TIPPProof, com_ab, ip_ab, r: ZR, n: int) -> bool:
    """
    Verify a TIPP proof for the claim ∏ e(A_i, B_i^{r^i}) = ip_ab.

    Parameters
    ----------
    vk_srs : VerifierSRS
        The verifier SRS
    proof : TIPPProof
        The TIPP proof
    com_ab : Output
        Commitment to A and B
    ip_ab : GT
        The claimed pairing product
    r : ZR
        The randomness
    n : int
        Number of aggregated proofs

    Returns
    -------
    bool
    """
    group = vk_srs.group
    gipa = proof.gipa
    transcript = argument_transcript(group, TIPP_LABEL, r, ip_ab)

    ok, challenges = verify_gipa_tipp(gipa, com_ab, ip_ab, transcript)
    if not ok:
        return False

    z = tipp_kzg_point(transcript, gipa)

    v_eval = evaluate_product_form(vkey_scales(challenges), z, group)
    if not verify_vkey_opening(vk_srs, gipa.final_vkey, proof.vkey_opening, z, v_eval):
        logger.info("tipp v-key opening rejected")
        return False

    w_eval = (z ** n) * evaluate_product_form(wkey_scales(challenges, r), z, group)
    if not verify_wkey_opening(vk_srs, gipa.final_wkey, proof.wkey_opening, z, w_eval):
        logger.info("tipp w-key opening rejected")
        return False

    return True


def verify_mipp(vk_srs: VerifierSRS, proof: MIPPProof, com_c, agg_c, r: ZR) -> bool:
    """Verify a MIPP proof for the claim Σ r^i · C_i = agg_c."""
    group = vk_srs.group
    gipa = proof.gipa
    transcript = argument_transcript(group, MIPP_LABEL, r, agg_c)

    ok, challenges = verify_gipa_mipp(gipa, com_c, agg_c, transcript)
    if not ok:
        return False

    # final_r is the r-vector folded with x^{-1}: f_v evaluated at r
    scales = vkey_scales(challenges)
    if not gipa.final_r == evaluate_product_form(scales, r, group):
        logger.info("mipp final_r does not match the folded randomness")
        return False

    z = mipp_kzg_point(transcript, gipa)
    v_eval = evaluate_product_form(scales, z, group)
    if not verify_vkey_opening(vk_srs, gipa.final_vkey, proof.vkey_opening, z, v_eval):
        logger.info("mipp v-key opening rejected")
        return False

    return True


def aggregated_groth16_rhs(vk: VerifyingKey, public_inputs: List[List[int]], r: ZR,
                           agg_c, group: PairingGroup):
    """
    Right-hand side of the aggregated Groth16 equation.

    e(α, β)^{Σ r^i} · e(IC_0^{Σ r^i} · ∏_j IC_j^{Σ_i r^i x_{i,j}}, γ) · e(agg_c, δ)
    """
    n = len(public_inputs)
    r_vec = structured_scalar_power(n, r, group)

    r_sum = group.init(ZR, 0)
    for ri in r_vec:
        r_sum += ri

    acc = vk.ic[0] ** r_sum
    for j, ic in enumerate(vk.ic[1:]):
        coeff = group.init(ZR, 0)
        for ri, inputs in zip(r_vec, public_inputs):
            coeff += ri * scalar(group, inputs[j])
        acc *= ic ** coeff

    return (pair(vk.alpha_g1, vk.beta_g2) ** r_sum) * pair(acc, vk.gamma_g2) * pair(agg_c, vk.delta_g2)


def _check_shape(proof: AggregateProof, public_inputs: List[List[int]], vk: VerifyingKey):
    n = len(public_inputs)
    if not is_power_of_two(n):
        raise InvalidInputError(f"number of public input vectors {n} is not a power of two")
    for inputs in public_inputs:
        check_public_inputs(vk, inputs)
    rounds = log2(n)
    tipp, mipp = proof.proof_ab.gipa, proof.proof_c.gipa
    for name, length in (("tipp comms", len(tipp.comms)), ("tipp z_vec", len(tipp.z_vec)),
                         ("mipp comms", len(mipp.comms)), ("mipp z_vec", len(mipp.z_vec))):
        if length != rounds:
            raise InvalidInputError(f"{name} has {length} rounds, expected {rounds} for {n} proofs")


def verify_aggregate_proof(vk_srs: VerifierSRS, vk: VerifyingKey, public_inputs: List[List[int]],
                           proof: AggregateProof, transcript_include: bytes = b"") -> bool:
    """
    Verify an aggregate proof.

    Parameters
    ----------
    vk_srs : VerifierSRS
        The verifier SRS
    vk : VerifyingKey
        The Groth16 verifying key shared by all aggregated proofs
    public_inputs : List[List[int]]
        One list of public inputs per aggregated proof, in proof order
    proof : AggregateProof
        The aggregate proof
    transcript_include : bytes
        The bytes the prover bound into the randomness

    Returns
    -------
    bool
        True iff every check passes.
    """
    group = vk_srs.group
    try:
        _check_shape(proof, public_inputs, vk)
    except InvalidInputError as e:
        logger.info("aggregate proof rejected: %s", e)
        return False

    n = len(public_inputs)
    if n > vk_srs.n:
        logger.info("aggregate proof rejected: %d proofs exceed SRS size %d", n, vk_srs.n)
        return False

    r = derive_randomness(group, transcript_include, n, proof.com_ab, proof.com_c)

    if not verify_tipp(vk_srs, proof.proof_ab, proof.com_ab, proof.ip_ab, r, n):
        logger.info("aggregate proof rejected: tipp")
        return False

    if not verify_mipp(vk_srs, proof.proof_c, proof.com_c, proof.agg_c, r):
        logger.info("aggregate proof rejected: mipp")
        return False

    if not proof.ip_ab == aggregated_groth16_rhs(vk, public_inputs, r, proof.agg_c, group):
        logger.info("aggregate proof rejected: aggregated groth16 equation")
        return False

    logger.info("aggregate proof of %d proofs accepted", n)
    return True
