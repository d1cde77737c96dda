"""
End-to-end tests: aggregate toy Groth16 proofs and verify the result.
"""

import dataclasses

import pytest
from charm.toolbox.pairinggroup import ZR, G1, G2, GT

from agg_prover import ProofAggregator
from agg_verifier import AggregateVerifier
from snarkpack.errors import InvalidInputError
from snarkpack.groth16 import Proof, pad_proofs, pad_public_inputs, setup_toy_circuit, verify_proof
from snarkpack.prover import aggregate_proofs, check_commitment_rescaling
from snarkpack.serialization import aggregate_proof_to_bytes
from snarkpack.srs import setup_fake_srs
from snarkpack.verifier import verify_aggregate_proof


@pytest.fixture(scope="module")
def aggregated(generic_srs, make_batch):
    """An aggregate proof of 8 proofs with its verification material."""
    prover_srs, vk_srs = generic_srs.specialize(8)
    proofs, public_inputs = make_batch(8)
    proof = aggregate_proofs(prover_srs, proofs, b"ctx")
    return vk_srs, proofs, public_inputs, proof


def test_toy_proofs_are_valid(group, circuit, make_batch):
    vk, _ = circuit
    proofs, public_inputs = make_batch(4)
    for p, x in zip(proofs, public_inputs):
        assert verify_proof(vk, p, x, group)


@pytest.mark.parametrize("n", [1, 2, 4, 8])
def test_completeness(generic_srs, circuit, make_batch, n):
    vk, _ = circuit
    prover_srs, vk_srs = generic_srs.specialize(n)
    proofs, public_inputs = make_batch(n)

    proof = aggregate_proofs(prover_srs, proofs, b"ctx")

    assert proof.nproofs == n
    assert proof.is_well_formed()
    assert verify_aggregate_proof(vk_srs, vk, public_inputs, proof, b"ctx")


@pytest.mark.slow
@pytest.mark.parametrize("n", [16, 32, 64])
def test_completeness_large(group, circuit, make_batch, n):
    vk, _ = circuit
    prover_srs, vk_srs = setup_fake_srs(group, n).specialize(n)
    proofs, public_inputs = make_batch(n)

    proof = aggregate_proofs(prover_srs, proofs)

    assert verify_aggregate_proof(vk_srs, vk, public_inputs, proof)


def test_generic_verifier_srs_accepts_smaller_batches(generic_srs, circuit, make_batch):
    """The verifier SRS published for the full size verifies every smaller batch."""
    vk, _ = circuit
    prover_srs, _ = generic_srs.specialize(4)
    proofs, public_inputs = make_batch(4)

    proof = aggregate_proofs(prover_srs, proofs)

    assert verify_aggregate_proof(generic_srs.verifier_srs(), vk, public_inputs, proof)


def test_deterministic(generic_srs, group, make_batch):
    prover_srs, _ = generic_srs.specialize(4)
    proofs, _ = make_batch(4)

    first = aggregate_proof_to_bytes(aggregate_proofs(prover_srs, proofs, b"ctx"), group)
    second = aggregate_proof_to_bytes(aggregate_proofs(prover_srs, proofs, b"ctx"), group)

    assert first == second


def test_wrong_transcript_include(aggregated, circuit):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated
    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, proof, b"other")
    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, proof)


def test_wrong_public_inputs(aggregated, circuit):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated

    changed = [list(x) for x in public_inputs]
    changed[3][1] += 1
    assert not verify_aggregate_proof(vk_srs, vk, changed, proof, b"ctx")

    swapped = [public_inputs[1], public_inputs[0]] + public_inputs[2:]
    assert not verify_aggregate_proof(vk_srs, vk, swapped, proof, b"ctx")


def test_wrong_number_of_inputs(aggregated, circuit):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated

    assert not verify_aggregate_proof(vk_srs, vk, public_inputs[:4], proof, b"ctx")
    assert not verify_aggregate_proof(vk_srs, vk, public_inputs[:7], proof, b"ctx")
    assert not verify_aggregate_proof(vk_srs, vk, [x[:1] for x in public_inputs], proof, b"ctx")


def test_wrong_verifying_key(aggregated, group):
    other_vk, _ = setup_toy_circuit(group, 2)
    vk_srs, _, public_inputs, proof = aggregated
    assert not verify_aggregate_proof(vk_srs, other_vk, public_inputs, proof, b"ctx")


def test_srs_too_small(aggregated, generic_srs, circuit):
    vk, _ = circuit
    _, _, public_inputs, proof = aggregated
    assert not verify_aggregate_proof(generic_srs.verifier_srs(4), vk, public_inputs, proof, b"ctx")


@pytest.mark.parametrize("field", ["ip_ab", "agg_c", "com_ab", "com_c"])
def test_tampered_top_level(aggregated, circuit, group, field):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated

    if field == "ip_ab":
        tampered = dataclasses.replace(proof, ip_ab=proof.ip_ab * group.random(GT))
    elif field == "agg_c":
        tampered = dataclasses.replace(proof, agg_c=proof.agg_c * group.random(G1))
    elif field == "com_ab":
        tampered = dataclasses.replace(proof, com_ab=(proof.com_ab[1], proof.com_ab[0]))
    else:
        tampered = dataclasses.replace(proof, com_c=(proof.com_c[0] * group.random(GT), proof.com_c[1]))

    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, tampered, b"ctx")


def test_tampered_tipp(aggregated, circuit, group):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated
    tipp = proof.proof_ab

    bad_final = dataclasses.replace(tipp, gipa=dataclasses.replace(
        tipp.gipa, final_a=tipp.gipa.final_a * group.random(G1)))
    bad_opening = dataclasses.replace(tipp, wkey_opening=(tipp.wkey_opening[1], tipp.wkey_opening[0]))

    for tampered in (bad_final, bad_opening):
        assert not verify_aggregate_proof(
            vk_srs, vk, public_inputs, dataclasses.replace(proof, proof_ab=tampered), b"ctx")


def test_tampered_mipp(aggregated, circuit, group):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated
    mipp = proof.proof_c

    bad_r = dataclasses.replace(mipp, gipa=dataclasses.replace(
        mipp.gipa, final_r=mipp.gipa.final_r + mipp.gipa.final_r))
    bad_opening = dataclasses.replace(mipp, vkey_opening=(mipp.vkey_opening[1], mipp.vkey_opening[0]))
    short = dataclasses.replace(mipp, gipa=dataclasses.replace(
        mipp.gipa, comms=mipp.gipa.comms[:-1], z_vec=mipp.gipa.z_vec[:-1]))

    for tampered in (bad_r, bad_opening, short):
        assert not verify_aggregate_proof(
            vk_srs, vk, public_inputs, dataclasses.replace(proof, proof_c=tampered), b"ctx")


def _bump_first_round(rounds, factor):
    """Multiply the first element of the first round entry by ``factor``."""
    (left, right), rest = rounds[0], rounds[1:]
    if isinstance(left, tuple):
        left = (left[0] * factor,) + left[1:]
    else:
        left = left * factor
    return ((left, right),) + tuple(rest)


def _bump_pair(pair, factor):
    return (pair[0] * factor, pair[1])


TIPP_FIELDS = {
    "comms": lambda g, group: dict(comms=_bump_first_round(g.comms, group.random(GT))),
    "z_vec": lambda g, group: dict(z_vec=_bump_first_round(g.z_vec, group.random(GT))),
    "final_b": lambda g, group: dict(final_b=g.final_b * group.random(G2)),
    "final_vkey": lambda g, group: dict(final_vkey=_bump_pair(g.final_vkey, group.random(G2))),
    "final_wkey": lambda g, group: dict(final_wkey=_bump_pair(g.final_wkey, group.random(G1))),
}

MIPP_FIELDS = {
    "comms": lambda g, group: dict(comms=_bump_first_round(g.comms, group.random(GT))),
    "z_vec": lambda g, group: dict(z_vec=_bump_first_round(g.z_vec, group.random(G1))),
    "final_c": lambda g, group: dict(final_c=g.final_c * group.random(G1)),
    "final_vkey": lambda g, group: dict(final_vkey=_bump_pair(g.final_vkey, group.random(G2))),
}


@pytest.mark.parametrize("field", sorted(TIPP_FIELDS))
def test_tampered_tipp_transcript(aggregated, circuit, group, field):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated
    tipp = proof.proof_ab

    gipa = dataclasses.replace(tipp.gipa, **TIPP_FIELDS[field](tipp.gipa, group))
    tampered = dataclasses.replace(proof, proof_ab=dataclasses.replace(tipp, gipa=gipa))

    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, tampered, b"ctx")


@pytest.mark.parametrize("field", sorted(MIPP_FIELDS))
def test_tampered_mipp_transcript(aggregated, circuit, group, field):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated
    mipp = proof.proof_c

    gipa = dataclasses.replace(mipp.gipa, **MIPP_FIELDS[field](mipp.gipa, group))
    tampered = dataclasses.replace(proof, proof_c=dataclasses.replace(mipp, gipa=gipa))

    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, tampered, b"ctx")


def test_tipp_vkey_opening_tampered(aggregated, circuit, group):
    vk, _ = circuit
    vk_srs, _, public_inputs, proof = aggregated
    tipp = proof.proof_ab

    tampered = dataclasses.replace(tipp, vkey_opening=_bump_pair(tipp.vkey_opening, group.random(G2)))

    assert not verify_aggregate_proof(
        vk_srs, vk, public_inputs, dataclasses.replace(proof, proof_ab=tampered), b"ctx")


def test_invalid_groth16_proof_is_caught(generic_srs, circuit, make_batch, group):
    vk, _ = circuit
    prover_srs, vk_srs = generic_srs.specialize(4)
    proofs, public_inputs = make_batch(4)
    proofs[2] = Proof(a=proofs[2].a, b=proofs[2].b, c=proofs[2].c * group.random(G1))

    proof = aggregate_proofs(prover_srs, proofs)

    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, proof)


def test_non_power_of_two_rejected(generic_srs, make_batch):
    prover_srs, _ = generic_srs.specialize(4)
    proofs, _ = make_batch(3)
    with pytest.raises(InvalidInputError, match="power of two"):
        aggregate_proofs(prover_srs, proofs)


def test_srs_size_mismatch_rejected(generic_srs, make_batch):
    prover_srs, _ = generic_srs.specialize(8)
    proofs, _ = make_batch(4)
    with pytest.raises(InvalidInputError):
        aggregate_proofs(prover_srs, proofs)
    with pytest.raises(InvalidInputError):
        generic_srs.specialize(16)


def test_padding(generic_srs, circuit, make_batch):
    vk, _ = circuit
    proofs, public_inputs = make_batch(5)
    padded = pad_proofs(proofs)
    assert len(padded) == 8
    prover_srs, vk_srs = generic_srs.specialize(8)

    proof = aggregate_proofs(prover_srs, padded)

    assert verify_aggregate_proof(vk_srs, vk, pad_public_inputs(public_inputs), proof)
    assert not verify_aggregate_proof(vk_srs, vk, public_inputs, proof)


def test_commitment_rescaling(generic_srs, make_batch, group):
    prover_srs, _ = generic_srs.specialize(4)
    proofs, _ = make_batch(4)
    r = group.random(ZR)
    assert check_commitment_rescaling(prover_srs, proofs, r)


class TestRoles:
    """ProofAggregator and AggregateVerifier."""

    @pytest.fixture
    def roles(self, generic_srs, circuit):
        vk, _ = circuit
        aggregator = ProofAggregator(generic_srs)
        verifier = AggregateVerifier(aggregator.verifier_srs(), vk)
        return aggregator, verifier

    def test_aggregate_and_verify(self, roles, make_batch):
        aggregator, verifier = roles
        proofs, public_inputs = make_batch(4, offset=100)

        data = aggregator.aggregate_to_bytes(proofs, b"batch-1")

        assert verifier.verify_bytes(data, public_inputs, b"batch-1")
        assert not verifier.verify_bytes(data, public_inputs, b"batch-2")

    def test_padding_flag(self, roles, make_batch):
        aggregator, verifier = roles
        proofs, public_inputs = make_batch(3)

        proof = aggregator.aggregate(proofs, pad=True)

        assert proof.nproofs == 4
        assert verifier.verify(proof, public_inputs, pad=True)

    def test_specialization_is_cached(self, roles):
        aggregator, _ = roles
        assert aggregator.specialized(4) is aggregator.specialized(4)

    def test_garbage_bytes_rejected(self, roles, make_batch):
        _, verifier = roles
        _, public_inputs = make_batch(4)
        assert not verifier.verify_bytes(b"not a proof", public_inputs)
