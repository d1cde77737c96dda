#!/usr/bin/env python3
"""
Aggregation demo
================

Aggregates batches of toy Groth16 proofs and verifies the result.

Scenarios:
1. Aggregate n proofs and verify the aggregate proof
2. Aggregate a batch whose size is not a power of two (padding)
3. Tamper with the public inputs and watch verification fail
"""

import logging
import time

from agg_prover import ProofAggregator
from agg_verifier import AggregateVerifier
from snarkpack import setup, setup_fake_srs
from snarkpack.config import config
from snarkpack.groth16 import prove_with_trapdoor, setup_toy_circuit, verify_proof
from snarkpack.serialization import aggregate_proof_to_bytes


def make_batch(trapdoor, group, count, num_inputs):
    public_inputs = [[i * 10 + j + 1 for j in range(num_inputs)] for i in range(count)]
    proofs = [prove_with_trapdoor(trapdoor, inputs, group) for inputs in public_inputs]
    return proofs, public_inputs


def demo_aggregate(n=8, num_inputs=2):
    print("=" * 70)
    print(f"Scenario 1: aggregate {n} proofs")
    print("=" * 70)

    params = setup('BN254')
    group = params['group']

    vk, trapdoor = setup_toy_circuit(group, num_inputs)
    proofs, public_inputs = make_batch(trapdoor, group, n, num_inputs)
    assert all(verify_proof(vk, p, x, group) for p, x in zip(proofs, public_inputs))

    aggregator = ProofAggregator(setup_fake_srs(group, n))
    verifier = AggregateVerifier(aggregator.verifier_srs(), vk)

    start = time.time()
    proof = aggregator.aggregate(proofs, b"demo")
    print(f"[1] aggregated in {time.time() - start:.2f}s, "
          f"{len(aggregate_proof_to_bytes(proof, group))} bytes")

    start = time.time()
    ok = verifier.verify(proof, public_inputs, b"demo")
    print(f"[2] verified in {time.time() - start:.2f}s: {'accepted' if ok else 'REJECTED'}")
    print()
    return aggregator, verifier, trapdoor, group


def demo_padding(aggregator, verifier, trapdoor, group, count=5):
    print("=" * 70)
    print(f"Scenario 2: aggregate {count} proofs with padding")
    print("=" * 70)

    proofs, public_inputs = make_batch(trapdoor, group, count, verifier.vk.num_inputs)
    proof = aggregator.aggregate(proofs, b"padded", pad=True)
    ok = verifier.verify(proof, public_inputs, b"padded", pad=True)
    print(f"padded to {proof.nproofs} proofs: {'accepted' if ok else 'REJECTED'}")
    print()


def demo_tamper(aggregator, verifier, trapdoor, group, n=4):
    print("=" * 70)
    print("Scenario 3: wrong public inputs")
    print("=" * 70)

    proofs, public_inputs = make_batch(trapdoor, group, n, verifier.vk.num_inputs)
    proof = aggregator.aggregate(proofs)
    public_inputs[0][0] += 1
    ok = verifier.verify(proof, public_inputs)
    print(f"tampered inputs: {'accepted (unexpected!)' if ok else 'rejected'}")
    print()


if __name__ == '__main__':
    logging.basicConfig(level=config.log_level, format='%(levelname)s %(name)s: %(message)s')
    aggregator, verifier, trapdoor, group = demo_aggregate()
    demo_padding(aggregator, verifier, trapdoor, group)
    demo_tamper(aggregator, verifier, trapdoor, group)
