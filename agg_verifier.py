"""
Aggregate Proof Verifier
========================

The verifier holds:
1. The verifier SRS (public, from setup)
2. The Groth16 verifying key of the circuit whose proofs are aggregated

and checks aggregate proofs against the public inputs of every aggregated
proof. Verification is binary: a proof is either accepted or rejected.
"""

import logging
from typing import List

from snarkpack.errors import SerializationError
from snarkpack.groth16 import VerifyingKey, pad_public_inputs
from snarkpack.proof import AggregateProof
from snarkpack.serialization import aggregate_proof_from_bytes
from snarkpack.srs import VerifierSRS
from snarkpack.verifier import verify_aggregate_proof

logger = logging.getLogger(__name__)


class AggregateVerifier:

    def __init__(self, vk_srs: VerifierSRS, vk: VerifyingKey):
        self.vk_srs = vk_srs
        self.vk = vk
        self.group = vk_srs.group

    def verify(self, proof: AggregateProof, public_inputs: List[List[int]],
               transcript_include: bytes = b"", pad: bool = False) -> bool:
        """
        Verify an aggregate proof.

        ``pad`` must match the flag the aggregator used.
        """
        if pad:
            public_inputs = pad_public_inputs(public_inputs)
        return verify_aggregate_proof(self.vk_srs, self.vk, public_inputs, proof, transcript_include)

    def verify_bytes(self, data: bytes, public_inputs: List[List[int]],
                     transcript_include: bytes = b"", pad: bool = False) -> bool:
        """Decode and verify; a structurally invalid encoding is a rejection."""
        try:
            proof = aggregate_proof_from_bytes(data, self.group)
        except SerializationError as e:
            logger.info("aggregate proof rejected: %s", e)
            return False
        return self.verify(proof, public_inputs, transcript_include, pad)
