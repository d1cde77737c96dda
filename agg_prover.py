"""
Proof Aggregator
================

The aggregator is an untrusted but computationally powerful entity that:
1. Holds the prover side of the SRS
2. Collects Groth16 proofs from many provers
3. Produces one aggregate proof per batch

Key Responsibilities:
---------------------
- Heavy computation: commitments, GIPA, KZG openings
- SRS management: specializes the generic SRS once per batch size
- Padding: optionally pads a batch to the next power of two

Security Model:
---------------
- The aggregator is untrusted; verifiers only trust the verifier SRS and the
  Groth16 verifying key
- The aggregator cannot turn an invalid Groth16 proof into a valid aggregate
"""

import logging
from typing import Dict, List, Tuple

from snarkpack.groth16 import Proof, pad_proofs
from snarkpack.proof import AggregateProof
from snarkpack.prover import aggregate_proofs
from snarkpack.serialization import aggregate_proof_to_bytes
from snarkpack.srs import GenericSRS, ProverSRS, VerifierSRS

logger = logging.getLogger(__name__)


class ProofAggregator:
    """Aggregates batches of Groth16 proofs under one generic SRS."""

    def __init__(self, srs: GenericSRS):
        """
        Parameters
        ----------
        srs : GenericSRS
            SRS supporting up to ``srs.size`` proofs per batch
        """
        self.srs = srs
        self.group = srs.group
        self._specialized: Dict[int, Tuple[ProverSRS, VerifierSRS]] = {}

    def specialized(self, n: int) -> Tuple[ProverSRS, VerifierSRS]:
        if n not in self._specialized:
            logger.debug("specializing SRS for %d proofs", n)
            self._specialized[n] = self.srs.specialize(n)
        return self._specialized[n]

    def verifier_srs(self) -> VerifierSRS:
        """The verifier SRS to publish; valid for every batch size up to ``srs.size``."""
        return self.srs.verifier_srs()

    def aggregate(self, proofs: List[Proof], transcript_include: bytes = b"",
                  pad: bool = False) -> AggregateProof:
        """
        Aggregate a batch.

        Parameters
        ----------
        proofs : List[Proof]
            The Groth16 proofs
        transcript_include : bytes
            Context bytes bound into the aggregation randomness
        pad : bool
            Pad the batch to a power of two by repeating the last proof. The
            verifier must then pad the public inputs the same way.
        """
        if pad:
            proofs = pad_proofs(proofs)
        prover_srs, _ = self.specialized(len(proofs))
        return aggregate_proofs(prover_srs, proofs, transcript_include)

    def aggregate_to_bytes(self, proofs: List[Proof], transcript_include: bytes = b"",
                           pad: bool = False) -> bytes:
        return aggregate_proof_to_bytes(self.aggregate(proofs, transcript_include, pad), self.group)
