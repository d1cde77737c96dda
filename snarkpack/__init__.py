"""
Groth16 Proof Aggregation with Inner Pairing Products
=====================================================

Aggregates n Groth16 proofs into a single proof whose size and
verification time are logarithmic in n, following the SnarkPack
construction:

- TIPP proves the randomized pairing product ∏ e(A_i, B_i)^{r^i}
- MIPP proves the randomized sum Σ r^i · C_i
- both run the GIPA recursive halving argument over pairing-based
  commitments, and open the final commitment keys with KZG proofs

Modules:
--------
- groups: Pairing group initialization (charm-crypto)
- srs: Structured reference string and its prover/verifier specializations
- commit: Pair commitment scheme and commitment keys
- transcript: Fiat-Shamir transcript
- gipa: The GIPA recursion for TIPP and MIPP
- kzg: KZG openings of the final commitment keys
- proof: Aggregate proof data model
- prover / verifier: Aggregation and verification entry points
- serialization: Binary encoding of proofs
- groth16: Groth16 proof / verifying key types
- accelerator: Optional multi-exponentiation offload with CPU fallback

Usage:
------
    from snarkpack import setup, setup_fake_srs, aggregate_proofs, verify_aggregate_proof

    params = setup('BN254')
    srs = setup_fake_srs(params['group'], 8)
    prover_srs, verifier_srs = srs.specialize(8)
    agg = aggregate_proofs(prover_srs, proofs, b"context")
    assert verify_aggregate_proof(verifier_srs, vk, public_inputs, agg, b"context")
"""

__version__ = "0.1.0"

from .groups import setup
from .srs import setup_fake_srs
from .prover import aggregate_proofs
from .verifier import verify_aggregate_proof

__all__ = ['setup', 'setup_fake_srs', 'aggregate_proofs', 'verify_aggregate_proof']
