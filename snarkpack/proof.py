"""
Aggregate proof data model.

All structures are immutable once produced. Sequences are stored as tuples
and every nested proof is owned by its parent.

Transcript entries are kept in the order the prover generated them: entry j
holds the values of GIPA round j, so for n = 2^k aggregated proofs
``len(comms) == len(z_vec) == k``.
"""

from dataclasses import dataclass
from typing import Tuple

from charm.toolbox.pairinggroup import ZR, G1, G2, GT

from .commit import Output

# A KZG opening of a commitment key is a pair since keys are pairs: the
# opening of the α-part and of the β-part.
KZGOpening = Tuple


@dataclass(frozen=True)
class GipaTIPP:
    """GIPA transcript for the TIPP relation Z = ∏ e(A_i, B_i)."""
    # ((T_L, U_L), (T_R, U_R)) per round
    comms: Tuple[Tuple[Output, Output], ...]
    # (Z_L, Z_R) per round
    z_vec: Tuple[Tuple[GT, GT], ...]
    final_a: G1
    final_b: G2
    # fully compressed keys: (v1, v2) and (w1, w2)
    final_vkey: Tuple[G2, G2]
    final_wkey: Tuple[G1, G1]

    @property
    def rounds(self) -> int:
        return len(self.comms)

    @property
    def nproofs(self) -> int:
        return 1 << len(self.comms)


@dataclass(frozen=True)
class TIPPProof:
    gipa: GipaTIPP
    vkey_opening: KZGOpening  # (G2, G2)
    wkey_opening: KZGOpening  # (G1, G1)


@dataclass(frozen=True)
class GipaMIPP:
    """GIPA transcript for the MIPP relation Z = Σ r_i · C_i."""
    comms: Tuple[Tuple[Output, Output], ...]
    # (Z_L, Z_R) per round, in G1
    z_vec: Tuple[Tuple[G1, G1], ...]
    final_c: G1
    final_r: ZR
    final_vkey: Tuple[G2, G2]

    @property
    def rounds(self) -> int:
        return len(self.comms)

    @property
    def nproofs(self) -> int:
        return 1 << len(self.comms)


@dataclass(frozen=True)
class MIPPProof:
    gipa: GipaMIPP
    vkey_opening: KZGOpening  # (G2, G2)


@dataclass(frozen=True)
class AggregateProof:
    """
    Aggregation of n Groth16 proofs.

    com_ab  : commitment to the A and B vectors (TIPP)
    com_c   : commitment to the C vector (MIPP)
    ip_ab   : ∏ e(A_i, B_i)^{r^i}, left side of the aggregated Groth16 equation
    agg_c   : Σ r^i · C_i, used on the right side of that equation
    proof_ab: TIPP proof for ip_ab
    proof_c : MIPP proof for agg_c
    """
    com_ab: Output
    com_c: Output
    ip_ab: GT
    agg_c: G1
    proof_ab: TIPPProof
    proof_c: MIPPProof

    @property
    def nproofs(self) -> int:
        return self.proof_ab.gipa.nproofs

    def is_well_formed(self) -> bool:
        """Round counts of both transcripts agree with each other."""
        tipp, mipp = self.proof_ab.gipa, self.proof_c.gipa
        return (len(tipp.comms) == len(tipp.z_vec)
                == len(mipp.comms) == len(mipp.z_vec))
