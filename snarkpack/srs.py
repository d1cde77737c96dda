"""
Structured Reference String (SRS)
=================================

The SRS consists of powers of two secrets α and β in both source groups:

- G:  g^{α^i}, g^{β^i}   for i ∈ [0, 2N)
- Ĝ:  h^{α^i}, h^{β^i}   for i ∈ [0, N)

where N is the largest number of proofs the SRS supports. A generic SRS is
specialized for a concrete number of proofs n (a power of two, n ≤ N) into:

- ProverSRS:   commitment keys v = (h^{α^i}, h^{β^i})_{i<n},
               w = (g^{α^{n+i}}, g^{β^{n+i}})_{i<n}, plus the power tables
               needed to open the key polynomials (KZG).
- VerifierSRS: g, h, g^α, g^β, h^α, h^β.

Security:
- α and β must be destroyed after generation. ``setup_fake_srs`` draws them
  locally and is meant for development and tests only; a production SRS comes
  from a ceremony.
"""

from dataclasses import dataclass
from typing import List

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2

from .commit import VKey, WKey
from .errors import InvalidInputError
from .groups import get_generators
from .utils import is_power_of_two, structured_scalar_power


@dataclass
class ProverSRS:
    group: PairingGroup
    n: int
    vkey: VKey
    wkey: WKey
    g_alpha_powers: List[G1]  # i ∈ [0, 2n)
    g_beta_powers: List[G1]
    h_alpha_powers: List[G2]  # i ∈ [0, n)
    h_beta_powers: List[G2]


@dataclass
class VerifierSRS:
    group: PairingGroup
    n: int
    g: G1
    h: G2
    g_alpha: G1
    g_beta: G1
    h_alpha: G2
    h_beta: G2


@dataclass
class GenericSRS:
    group: PairingGroup
    size: int
    g_alpha_powers: List[G1]
    g_beta_powers: List[G1]
    h_alpha_powers: List[G2]
    h_beta_powers: List[G2]

    def specialize(self, n: int):
        """
        Specialize the SRS for aggregating exactly n proofs.

        Parameters
        ----------
        n : int
            Number of proofs, a power of two with n <= size.

        Returns
        -------
        tuple
            (ProverSRS, VerifierSRS)
        """
        if not is_power_of_two(n):
            raise InvalidInputError(f"number of proofs {n} is not a power of two")
        if n > self.size:
            raise InvalidInputError(f"SRS supports at most {self.size} proofs, asked for {n}")

        vkey = VKey(self.h_alpha_powers[:n], self.h_beta_powers[:n])
        wkey = WKey(self.g_alpha_powers[n:2 * n], self.g_beta_powers[n:2 * n])
        prover_srs = ProverSRS(
            group=self.group,
            n=n,
            vkey=vkey,
            wkey=wkey,
            g_alpha_powers=self.g_alpha_powers[:2 * n],
            g_beta_powers=self.g_beta_powers[:2 * n],
            h_alpha_powers=self.h_alpha_powers[:n],
            h_beta_powers=self.h_beta_powers[:n],
        )
        return prover_srs, self.verifier_srs(n)

    def verifier_srs(self, n: int = None) -> VerifierSRS:
        return VerifierSRS(
            group=self.group,
            n=self.size if n is None else n,
            g=self.g_alpha_powers[0],
            h=self.h_alpha_powers[0],
            g_alpha=self.g_alpha_powers[1],
            g_beta=self.g_beta_powers[1],
            h_alpha=self.h_alpha_powers[1],
            h_beta=self.h_beta_powers[1],
        )


def setup_fake_srs(group: PairingGroup, size: int, alpha: ZR = None, beta: ZR = None,
                   g: G1 = None, h: G2 = None) -> GenericSRS:
    """
    Generate an SRS supporting up to ``size`` proofs from local secrets.

    Parameters
    ----------
    group : PairingGroup
        The pairing group
    size : int
        Maximum number of proofs (power of two)
    alpha, beta : ZR, optional
        The trapdoors. Random if not given.
    g, h : G1, G2, optional
        Generators. Random if not given.

    Returns
    -------
    GenericSRS
    """
    if not is_power_of_two(size):
        raise InvalidInputError(f"SRS size {size} is not a power of two")

    if alpha is None:
        alpha = group.random(ZR)
    if beta is None:
        beta = group.random(ZR)
    if g is None or h is None:
        g_rand, h_rand = get_generators(group)
        g = g_rand if g is None else g
        h = h_rand if h is None else h

    # h^{α^1} must exist even for size 1 since the verifier uses it
    h_len = max(size, 2)
    alpha_powers = structured_scalar_power(2 * size, alpha, group)
    beta_powers = structured_scalar_power(2 * size, beta, group)

    return GenericSRS(
        group=group,
        size=size,
        g_alpha_powers=[g ** a for a in alpha_powers],
        g_beta_powers=[g ** b for b in beta_powers],
        h_alpha_powers=[h ** a for a in alpha_powers[:h_len]],
        h_beta_powers=[h ** b for b in beta_powers[:h_len]],
    )
