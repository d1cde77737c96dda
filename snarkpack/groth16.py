"""
Groth16 collaborator types
==========================

The aggregator consumes Groth16 proofs and verifying keys; it does not
produce them. This module defines the data it consumes, the single-proof
verification equation

    e(A, B) = e(α, β) · e(Σ x_j · IC_j, γ) · e(C, δ)

and a toy circuit whose proofs are produced from a known trapdoor. The toy
circuit exists so that aggregation can be exercised without a real Groth16
prover; its proofs satisfy the verification equation exactly like honest
proofs do.
"""

from dataclasses import dataclass
from typing import List

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, pair

from .errors import InvalidInputError
from .groups import get_generators, scalar


@dataclass(frozen=True)
class Proof:
    a: G1
    b: G2
    c: G1


@dataclass(frozen=True)
class VerifyingKey:
    alpha_g1: G1
    beta_g2: G2
    gamma_g2: G2
    delta_g2: G2
    # IC_0 followed by one element per public input
    ic: tuple

    @property
    def num_inputs(self) -> int:
        return len(self.ic) - 1


def check_public_inputs(vk: VerifyingKey, public_inputs: List[int]):
    if len(public_inputs) != vk.num_inputs:
        raise InvalidInputError(
            f"expected {vk.num_inputs} public inputs, got {len(public_inputs)}")


def prepare_inputs(vk: VerifyingKey, public_inputs: List[int], group: PairingGroup) -> G1:
    """Σ x_j · IC_j with x_0 = 1."""
    check_public_inputs(vk, public_inputs)
    acc = vk.ic[0]
    for x, ic in zip(public_inputs, vk.ic[1:]):
        acc *= ic ** scalar(group, x)
    return acc


def verify_proof(vk: VerifyingKey, proof: Proof, public_inputs: List[int], group: PairingGroup) -> bool:
    """Verify a single Groth16 proof."""
    lhs = pair(proof.a, proof.b)
    rhs = (pair(vk.alpha_g1, vk.beta_g2)
           * pair(prepare_inputs(vk, public_inputs, group), vk.gamma_g2)
           * pair(proof.c, vk.delta_g2))
    return lhs == rhs


@dataclass
class CircuitTrapdoor:
    g: G1
    h: G2
    alpha: ZR
    beta: ZR
    gamma: ZR
    delta: ZR
    ic_exponents: List[ZR]


def setup_toy_circuit(group: PairingGroup, num_inputs: int):
    """
    Create a verifying key with known trapdoor for a circuit with
    ``num_inputs`` public inputs.

    Returns
    -------
    tuple
        (VerifyingKey, CircuitTrapdoor)
    """
    g, h = get_generators(group)
    alpha, beta, gamma, delta = (group.random(ZR) for _ in range(4))
    ic_exponents = [group.random(ZR) for _ in range(num_inputs + 1)]

    vk = VerifyingKey(
        alpha_g1=g ** alpha,
        beta_g2=h ** beta,
        gamma_g2=h ** gamma,
        delta_g2=h ** delta,
        ic=tuple(g ** u for u in ic_exponents),
    )
    trapdoor = CircuitTrapdoor(g, h, alpha, beta, gamma, delta, ic_exponents)
    return vk, trapdoor


def prove_with_trapdoor(trapdoor: CircuitTrapdoor, public_inputs: List[int], group: PairingGroup) -> Proof:
    """
    Produce a proof satisfying the verification equation for the inputs.

    A = g^a, B = h^b for random a, b and C = g^c with
    c = (a·b - α·β - γ·(u_0 + Σ x_j u_j)) / δ.
    """
    if len(public_inputs) != len(trapdoor.ic_exponents) - 1:
        raise InvalidInputError(
            f"expected {len(trapdoor.ic_exponents) - 1} public inputs, got {len(public_inputs)}")

    a = group.random(ZR)
    b = group.random(ZR)
    s = trapdoor.ic_exponents[0]
    for x, u in zip(public_inputs, trapdoor.ic_exponents[1:]):
        s += scalar(group, x) * u
    c = (a * b - trapdoor.alpha * trapdoor.beta - trapdoor.gamma * s) * (trapdoor.delta ** -1)

    return Proof(a=trapdoor.g ** a, b=trapdoor.h ** b, c=trapdoor.g ** c)


def _next_power_of_two(n: int) -> int:
    if n <= 0:
        raise InvalidInputError("cannot pad an empty list")
    return 1 << (n - 1).bit_length()


def pad_proofs(proofs: List[Proof]) -> List[Proof]:
    """Duplicate the last proof until the count is a power of two."""
    target = _next_power_of_two(len(proofs))
    return list(proofs) + [proofs[-1]] * (target - len(proofs))


def pad_public_inputs(public_inputs: List[List[int]]) -> List[List[int]]:
    """Pad public inputs the same way ``pad_proofs`` pads proofs."""
    target = _next_power_of_two(len(public_inputs))
    return list(public_inputs) + [public_inputs[-1]] * (target - len(public_inputs))
