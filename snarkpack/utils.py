"""
Utility Functions
=================

This module provides utility functions for group operations,
multi-exponentiation, pairing products and structured scalar vectors.

Key Operations:
- Multi-exponentiation: Compute ∏ g_i^{e_i} (accelerator-aware)
- Pairing products: Compute ∏ e(a_i, b_i)
- GT operations: Division (multiplication by inverse) in GT
- Structured scalars: (1, r, r^2, ..., r^{n-1}) and their inverses

According to charm-crypto documentation:
- Group operations use * for multiplication, ** for exponentiation
- Inverse is computed as elem ** -1
- Pairing is computed as pair(g1_elem, g2_elem)
"""

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair
from typing import List

from .accelerator import dispatch_multiexp
from .errors import InvalidInputError


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def log2(n: int) -> int:
    """Number of GIPA rounds for n entries. n must be a power of two."""
    if not is_power_of_two(n):
        raise InvalidInputError(f"{n} is not a power of two")
    return n.bit_length() - 1


def _check_lengths(left: list, right: list, what: str):
    if len(left) != len(right):
        raise InvalidInputError(f"{what} must have same length: {len(left)} != {len(right)}")


def _cpu_multiexp(identity_type):
    def run(bases, exponents, group):
        result = group.init(identity_type, 1)
        for base, exp in zip(bases, exponents):
            result *= base ** exp
        return result
    return run


_cpu_multiexp_g1 = _cpu_multiexp(G1)
_cpu_multiexp_g2 = _cpu_multiexp(G2)


def multiexp_g1(bases: List[G1], exponents: List[ZR], group: PairingGroup) -> G1:
    """
    Compute multi-exponentiation in G1: ∏ bases[i]^{exponents[i]}.

    Parameters
    ----------
    bases : List[G1]
        List of base elements in G1
    exponents : List[ZR]
        List of exponents in Z_p
    group : PairingGroup
        The pairing group

    Returns
    -------
    G1
        The product ∏ bases[i]^{exponents[i]}; the identity for empty input.

    Notes
    -----
    The computation is offloaded to the accelerator when one is configured
    and available, otherwise it runs on the CPU.
    """
    _check_lengths(bases, exponents, "bases and exponents")
    if len(bases) == 0:
        return group.init(G1, 1)
    return dispatch_multiexp(bases, exponents, group, _cpu_multiexp_g1)


def multiexp_g2(bases: List[G2], exponents: List[ZR], group: PairingGroup) -> G2:
    """Multi-exponentiation in G2: ∏ bases[i]^{exponents[i]}."""
    _check_lengths(bases, exponents, "bases and exponents")
    if len(bases) == 0:
        return group.init(G2, 1)
    return dispatch_multiexp(bases, exponents, group, _cpu_multiexp_g2)


def pair_prod(g1_elems: List[G1], g2_elems: List[G2], group: PairingGroup) -> GT:
    """
    Compute product of pairings: ∏ e(g1_elems[i], g2_elems[i]).

    Returns the identity of GT for empty input.
    """
    _check_lengths(g1_elems, g2_elems, "g1_elems and g2_elems")

    result = group.init(GT, 1)
    for g1, g2 in zip(g1_elems, g2_elems):
        result *= pair(g1, g2)
    return result


def gt_div(numerator: GT, denominator: GT) -> GT:
    """Division in GT: numerator * denominator^{-1}."""
    return numerator * (denominator ** -1)


def scale_vector(elems: list, scalars: List[ZR]) -> list:
    """Element-wise exponentiation [elems[i]^{scalars[i]}]."""
    _check_lengths(elems, scalars, "elements and scalars")
    return [e ** s for e, s in zip(elems, scalars)]


def compress(elems: list, split: int, scale: ZR) -> list:
    """
    Fold a vector in half: left[i] * right[i]^{scale}.

    This is the GIPA folding step in multiplicative notation
    (left + scale·right in additive notation).
    """
    left, right = elems[:split], elems[split:]
    _check_lengths(left, right, "vector halves")
    return [l * (r ** scale) for l, r in zip(left, right)]


def compress_scalars(elems: List[ZR], split: int, scale: ZR) -> List[ZR]:
    """Scalar version of ``compress``: left[i] + scale * right[i]."""
    left, right = elems[:split], elems[split:]
    _check_lengths(left, right, "vector halves")
    return [l + scale * r for l, r in zip(left, right)]


def structured_scalar_power(n: int, s: ZR, group: PairingGroup) -> List[ZR]:
    """Return [1, s, s^2, ..., s^{n-1}]."""
    powers = [group.init(ZR, 1)]
    for _ in range(1, n):
        powers.append(powers[-1] * s)
    return powers[:n]


def inverse_all(scalars: List[ZR]) -> List[ZR]:
    return [s ** -1 for s in scalars]


def pair_or_one(g1_elem: G1, g2_elem: G2, group: PairingGroup) -> GT:
    """e(g1_elem, g2_elem), short-circuiting to 1_GT when either side is the identity."""
    if g1_elem == group.init(G1, 1) or g2_elem == group.init(G2, 1):
        return group.init(GT, 1)
    return pair(g1_elem, g2_elem)
