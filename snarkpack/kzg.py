"""
KZG Openings of Commitment Keys
===============================

After GIPA the prover claims final commitment keys. Recomputing them would
cost the verifier O(n); instead the prover shows they are evaluations of the
key polynomials at the SRS secrets.

With per-round challenges x_0, ..., x_{k-1} and n = 2^k:

    f_v(X) = ∏_j (1 + x_j^{-1} · X^{n/2^{j+1}})
    final v-key = (h^{f_v(α)}, h^{f_v(β)})

    f_w(X) = X^n · ∏_j (1 + x_j · r^{-n/2^{j+1}} · X^{n/2^{j+1}})
    final w-key = (g^{f_w(α)}, g^{f_w(β)})

Both products are described by one scale per round (``s_j``): the v-key uses
s_j = x_j^{-1}, the w-key uses s_j = x_j · r^{-n/2^{j+1}}. The verifier
evaluates them at a transcript-derived point z in O(log n).

An opening for point z is (base^{q(α)}, base^{q(β)}) with
q(X) = (f(X) - f(z)) / (X - z). Verification is one pairing equation per
secret:

    v-key (G2):  e(g, V - h^{y}) = e(g^{α} - g^{z}, π)
    w-key (G1):  e(W - g^{y}, h) = e(π, h^{α} - h^{z})
"""

import numpy as np
from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2
from typing import List

from .utils import multiexp_g1, multiexp_g2, pair_or_one


def vkey_scales(challenges: List[ZR]) -> List[ZR]:
    """Per-round scales of f_v: x_j^{-1}."""
    return [c ** -1 for c in challenges]


def wkey_scales(challenges: List[ZR], r: ZR) -> List[ZR]:
    """Per-round scales of f_w (without the X^n shift): x_j · r^{-n/2^{j+1}}."""
    r_inv = r ** -1
    k = len(challenges)
    scales = []
    for j, c in enumerate(challenges):
        exponent = 1 << (k - 1 - j)
        scales.append(c * (r_inv ** exponent))
    return scales


def evaluate_product_form(scales: List[ZR], point: ZR, group: PairingGroup) -> ZR:
    """
    Evaluate ∏_j (1 + s_j · point^{2^{k-1-j}}) in O(k).

    Round k-1 carries the smallest power, so the product is built from the
    last scale backwards while squaring the point.
    """
    one = group.init(ZR, 1)
    result = one
    power = point
    for s in reversed(scales):
        result *= one + s * power
        power = power * power
    return result


def polynomial_coefficients(scales: List[ZR], group: PairingGroup) -> List[int]:
    """
    Expand ∏_j (1 + s_j · X^{2^{k-1-j}}) into 2^k coefficients.

    Coefficient i is the product of s_{k-1-b} over the set bits b of i.
    Coefficients are returned as integers modulo the group order, lowest
    degree first.
    """
    p = int(group.order())
    coeffs = np.array([1], dtype=object)
    for s in reversed(scales):
        coeffs = np.concatenate([coeffs, (coeffs * int(s)) % p])
    return [int(c) for c in coeffs]


def divide_by_linear(coeffs: List[int], z: int, p: int):
    """
    Divide f(X) by (X - z) over Z_p.

    Parameters
    ----------
    coeffs : List[int]
        f's coefficients, lowest degree first
    z : int
        The root of the divisor
    p : int
        The field modulus

    Returns
    -------
    tuple
        (quotient coefficients lowest degree first, remainder f(z))
    """
    if len(coeffs) == 0:
        return [], 0
    quotient = [0] * (len(coeffs) - 1)
    acc = coeffs[-1] % p
    for i in range(len(coeffs) - 2, -1, -1):
        quotient[i] = acc
        acc = (coeffs[i] + z * acc) % p
    return quotient, acc


def _opening_quotient(coeffs: List[int], z: ZR, group: PairingGroup) -> List[ZR]:
    p = int(group.order())
    quotient, _ = divide_by_linear(coeffs, int(z), p)
    return [group.init(ZR, q) for q in quotient]


def prove_vkey_opening(h_alpha_powers: List[G2], h_beta_powers: List[G2], scales: List[ZR],
                       z: ZR, group: PairingGroup) -> tuple:
    """
    Open the final v-key at z.

    Parameters
    ----------
    h_alpha_powers, h_beta_powers : List[G2]
        h^{α^i}, h^{β^i} for i < n
    scales : List[ZR]
        Per-round scales of f_v (see ``vkey_scales``)
    z : ZR
        The KZG challenge point

    Returns
    -------
    tuple
        (h^{q(α)}, h^{q(β)})
    """
    q = _opening_quotient(polynomial_coefficients(scales, group), z, group)
    return (multiexp_g2(h_alpha_powers[:len(q)], q, group),
            multiexp_g2(h_beta_powers[:len(q)], q, group))


def prove_wkey_opening(g_alpha_powers: List[G1], g_beta_powers: List[G1], scales: List[ZR],
                       n: int, z: ZR, group: PairingGroup) -> tuple:
    """Open the final w-key at z. f_w carries an X^n shift; powers must cover i < 2n."""
    coeffs = [0] * n + polynomial_coefficients(scales, group)
    q = _opening_quotient(coeffs, z, group)
    return (multiexp_g1(g_alpha_powers[:len(q)], q, group),
            multiexp_g1(g_beta_powers[:len(q)], q, group))


def verify_vkey_opening(vk_srs, final_vkey: tuple, opening: tuple, z: ZR, y: ZR) -> bool:
    """
    Check e(g, V - h^{y}) = e(g^{s} - g^{z}, π) for s ∈ {α, β}.

    ``y`` is f_v(z), computed by the verifier itself.
    """
    group = vk_srs.group
    h_y_inv = (vk_srs.h ** y) ** -1
    g_z_inv = (vk_srs.g ** z) ** -1
    for key, g_secret, pi in ((final_vkey[0], vk_srs.g_alpha, opening[0]),
                              (final_vkey[1], vk_srs.g_beta, opening[1])):
        if not pair_or_one(vk_srs.g, key * h_y_inv, group) == pair_or_one(g_secret * g_z_inv, pi, group):
            return False
    return True


def verify_wkey_opening(vk_srs, final_wkey: tuple, opening: tuple, z: ZR, y: ZR) -> bool:
    """Check e(W - g^{y}, h) = e(π, h^{s} - h^{z}) for s ∈ {α, β}."""
    group = vk_srs.group
    g_y_inv = (vk_srs.g ** y) ** -1
    h_z_inv = (vk_srs.h ** z) ** -1
    for key, h_secret, pi in ((final_wkey[0], vk_srs.h_alpha, opening[0]),
                              (final_wkey[1], vk_srs.h_beta, opening[1])):
        if not pair_or_one(key * g_y_inv, vk_srs.h, group) == pair_or_one(pi, h_secret * h_z_inv, group):
            return False
    return True
