"""
Pair Commitment Scheme
======================

This module implements the pairing-based commitment used by TIPP and MIPP.

Commitment keys are structured: a key holds two parallel vectors derived
from the secret exponents α and β of the SRS.

- v-key (in Ĝ = G2):  v1_i = h^{α^i},       v2_i = h^{β^i}       for i ∈ [0, n)
- w-key (in G = G1):  w1_i = g^{α^{n+i}},   w2_i = g^{β^{n+i}}   for i ∈ [0, n)

Commitments:
------------
pair_commit((v, w), A, B) = (T, U) with
    T = ∏ e(A_i, v1_i) · e(w1_i, B_i)
    U = ∏ e(A_i, v2_i) · e(w2_i, B_i)

single_g1_commit(v, C) = (T, U) with
    T = ∏ e(C_i, v1_i)
    U = ∏ e(C_i, v2_i)

Both are homomorphic under key concatenation: committing to the
concatenation of two halves under the concatenated keys is the product
of the two half-commitments. GIPA folding relies on exactly this.
"""

from charm.toolbox.pairinggroup import PairingGroup, G1, G2, GT
from typing import List, Tuple

from .errors import InvalidInputError
from .utils import compress, is_power_of_two, pair_prod, scale_vector

# (T, U) ∈ GT × GT
Output = Tuple[GT, GT]


class _Key:
    """Two parallel key vectors (a, b) of equal length."""

    def __init__(self, a: list, b: list):
        if len(a) != len(b):
            raise InvalidInputError(f"key vectors must have same length: {len(a)} != {len(b)}")
        self.a = list(a)
        self.b = list(b)

    def __len__(self):
        return len(self.a)

    def __eq__(self, other):
        return type(self) is type(other) and self.a == other.a and self.b == other.b

    def has_correct_len(self, n: int) -> bool:
        return len(self.a) == n and len(self.b) == n

    def split(self, at: int):
        """Return (left, right) keys of the first ``at`` and remaining entries."""
        cls = type(self)
        return (cls(self.a[:at], self.b[:at]),
                cls(self.a[at:], self.b[at:]))

    def compress(self, right, scale):
        """
        Fold two key halves: left_i · right_i^{scale}.

        ``self`` is the left half.
        """
        if len(self) != len(right):
            raise InvalidInputError(f"cannot compress keys of length {len(self)} and {len(right)}")
        cls = type(self)
        joined_a = self.a + right.a
        joined_b = self.b + right.b
        split = len(self)
        return cls(compress(joined_a, split, scale), compress(joined_b, split, scale))

    def first(self) -> tuple:
        """The fully compressed key as a pair (a_0, b_0)."""
        return self.a[0], self.b[0]


class VKey(_Key):
    """Commitment key in G2: (h^{α^i}, h^{β^i})."""


class WKey(_Key):
    """Commitment key in G1: (g^{α^{n+i}}, g^{β^{n+i}})."""

    def scale(self, s_vec: list):
        """Return the key with each entry raised to s_vec[i]."""
        return WKey(scale_vector(self.a, s_vec), scale_vector(self.b, s_vec))


def _check_inputs(n: int, *keys):
    if not is_power_of_two(n):
        raise InvalidInputError(f"commitment input length {n} is not a power of two")
    for key in keys:
        if not key.has_correct_len(n):
            raise InvalidInputError(f"commitment key length {len(key)} does not match input length {n}")


def pair_commit(vkey: VKey, wkey: WKey, a: List[G1], b: List[G2], group: PairingGroup) -> Output:
    """
    Commit to the vectors A ∈ G1^n and B ∈ G2^n with keys (v, w).

    Parameters
    ----------
    vkey : VKey
        Key in G2, length n
    wkey : WKey
        Key in G1, length n
    a : List[G1]
        Vector in G1
    b : List[G2]
        Vector in G2
    group : PairingGroup
        The pairing group

    Returns
    -------
    Output
        (T, U) = (∏ e(A_i, v1_i)·e(w1_i, B_i), ∏ e(A_i, v2_i)·e(w2_i, B_i))

    Raises
    ------
    InvalidInputError
        If len(a) != len(b), the length is not a power of two, or the keys
        are not sized to the input.
    """
    if len(a) != len(b):
        raise InvalidInputError(f"A and B must have same length: {len(a)} != {len(b)}")
    _check_inputs(len(a), vkey, wkey)

    t = pair_prod(a, vkey.a, group) * pair_prod(wkey.a, b, group)
    u = pair_prod(a, vkey.b, group) * pair_prod(wkey.b, b, group)
    return t, u


def single_g1_commit(vkey: VKey, a: List[G1], group: PairingGroup) -> Output:
    """Commit to A ∈ G1^n with key v only: (∏ e(A_i, v1_i), ∏ e(A_i, v2_i))."""
    _check_inputs(len(a), vkey)

    t = pair_prod(a, vkey.a, group)
    u = pair_prod(a, vkey.b, group)
    return t, u
