"""
Fiat-Shamir Transcript
======================

This module implements the hash-based transcript that turns the interactive
GIPA/KZG protocols into non-interactive proofs.

The transcript keeps a running SHA-512 state. Every absorbed item is
length-framed and preceded by a label, so the mapping from transcript
contents to challenges is injective. A challenge is squeezed from the
current state and immediately absorbed back, so every later challenge is
bound to everything produced before it.

Domain Separation:
------------------
- Every transcript starts from a protocol label (b"snarkpack-tipp",
  b"snarkpack-mipp", b"snarkpack-r", ...)
- Every append/challenge carries its own label

Encoding:
---------
- Group elements (G1, G2, GT, ZR) use charm's canonical serialization
- ints are encoded as 8-byte big-endian
- str is UTF-8, bytes are absorbed as-is

The encoding is part of the proof format: changing it breaks verification
of proofs produced by other implementations.
"""

import hashlib

from charm.toolbox.pairinggroup import PairingGroup, ZR

PROTOCOL_NAME = b"snarkpack-v1"


def _encode(group: PairingGroup, item) -> bytes:
    if isinstance(item, bytes):
        return item
    if isinstance(item, bool):
        raise TypeError("cannot absorb a bool into the transcript")
    if isinstance(item, int):
        return item.to_bytes(8, 'big')
    if isinstance(item, str):
        return item.encode('utf-8')
    return group.serialize(item)


class Transcript:
    """Running Fiat-Shamir transcript."""

    def __init__(self, group: PairingGroup, label: bytes):
        self.group = group
        self._state = hashlib.sha512(PROTOCOL_NAME + b"/" + label).digest()

    def append(self, label: bytes, *items):
        """Absorb items under a label."""
        h = hashlib.sha512(self._state)
        h.update(len(label).to_bytes(4, 'big'))
        h.update(label)
        for item in items:
            data = _encode(self.group, item)
            h.update(len(data).to_bytes(4, 'big'))
            h.update(data)
        self._state = h.digest()
        return self

    def challenge(self, label: bytes) -> ZR:
        """
        Squeeze a non-zero scalar challenge.

        The 512-bit digest is reduced modulo the group order. A zero result
        is re-drawn with an incremented counter so that the challenge is
        always invertible.
        """
        p = int(self.group.order())
        counter = 0
        while True:
            h = hashlib.sha512(self._state)
            h.update(label)
            h.update(counter.to_bytes(8, 'big'))
            value = int.from_bytes(h.digest(), 'big') % p
            if value != 0:
                break
            counter += 1

        c = self.group.init(ZR, value)
        self.append(b"challenge/" + label, c)
        return c


def derive_randomness(group: PairingGroup, transcript_include: bytes, nproofs: int,
                      com_ab: tuple, com_c: tuple) -> ZR:
    """
    Derive the scalar r used to take a random linear combination of proofs.

    r is bound to the caller-provided ``transcript_include`` bytes, the number
    of proofs and both commitments, so neither the prover nor the aggregated
    proofs can influence it after committing.
    """
    transcript = Transcript(group, b"snarkpack-r")
    transcript.append(b"include", transcript_include)
    transcript.append(b"nproofs", nproofs)
    transcript.append(b"com_ab", com_ab[0], com_ab[1])
    transcript.append(b"com_c", com_c[0], com_c[1])
    return transcript.challenge(b"r")


def argument_transcript(group: PairingGroup, label: bytes, r: ZR, claim) -> Transcript:
    """
    Fresh transcript for one sub-argument (TIPP or MIPP).

    Seeded with r and the claimed value (ip_ab for TIPP, agg_c for MIPP), so
    every GIPA challenge depends on the statement being proven.
    """
    return Transcript(group, label).append(b"r", r).append(b"claim", claim)
