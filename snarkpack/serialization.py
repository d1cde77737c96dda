"""
Binary encoding of aggregate proofs.

Layout (all integers big-endian):

    magic      4 bytes  b"SPK1"
    kind       1 byte   1 = AggregateProof, 2 = TIPPProof, 3 = MIPPProof
    curve      u8 length + ASCII name of the pairing curve
    nproofs    u32, a power of two
    body       length-framed elements (u32 length + charm serialization,
               an empty frame for the identity of G1 or G2)
               in field order; transcripts carry exactly log2(nproofs) rounds

Decoding rejects unknown magic/kind, a curve other than the decoding group's,
a non power-of-two ``nproofs``, truncated input, trailing bytes and any
element whose charm type prefix does not match the group of its slot.
Round-tripping a proof yields an equal proof and re-encoding it yields the
same bytes.
"""

import struct

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT

from .errors import EngineMismatchError, SerializationError
from .groups import curve_name
from .proof import AggregateProof, GipaMIPP, GipaTIPP, MIPPProof, TIPPProof
from .utils import is_power_of_two

MAGIC = b"SPK1"
KIND_AGGREGATE = 1
KIND_TIPP = 2
KIND_MIPP = 3

MAX_ROUNDS = 32

_KIND_NAMES = {ZR: "ZR", G1: "G1", G2: "G2", GT: "GT"}


def check_element_kind(data: bytes, kind):
    """
    Reject an encoded element whose group differs from ``kind``.

    charm prefixes every serialized element with its group type id
    (b"1:" for G1, b"3:" for GT, ...); deserialize() trusts that prefix,
    so a GT value in a G1 slot would otherwise decode without complaint.
    """
    prefix, sep, _ = data.partition(b":")
    expected = str(int(kind)).encode()
    if not sep or prefix != expected:
        found = prefix.decode('ascii', 'replace') if sep else "?"
        raise SerializationError(
            f"expected a {_KIND_NAMES.get(kind, kind)} element, found type id {found}")


class _Writer:
    def __init__(self, group: PairingGroup):
        self.group = group
        self.parts = []

    def raw(self, data: bytes):
        self.parts.append(data)

    def u8(self, value: int):
        self.parts.append(struct.pack('>B', value))

    def u32(self, value: int):
        self.parts.append(struct.pack('>I', value))

    def element(self, elem, kind):
        # identity points are written as an empty frame
        if kind in (G1, G2) and elem == self.group.init(kind, 1):
            self.u32(0)
            return
        data = self.group.serialize(elem)
        self.u32(len(data))
        self.parts.append(data)

    def elements(self, kind, *elems):
        for elem in elems:
            self.element(elem, kind)

    def getvalue(self) -> bytes:
        return b"".join(self.parts)


class _Reader:
    def __init__(self, group: PairingGroup, data: bytes):
        self.group = group
        self.data = data
        self.pos = 0

    def raw(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise SerializationError(f"truncated input: wanted {size} bytes at offset {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def u8(self) -> int:
        return struct.unpack('>B', self.raw(1))[0]

    def u32(self) -> int:
        return struct.unpack('>I', self.raw(4))[0]

    def element(self, kind):
        size = self.u32()
        if size == 0:
            if kind not in (G1, G2):
                raise SerializationError(f"empty element at offset {self.pos}")
            return self.group.init(kind, 1)
        data = self.raw(size)
        check_element_kind(data, kind)
        try:
            elem = self.group.deserialize(data)
        except Exception as e:
            raise SerializationError(f"invalid group element at offset {self.pos}: {e}") from e
        if elem is None or elem is False:
            raise SerializationError(f"invalid group element at offset {self.pos}")
        return elem

    def pair(self, kind):
        return self.element(kind), self.element(kind)

    def finish(self):
        if self.pos != len(self.data):
            raise SerializationError(f"{len(self.data) - self.pos} trailing bytes")


def _write_header(w: _Writer, kind: int, nproofs: int):
    name = curve_name(w.group).encode('ascii')
    w.raw(MAGIC)
    w.u8(kind)
    w.u8(len(name))
    w.raw(name)
    w.u32(nproofs)


def _read_header(r: _Reader, kind: int) -> int:
    """Check the header and return the number of rounds."""
    if r.raw(len(MAGIC)) != MAGIC:
        raise SerializationError("bad magic")
    found_kind = r.u8()
    if found_kind != kind:
        raise SerializationError(f"expected encoding kind {kind}, found {found_kind}")
    found_curve = r.raw(r.u8()).decode('ascii', errors='replace')
    expected_curve = curve_name(r.group)
    if found_curve != expected_curve:
        raise EngineMismatchError(expected_curve, found_curve)
    nproofs = r.u32()
    if not is_power_of_two(nproofs):
        raise SerializationError(f"nproofs {nproofs} is not a power of two")
    rounds = nproofs.bit_length() - 1
    if rounds > MAX_ROUNDS:
        raise SerializationError(f"too many rounds: {rounds}")
    return rounds


def _check_rounds(what: str, gipa):
    if len(gipa.comms) != len(gipa.z_vec):
        raise SerializationError(
            f"{what} transcript inconsistent: {len(gipa.comms)} comms, {len(gipa.z_vec)} z values")


def _write_output(w: _Writer, output):
    w.elements(GT, output[0], output[1])


def _write_rounds(w: _Writer, gipa, z_kind):
    for (left, right), (z_l, z_r) in zip(gipa.comms, gipa.z_vec):
        _write_output(w, left)
        _write_output(w, right)
        w.elements(z_kind, z_l, z_r)


def _read_rounds(r: _Reader, rounds: int, z_kind):
    comms, z_vec = [], []
    for _ in range(rounds):
        left = r.pair(GT)
        right = r.pair(GT)
        comms.append((left, right))
        z_vec.append(r.pair(z_kind))
    return tuple(comms), tuple(z_vec)


def _write_tipp(w: _Writer, proof: TIPPProof):
    gipa = proof.gipa
    _check_rounds("tipp", gipa)
    _write_rounds(w, gipa, GT)
    w.element(gipa.final_a, G1)
    w.element(gipa.final_b, G2)
    w.elements(G2, *gipa.final_vkey)
    w.elements(G1, *gipa.final_wkey)
    w.elements(G2, *proof.vkey_opening)
    w.elements(G1, *proof.wkey_opening)


def _read_tipp(r: _Reader, rounds: int) -> TIPPProof:
    comms, z_vec = _read_rounds(r, rounds, GT)
    gipa = GipaTIPP(
        comms=comms,
        z_vec=z_vec,
        final_a=r.element(G1),
        final_b=r.element(G2),
        final_vkey=r.pair(G2),
        final_wkey=r.pair(G1),
    )
    return TIPPProof(gipa=gipa, vkey_opening=r.pair(G2), wkey_opening=r.pair(G1))


def _write_mipp(w: _Writer, proof: MIPPProof):
    gipa = proof.gipa
    _check_rounds("mipp", gipa)
    _write_rounds(w, gipa, G1)
    w.element(gipa.final_c, G1)
    w.element(gipa.final_r, ZR)
    w.elements(G2, *gipa.final_vkey)
    w.elements(G2, *proof.vkey_opening)


def _read_mipp(r: _Reader, rounds: int) -> MIPPProof:
    comms, z_vec = _read_rounds(r, rounds, G1)
    gipa = GipaMIPP(
        comms=comms,
        z_vec=z_vec,
        final_c=r.element(G1),
        final_r=r.element(ZR),
        final_vkey=r.pair(G2),
    )
    return MIPPProof(gipa=gipa, vkey_opening=r.pair(G2))


def tipp_proof_to_bytes(proof: TIPPProof, group: PairingGroup) -> bytes:
    w = _Writer(group)
    _write_header(w, KIND_TIPP, proof.gipa.nproofs)
    _write_tipp(w, proof)
    return w.getvalue()


def tipp_proof_from_bytes(data: bytes, group: PairingGroup) -> TIPPProof:
    r = _Reader(group, data)
    proof = _read_tipp(r, _read_header(r, KIND_TIPP))
    r.finish()
    return proof


def mipp_proof_to_bytes(proof: MIPPProof, group: PairingGroup) -> bytes:
    w = _Writer(group)
    _write_header(w, KIND_MIPP, proof.gipa.nproofs)
    _write_mipp(w, proof)
    return w.getvalue()


def mipp_proof_from_bytes(data: bytes, group: PairingGroup) -> MIPPProof:
    r = _Reader(group, data)
    proof = _read_mipp(r, _read_header(r, KIND_MIPP))
    r.finish()
    return proof


def aggregate_proof_to_bytes(proof: AggregateProof, group: PairingGroup) -> bytes:
    """
    Encode an aggregate proof.

    Raises
    ------
    SerializationError
        If the TIPP and MIPP transcripts do not have the same number of rounds.
    """
    if not proof.is_well_formed():
        raise SerializationError("tipp and mipp transcripts have different round counts")

    w = _Writer(group)
    _write_header(w, KIND_AGGREGATE, proof.nproofs)
    _write_output(w, proof.com_ab)
    _write_output(w, proof.com_c)
    w.element(proof.ip_ab, GT)
    w.element(proof.agg_c, G1)
    _write_tipp(w, proof.proof_ab)
    _write_mipp(w, proof.proof_c)
    return w.getvalue()


def aggregate_proof_from_bytes(data: bytes, group: PairingGroup) -> AggregateProof:
    """
    Decode an aggregate proof produced by ``aggregate_proof_to_bytes``.

    Raises
    ------
    SerializationError
        On any structural problem.
    EngineMismatchError
        If the proof was encoded for another curve.
    """
    r = _Reader(group, data)
    rounds = _read_header(r, KIND_AGGREGATE)
    proof = AggregateProof(
        com_ab=r.pair(GT),
        com_c=r.pair(GT),
        ip_ab=r.element(GT),
        agg_c=r.element(G1),
        proof_ab=_read_tipp(r, rounds),
        proof_c=_read_mipp(r, rounds),
    )
    r.finish()
    return proof
