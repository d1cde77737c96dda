"""
JSON encoding of aggregation objects for HTTP transport
Group elements travel as base64 strings; aggregate proofs travel as the
base64 of their binary encoding (see snarkpack.serialization).
"""

import base64
from typing import List

from charm.toolbox.pairinggroup import PairingGroup, G1, G2

from snarkpack.errors import SerializationError
from snarkpack.groth16 import Proof, VerifyingKey
from snarkpack.proof import AggregateProof
from snarkpack.serialization import (
    aggregate_proof_from_bytes, aggregate_proof_to_bytes, check_element_kind,
)
from snarkpack.srs import VerifierSRS

IDENTITY_G1 = "__IDENTITY_G1__"
IDENTITY_G2 = "__IDENTITY_G2__"


def serialize_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode('utf-8')


def deserialize_bytes(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"invalid base64: {e}") from e


def _serialize_element(elem, kind, marker: str, group: PairingGroup) -> str:
    if elem == group.init(kind, 1):
        return marker
    return serialize_bytes(group.serialize(elem))


def _deserialize_element(data: str, kind, marker: str, group: PairingGroup):
    if data == marker:
        return group.init(kind, 1)
    try:
        raw = deserialize_bytes(data)
        check_element_kind(raw, kind)
        elem = group.deserialize(raw)
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(f"invalid group element: {e}") from e
    if elem is None or elem is False:
        raise SerializationError("invalid group element")
    return elem


def serialize_g1(elem: G1, group: PairingGroup) -> str:
    """Encode a G1 element, identity as a marker string"""
    return _serialize_element(elem, G1, IDENTITY_G1, group)


def deserialize_g1(data: str, group: PairingGroup) -> G1:
    return _deserialize_element(data, G1, IDENTITY_G1, group)


def serialize_g2(elem: G2, group: PairingGroup) -> str:
    """Encode a G2 element, identity as a marker string"""
    return _serialize_element(elem, G2, IDENTITY_G2, group)


def deserialize_g2(data: str, group: PairingGroup) -> G2:
    return _deserialize_element(data, G2, IDENTITY_G2, group)


def serialize_verifier_srs(vk_srs: VerifierSRS) -> dict:
    """Encode the verifier SRS for network transport"""
    group = vk_srs.group
    return {
        'n': vk_srs.n,
        'g': serialize_g1(vk_srs.g, group),
        'h': serialize_g2(vk_srs.h, group),
        'g_alpha': serialize_g1(vk_srs.g_alpha, group),
        'g_beta': serialize_g1(vk_srs.g_beta, group),
        'h_alpha': serialize_g2(vk_srs.h_alpha, group),
        'h_beta': serialize_g2(vk_srs.h_beta, group),
    }


def deserialize_verifier_srs(data: dict, group: PairingGroup) -> VerifierSRS:
    return VerifierSRS(
        group=group,
        n=int(data['n']),
        g=deserialize_g1(data['g'], group),
        h=deserialize_g2(data['h'], group),
        g_alpha=deserialize_g1(data['g_alpha'], group),
        g_beta=deserialize_g1(data['g_beta'], group),
        h_alpha=deserialize_g2(data['h_alpha'], group),
        h_beta=deserialize_g2(data['h_beta'], group),
    )


def serialize_verifying_key(vk: VerifyingKey, group: PairingGroup) -> dict:
    """Encode a Groth16 verifying key"""
    return {
        'alpha_g1': serialize_g1(vk.alpha_g1, group),
        'beta_g2': serialize_g2(vk.beta_g2, group),
        'gamma_g2': serialize_g2(vk.gamma_g2, group),
        'delta_g2': serialize_g2(vk.delta_g2, group),
        'ic': [serialize_g1(ic, group) for ic in vk.ic],
    }


def deserialize_verifying_key(data: dict, group: PairingGroup) -> VerifyingKey:
    return VerifyingKey(
        alpha_g1=deserialize_g1(data['alpha_g1'], group),
        beta_g2=deserialize_g2(data['beta_g2'], group),
        gamma_g2=deserialize_g2(data['gamma_g2'], group),
        delta_g2=deserialize_g2(data['delta_g2'], group),
        ic=tuple(deserialize_g1(ic, group) for ic in data['ic']),
    )


def serialize_groth16_proofs(proofs: List[Proof], group: PairingGroup) -> List[dict]:
    """Encode a list of Groth16 proofs"""
    return [{
        'a': serialize_g1(p.a, group),
        'b': serialize_g2(p.b, group),
        'c': serialize_g1(p.c, group),
    } for p in proofs]


def deserialize_groth16_proofs(data: List[dict], group: PairingGroup) -> List[Proof]:
    return [Proof(
        a=deserialize_g1(p['a'], group),
        b=deserialize_g2(p['b'], group),
        c=deserialize_g1(p['c'], group),
    ) for p in data]


def serialize_aggregate_proof(proof: AggregateProof, group: PairingGroup) -> str:
    return serialize_bytes(aggregate_proof_to_bytes(proof, group))


def deserialize_aggregate_proof(data: str, group: PairingGroup) -> AggregateProof:
    return aggregate_proof_from_bytes(deserialize_bytes(data), group)


def serialize_public_inputs(public_inputs: List[List[int]]) -> List[List[str]]:
    """Public inputs are field elements; send them as decimal strings"""
    return [[str(x) for x in inputs] for inputs in public_inputs]


def deserialize_public_inputs(data: List[List]) -> List[List[int]]:
    return [[int(x) for x in inputs] for inputs in data]
