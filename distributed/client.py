"""
Client library for the aggregation services
Wraps the HTTP calls behind one method per endpoint
"""

from typing import List

import requests

from distributed.config import config
from distributed.serialization import (
    serialize_bytes,
    serialize_groth16_proofs,
    serialize_public_inputs,
    serialize_verifier_srs,
    serialize_verifying_key,
)
from snarkpack.groth16 import Proof, VerifyingKey
from snarkpack.srs import VerifierSRS


class AggregatorClient:
    """Aggregator service client"""

    def __init__(self, base_url: str = None):
        self.base_url = base_url or config.aggregator_url

    def health(self) -> dict:
        resp = requests.get(f"{self.base_url}/health")
        resp.raise_for_status()
        return resp.json()

    def init(self, size: int = None, curve: str = None) -> dict:
        """Ask the aggregator to generate a development SRS"""
        data = {}
        if size:
            data['size'] = size
        if curve:
            data['curve'] = curve
        resp = requests.post(f"{self.base_url}/init", json=data)
        resp.raise_for_status()
        return resp.json()

    def get_verifier_srs(self) -> dict:
        resp = requests.get(f"{self.base_url}/get_verifier_srs")
        resp.raise_for_status()
        return resp.json()

    def aggregate(self, proofs: List[Proof], group, transcript_include: bytes = b"",
                  pad: bool = False) -> dict:
        """Aggregate proofs; the result carries the base64 proof under 'proof'"""
        resp = requests.post(f"{self.base_url}/aggregate", json={
            'proofs': serialize_groth16_proofs(proofs, group),
            'transcript_include': serialize_bytes(transcript_include),
            'pad': pad,
        })
        resp.raise_for_status()
        return resp.json()


class VerifierClient:
    """Verifier service client"""

    def __init__(self, base_url: str = None):
        self.base_url = base_url or config.verifier_url

    def health(self) -> dict:
        resp = requests.get(f"{self.base_url}/health")
        resp.raise_for_status()
        return resp.json()

    def init(self, verifier_srs, vk: VerifyingKey, group, curve: str = None) -> dict:
        """
        Install the verifier SRS and verifying key.

        ``verifier_srs`` is either a VerifierSRS or its JSON form as
        returned by the aggregator.
        """
        if isinstance(verifier_srs, VerifierSRS):
            verifier_srs = serialize_verifier_srs(verifier_srs)
        data = {
            'verifier_srs': verifier_srs,
            'verifying_key': serialize_verifying_key(vk, group),
        }
        if curve:
            data['curve'] = curve
        resp = requests.post(f"{self.base_url}/init", json=data)
        resp.raise_for_status()
        return resp.json()

    def verify(self, proof: str, public_inputs: List[List[int]], transcript_include: bytes = b"",
               pad: bool = False) -> dict:
        """Verify a base64-encoded aggregate proof"""
        resp = requests.post(f"{self.base_url}/verify", json={
            'proof': proof,
            'public_inputs': serialize_public_inputs(public_inputs),
            'transcript_include': serialize_bytes(transcript_include),
            'pad': pad,
        })
        resp.raise_for_status()
        return resp.json()
