"""
Shared fixtures: one BN254 group, a generic SRS and a toy Groth16 circuit
per test module.
"""

import pytest

from snarkpack.groups import setup
from snarkpack.groth16 import prove_with_trapdoor, setup_toy_circuit
from snarkpack.srs import setup_fake_srs

SRS_SIZE = 8
NUM_INPUTS = 2


@pytest.fixture(scope="module")
def pairing_params():
    """Initialize pairing group."""
    return setup('BN254')


@pytest.fixture(scope="module")
def group(pairing_params):
    return pairing_params['group']


@pytest.fixture(scope="module")
def generic_srs(group):
    """SRS supporting up to 8 proofs."""
    return setup_fake_srs(group, SRS_SIZE)


@pytest.fixture(scope="module")
def circuit(group):
    """(VerifyingKey, CircuitTrapdoor) of a toy circuit with two public inputs."""
    return setup_toy_circuit(group, NUM_INPUTS)


@pytest.fixture(scope="module")
def make_batch(group, circuit):
    """Factory producing n valid proofs together with their public inputs."""
    _, trapdoor = circuit

    def make(n, offset=0):
        public_inputs = [[offset + 10 * i + j + 1 for j in range(NUM_INPUTS)] for i in range(n)]
        proofs = [prove_with_trapdoor(trapdoor, inputs, group) for inputs in public_inputs]
        return proofs, public_inputs

    return make
