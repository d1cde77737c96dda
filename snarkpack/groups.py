"""
Group Initialization and Setup
===============================

This module handles the initialization of the pairing engine used by the
aggregation scheme.

The engine is a charm-crypto PairingGroup with Type-3 asymmetric pairings:
- G1, G2 are the source groups (A, C live in G1; B lives in G2)
- GT is the target group (pairing products, commitment outputs)
- ZR is the scalar field Fr
- pair(g1_elem, g2_elem) -> GT element

A single group object is used for the whole lifetime of an aggregate proof;
elements from different groups must never be mixed.
"""

import logging

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

from .config import config

logger = logging.getLogger(__name__)

SUPPORTED_CURVES = ('BN254', 'MNT224', 'MNT201', 'MNT159')


def setup(group_name: str = None) -> dict:
    """
    Initialize the pairing group for the aggregation scheme.

    Parameters
    ----------
    group_name : str, optional
        The pairing curve identifier. Defaults to the configured curve
        (``SNARKPACK_CURVE``, ``BN254`` when unset). Only asymmetric curves
        are accepted since the scheme relies on distinct G1 and G2.

    Returns
    -------
    dict
        A dictionary containing:
        - 'group': The PairingGroup object
        - 'group_name': The name of the curve used
        - 'G1', 'G2', 'GT', 'ZR': The charm type constants
        - 'pair': The pairing function

    Raises
    ------
    ValueError
        If the curve is not one of the supported asymmetric curves.
    """
    if group_name is None:
        group_name = config.curve
    if group_name not in SUPPORTED_CURVES:
        raise ValueError(f"Unsupported pairing curve {group_name!r}; expected one of {SUPPORTED_CURVES}")

    group = PairingGroup(group_name)
    logger.debug("initialized pairing group %s", group_name)

    return {
        'group': group,
        'group_name': group_name,
        'G1': G1,
        'G2': G2,
        'GT': GT,
        'ZR': ZR,
        'pair': pair,
    }


def curve_name(group: PairingGroup) -> str:
    """Return the curve identifier the group was created with."""
    return group.groupType()


def scalar(group: PairingGroup, value: int) -> ZR:
    """Lift a Python integer into ZR, reducing it modulo the group order."""
    return group.init(ZR, int(value) % int(group.order()))


def get_generators(group: PairingGroup) -> tuple:
    """
    Generate random generators for G1 and G2.

    Returns
    -------
    tuple
        (g, h) with g in G1 and h in G2.
    """
    g = group.random(G1)
    h = group.random(G2)
    return g, h
