"""
Settings of the aggregation services

Every value comes from an environment variable. The aggregator and the
verifier run as separate processes, so each one builds its own Config at
import time; tests build a Config from a plain dict instead.

    AGGREGATOR_HOST / AGGREGATOR_PORT   aggregator address (localhost:5001)
    VERIFIER_HOST / VERIFIER_PORT       verifier address (localhost:5003)
    SRS_SIZE                            largest batch a dev SRS supports (16)
    PAIRING_CURVE                       charm curve name (BN254)
    LOG_LEVEL                           service log level (INFO)
    DEV_MODE                            allow /setup to sample SRS secrets (true)
"""

import os
from typing import Mapping, Optional

_TRUE = ('1', 'true', 'yes', 'on')


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


class Config:
    """Service settings read from ``env`` (the process environment by default)"""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        env = os.environ if env is None else env

        self.aggregator_host = env.get('AGGREGATOR_HOST', 'localhost')
        self.aggregator_port = _env_int(env, 'AGGREGATOR_PORT', 5001)
        self.verifier_host = env.get('VERIFIER_HOST', 'localhost')
        self.verifier_port = _env_int(env, 'VERIFIER_PORT', 5003)

        self.srs_size = _env_int(env, 'SRS_SIZE', 16)
        self.pairing_curve = env.get('PAIRING_CURVE', 'BN254')
        self.log_level = env.get('LOG_LEVEL', 'INFO').upper()

        # Production deployments load a ceremony SRS and keep this off.
        self.dev_mode = _env_flag(env, 'DEV_MODE', True)

    @property
    def aggregator_url(self):
        return f"http://{self.aggregator_host}:{self.aggregator_port}"

    @property
    def verifier_url(self):
        return f"http://{self.verifier_host}:{self.verifier_port}"


config = Config()
