"""
Aggregation configuration
Read from the environment once at import time; tests may mutate the
module-level ``config`` instance directly.
"""

import os

DEFAULT_CURVE = os.getenv('SNARKPACK_CURVE', 'BN254')

# Accelerator offload for multi-exponentiations. The CPU path is always
# available and is used whenever the accelerator cannot be acquired.
DEFAULT_ACCELERATOR = os.getenv('SNARKPACK_ACCELERATOR', 'false').lower() == 'true'

DEFAULT_LOG_LEVEL = os.getenv('SNARKPACK_LOG_LEVEL', 'INFO').upper()


class Config:
    """Configuration for the aggregation core"""

    def __init__(self):
        self.curve = DEFAULT_CURVE
        self.accelerator_enabled = DEFAULT_ACCELERATOR
        self.log_level = DEFAULT_LOG_LEVEL


config = Config()
