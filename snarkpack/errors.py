"""
Error types for the aggregation core.

Two families exist. Everything under ``AggregationError`` is protocol-fatal:
it is never retried and nothing produced before it is trusted. Accelerator
failures live in ``snarkpack.accelerator`` and are normally absorbed by the
CPU fallback; they only surface here, wrapped in ``AcceleratorFailure``, when
the fallback itself fails.
"""


class AggregationError(Exception):
    """Base class for protocol-fatal aggregation errors."""


class InvalidInputError(AggregationError, ValueError):
    """Precondition violation: mismatched lengths, non power-of-two sizes, etc."""


class SerializationError(AggregationError):
    """Structurally invalid encoding."""


class EngineMismatchError(SerializationError):
    """Data produced for one pairing curve was presented to another."""

    def __init__(self, expected: str, found: str):
        super().__init__(f"engine mismatch: expected curve {expected}, found {found}")
        self.expected = expected
        self.found = found


class AcceleratorFailure(AggregationError):
    """The accelerator failed and so did the CPU fallback."""

    def __init__(self, cause):
        super().__init__(f"accelerator failure not recoverable by CPU fallback: {cause}")
        self.cause = cause
