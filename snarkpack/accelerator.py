"""
Accelerator capability
======================

Optional offload of multi-exponentiations to an external accelerator
(GPU or similar). The aggregation core never requires one: every offloaded
operation has a CPU implementation and any accelerator failure falls back
to it.

The accelerator is a single shared resource per process. ``acquire()`` takes
it without blocking; if another caller holds it the acquisition fails with
``AcceleratorTaken`` and the caller falls back to the CPU.

Backends are plain objects exposing ``multiexp(bases, exponents, group)``;
they are installed with ``register_backend`` by whatever code owns the
hardware.
"""

import logging
import threading
from contextlib import contextmanager

from .config import config
from .errors import AcceleratorFailure

logger = logging.getLogger(__name__)


class AcceleratorError(Exception):
    """Base class for accelerator failures. Always recoverable by CPU fallback."""


class AcceleratorDisabled(AcceleratorError):
    def __init__(self):
        super().__init__("accelerator is disabled")


class AcceleratorTaken(AcceleratorError):
    def __init__(self):
        super().__init__("accelerator taken by another process")


class KernelUninitialized(AcceleratorError):
    def __init__(self):
        super().__init__("no accelerator kernel is initialized")


class ToolFailure(AcceleratorError):
    def __init__(self, detail: str):
        super().__init__(f"accelerator tool error: {detail}")
        self.detail = detail


class UnknownAcceleratorError(AcceleratorError):
    def __init__(self):
        super().__init__("an unknown accelerator error happened")


class Accelerator:
    """Interface implemented by accelerator backends."""

    def multiexp(self, bases, exponents, group):
        raise NotImplementedError


_backend_factory = None
_lock = threading.Lock()


def register_backend(factory):
    """Install a zero-argument callable returning an ``Accelerator``."""
    global _backend_factory
    _backend_factory = factory


def clear_backend():
    global _backend_factory
    _backend_factory = None


@contextmanager
def acquire():
    """
    Acquire the process-wide accelerator.

    Raises
    ------
    AcceleratorDisabled
        Acceleration is switched off in the configuration.
    KernelUninitialized
        No backend has been registered.
    AcceleratorTaken
        Another caller currently holds the accelerator.
    ToolFailure
        The backend could not be instantiated.
    """
    if not config.accelerator_enabled:
        raise AcceleratorDisabled()
    if _backend_factory is None:
        raise KernelUninitialized()
    if not _lock.acquire(blocking=False):
        raise AcceleratorTaken()
    try:
        try:
            accel = _backend_factory()
        except AcceleratorError:
            raise
        except Exception as e:
            raise ToolFailure(str(e)) from e
        yield accel
    finally:
        _lock.release()


def _accelerated_multiexp(bases, exponents, group):
    with acquire() as accel:
        try:
            return accel.multiexp(bases, exponents, group)
        except AcceleratorError:
            raise
        except Exception as e:
            raise UnknownAcceleratorError() from e


def dispatch_multiexp(bases, exponents, group, cpu_multiexp):
    """
    Run a multi-exponentiation on the accelerator, falling back to the CPU.

    When acceleration is disabled the CPU routine is called directly and its
    errors propagate unchanged. When it is enabled, an ``AcceleratorError``
    triggers the CPU routine; if that fails too, ``AcceleratorFailure`` is
    raised with the accelerator error as its cause.
    """
    if not config.accelerator_enabled:
        return cpu_multiexp(bases, exponents, group)

    try:
        return _accelerated_multiexp(bases, exponents, group)
    except AcceleratorError as err:
        logger.debug("accelerator unavailable (%s), using CPU multiexp", err)
        try:
            return cpu_multiexp(bases, exponents, group)
        except Exception as cpu_err:
            raise AcceleratorFailure(err) from cpu_err
