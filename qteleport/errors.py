# qteleport/errors.py
from __future__ import annotations


class SimulatorError(Exception):
    """Base class for every error raised by a qteleport backend."""


class UnknownHandleError(SimulatorError):
    """The qubit handle was released or never allocated by this session."""


class InvalidStateError(SimulatorError):
    """The qubit is not in a known computational-basis state."""


class NormalizationError(SimulatorError):
    """The amplitude vector lost its unit norm (simulator bug)."""


class QubitCapacityError(SimulatorError):
    """Allocating another qubit would exceed the configured cap."""
