# qteleport/__init__.py
import importlib.metadata

from .errors import (
    SimulatorError, UnknownHandleError, InvalidStateError, NormalizationError, QubitCapacityError
)
from .quantum_backend import QuantumBackend, QuantumGate, Outcome, Qubit
from .statevector_backend import StateVectorSimulator
from .stim_backend import StimSimulator
from .backends import create_backend
from .teleport import (
    teleport, flip_coin, teleport_classical_message, teleport_random_message, qubits, TeleportReport
)
from .logging_config import setup_logging
from .diagnostics import dump_machine

__version__ = importlib.metadata.version("qteleport")
