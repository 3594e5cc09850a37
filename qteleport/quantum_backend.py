# qteleport/quantum_backend.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import List, Tuple


class QuantumGate(StrEnum):
    """
    Backend-agnostic gate vocabulary needed by teleportation.
    """

    # Single-qubit
    H = "H"
    X = "X"
    Z = "Z"

    # Two-qubit (control, target)
    CX = "CX"


GATE_ARITY: dict[QuantumGate, int] = {
    QuantumGate.H: 1,
    QuantumGate.X: 1,
    QuantumGate.Z: 1,
    QuantumGate.CX: 2,
}

# Gates that map a classically known qubit to another basis state
BASIS_PRESERVING = frozenset({QuantumGate.X, QuantumGate.Z})

# Accepted spellings besides the enum names
_GATE_ALIASES = {
    "HADAMARD": QuantumGate.H,
    "PAULIX": QuantumGate.X,
    "PAULIZ": QuantumGate.Z,
    "CNOT": QuantumGate.CX,
}


def parse_gate(gate: QuantumGate | str) -> QuantumGate:
    """Normalize a gate name (case-insensitive, aliases allowed) to QuantumGate."""
    if isinstance(gate, QuantumGate):
        return gate
    key = gate.strip().upper().replace("-", "").replace("_", "")
    if key in _GATE_ALIASES:
        return _GATE_ALIASES[key]
    try:
        return QuantumGate(key)
    except ValueError:
        raise ValueError(f"Unsupported gate: {gate}")


class Outcome(IntEnum):
    """Classical result of a Z-basis measurement."""

    ZERO = 0
    ONE = 1


@dataclass(frozen=True)
class Qubit:
    """
    Opaque qubit handle issued by a backend.

    ``id`` is never reused within a session, so a stale handle can never
    address a qubit allocated after it was released.
    """

    id: int

    def __repr__(self) -> str:
        return f"Qubit({self.id})"


class QuantumBackend(ABC):
    """Exclusively owned simulation session: qubits, gates and measurements."""

    # ---------- qubit lifecycle ----------

    @abstractmethod
    def allocate_qubit(self) -> Qubit:
        """Add a fresh |0⟩ qubit to the joint state and return its handle."""
        ...

    @abstractmethod
    def release(self, qubit: Qubit) -> None:
        """
        Remove `qubit` from the joint state.
        Only valid once it has been measured or reset and not touched since
        by a gate that can create superposition or entanglement.
        """
        ...

    @property
    @abstractmethod
    def num_qubits(self) -> int:
        """Number of live qubits."""
        ...

    @abstractmethod
    def live_qubits(self) -> List[Qubit]:
        """Live handles in allocation order."""
        ...

    # ---------- gates ----------

    @abstractmethod
    def apply_gate(self, gate: QuantumGate | str, *qubits: Qubit) -> None:
        """
        Apply a named gate to the given handles.
        Two-qubit gates take (control, target).
        """
        ...

    # ---------- measurement ----------

    @abstractmethod
    def measure_z(self, qubit: Qubit) -> Outcome:
        """Projectively measure `qubit` in the Z basis and collapse the state."""
        ...

    @abstractmethod
    def inspect_probabilities(self, qubit: Qubit) -> Tuple[float, float]:
        """Return (p0, p1) for `qubit` without touching the state."""
        ...

    def measure_and_reset(self, qubit: Qubit) -> Outcome:
        """Measure in Z, then flip back to |0⟩ if the outcome was One."""
        outcome = self.measure_z(qubit)
        if outcome is Outcome.ONE:
            self.apply_gate(QuantumGate.X, qubit)
        return outcome

    def reset(self, qubit: Qubit) -> None:
        """Return `qubit` to |0⟩, discarding the measured value."""
        self.measure_and_reset(qubit)

    # ---------- shorthands ----------

    def h(self, qubit: Qubit) -> None:
        self.apply_gate(QuantumGate.H, qubit)

    def x(self, qubit: Qubit) -> None:
        self.apply_gate(QuantumGate.X, qubit)

    def z(self, qubit: Qubit) -> None:
        self.apply_gate(QuantumGate.Z, qubit)

    def cx(self, control: Qubit, target: Qubit) -> None:
        self.apply_gate(QuantumGate.CX, control, target)
