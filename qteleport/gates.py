# qteleport/gates.py
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from qteleport.amplitudes import AmplitudeStore
from qteleport.quantum_backend import GATE_ARITY, QuantumGate, parse_gate

INV_SQRT2 = 1.0 / math.sqrt(2.0)


class GateEngine:
    """Applies the supported unitaries to an AmplitudeStore in place."""

    def __init__(self, store: AmplitudeStore):
        self.store = store

    # ---------- internal helpers ----------

    def _pairs(self, axis: int) -> tuple[np.ndarray, np.ndarray]:
        """Index pairs (i, i | 1<<axis) for every i with bit `axis` clear."""
        idx = self.store.indices()
        zero = idx[(idx >> axis) & 1 == 0]
        return zero, zero | (1 << axis)

    def _hadamard(self, axis: int) -> None:
        vec = self.store.vec
        i0, i1 = self._pairs(axis)
        a0, a1 = vec[i0], vec[i1]
        vec[i0] = (a0 + a1) * INV_SQRT2
        vec[i1] = (a0 - a1) * INV_SQRT2

    def _pauli_x(self, axis: int) -> None:
        vec = self.store.vec
        i0, i1 = self._pairs(axis)
        vec[i0], vec[i1] = vec[i1], vec[i0]

    def _pauli_z(self, axis: int) -> None:
        self.store.vec[self.store.bit_is_set(axis)] *= -1

    def _cnot(self, control: int, target: int) -> None:
        vec = self.store.vec
        idx = self.store.indices()
        # control set, target clear; partner has target set
        src = idx[((idx >> control) & 1 == 1) & ((idx >> target) & 1 == 0)]
        dst = src | (1 << target)
        vec[src], vec[dst] = vec[dst], vec[src]

    # ---------- public API ----------

    def apply(self, gate: QuantumGate | str, axes: Sequence[int]) -> None:
        """
        Apply `gate` to the given axes and verify the norm afterwards.

        Raises
        ------
        ValueError
            If the gate is unsupported, the axis count does not match its
            arity, or a two-qubit gate addresses the same axis twice.
        NormalizationError
            If the state lost its unit norm.
        """
        gate_enum = parse_gate(gate)
        arity = GATE_ARITY[gate_enum]
        if len(axes) != arity:
            raise ValueError(f"{gate_enum} expects {arity} qubit(s), got {len(axes)}")

        if gate_enum == QuantumGate.H:
            self._hadamard(axes[0])
        elif gate_enum == QuantumGate.X:
            self._pauli_x(axes[0])
        elif gate_enum == QuantumGate.Z:
            self._pauli_z(axes[0])
        elif gate_enum == QuantumGate.CX:
            control, target = axes
            if control == target:
                raise ValueError("CX needs distinct control and target")
            self._cnot(control, target)
        else:
            raise ValueError(f"Unsupported gate: {gate_enum}")

        self.store.check_normalized()
