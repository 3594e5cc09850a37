# qteleport/statevector_backend.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from qteleport.allocator import QubitAllocator
from qteleport.amplitudes import AmplitudeStore
from qteleport.errors import InvalidStateError
from qteleport.gates import GateEngine
from qteleport.measurement import MeasurementEngine
from qteleport.quantum_backend import BASIS_PRESERVING, Outcome, QuantumBackend, QuantumGate, Qubit, parse_gate
from qteleport.settings import get_settings

log = logging.getLogger("qteleport.sim")


class StateVectorSimulator(QuantumBackend):
    """
    Dense state-vector simulation session.

    Owns one AmplitudeStore, the allocator that maps handles onto its axes,
    and the random generator used for measurement. Nothing is shared between
    instances; do not use one instance from several threads.

    Parameters
    ----------
    seed : Optional[int]
        Seed for a fresh ``numpy.random.default_rng``. Defaults to
        ``settings.SEED``. Ignored when `rng` is given.
    rng : Optional[np.random.Generator]
        Explicit random source for measurement outcomes.
    max_qubits : Optional[int]
        Cap on live qubits. Defaults to ``settings.MAX_QUBITS``.
    tolerance : Optional[float]
        Normalization / determinism tolerance. Defaults to
        ``settings.NORM_TOLERANCE``.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        max_qubits: Optional[int] = None,
        tolerance: Optional[float] = None,
    ):
        settings = get_settings()
        if rng is None:
            rng = np.random.default_rng(settings.SEED if seed is None else seed)

        self.store = AmplitudeStore(settings.NORM_TOLERANCE if tolerance is None else tolerance)
        self.allocator = QubitAllocator(settings.MAX_QUBITS if max_qubits is None else max_qubits)
        self.gates = GateEngine(self.store)
        self.meter = MeasurementEngine(self.store, rng)

    # ---------- qubit lifecycle ----------

    @property
    def num_qubits(self) -> int:
        return len(self.allocator)

    def live_qubits(self) -> List[Qubit]:
        return self.allocator.live()

    def allocate_qubit(self) -> Qubit:
        qubit = self.allocator.issue()
        axis = self.store.add_axis()
        log.debug(f"allocate {qubit!r} -> axis {axis} (dim={len(self.store)})")
        return qubit

    def release(self, qubit: Qubit) -> None:
        """
        Drop `qubit` from the register.

        Raises
        ------
        UnknownHandleError
            If `qubit` is not live.
        InvalidStateError
            If `qubit` has not been measured or reset since it was allocated
            or last touched by H or CX.
        """
        axis = self.allocator.axis(qubit)
        if not self.allocator.is_known(qubit):
            raise InvalidStateError(f"{qubit!r} has not been measured or reset; measure or reset it before release")
        if not self.meter.is_basis_state(axis):
            p0, p1 = self.meter.probabilities(axis)
            raise InvalidStateError(
                f"{qubit!r} is not in a computational-basis state (p0={p0:.6g}, p1={p1:.6g}); "
                "measure or reset it before release"
            )
        value = int(self.store.probability_one(axis) >= 0.5)
        self.store.remove_axis(axis, value)
        self.allocator.retire(qubit)
        log.debug(f"release {qubit!r} from axis {axis} (value={value}, dim={len(self.store)})")

    # ---------- gates ----------

    def apply_gate(self, gate: QuantumGate | str, *qubits: Qubit) -> None:
        gate_enum = parse_gate(gate)
        axes = self.allocator.axes(qubits)
        self.gates.apply(gate_enum, axes)
        if gate_enum not in BASIS_PRESERVING:
            self.allocator.forget(qubits)

    # ---------- measurement ----------

    def measure_z(self, qubit: Qubit) -> Outcome:
        axis = self.allocator.axis(qubit)
        outcome = self.meter.measure_z(axis)
        self.allocator.mark_known(qubit)
        log.debug(f"measure {qubit!r} -> {outcome.name}")
        return outcome

    def inspect_probabilities(self, qubit: Qubit) -> Tuple[float, float]:
        return self.meter.probabilities(self.allocator.axis(qubit))

    # ---------- diagnostics ----------

    def amplitudes(self) -> np.ndarray:
        """Read-only copy of the joint amplitude vector (little-endian)."""
        return self.store.snapshot()

    def dump(self, cutoff: float = 1e-12) -> Dict[str, complex]:
        """
        Map basis labels to amplitudes for every entry with |a|^2 > cutoff.

        Labels list the live qubits in allocation order, left to right, so
        ``"10"`` means the first allocated qubit is 1 and the second is 0.
        """
        n = self.num_qubits
        out: Dict[str, complex] = {}
        for i, amp in enumerate(self.store.vec):
            if abs(amp) ** 2 > cutoff:
                label = format(i, f"0{n}b")[::-1] if n else ""
                out[label] = complex(amp)
        return out
