# qteleport/stim_backend.py
from __future__ import annotations

import itertools
import logging
from typing import Dict, List, Optional, Set, Tuple

import stim

from qteleport.errors import InvalidStateError, QubitCapacityError, UnknownHandleError
from qteleport.quantum_backend import BASIS_PRESERVING, GATE_ARITY, Outcome, QuantumBackend, QuantumGate, Qubit, parse_gate
from qteleport.settings import get_settings

log = logging.getLogger("qteleport.stim")

# QuantumGate -> Stim instruction name
_STIM_NAMES = {
    QuantumGate.H: "H",
    QuantumGate.X: "X",
    QuantumGate.Z: "Z",
    QuantumGate.CX: "CX",
}


class StimSimulator(QuantumBackend):
    """
    Stim-based stabilizer backend.

    Every gate of the teleportation vocabulary is Clifford, so a tableau
    simulator runs the protocol exactly. Single-qubit Z marginals of a
    stabilizer state are always 0, 1/2 or 1.

    Released qubits go back to a free pool in |0⟩ and their Stim index is
    handed to the next allocation.
    """

    def __init__(self, seed: Optional[int] = None, *, max_qubits: Optional[int] = None):
        settings = get_settings()
        self.max_qubits = settings.MAX_QUBITS if max_qubits is None else max_qubits
        self.tab = stim.TableauSimulator(seed=settings.SEED if seed is None else seed)
        self._ids = itertools.count()
        self._index: Dict[Qubit, int] = {}
        self._free: List[int] = []
        self._known: Set[Qubit] = set()
        self._next_index = 0

    # ---------- internal helpers ----------

    def _idx(self, qubit: Qubit) -> int:
        try:
            return self._index[qubit]
        except KeyError:
            raise UnknownHandleError(f"{qubit!r} is not allocated") from None

    def _do(self, opname: str, *targets: int) -> None:
        """Apply a Stim op by name to the target indices."""
        self.tab.do(stim.Circuit(f"{opname} {' '.join(str(t) for t in targets)}"))

    # ---------- qubit lifecycle ----------

    @property
    def num_qubits(self) -> int:
        return len(self._index)

    def live_qubits(self) -> List[Qubit]:
        return sorted(self._index, key=lambda q: q.id)

    def allocate_qubit(self) -> Qubit:
        if len(self._index) >= self.max_qubits:
            raise QubitCapacityError(f"Cannot allocate more than {self.max_qubits} qubits")
        if self._free:
            idx = self._free.pop()
        else:
            idx = self._next_index
            self._next_index += 1
            self.tab.set_num_qubits(self._next_index)
        qubit = Qubit(next(self._ids))
        self._index[qubit] = idx
        log.debug(f"allocate {qubit!r} -> stim index {idx}")
        return qubit

    def release(self, qubit: Qubit) -> None:
        idx = self._idx(qubit)
        if qubit not in self._known:
            raise InvalidStateError(f"{qubit!r} has not been measured or reset; measure or reset it before release")
        z = self.tab.peek_z(idx)
        if z == -1:
            self._do("X", idx)
        del self._index[qubit]
        self._known.discard(qubit)
        self._free.append(idx)
        log.debug(f"release {qubit!r} from stim index {idx}")

    # ---------- gates ----------

    def apply_gate(self, gate: QuantumGate | str, *qubits: Qubit) -> None:
        gate_enum = parse_gate(gate)
        arity = GATE_ARITY[gate_enum]
        if len(qubits) != arity:
            raise ValueError(f"{gate_enum} expects {arity} qubit(s), got {len(qubits)}")
        targets = [self._idx(q) for q in qubits]
        if len(set(targets)) != len(targets):
            raise ValueError(f"{gate_enum} needs distinct control and target")
        self._do(_STIM_NAMES[gate_enum], *targets)
        if gate_enum not in BASIS_PRESERVING:
            self._known.difference_update(qubits)

    # ---------- measurement ----------

    def measure_z(self, qubit: Qubit) -> Outcome:
        outcome = Outcome(int(self.tab.measure(self._idx(qubit))))
        self._known.add(qubit)
        log.debug(f"measure {qubit!r} -> {outcome.name}")
        return outcome

    def inspect_probabilities(self, qubit: Qubit) -> Tuple[float, float]:
        # <Z> = p0 - p1
        z = self.tab.peek_z(self._idx(qubit))
        p1 = 0.5 * (1.0 - z)
        return 1.0 - p1, p1
