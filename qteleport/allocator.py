# qteleport/allocator.py
from __future__ import annotations

import itertools
from typing import Dict, List, Set

from qteleport.errors import QubitCapacityError, UnknownHandleError
from qteleport.quantum_backend import Qubit


class QubitAllocator:
    """
    Maps live qubit handles to axes of the amplitude store.

    Axes stay dense (0..n-1): releasing axis k shifts every higher axis down
    by one, so the freed index is reused by the next allocation.

    It also tracks which handles are classically known: measured (or reset)
    and since touched only by basis-preserving gates.
    """

    def __init__(self, max_qubits: int):
        self.max_qubits = max_qubits
        self._ids = itertools.count()
        self._axis: Dict[Qubit, int] = {}
        self._known: Set[Qubit] = set()

    def __len__(self) -> int:
        return len(self._axis)

    def __contains__(self, qubit: object) -> bool:
        return qubit in self._axis

    def issue(self) -> Qubit:
        """Create a handle bound to the next free axis."""
        if len(self._axis) >= self.max_qubits:
            raise QubitCapacityError(f"Cannot allocate more than {self.max_qubits} qubits")
        qubit = Qubit(next(self._ids))
        self._axis[qubit] = len(self._axis)
        return qubit

    def axis(self, qubit: Qubit) -> int:
        try:
            return self._axis[qubit]
        except KeyError:
            raise UnknownHandleError(f"{qubit!r} is not allocated") from None

    def axes(self, qubits: tuple[Qubit, ...]) -> List[int]:
        return [self.axis(q) for q in qubits]

    def retire(self, qubit: Qubit) -> int:
        """Forget `qubit` and compact the axes above it. Returns the freed axis."""
        freed = self._axis.pop(qubit, None)
        if freed is None:
            raise UnknownHandleError(f"{qubit!r} is not allocated")
        self._known.discard(qubit)
        for q, ax in self._axis.items():
            if ax > freed:
                self._axis[q] = ax - 1
        return freed

    def live(self) -> List[Qubit]:
        """Live handles ordered by axis (equivalently, by allocation)."""
        return sorted(self._axis, key=self._axis.__getitem__)

    # ---------- classical knowledge ----------

    def mark_known(self, qubit: Qubit) -> None:
        self.axis(qubit)
        self._known.add(qubit)

    def forget(self, qubits: tuple[Qubit, ...]) -> None:
        """Mark `qubits` as no longer classically known."""
        self._known.difference_update(qubits)

    def is_known(self, qubit: Qubit) -> bool:
        self.axis(qubit)
        return qubit in self._known
