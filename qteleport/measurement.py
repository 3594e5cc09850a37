# qteleport/measurement.py
from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from qteleport.amplitudes import AmplitudeStore
from qteleport.quantum_backend import Outcome


class MeasurementEngine:
    """
    Z-basis projective measurement on an AmplitudeStore.

    All randomness comes from the generator handed in at construction, so a
    seeded generator makes every outcome reproducible.
    """

    def __init__(self, store: AmplitudeStore, rng: np.random.Generator):
        self.store = store
        self.rng = rng

    def probabilities(self, axis: int) -> Tuple[float, float]:
        """Return (p0, p1) for `axis`. Does not mutate the store."""
        p1 = min(max(self.store.probability_one(axis), 0.0), 1.0)
        return 1.0 - p1, p1

    def is_basis_state(self, axis: int) -> bool:
        """True when `axis` is |0⟩ or |1⟩ up to the store tolerance."""
        _, p1 = self.probabilities(axis)
        tol = self.store.tolerance
        return p1 <= tol or p1 >= 1.0 - tol

    def sample(self, axis: int) -> Outcome:
        """Draw an outcome per the Born rule; near-certain outcomes skip the draw."""
        _, p1 = self.probabilities(axis)
        tol = self.store.tolerance
        if p1 <= tol:
            return Outcome.ZERO
        if p1 >= 1.0 - tol:
            return Outcome.ONE
        return Outcome.ONE if self.rng.random() < p1 else Outcome.ZERO

    def collapse(self, axis: int, outcome: Outcome) -> None:
        """Zero the amplitudes inconsistent with `outcome` and renormalize."""
        p0, p1 = self.probabilities(axis)
        p = p1 if outcome is Outcome.ONE else p0
        vec = self.store.vec
        vec[self.store.bit_is_set(axis) != bool(outcome)] = 0.0
        vec /= math.sqrt(p)
        self.store.check_normalized()

    def measure_z(self, axis: int) -> Outcome:
        outcome = self.sample(axis)
        self.collapse(axis, outcome)
        return outcome
