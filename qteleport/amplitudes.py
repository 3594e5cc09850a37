# qteleport/amplitudes.py
from __future__ import annotations

import numpy as np

from qteleport.errors import NormalizationError


class AmplitudeStore:
    """
    Complex state vector of an N-qubit register.

    Index convention is little-endian: bit k of an index is the value of
    axis k. With no axes the vector is the scalar ``[1]``.
    """

    def __init__(self, tolerance: float = 1e-9):
        self.tolerance = tolerance
        self.vec: np.ndarray = np.ones(1, dtype=np.complex128)
        self.num_axes = 0

    def __len__(self) -> int:
        return len(self.vec)

    # ---------- masks ----------

    def indices(self) -> np.ndarray:
        return np.arange(len(self.vec))

    def bit_is_set(self, axis: int) -> np.ndarray:
        """Boolean mask of the indices whose bit `axis` is 1."""
        return (self.indices() >> axis) & 1 == 1

    # ---------- shape changes ----------

    def add_axis(self) -> int:
        """
        Tensor a fresh |0⟩ axis onto the register as its most significant bit.
        Returns the new axis index.
        """
        grown = np.zeros(2 * len(self.vec), dtype=np.complex128)
        grown[: len(self.vec)] = self.vec
        self.vec = grown
        self.num_axes += 1
        return self.num_axes - 1

    def remove_axis(self, axis: int, value: int) -> None:
        """
        Project `axis` onto `value` and drop it. Higher axes shift down by one.
        """
        keep = self.bit_is_set(axis) == bool(value)
        reduced = self.vec[keep]
        norm = np.linalg.norm(reduced)
        if norm <= self.tolerance:
            raise NormalizationError(f"Axis {axis} has no weight on value {value}")
        self.vec = reduced / norm
        self.num_axes -= 1

    # ---------- probabilities ----------

    def probability_one(self, axis: int) -> float:
        """Born weight of bit `axis` being 1."""
        probs = np.abs(self.vec[self.bit_is_set(axis)]) ** 2
        return float(np.sum(probs))

    def norm_squared(self) -> float:
        return float(np.sum(np.abs(self.vec) ** 2))

    def check_normalized(self) -> None:
        """Raise NormalizationError if the squared norm drifted away from 1."""
        total = self.norm_squared()
        if abs(total - 1.0) > self.tolerance:
            raise NormalizationError(f"State norm is {total!r}, expected 1")

    def snapshot(self) -> np.ndarray:
        """Read-only copy of the amplitudes."""
        out = self.vec.copy()
        out.setflags(write=False)
        return out
