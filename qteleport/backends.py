# qteleport/backends.py
from __future__ import annotations

from typing import Optional

from qteleport.quantum_backend import QuantumBackend
from qteleport.settings import get_settings
from qteleport.statevector_backend import StateVectorSimulator
from qteleport.stim_backend import StimSimulator

BACKENDS: dict[str, type[QuantumBackend]] = {
    "statevector": StateVectorSimulator,
    "stim": StimSimulator,
}


def create_backend(name: Optional[str] = None, *, seed: Optional[int] = None) -> QuantumBackend:
    """
    Create a fresh simulation session.
    Uses settings.BACKEND by default; `name` overrides for this call.
    """
    chosen = (name or get_settings().BACKEND).strip().lower()
    try:
        cls = BACKENDS[chosen]
    except KeyError:
        raise ValueError(f"Invalid backend {chosen!r}, choose one of: {', '.join(BACKENDS)}") from None
    return cls(seed)
