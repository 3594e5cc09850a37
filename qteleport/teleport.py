# qteleport/teleport.py
from __future__ import annotations

import logging
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from qteleport.quantum_backend import Outcome, QuantumBackend, Qubit

log = logging.getLogger("qteleport.protocol")


@dataclass
class TeleportReport:
    """
    Result of a random-message teleportation.

    Attributes
    ----------
    sent_plus : bool
        True if the message was prepared in |+⟩, False for |−⟩.
    received_plus : bool
        True if the target measured as |+⟩ in the X basis.
    """

    sent_plus: bool
    received_plus: bool

    @property
    def ok(self) -> bool:
        return self.sent_plus == self.received_plus


@contextmanager
def qubits(sim: QuantumBackend, count: int) -> Iterator[List[Qubit]]:
    """
    Allocate `count` fresh qubits for the duration of a block.
    On exit every qubit is reset to |0⟩ and released, even on error. Each
    qubit is returned on its own, so one failing release does not leak the
    others; an error is re-raised once all of them were tried.
    """
    with ExitStack() as stack:
        owned = []
        for _ in range(count):
            q = sim.allocate_qubit()
            stack.callback(_reset_and_release, sim, q)
            owned.append(q)
        yield owned


def _reset_and_release(sim: QuantumBackend, q: Qubit) -> None:
    sim.reset(q)
    sim.release(q)


# ---------- state preparation ----------

def set_to_plus(sim: QuantumBackend, q: Qubit) -> None:
    """Prepare |+⟩ from a qubit in |0⟩."""
    sim.h(q)


def set_to_minus(sim: QuantumBackend, q: Qubit) -> None:
    """Prepare |−⟩ from a qubit in |0⟩."""
    sim.x(q)
    sim.h(q)


def prepare_message(sim: QuantumBackend, q: Qubit, plus: bool) -> None:
    if plus:
        set_to_plus(sim, q)
    else:
        set_to_minus(sim, q)


def measure_is_plus(sim: QuantumBackend, q: Qubit) -> bool:
    """Measure `q` in the X basis, leave it in |0⟩, and return True for |+⟩."""
    sim.h(q)
    return sim.measure_and_reset(q) is Outcome.ZERO


def flip_coin(sim: QuantumBackend) -> bool:
    """Fair random bit drawn from the session's own measurement randomness."""
    with qubits(sim, 1) as (coin,):
        sim.h(coin)
        return sim.measure_and_reset(coin) is Outcome.ONE


# ---------- protocol ----------

def teleport(sim: QuantumBackend, msg: Qubit, target: Qubit) -> None:
    """
    Move the state of `msg` onto `target`.

    `target` must start in |0⟩. An auxiliary qubit is borrowed for the Bell
    pair and released again; `msg` ends reset to |0⟩.
    """
    with qubits(sim, 1) as (here,):
        # Bell pair between here and target
        sim.h(here)
        sim.cx(here, target)

        # Bell measurement of (msg, here)
        sim.cx(msg, here)
        sim.h(msg)
        msg_bit = sim.measure_and_reset(msg)
        here_bit = sim.measure_and_reset(here)

        if msg_bit is Outcome.ONE:
            sim.z(target)
        if here_bit is Outcome.ONE:
            sim.x(target)
        log.debug(f"teleport {msg!r} -> {target!r}: corrections Z={msg_bit.value} X={here_bit.value}")


def teleport_classical_message(sim: QuantumBackend, message: bool) -> bool:
    """Encode `message` in a basis state, teleport it, and read it back."""
    with qubits(sim, 2) as (msg, target):
        if message:
            sim.x(msg)
        teleport(sim, msg, target)
        return sim.measure_and_reset(target) is Outcome.ONE


def teleport_random_message(
    sim: QuantumBackend,
    rng: Optional[np.random.Generator] = None,
) -> TeleportReport:
    """
    Teleport |+⟩ or |−⟩ (chosen at random) and check it in the X basis.

    Without `rng` the choice is a coin qubit measured through `sim`, so a
    seeded session picks the same message every run.
    """
    if rng is not None:
        sent_plus = bool(rng.integers(2))
    else:
        sent_plus = flip_coin(sim)

    with qubits(sim, 2) as (msg, target):
        prepare_message(sim, msg, sent_plus)
        teleport(sim, msg, target)
        received_plus = measure_is_plus(sim, target)

    report = TeleportReport(sent_plus=sent_plus, received_plus=received_plus)
    if not report.ok:
        log.warning(f"teleport mismatch: sent {'+' if sent_plus else '-'}, received {'+' if received_plus else '-'}")
    return report
