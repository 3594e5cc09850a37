# qteleport/diagnostics.py
from __future__ import annotations

import cmath
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from qteleport.quantum_backend import QuantumBackend
from qteleport.statevector_backend import StateVectorSimulator


# ---------- Coloring helper for probabilities ----------
def prob_style(p: float) -> str:
    v = min(max(p, 0.0), 1.0)
    g = int(255 * v)
    b = int(255 * (1 - v))
    return f"rgb(0,{g},{b})"


def _amplitude_table(sim: StateVectorSimulator, cutoff: float) -> Table:
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 1))
    table.add_column("basis", justify="left")
    table.add_column("amplitude", justify="right")
    table.add_column("prob", justify="right")
    table.add_column("phase", justify="right")

    for label, amp in sim.dump(cutoff).items():
        p = abs(amp) ** 2
        table.add_row(
            Text(f"|{label}⟩"),
            Text(f"{amp.real:+.4f}{amp.imag:+.4f}i"),
            Text(f"{p:.4f}", style=prob_style(p)),
            Text(f"{cmath.phase(amp):+.4f}"),
        )
    return table


def _marginal_table(sim: QuantumBackend) -> Table:
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 1))
    table.add_column("qubit", justify="left")
    table.add_column("p0", justify="right")
    table.add_column("p1", justify="right")

    for q in sim.live_qubits():
        p0, p1 = sim.inspect_probabilities(q)
        table.add_row(
            Text(str(q.id)),
            Text(f"{p0:.4f}", style=prob_style(p0)),
            Text(f"{p1:.4f}", style=prob_style(p1)),
        )
    return table


def dump_machine(sim: QuantumBackend, console: Optional[Console] = None, cutoff: float = 1e-12) -> None:
    """
    Print the current state of `sim`.

    State-vector sessions show every basis state with non-negligible weight;
    other backends show per-qubit Z marginals.
    """
    console = console or Console()
    console.print(f"[bold magenta]Qubits =[/bold magenta] {sim.num_qubits}")
    if isinstance(sim, StateVectorSimulator):
        console.print(_amplitude_table(sim, cutoff))
    else:
        console.print(_marginal_table(sim))
