# tests/test_settings.py
import logging

import pytest
from rich.console import Console

from qteleport.backends import create_backend
from qteleport.diagnostics import dump_machine
from qteleport.errors import QubitCapacityError
from qteleport.logging_config import setup_logging
from qteleport.settings import Settings, get_settings
from qteleport.statevector_backend import StateVectorSimulator
from qteleport.stim_backend import StimSimulator


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    s = Settings(_env_file=None)
    assert s.BACKEND == "statevector"
    assert s.MAX_QUBITS == 24
    assert s.NORM_TOLERANCE == pytest.approx(1e-9)
    assert s.SEED is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("QTP_MAX_QUBITS", "5")
    monkeypatch.setenv("QTP_SEED", "42")
    monkeypatch.setenv("QTP_BACKEND", "stim")
    s = Settings(_env_file=None)
    assert s.MAX_QUBITS == 5
    assert s.SEED == 42
    assert s.BACKEND == "stim"


@pytest.mark.parametrize("key, value", [("QTP_MAX_QUBITS", "0"), ("QTP_NORM_TOLERANCE", "2")])
def test_invalid_values_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_capacity_from_settings(monkeypatch, fresh_settings):
    monkeypatch.setenv("QTP_MAX_QUBITS", "2")
    sim = StateVectorSimulator(seed=0)
    a = sim.allocate_qubit()
    sim.allocate_qubit()
    with pytest.raises(QubitCapacityError):
        sim.allocate_qubit()
    sim.reset(a)
    sim.release(a)
    sim.allocate_qubit()


@pytest.mark.parametrize("Backend", [StateVectorSimulator, StimSimulator])
def test_capacity_argument(Backend):
    sim = Backend(0, max_qubits=1)
    sim.allocate_qubit()
    with pytest.raises(QubitCapacityError):
        sim.allocate_qubit()


def test_create_backend_by_name():
    assert isinstance(create_backend("stim", seed=1), StimSimulator)
    assert isinstance(create_backend(" StateVector "), StateVectorSimulator)
    with pytest.raises(ValueError):
        create_backend("qpu")


def test_create_backend_uses_settings(monkeypatch, fresh_settings):
    monkeypatch.setenv("QTP_BACKEND", "stim")
    assert isinstance(create_backend(), StimSimulator)


def test_seed_from_settings(monkeypatch, fresh_settings):
    monkeypatch.setenv("QTP_SEED", "314")

    def run():
        sim = create_backend("statevector")
        q = sim.allocate_qubit()
        out = []
        for _ in range(32):
            sim.h(q)
            out.append(int(sim.measure_and_reset(q)))
        return out

    assert run() == run()


def test_setup_logging_sets_package_level(caplog):
    setup_logging("DEBUG")
    assert logging.getLogger("qteleport").level == logging.DEBUG

    caplog.set_level(logging.DEBUG, logger="qteleport")
    sim = StateVectorSimulator(seed=0)
    q = sim.allocate_qubit()
    sim.measure_z(q)
    assert any("measure" in r.getMessage() for r in caplog.records)

    setup_logging("WARNING")
    assert logging.getLogger("qteleport").level == logging.WARNING


def test_dump_machine_statevector():
    sim = StateVectorSimulator(seed=0)
    a, b = sim.allocate_qubit(), sim.allocate_qubit()
    sim.h(a)
    sim.cx(a, b)
    console = Console(record=True, width=100)
    dump_machine(sim, console)
    text = console.export_text()
    assert "|00⟩" in text
    assert "|11⟩" in text
    assert "|01⟩" not in text
    assert "0.5000" in text


def test_dump_machine_stim():
    sim = StimSimulator(0)
    q = sim.allocate_qubit()
    sim.x(q)
    console = Console(record=True, width=100)
    dump_machine(sim, console)
    text = console.export_text()
    assert "p1" in text
    assert "1.0000" in text


@pytest.mark.parametrize("Backend", [StateVectorSimulator, StimSimulator])
def test_zero_capacity_is_not_replaced_by_default(Backend):
    sim = Backend(0, max_qubits=0)
    with pytest.raises(QubitCapacityError):
        sim.allocate_qubit()


def test_explicit_tolerance_is_kept():
    sim = StateVectorSimulator(0, tolerance=1e-3)
    assert sim.store.tolerance == pytest.approx(1e-3)
    assert StateVectorSimulator(0).store.tolerance == pytest.approx(get_settings().NORM_TOLERANCE)


def test_package_exports_ambient_helpers():
    import qteleport

    assert qteleport.setup_logging is setup_logging
    assert qteleport.dump_machine is dump_machine
