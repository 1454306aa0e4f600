"""
Pytest fixtures for the xsec test suite.
"""

import math
import threading
import time

import pytest

from app import create_app
from xsec.algorithm import ResponseAlgorithm
from xsec.interaction import Interaction
from xsec.registry import SplineRegistry

# Masses in GeV
M_MUON = 0.105658
M_PROTON = 0.938272
M_NEUTRON = 0.939565


class CountingAlgorithm(ResponseAlgorithm):
    """
    Toy cross section that counts its calls.

    xsec(E) = scale * (E - E_thr) above threshold, 0 below.
    """

    name = "CountingXSec"
    config = "Default"

    def __init__(self, scale=1.0e-12, delay=0.0, config="Default"):
        self.scale = scale
        self.delay = delay
        self.config = config
        self.calls = 0
        self.energies = []
        self.momenta = []
        self._lock = threading.Lock()

    def integral(self, interaction):
        with self._lock:
            self.calls += 1
            self.energies.append(interaction.probe_p4.energy)
            self.momenta.append(interaction.probe_p4.pz)
        if self.delay:
            time.sleep(self.delay)
        E = interaction.probe_p4.energy
        return self.scale * max(0.0, E - interaction.threshold())


class DivergentAlgorithm(CountingAlgorithm):
    """Returns `value` (NaN by default) above a cutoff energy."""

    def __init__(self, cutoff, value=math.nan):
        super().__init__()
        self.cutoff = cutoff
        self.value = value

    def integral(self, interaction):
        xsec = super().integral(interaction)
        if interaction.probe_p4.energy > self.cutoff:
            return self.value
        return xsec


@pytest.fixture
def algorithm():
    return CountingAlgorithm()


@pytest.fixture
def qel_interaction():
    """numu + n -> mu- + p, threshold ~0.11 GeV."""
    return Interaction(14, 2112, "Weak[CC],QES", probe_mass=0.0,
                       target_mass=M_NEUTRON,
                       final_state_mass=M_MUON + M_PROTON)


@pytest.fixture
def nc_interaction():
    """Elastic NC scattering: open at any energy."""
    return Interaction(14, 2212, "Weak[NC],EL", probe_mass=0.0,
                       target_mass=M_PROTON, final_state_mass=M_PROTON)


@pytest.fixture
def registry():
    return SplineRegistry()


@pytest.fixture
def app(registry, tmp_path):
    """Create application for testing around the test registry."""
    app = create_app(registry=registry, config={
        "TESTING": True,
        "SPLINE_DIR": str(tmp_path / "splines"),
    })
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
