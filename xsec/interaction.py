"""
Process descriptions: what a cross section is computed for.

ProcessDescription is the interface the spline builder relies on. The
builder needs the kinematic threshold, a canonical string (used in the
spline key), the probe rest mass, and a way to set the probe
four-momentum before each cross-section evaluation.

Interaction is a concrete fixed-target description: a probe of known
mass hits a target at rest and produces a final state of known total
rest mass. Its threshold is the minimum probe energy for which

    s = m_p^2 + M^2 + 2 E M  >=  (sum of final-state masses)^2

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

from abc import ABC, abstractmethod

from xsec.kinematics import probe_p4


class ProcessDescription(ABC):
    """
    Abstract physical process description.

    Implementations must produce identical canonical strings for
    physically identical processes, since the string is persisted as
    part of the spline key.
    """

    @abstractmethod
    def threshold(self):
        """Minimum probe energy (GeV) at which the process is allowed."""

    @abstractmethod
    def as_string(self):
        """Canonical, deterministic string form of the process."""

    @abstractmethod
    def probe_mass(self):
        """Probe rest mass in GeV."""

    @abstractmethod
    def set_probe_p4(self, p4):
        """Set the probe four-momentum used by the next evaluation."""


class Interaction(ProcessDescription):
    """
    Fixed-target interaction.

    Parameters
    ----------
    probe_pdg : int
        PDG code of the probe.
    target_pdg : int
        PDG code of the target.
    channel : str
        Reaction channel tag (e.g. "Weak[CC],QES").
    probe_mass : float, optional
        Probe rest mass in GeV (default 0, massless).
    target_mass : float, optional
        Target rest mass in GeV. Required for a kinematic threshold.
    final_state_mass : float, optional
        Sum of final-state rest masses in GeV. When it does not exceed
        probe_mass + target_mass the process is open at any energy.
    """

    def __init__(self, probe_pdg, target_pdg, channel, probe_mass=0.0,
                 target_mass=0.0, final_state_mass=0.0):
        self.probe_pdg = int(probe_pdg)
        self.target_pdg = int(target_pdg)
        self.channel = str(channel)
        self._probe_mass = float(probe_mass)
        self.target_mass = float(target_mass)
        self.final_state_mass = float(final_state_mass)
        self.probe_p4 = probe_p4(0.0, self._probe_mass)

    def threshold(self):
        mp = self._probe_mass
        M = self.target_mass
        W = self.final_state_mass
        if M <= 0 or W <= mp + M:
            return mp
        return (W * W - mp * mp - M * M) / (2.0 * M)

    def as_string(self):
        return "nu:{};tgt:{};proc:{};".format(
            self.probe_pdg, self.target_pdg, self.channel)

    def probe_mass(self):
        return self._probe_mass

    def set_probe_p4(self, p4):
        self.probe_p4 = p4

    @property
    def probe_energy(self):
        return self.probe_p4.energy

    def __repr__(self):
        return "Interaction({})".format(self.as_string())
