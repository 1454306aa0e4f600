"""
Probe kinematics for cross-section tabulation.

The probe travels along +z. For a probe of rest mass m and total energy
E the momentum follows from E^2 = p^2 + m^2:

    pz = sqrt(max(0, E^2 - m^2))

The clamp keeps the square root real for E at (or numerically just
below) the rest mass.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import math


class P4:
    """
    Four-momentum (px, py, pz, E) in GeV.

    Parameters
    ----------
    px, py, pz : float
        Momentum components.
    energy : float
        Total energy.
    """

    __slots__ = ("px", "py", "pz", "energy")

    def __init__(self, px, py, pz, energy):
        self.px = float(px)
        self.py = float(py)
        self.pz = float(pz)
        self.energy = float(energy)

    @property
    def p(self):
        return math.sqrt(self.px * self.px + self.py * self.py + self.pz * self.pz)

    def __eq__(self, other):
        if not isinstance(other, P4):
            return NotImplemented
        return (self.px, self.py, self.pz, self.energy) == \
            (other.px, other.py, other.pz, other.energy)

    def __repr__(self):
        return "P4(px={}, py={}, pz={}, E={})".format(
            self.px, self.py, self.pz, self.energy)


def probe_momentum(energy, mass):
    """
    Momentum of a probe of given total energy and rest mass.

    Returns 0 when energy <= mass.
    """
    return math.sqrt(max(0.0, energy * energy - mass * mass))


def probe_p4(energy, mass=0.0):
    """
    Four-momentum of a probe moving along +z with total energy `energy`.

    Massless (or non-positive mass) probes get pz = E.
    """
    pz = energy
    if mass > 0.0:
        pz = probe_momentum(energy, mass)
    return P4(0.0, 0.0, pz, energy)
