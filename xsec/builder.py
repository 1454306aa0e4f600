"""
Cross-section spline builder.

Runs a ResponseAlgorithm once per planned knot energy and turns the
(E, xsec) samples into a Spline. The builder never inserts anything in
a registry; SplineRegistry.get_or_create does that.

For each knot energy E the probe four-momentum is set to (0, 0, pz, E)
with pz = E for massless probes and pz = sqrt(max(0, E^2 - m^2))
otherwise. Cross-section values are passed to the spline unchanged,
including negative or non-finite ones.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import logging

import numpy as np

from xsec.config import SplineDefaults
from xsec.constants import XSEC_LOG_SCALE
from xsec.kinematics import probe_p4
from xsec.knots import plan_knots
from xsec.spline import Spline

log = logging.getLogger(__name__)


def build_spline(algorithm, interaction, defaults=None, nknots=None,
                 e_min=None, e_max=None):
    """
    Tabulate algorithm's cross section for interaction and build a Spline.

    Parameters
    ----------
    algorithm : ResponseAlgorithm
        Cross-section algorithm; integral() is called once per knot.
    interaction : ProcessDescription
        Process to tabulate. Its probe four-momentum is overwritten.
    defaults : SplineDefaults, optional
        Registry tuning used for missing or unacceptable overrides.
    nknots : int, optional
        Knot count override; ignored if <= 2.
    e_min, e_max : float, optional
        Energy range overrides in GeV; ignored if non-positive.

    Returns
    -------
    Spline

    Raises
    ------
    ValueError
        If the resolved range has e_min >= e_max.
    """
    if defaults is None:
        defaults = SplineDefaults()
    nknots, e_min, e_max = defaults.resolve(nknots, e_min, e_max)

    log.info("Creating cross section spline using the algorithm: %s", algorithm)

    e_thr = interaction.threshold()
    log.info("Energy threshold for current interaction = %g GeV", e_thr)

    energies = plan_knots(e_thr, e_min, e_max, nknots, defaults.use_log)

    mass = interaction.probe_mass()
    xsec = np.empty(energies.size)
    for i, E in enumerate(energies):
        interaction.set_probe_p4(probe_p4(E, mass))
        xsec[i] = algorithm.integral(interaction)
        log.info("xsec(E = %g) = %g x 1E-38 cm^2", E, XSEC_LOG_SCALE * xsec[i])

    return Spline(energies, xsec)
