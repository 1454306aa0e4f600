"""
Registry-wide spline tuning state.

SplineDefaults holds the knot count, energy range and spacing flag used
for every spline build that does not supply its own acceptable values.
Changing a default only affects splines built afterwards; existing
entries are never touched.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import logging

from xsec.constants import (
    DEFAULT_NKNOTS,
    DEFAULT_EMIN,
    DEFAULT_EMAX,
    DEFAULT_USE_LOG,
    MIN_NKNOTS,
    MIN_OVERRIDE_NKNOTS,
)

log = logging.getLogger(__name__)


class SplineDefaults:
    """
    Registry-wide spline build parameters.

    Parameters
    ----------
    nknots : int, optional
        Number of knots per spline. Floored at MIN_NKNOTS (10).
    emin : float, optional
        Lower edge of the energy range in GeV. Non-positive values are
        ignored and the built-in default is kept.
    emax : float, optional
        Upper edge of the energy range in GeV. Non-positive values are
        ignored and the built-in default is kept.
    use_log : bool, optional
        Space knots above threshold logarithmically (True) or linearly.
    """

    def __init__(self, nknots=DEFAULT_NKNOTS, emin=DEFAULT_EMIN,
                 emax=DEFAULT_EMAX, use_log=DEFAULT_USE_LOG):
        self.nknots = DEFAULT_NKNOTS
        self.emin = DEFAULT_EMIN
        self.emax = DEFAULT_EMAX
        self.use_log = bool(use_log)
        self.set_nknots(nknots)
        self.set_min_e(emin)
        self.set_max_e(emax)

    def set_nknots(self, nknots):
        """Set the knot count, silently floored at MIN_NKNOTS."""
        self.nknots = max(MIN_NKNOTS, int(nknots))

    def set_min_e(self, emin):
        """Set the minimum energy; ignored unless positive."""
        if emin is not None and emin > 0:
            self.emin = float(emin)

    def set_max_e(self, emax):
        """Set the maximum energy; ignored unless positive."""
        if emax is not None and emax > 0:
            self.emax = float(emax)

    def set_log_e(self, on):
        self.use_log = bool(on)

    def resolve(self, nknots=None, emin=None, emax=None):
        """
        Resolve per-build overrides against these defaults.

        An override that is missing or not acceptable (non-positive
        energy, knot count <= 2) is replaced by the registry value.

        Returns
        -------
        tuple
            (nknots, emin, emax) to use for the build.
        """
        if nknots is None or nknots <= MIN_OVERRIDE_NKNOTS:
            nknots = self.nknots
        if emin is None or emin <= 0:
            emin = self.emin
        if emax is None or emax <= 0:
            emax = self.emax
        return int(nknots), float(emin), float(emax)

    def copy(self):
        return SplineDefaults(self.nknots, self.emin, self.emax, self.use_log)

    def to_dict(self):
        """Serialize the tuning state for API responses."""
        return {
            "nknots": self.nknots,
            "emin": self.emin,
            "emax": self.emax,
            "use_log": self.use_log,
        }
