"""
Spline registry entries and their provenance.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

from enum import Enum


class Provenance(Enum):
    """Where a registry entry came from."""

    COMPUTED = "computed"   # built in this session
    LOADED = "loaded"       # read from a spline file


class SplineEntry:
    """
    Immutable registry entry: a Spline and its provenance.

    Parameters
    ----------
    spline : Spline
        The tabulated cross section.
    provenance : Provenance
        COMPUTED or LOADED.
    """

    __slots__ = ("_spline", "_provenance")

    def __init__(self, spline, provenance):
        self._spline = spline
        self._provenance = Provenance(provenance)

    @property
    def spline(self):
        return self._spline

    @property
    def provenance(self):
        return self._provenance

    @property
    def is_loaded(self):
        return self._provenance is Provenance.LOADED

    def __repr__(self):
        return "SplineEntry({!r}, {})".format(self._spline, self._provenance.value)
