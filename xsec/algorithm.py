"""
Cross-section algorithm interface.

A ResponseAlgorithm is the expensive computation the spline cache
exists to avoid repeating. It is identified by a name and a
configuration tag; both become part of the spline key, so two
configurations of the same model never share a spline.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

from abc import ABC, abstractmethod


class ResponseAlgorithm(ABC):
    """
    Abstract cross-section algorithm.

    Class Attributes
    ----------------
    name : str
        Algorithm identifier (e.g. "LlewellynSmithQELCCPXSec").
    config : str
        Configuration (parameter set) tag (e.g. "Default").
    """

    name = ""
    config = "Default"

    @abstractmethod
    def integral(self, interaction):
        """
        Integrated cross section for the interaction at its current
        probe four-momentum.

        Parameters
        ----------
        interaction : ProcessDescription
            Process with the probe four-momentum already set.

        Returns
        -------
        float
            Cross section in natural units (GeV^-2). Expected to be
            non-negative; not checked by the cache.
        """

    def __str__(self):
        return "{}/{}".format(self.name, self.config)
