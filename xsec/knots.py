"""
Knot placement for cross-section splines.

Cross sections are typically zero below an interaction threshold and
rise sharply just above it. Uniform sampling of the full energy range
puts too few knots near the rise, so knots are distributed as:

  - 5 knots linearly spaced in [E_min, E_thr) when the threshold lies
    inside the range,
  - 1 knot exactly at max(E_thr, E_min),
  - the remaining knots up to E_max, with equal ratio (log spacing) or
    equal difference (linear spacing).

If E_thr <= E_min no knots are placed below threshold and the first
knot is E_min.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import logging

import numpy as np

from xsec.constants import MIN_NKNOTS, NKNOTS_BELOW_THRESHOLD

log = logging.getLogger(__name__)


def plan_knots(threshold, e_min, e_max, nknots, use_log):
    """
    Distribute spline knots over [e_min, e_max].

    Parameters
    ----------
    threshold : float
        Interaction threshold energy in GeV.
    e_min, e_max : float
        Energy range in GeV. Must satisfy e_min < e_max.
    nknots : int
        Total number of knots. Values below MIN_NKNOTS are replaced by
        MIN_NKNOTS.
    use_log : bool
        Logarithmic (equal ratio) spacing above threshold if True,
        linear (equal difference) otherwise. Log spacing needs e_min > 0.

    Returns
    -------
    numpy.ndarray
        nknots strictly increasing energies; the first is e_min and the
        last is e_max.

    Raises
    ------
    ValueError
        If e_min >= e_max. This is a caller bug, not a data condition.
    """
    e_min = float(e_min)
    e_max = float(e_max)
    if not e_min < e_max:
        raise ValueError(
            "Invalid spline energy range: E_min = {} must be < E_max = {}".format(
                e_min, e_max))

    nknots = int(nknots)
    if nknots < MIN_NKNOTS:
        log.warning("Requested %d knots; using minimum of %d", nknots, MIN_NKNOTS)
        nknots = MIN_NKNOTS

    threshold = float(threshold)
    if threshold >= e_max:
        log.warning(
            "Threshold %g GeV is not below E_max = %g GeV; "
            "spacing knots over the full range", threshold, e_max)
        threshold = e_min

    # knots < threshold
    nkb = NKNOTS_BELOW_THRESHOLD if threshold > e_min else 0
    nka = nknots - nkb
    if nkb:
        dEb = (threshold - e_min) / nkb
        below = e_min + dEb * np.arange(nkb)
    else:
        below = np.empty(0)

    # knots >= threshold
    E0 = max(threshold, e_min)
    if use_log:
        above = np.geomspace(E0, e_max, nka)
    else:
        above = np.linspace(E0, e_max, nka)
    above[0] = E0
    above[-1] = e_max

    return np.concatenate((below, above))
