"""
Tests for spline knot placement.

Verifies:
  1. Threshold below the range: no below-threshold knots, first knot E_min.
  2. Threshold inside the range: 5 knots in [E_min, E_thr), one knot at
     E_thr exactly.
  3. Log spacing has constant ratios above threshold; linear spacing has
     constant differences.
  4. Knot count floor and the E_min < E_max precondition.
"""

import numpy as np
import pytest

from xsec.knots import plan_knots
from xsec.constants import MIN_NKNOTS, NKNOTS_BELOW_THRESHOLD


class TestThresholdBelowRange:

    @pytest.mark.parametrize("use_log", [True, False])
    def test_no_below_threshold_knots(self, use_log):
        E = plan_knots(0.001, 0.01, 100.0, 50, use_log)
        assert len(E) == 50
        assert E[0] == 0.01
        assert E[-1] == 100.0
        assert np.all(E >= 0.01)

    def test_threshold_equal_to_emin(self):
        E = plan_knots(0.5, 0.5, 10.0, 20, True)
        assert E[0] == 0.5
        assert np.sum(E < 0.5) == 0

    def test_zero_threshold(self):
        E = plan_knots(0.0, 0.01, 100.0, 30, True)
        assert E[0] == 0.01
        assert len(E) == 30


class TestThresholdInsideRange:

    @pytest.mark.parametrize("use_log", [True, False])
    def test_five_knots_below_and_one_on_threshold(self, use_log):
        thr = 0.11
        E = plan_knots(thr, 0.01, 100.0, 100, use_log)
        assert len(E) == 100
        below = E[E < thr]
        assert len(below) == NKNOTS_BELOW_THRESHOLD
        assert np.all(below >= 0.01)
        assert E[0] == 0.01
        assert np.sum(E == thr) == 1
        assert E[NKNOTS_BELOW_THRESHOLD] == thr

    def test_below_knots_linear(self):
        E = plan_knots(1.0, 0.5, 10.0, 20, True)
        below = E[:NKNOTS_BELOW_THRESHOLD]
        np.testing.assert_allclose(below, [0.5, 0.6, 0.7, 0.8, 0.9])

    @pytest.mark.parametrize("use_log", [True, False])
    def test_strictly_increasing(self, use_log):
        E = plan_knots(2.3, 0.01, 100.0, 40, use_log)
        assert np.all(np.diff(E) > 0)
        assert E[-1] == 100.0


class TestSpacing:

    def test_log_ratios_constant(self):
        thr = 0.2
        E = plan_knots(thr, 0.01, 100.0, 60, True)
        above = E[E >= thr]
        ratios = above[1:] / above[:-1]
        np.testing.assert_allclose(ratios, ratios[0], rtol=1e-9)

    def test_linear_differences_constant(self):
        thr = 0.2
        E = plan_knots(thr, 0.01, 100.0, 60, False)
        above = E[E >= thr]
        diffs = np.diff(above)
        np.testing.assert_allclose(diffs, diffs[0], rtol=1e-9)

    def test_log_spacing_without_threshold(self):
        E = plan_knots(0.0, 0.1, 1000.0, 5 * MIN_NKNOTS, True)
        np.testing.assert_allclose(E[1:] / E[:-1], 10.0 ** (4.0 / 49), rtol=1e-9)


class TestPreconditions:

    def test_knot_floor(self):
        E = plan_knots(0.0, 0.01, 100.0, 3, True)
        assert len(E) == MIN_NKNOTS

    @pytest.mark.parametrize("e_min,e_max", [(10.0, 1.0), (5.0, 5.0)])
    def test_empty_range_is_fatal(self, e_min, e_max):
        with pytest.raises(ValueError):
            plan_knots(0.0, e_min, e_max, 50, True)

    def test_threshold_above_range(self):
        """No knot can straddle a threshold above E_max: plain spacing."""
        E = plan_knots(500.0, 0.01, 100.0, 20, False)
        assert len(E) == 20
        assert E[0] == 0.01
        assert E[-1] == 100.0
        np.testing.assert_allclose(np.diff(E), np.diff(E)[0])
