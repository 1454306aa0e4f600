"""
Tests for SplineRegistry.

Verifies:
  1. Key derivation, including the empty key for missing inputs.
  2. At-most-once computation per key, also under concurrent callers.
  3. Lookup, enumeration, provenance and clearing.
  4. Registry-wide defaults and their effect on future builds only.
"""

import threading

import numpy as np
import pytest

from xsec.constants import MIN_NKNOTS
from xsec.entry import Provenance
from xsec.registry import SplineRegistry, get_registry, reset_registry

from conftest import CountingAlgorithm, DivergentAlgorithm


class TestBuildKey:

    def test_key_format(self, algorithm, qel_interaction):
        key = SplineRegistry.build_key(algorithm, qel_interaction)
        assert key == "CountingXSec/Default/nu:14;tgt:2112;proc:Weak[CC],QES;"

    def test_config_is_part_of_key(self, qel_interaction):
        a = CountingAlgorithm(config="Default")
        b = CountingAlgorithm(config="Tune2")
        assert SplineRegistry.build_key(a, qel_interaction) != \
            SplineRegistry.build_key(b, qel_interaction)

    def test_missing_inputs_give_empty_key(self, registry, algorithm, qel_interaction):
        assert SplineRegistry.build_key(None, qel_interaction) == ""
        assert SplineRegistry.build_key(algorithm, None) == ""
        assert not registry.exists("")
        assert registry.get_or_create(None, qel_interaction) is None
        assert registry.get_or_create(algorithm, None) is None
        assert len(registry) == 0


class TestGetOrCreate:

    def test_computed_at_most_once(self, registry, algorithm, qel_interaction):
        first = registry.get_or_create(algorithm, qel_interaction)
        calls = algorithm.calls
        second = registry.get_or_create(algorithm, qel_interaction)
        assert calls == registry.nknots
        assert algorithm.calls == calls
        assert second is first

    def test_hit_ignores_overrides(self, registry, algorithm, qel_interaction):
        first = registry.get_or_create(algorithm, qel_interaction, nknots=20)
        second = registry.get_or_create(algorithm, qel_interaction, nknots=50)
        assert second is first
        assert second.nknots == 20

    def test_distinct_interactions_get_distinct_splines(
            self, registry, algorithm, qel_interaction, nc_interaction):
        registry.get_or_create(algorithm, qel_interaction, nknots=10)
        registry.get_or_create(algorithm, nc_interaction, nknots=10)
        assert len(registry) == 2
        assert algorithm.calls == 20

    def test_concurrent_misses_build_once(self, registry, qel_interaction):
        algorithm = CountingAlgorithm(delay=0.002)
        results = []

        def worker():
            results.append(registry.get_or_create(algorithm, qel_interaction, nknots=10))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert algorithm.calls == 10
        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_failed_build_leaves_no_entry(self, registry, algorithm, qel_interaction):
        with pytest.raises(ValueError):
            registry.get_or_create(algorithm, qel_interaction, e_min=500.0)
        assert len(registry) == 0
        spline = registry.get_or_create(algorithm, qel_interaction, nknots=10)
        assert spline is not None

    def test_non_finite_values_cached(self, registry, nc_interaction):
        algorithm = DivergentAlgorithm(cutoff=50.0)
        spline = registry.get_or_create(algorithm, nc_interaction, nknots=10)
        assert spline is not None
        assert registry.exists_for(algorithm, nc_interaction)
        assert np.isnan(spline.y[-1])
        assert registry.get_or_create(algorithm, nc_interaction) is spline
        assert algorithm.calls == 10

    def test_rebuilt_after_clear(self, registry, algorithm, qel_interaction):
        registry.get_or_create(algorithm, qel_interaction, nknots=10)
        registry.clear()
        assert len(registry) == 0
        registry.get_or_create(algorithm, qel_interaction, nknots=10)
        assert algorithm.calls == 20


class TestLookup:

    def test_exists_and_get(self, registry, algorithm, qel_interaction):
        assert not registry.exists_for(algorithm, qel_interaction)
        assert registry.get_for(algorithm, qel_interaction) is None
        spline = registry.get_or_create(algorithm, qel_interaction, nknots=10)
        key = registry.build_key(algorithm, qel_interaction)
        assert registry.exists(key)
        assert key in registry
        assert registry.exists_for(algorithm, qel_interaction)
        assert registry.get(key) is spline
        assert registry.get_for(algorithm, qel_interaction) is spline

    def test_get_missing_is_none(self, registry):
        assert registry.get("no/such/key") is None
        assert registry.provenance("no/such/key") is None

    def test_keys_and_provenance(self, registry, algorithm, qel_interaction):
        registry.get_or_create(algorithm, qel_interaction, nknots=10)
        key = registry.build_key(algorithm, qel_interaction)
        assert registry.keys() == {key}
        assert registry.provenance(key) is Provenance.COMPUTED
        [(k, entry)] = registry.entries()
        assert k == key
        assert not entry.is_loaded

    def test_describe_lists_keys(self, registry, algorithm, qel_interaction):
        registry.get_or_create(algorithm, qel_interaction, nknots=10)
        text = str(registry)
        assert "Spline NKnots.............100" in text
        assert registry.build_key(algorithm, qel_interaction) in text


class TestDefaults:

    def test_builtin_defaults(self, registry):
        assert registry.nknots == 100
        assert registry.e_min == 0.01
        assert registry.e_max == 100.0
        assert registry.use_log_e is True

    def test_nknots_floor(self, registry):
        registry.set_nknots(4)
        assert registry.nknots == MIN_NKNOTS

    def test_non_positive_energies_ignored(self, registry):
        registry.set_defaults(e_min=0.0, e_max=-3.0)
        assert registry.e_min == 0.01
        assert registry.e_max == 100.0
        registry.set_min_e(0.5)
        registry.set_max_e(50.0)
        assert (registry.e_min, registry.e_max) == (0.5, 50.0)

    def test_defaults_affect_future_builds_only(
            self, registry, algorithm, qel_interaction, nc_interaction):
        first = registry.get_or_create(algorithm, qel_interaction)
        registry.set_defaults(nknots=12, e_min=1.0, e_max=10.0, use_log=False)
        second = registry.get_or_create(algorithm, nc_interaction)
        assert first.nknots == 100
        assert first.xmax == 100.0
        assert second.nknots == 12
        assert (second.xmin, second.xmax) == (1.0, 10.0)


class TestSharedRegistry:

    def test_lazily_created_once(self):
        reset_registry()
        try:
            a = get_registry()
            assert get_registry() is a
            reset_registry()
            assert get_registry() is not a
        finally:
            reset_registry()
