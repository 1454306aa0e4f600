"""
SplineRegistry: keyed cache of cross-section splines.

Each entry is keyed by

    "<algorithm name>/<algorithm config>/<interaction string>"

and holds a Spline plus its provenance (computed in this session or
loaded from a spline file). Other subsystems only ever call
get_or_create(); they never construct or mutate entries themselves.

For a fixed key the expensive algorithm runs at most once per registry
lifetime (until clear() or a non-keeping load). Concurrent misses on
the same key wait on the single in-flight build.

The host application normally creates one registry and injects it where
needed. get_registry() provides a lazily created shared instance for
code that cannot be handed one.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import logging
import threading
from concurrent.futures import Future

from xsec.builder import build_spline
from xsec.config import SplineDefaults
from xsec.entry import Provenance, SplineEntry

log = logging.getLogger(__name__)

KEY_SEPARATOR = "/"


class SplineRegistry:
    """
    Central lookup container for cross-section splines.

    Parameters
    ----------
    defaults : SplineDefaults, optional
        Registry-wide build parameters. A fresh SplineDefaults (100
        knots, 0.01-100 GeV, log spacing) is used if omitted.
    """

    def __init__(self, defaults=None):
        self.defaults = defaults if defaults is not None else SplineDefaults()
        self._entries = {}
        self._pending = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Tuning
    # ------------------------------------------------------------------

    def set_defaults(self, nknots=None, e_min=None, e_max=None, use_log=None):
        """
        Update registry-wide tuning. Arguments left as None are unchanged.

        nknots is floored at 10; non-positive energies are ignored.
        Existing splines are not affected.
        """
        with self._lock:
            if nknots is not None:
                self.defaults.set_nknots(nknots)
            self.defaults.set_min_e(e_min)
            self.defaults.set_max_e(e_max)
            if use_log is not None:
                self.defaults.set_log_e(use_log)

    def set_nknots(self, nknots):
        self.set_defaults(nknots=nknots)

    def set_min_e(self, e_min):
        self.set_defaults(e_min=e_min)

    def set_max_e(self, e_max):
        self.set_defaults(e_max=e_max)

    def set_log_e(self, on):
        self.set_defaults(use_log=on)

    @property
    def use_log_e(self):
        return self.defaults.use_log

    @property
    def nknots(self):
        return self.defaults.nknots

    @property
    def e_min(self):
        return self.defaults.emin

    @property
    def e_max(self):
        return self.defaults.emax

    # ------------------------------------------------------------------
    # Keys and lookup
    # ------------------------------------------------------------------

    @staticmethod
    def build_key(algorithm, interaction):
        """
        Derive the spline key for an (algorithm, interaction) pair.

        Returns
        -------
        str
            The key, or "" if either argument is None. The empty key
            never matches an entry.
        """
        if algorithm is None:
            log.warning("Null cross section algorithm - returning empty spline key")
            return ""
        if interaction is None:
            log.warning("Null interaction - returning empty spline key")
            return ""
        return KEY_SEPARATOR.join(
            (algorithm.name, algorithm.config, interaction.as_string()))

    def exists(self, key):
        """Return True if a spline is stored under key."""
        log.debug("Checking for spline with key = %s", key)
        with self._lock:
            found = bool(key) and key in self._entries
        log.debug("Spline found?....%s", "Y" if found else "N")
        return found

    def exists_for(self, algorithm, interaction):
        return self.exists(self.build_key(algorithm, interaction))

    def get(self, key):
        """
        Look up a spline by key.

        Returns
        -------
        Spline or None
            The stored spline, or None if no entry exists.
        """
        with self._lock:
            entry = self._entries.get(key) if key else None
        if entry is None:
            log.warning("Couldn't find spline for key = %s", key)
            return None
        return entry.spline

    def get_for(self, algorithm, interaction):
        return self.get(self.build_key(algorithm, interaction))

    def provenance(self, key):
        """Return the Provenance of the entry under key, or None."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.provenance if entry is not None else None

    def keys(self):
        """Return the set of keys currently held."""
        with self._lock:
            return set(self._entries)

    def entries(self):
        """Return (key, SplineEntry) pairs sorted by key."""
        with self._lock:
            return sorted(self._entries.items())

    def clear(self):
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __contains__(self, key):
        return self.exists(key)

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    def get_or_create(self, algorithm, interaction, nknots=None, e_min=None,
                      e_max=None):
        """
        Return the spline for (algorithm, interaction), building it on miss.

        On a hit the stored spline is returned untouched and the
        overrides are ignored. On a miss the spline is built with
        build_spline() and stored as COMPUTED.

        Parameters
        ----------
        algorithm : ResponseAlgorithm
        interaction : ProcessDescription
        nknots : int, optional
            Knot count for this build; <= 2 means registry default.
        e_min, e_max : float, optional
            Energy range for this build; non-positive means default.

        Returns
        -------
        Spline or None
            None only when the key cannot be derived.

        Raises
        ------
        ValueError
            If the resolved energy range is empty (e_min >= e_max).
        """
        key = self.build_key(algorithm, interaction)
        if not key:
            return None

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                return entry.spline
            pending = self._pending.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._pending[key] = pending
                defaults = self.defaults.copy()

        if not owner:
            log.debug("Waiting for in-flight build of spline %s", key)
            return pending.result()

        try:
            spline = build_spline(algorithm, interaction, defaults,
                                  nknots=nknots, e_min=e_min, e_max=e_max)
        except BaseException as e:
            with self._lock:
                del self._pending[key]
            pending.set_exception(e)
            raise

        with self._lock:
            self._entries[key] = SplineEntry(spline, Provenance.COMPUTED)
            del self._pending[key]
        pending.set_result(spline)
        return spline

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def insert_loaded(self, splines, keep, use_log):
        """
        Commit splines read from a file.

        Parameters
        ----------
        splines : list of (str, Spline)
            Parsed entries in document order.
        keep : bool
            If False the registry is cleared first. If True, keys
            already present keep their existing entry.
        use_log : bool
            Spacing flag declared by the file; becomes the registry
            default.

        Returns
        -------
        int
            Number of entries inserted.
        """
        inserted = 0
        with self._lock:
            if not keep:
                self._entries.clear()
            self.defaults.set_log_e(use_log)
            for key, spline in splines:
                if key in self._entries:
                    log.warning("Spline %s already loaded; keeping existing entry", key)
                    continue
                self._entries[key] = SplineEntry(spline, Provenance.LOADED)
                inserted += 1
        return inserted

    def save_as_xml(self, filename, save_init=True):
        """
        Write the registry to an XML spline file. See xml_io.save_as_xml.

        Returns the number of splines written, or None on failure.
        """
        from xsec.xml_io import save_as_xml
        return save_as_xml(self, filename, save_init)

    def load_from_xml(self, filename, keep=False):
        """Load an XML spline file. See xml_io.load_from_xml."""
        from xsec.xml_io import load_from_xml
        return load_from_xml(self, filename, keep)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def describe(self):
        """Human-readable summary of options and available splines."""
        lines = [
            "",
            " ******************* SplineRegistry *************************",
            " [-] Options:",
            "  |",
            "  |-----o  UseLogE..................." + str(int(self.use_log_e)),
            "  |-----o  Spline Emin..............." + str(self.e_min),
            "  |-----o  Spline Emax..............." + str(self.e_max),
            "  |-----o  Spline NKnots............." + str(self.nknots),
            "  |",
            " [-] Available Splines:",
            "  |",
        ]
        for key, entry in self.entries():
            lines.append("  |-----o  {} [{}]".format(key, entry.provenance.value))
        return "\n".join(lines) + "\n"

    __str__ = describe


_shared = None
_shared_lock = threading.Lock()


def get_registry():
    """Return the shared process-wide registry, creating it on first use."""
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = SplineRegistry()
        return _shared


def reset_registry():
    """Discard the shared registry; the next get_registry() starts empty."""
    global _shared
    with _shared_lock:
        _shared = None
