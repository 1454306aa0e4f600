"""
xsec: cross-section spline cache.

Tabulates expensive cross-section calculations as splines, keeps them in
a keyed registry so each (algorithm, interaction) pair is computed at
most once, and reads/writes spline libraries as XML.

Public interface
----------------
* **SplineRegistry** - keyed spline cache; get_or_create() is the entry
  point for other subsystems.
* **get_registry / reset_registry** - lazily created shared registry.
* **SplineDefaults** - registry-wide knot count, energy range, spacing.
* **Spline** - natural cubic interpolant over (E, xsec) knots.
* **plan_knots / build_spline** - knot placement and tabulation.
* **ResponseAlgorithm / ProcessDescription / Interaction** - interfaces
  the cache consumes.
* **save_as_xml / load_from_xml / XmlParserStatus** - persistence.
"""

from xsec.algorithm import ResponseAlgorithm
from xsec.builder import build_spline
from xsec.config import SplineDefaults
from xsec.entry import Provenance, SplineEntry
from xsec.interaction import Interaction, ProcessDescription
from xsec.kinematics import P4, probe_p4
from xsec.knots import plan_knots
from xsec.registry import SplineRegistry, get_registry, reset_registry
from xsec.spline import Spline
from xsec.xml_io import XmlParserStatus, load_from_xml, save_as_xml

__all__ = [
    "ResponseAlgorithm",
    "ProcessDescription",
    "Interaction",
    "P4",
    "probe_p4",
    "Spline",
    "SplineDefaults",
    "plan_knots",
    "build_spline",
    "Provenance",
    "SplineEntry",
    "SplineRegistry",
    "get_registry",
    "reset_registry",
    "XmlParserStatus",
    "save_as_xml",
    "load_from_xml",
]
