"""
Constants for cross-section spline tabulation.

Registry defaults, knot placement parameters, XML file-format tags and
the unit conversion used when logging computed cross sections.

IMPORTANT: No unicode characters allowed in this file (spline files are
written as ISO-8859-1).
"""

# Registry-wide defaults
DEFAULT_NKNOTS = 100
DEFAULT_EMIN = 0.01    # GeV
DEFAULT_EMAX = 100.0   # GeV
DEFAULT_USE_LOG = True

# Minimum acceptable number of knots per spline
MIN_NKNOTS = 10

# Knots placed linearly below an interaction threshold that lies inside
# the requested energy range
NKNOTS_BELOW_THRESHOLD = 5

# Per-call knot overrides at or below this count are not acceptable
MIN_OVERRIDE_NKNOTS = 2

# XML spline list format
XML_ENCODING = "ISO-8859-1"
XML_ROOT_TAG = "genie_xsec_spline_list"
XML_FORMAT_VERSION = "2.00"
XML_SPLINE_TAG = "spline"
XML_KNOT_TAG = "knot"
XML_X_TAG = "E"
XML_Y_TAG = "xsec"

# Natural units -> cm^2: 1 GeV^-2 = 0.389379 mb = 0.389379e-27 cm^2
GEV_M2_TO_CM2 = 0.389379372e-27

# Conversion for log messages quoted in units of 1E-38 cm^2
XSEC_LOG_SCALE = 1.0e38 * GEV_M2_TO_CM2
