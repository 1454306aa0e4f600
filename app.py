"""
xsec - cross-section spline cache service.
Flask application factory.

Serves the REST API for inspecting, evaluating, saving and loading the
spline registry. The registry is created once here (or passed in by the
host) and injected into the API blueprint; nothing reaches for a global.

Usage:
    python app.py              # Development server on http://localhost:5000
    flask run                  # Same, via Flask CLI

Environment:
    XSEC_SPLINE_FILE           # Optional spline library loaded at start-up
"""

__version__ = "0.1.0"

import logging
import os

from flask import Flask

from xsec.registry import SplineRegistry
from xsec.xml_io import XmlParserStatus

log = logging.getLogger(__name__)


def create_registry(spline_file=None):
    """Build the spline registry, optionally pre-populated from a file."""
    registry = SplineRegistry()
    if spline_file:
        status = registry.load_from_xml(spline_file, keep=False)
        if status is not XmlParserStatus.OK:
            log.warning("Start-up spline file %s not loaded: %s",
                        spline_file, status.value)
    return registry


def create_app(registry=None, config=None):
    """
    Application factory for the xsec Flask app.

    Parameters
    ----------
    registry : SplineRegistry, optional
        Registry to serve. Built with create_registry() if omitted.
    config : dict, optional
        Flask config overrides (SPLINE_DIR, SPLINE_FILE, TESTING, ...).
    """
    app = Flask(__name__)
    app.config["SPLINE_DIR"] = os.path.join(app.root_path, "splines")
    app.config["SPLINE_FILE"] = os.environ.get("XSEC_SPLINE_FILE")
    if config:
        app.config.update(config)

    if registry is None:
        registry = create_registry(app.config["SPLINE_FILE"])
    app.extensions["xsec_registry"] = registry

    from api.routes import create_api_blueprint
    api = create_api_blueprint(registry)
    app.register_blueprint(api)

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    app.run(debug=True, host="127.0.0.1", port=5000)
