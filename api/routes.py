"""
Flask API routes for the cross-section spline registry.

Endpoints:
  GET  /api/splines            - registry options and spline keys
  GET  /api/splines/knots      - knots of one spline (?key=...)
  GET  /api/splines/evaluate   - spline value at an energy (?key=...&E=...)
  POST /api/splines/save       - write the registry to an XML file
  POST /api/splines/load       - load an XML spline file into the registry

Save/load filenames are plain names resolved inside SPLINE_DIR.
"""

import logging
import math
import os
import re

from flask import Blueprint, current_app, jsonify, request

from xsec.xml_io import XmlParserStatus

log = logging.getLogger(__name__)

# Sanitize spline file names: no directories, .xml only
SPLINE_FILE_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+\.xml$")


def _spline_path(filename):
    """Resolve a user-supplied file name inside SPLINE_DIR, or None if invalid."""
    if not isinstance(filename, str) or not SPLINE_FILE_PATTERN.match(filename):
        return None
    if filename.startswith("."):
        return None
    return os.path.join(current_app.config["SPLINE_DIR"], filename)


def create_api_blueprint(registry):
    """
    Build the /api blueprint serving `registry`.

    Parameters
    ----------
    registry : SplineRegistry
        The registry every endpoint reads from and writes to.
    """
    api = Blueprint("api", __name__, url_prefix="/api")

    @api.route("/splines", methods=["GET"])
    def list_splines():
        """Return registry options and all keys, sorted."""
        return jsonify({
            "options": registry.defaults.to_dict(),
            "keys": sorted(registry.keys()),
        })

    @api.route("/splines/knots", methods=["GET"])
    def spline_knots():
        """Return the knots of a single spline."""
        key = request.args.get("key", "")
        spline = registry.get(key)
        if spline is None:
            return jsonify({"error": "Spline not found", "key": key}), 404
        data = spline.to_dict()
        data["key"] = key
        data["provenance"] = registry.provenance(key).value
        return jsonify(data)

    @api.route("/splines/evaluate", methods=["GET"])
    def evaluate_spline():
        """
        Evaluate a spline at one energy.

        Query: key (spline key), E (energy in GeV).
        Response: {"key": ..., "E": ..., "xsec": ...}
        """
        key = request.args.get("key", "")
        try:
            energy = float(request.args.get("E", ""))
        except ValueError:
            return jsonify({"error": "E must be a number"}), 400
        if not math.isfinite(energy):
            return jsonify({"error": "E must be finite"}), 400

        spline = registry.get(key)
        if spline is None:
            return jsonify({"error": "Spline not found", "key": key}), 404
        return jsonify({"key": key, "E": energy, "xsec": spline.evaluate(energy)})

    @api.route("/splines/save", methods=["POST"])
    def save_splines():
        """
        Write the registry to SPLINE_DIR/<filename>.

        Request JSON: {"filename": "splines.xml", "save_init": true}
        """
        body = request.get_json(silent=True)
        if not body or not isinstance(body, dict):
            return jsonify({"error": "Request body must be JSON"}), 400
        path = _spline_path(body.get("filename"))
        if path is None:
            return jsonify({"error": "Invalid spline file name"}), 400
        save_init = bool(body.get("save_init", True))

        os.makedirs(current_app.config["SPLINE_DIR"], exist_ok=True)
        written = registry.save_as_xml(path, save_init=save_init)
        if written is None:
            return jsonify({"error": "Could not write spline file"}), 500
        return jsonify({"filename": body["filename"], "save_init": save_init,
                        "written": written})

    @api.route("/splines/load", methods=["POST"])
    def load_splines():
        """
        Load SPLINE_DIR/<filename> into the registry.

        Request JSON: {"filename": "splines.xml", "keep": false}
        """
        body = request.get_json(silent=True)
        if not body or not isinstance(body, dict):
            return jsonify({"error": "Request body must be JSON"}), 400
        path = _spline_path(body.get("filename"))
        if path is None:
            return jsonify({"error": "Invalid spline file name"}), 400
        keep = bool(body.get("keep", False))

        status = registry.load_from_xml(path, keep=keep)
        if status is XmlParserStatus.NOT_FOUND:
            return jsonify({"status": status.value}), 404
        if status is not XmlParserStatus.OK:
            log.warning("Spline file %s rejected: %s", path, status.value)
            return jsonify({"status": status.value}), 400
        return jsonify({"status": status.value, "keys": sorted(registry.keys())})

    return api
