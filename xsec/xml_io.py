"""
XML persistence for the spline registry.

File layout (ISO-8859-1):

    <?xml version="1.0" encoding="ISO-8859-1"?>
    <!-- generated by xsec.xml_io.save_as_xml() -->
    <genie_xsec_spline_list version="2.00" uselog="1">
      <spline name="KEY" nknots="N">
        <knot> <E> 0.01 </E> <xsec> 1.2e-12 </xsec> </knot>
        ...
      </spline>
      ...
    </genie_xsec_spline_list>

Splines are written in key order, knots in ascending E. Values use the
shortest repr that round-trips, so save -> load reproduces every knot
exactly. Non-finite values are written as nan, inf or -inf and
read back unchanged. The root tag is the one GENIE spline libraries use,
so those files load as they are.

Loading is forward-only: the file is fed in chunks to an
ElementTree XMLPullParser and the start/end events drive a small state
machine. Finished knots and splines are cleared from the partial tree,
so memory stays flat for large spline libraries. Nothing is committed
to the registry unless the whole document parses.

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from enum import Enum
from xml.parsers import expat
from xml.sax.saxutils import quoteattr

from xsec.constants import (
    XML_ENCODING,
    XML_ROOT_TAG,
    XML_FORMAT_VERSION,
    XML_SPLINE_TAG,
    XML_KNOT_TAG,
    XML_X_TAG,
    XML_Y_TAG,
)
from xsec.spline import Spline

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1 << 16

_NO_ELEMENTS = expat.errors.codes[expat.errors.XML_ERROR_NO_ELEMENTS]


class XmlParserStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    NOT_PARSED = "not_parsed"
    EMPTY_DOCUMENT = "empty_document"
    INVALID_ROOT = "invalid_root"


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _write_spline(f, key, spline):
    f.write("  <{} name={} nknots=\"{}\">\n".format(
        XML_SPLINE_TAG, quoteattr(key), spline.nknots))
    for x, y in spline.knots():
        f.write("    <{k}> <{X}> {x!r} </{X}> <{Y}> {y!r} </{Y}> </{k}>\n".format(
            k=XML_KNOT_TAG, X=XML_X_TAG, Y=XML_Y_TAG, x=float(x), y=float(y)))
    f.write("  </{}>\n\n".format(XML_SPLINE_TAG))


def _write_document(f, registry, save_init):
    f.write("<?xml version=\"1.0\" encoding=\"{}\"?>\n\n".format(XML_ENCODING))
    f.write("<!-- generated by xsec.xml_io.save_as_xml() -->\n\n")
    f.write("<{} version=\"{}\" uselog=\"{}\">\n\n".format(
        XML_ROOT_TAG, XML_FORMAT_VERSION, 1 if registry.use_log_e else 0))

    written = 0
    for key, entry in registry.entries():
        # Splines from the initially loaded set are only re-exported on request
        if entry.is_loaded and not save_init:
            continue
        _write_spline(f, key, entry.spline)
        written += 1

    f.write("</{}>\n".format(XML_ROOT_TAG))
    return written


def save_as_xml(registry, filename, save_init=True):
    """
    Write the registry's splines to an XML file.

    The file is written to a temporary sibling and moved into place, so
    an existing file is never left half-written. I/O failures are
    logged and swallowed: export is best-effort.

    Parameters
    ----------
    registry : SplineRegistry
    filename : str
        Destination path.
    save_init : bool, optional
        Also write entries that were loaded from a file (default True).
        False writes only splines computed in this session.

    Returns
    -------
    int or None
        Number of splines written, or None if the file could not be
        written.
    """
    log.info("Saving spline list as XML in file: %s", filename)

    out_dir = os.path.dirname(os.path.abspath(filename))
    try:
        fd, tmp_path = tempfile.mkstemp(dir=out_dir, prefix=".tmp_", suffix=".xml")
    except OSError as e:
        log.error("Couldn't create file = %s (%s)", filename, e)
        return None

    try:
        with os.fdopen(fd, "w", encoding=XML_ENCODING,
                       errors="xmlcharrefreplace") as f:
            written = _write_document(f, registry, save_init)
        os.replace(tmp_path, filename)
    except OSError as e:
        log.error("Couldn't write file = %s (%s)", filename, e)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        return None

    log.info("Wrote %d splines to %s", written, filename)
    return written


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

class _State(Enum):
    AWAITING_ROOT = 0
    IN_LIST = 1
    IN_SPLINE = 2
    IN_KNOT = 3
    AWAITING_X = 4
    AWAITING_Y = 5
    DONE = 6


class _MalformedSpline(Exception):
    pass


def _parse_float(text, what):
    try:
        return float((text or "").strip())
    except ValueError:
        raise _MalformedSpline("non-numeric {} value '{}'".format(what, text))


class SplineListReader:
    """
    Event-driven reader for the XML spline list.

    Feed it (event, element) pairs from an XMLPullParser. Parsed splines
    accumulate in `splines` as (name, Spline) pairs in document order.

    Attributes
    ----------
    state : _State
        Current position in the document.
    version : str
        Format version declared by the root element.
    use_log : bool
        Spacing flag declared by the root element.
    splines : list of (str, Spline)
        Completed spline entries.
    """

    def __init__(self):
        self.state = _State.AWAITING_ROOT
        self.version = ""
        self.use_log = False
        self.splines = []
        self._root = None
        self._name = ""
        self._declared = None
        self._E = []
        self._xsec = []
        self._x = None
        self._y = None

    @property
    def seen_root(self):
        return self._root is not None

    def consume(self, events):
        """
        Process pending parser events.

        Returns
        -------
        XmlParserStatus or None
            INVALID_ROOT or NOT_PARSED on a fatal problem, else None.
        """
        for event, elem in events:
            try:
                if event == "start":
                    status = self._start(elem)
                else:
                    status = self._end(elem)
            except _MalformedSpline as e:
                log.error("Malformed spline '%s': %s", self._name, e)
                return XmlParserStatus.NOT_PARSED
            if status is not None:
                return status
        return None

    def _start(self, elem):
        tag = elem.tag
        if self.state is _State.AWAITING_ROOT:
            log.debug("Root element = %s", tag)
            if tag != XML_ROOT_TAG:
                log.error("XML doc. has invalid root element <%s>", tag)
                return XmlParserStatus.INVALID_ROOT
            self._root = elem
            self.version = (elem.get("version") or "").strip()
            self.use_log = (elem.get("uselog") or "").strip() == "1"
            log.debug("Vrs   = %s", self.version)
            log.debug("InLog = %s", self.use_log)
            self.state = _State.IN_LIST

        elif self.state is _State.IN_LIST and tag == XML_SPLINE_TAG:
            self._name = (elem.get("name") or "").strip()
            nkn = (elem.get("nknots") or "").strip()
            try:
                self._declared = int(nkn)
            except ValueError:
                log.warning("Spline %s has unreadable nknots '%s'", self._name, nkn)
                self._declared = None
            log.info("Loading spline: %s", self._name)
            self._E = []
            self._xsec = []
            self.state = _State.IN_SPLINE

        elif self.state is _State.IN_SPLINE and tag == XML_KNOT_TAG:
            self._x = None
            self._y = None
            self.state = _State.IN_KNOT

        elif self.state is _State.IN_KNOT and tag == XML_X_TAG:
            self.state = _State.AWAITING_X

        elif self.state is _State.IN_KNOT and tag == XML_Y_TAG:
            self.state = _State.AWAITING_Y
        return None

    def _end(self, elem):
        tag = elem.tag
        if self.state is _State.AWAITING_X and tag == XML_X_TAG:
            self._x = _parse_float(elem.text, XML_X_TAG)
            self.state = _State.IN_KNOT

        elif self.state is _State.AWAITING_Y and tag == XML_Y_TAG:
            self._y = _parse_float(elem.text, XML_Y_TAG)
            self.state = _State.IN_KNOT

        elif self.state is _State.IN_KNOT and tag == XML_KNOT_TAG:
            if self._x is None or self._y is None:
                raise _MalformedSpline(
                    "knot {} lacks <{}> or <{}>".format(len(self._E), XML_X_TAG, XML_Y_TAG))
            self._E.append(self._x)
            self._xsec.append(self._y)
            elem.clear()
            self.state = _State.IN_SPLINE

        elif self.state is _State.IN_SPLINE and tag == XML_SPLINE_TAG:
            self._finish_spline()
            self._root.clear()
            self.state = _State.IN_LIST

        elif self.state is _State.IN_LIST and tag == XML_ROOT_TAG:
            self.state = _State.DONE
        return None

    def _finish_spline(self):
        nparsed = len(self._E)
        if self._declared != nparsed:
            log.warning(
                "Spline %s declares %s knots but %d were found; using the parsed knots",
                self._name, self._declared, nparsed)
        if not self._name:
            log.warning("Skipping spline with no name (%d knots)", nparsed)
            return
        try:
            spline = Spline(self._E, self._xsec)
        except ValueError as e:
            raise _MalformedSpline(str(e))
        self.splines.append((self._name, spline))


def load_from_xml(registry, filename, keep=False):
    """
    Load splines from an XML file into the registry.

    Parameters
    ----------
    registry : SplineRegistry
    filename : str
        Spline file path.
    keep : bool, optional
        True adds the loaded splines to the existing ones (existing keys
        win). False (default) replaces the registry contents.

    Returns
    -------
    XmlParserStatus
        OK on success. NOT_FOUND, EMPTY_DOCUMENT, INVALID_ROOT or
        NOT_PARSED otherwise; in those cases the registry is unchanged.
    """
    log.info("Loading splines from: %s", filename)
    log.info("Option to keep pre-existing splines is switched %s",
             "ON" if keep else "OFF")

    if not os.path.isfile(filename):
        log.error("XML file could not be found! [filename: %s]", filename)
        return XmlParserStatus.NOT_FOUND

    reader = SplineListReader()
    parser = ET.XMLPullParser(events=("start", "end"))
    try:
        with open(filename, "rb") as f:
            for chunk in iter(lambda: f.read(READ_CHUNK_SIZE), b""):
                parser.feed(chunk)
                status = reader.consume(parser.read_events())
                if status is not None:
                    return status
        parser.close()
        status = reader.consume(parser.read_events())
        if status is not None:
            return status
    except ET.ParseError as e:
        if not reader.seen_root and e.code == _NO_ELEMENTS:
            log.error("XML doc. is empty! [filename: %s]", filename)
            return XmlParserStatus.EMPTY_DOCUMENT
        log.error("XML file could not be parsed! [filename: %s] %s", filename, e)
        return XmlParserStatus.NOT_PARSED
    except OSError as e:
        log.error("XML file could not be read! [filename: %s] %s", filename, e)
        return XmlParserStatus.NOT_FOUND

    inserted = registry.insert_loaded(reader.splines, keep, reader.use_log)
    log.info("Loaded %d splines (%d new) from %s",
             len(reader.splines), inserted, filename)
    return XmlParserStatus.OK
