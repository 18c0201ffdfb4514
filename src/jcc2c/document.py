"""Read and write XML documents, with ``-`` standing for stdin/stdout."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from jcc2c.errors import ReportIOError, ReportParseError

if TYPE_CHECKING:
    from typing import BinaryIO
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

STDIO_PATH = "-"


def parse_document(stream: BinaryIO, name: str = "<stream>") -> XmlElement:
    """Parse *stream* and return its root element.

    Entity declarations and external references are rejected. A DOCTYPE that
    names an external DTD (as JaCoCo writes) is accepted but never loaded.
    """
    try:
        tree = ElementTree.parse(
            stream, forbid_dtd=False, forbid_entities=True, forbid_external=True
        )
    except DefusedParseError as e:
        raise ReportParseError(f"Malformed XML in {name}: {e}") from e
    except DefusedXmlException as e:
        raise ReportParseError(f"Forbidden XML construct in {name}: {e}") from e
    return tree.getroot()


def read_document(path: str | Path) -> XmlElement:
    """Parse the document at *path*, or standard input for ``-``."""
    if str(path) == STDIO_PATH:
        logger.info("Parsing input from stdin...")
        return parse_document(sys.stdin.buffer, "stdin")

    input_path = Path(path)
    logger.info("Parsing input from file %s", input_path.absolute())
    try:
        with input_path.open("rb") as stream:
            return parse_document(stream, str(input_path))
    except OSError as e:
        raise ReportIOError(str(input_path), f"Cannot read input ({e.strerror})") from e


def write_document(data: bytes, path: str | Path) -> None:
    """Write serialized *data* to *path*, or standard output for ``-``."""
    if str(path) == STDIO_PATH:
        logger.info("Writing output to stdout...")
        try:
            sys.stdout.flush()
            stream = sys.stdout.buffer
            stream.write(data)
            stream.flush()
        except OSError as e:
            raise ReportIOError(STDIO_PATH, f"Cannot write output ({e.strerror or e})") from e
        return

    output_path = Path(path)
    logger.info("Writing output to file %s", output_path.absolute())
    try:
        with output_path.open("wb") as stream:
            stream.write(data)
    except OSError as e:
        raise ReportIOError(str(output_path), f"Cannot write output ({e.strerror})") from e
