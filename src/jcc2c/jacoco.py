"""Read a parsed JaCoCo XML document into the typed report model.

JaCoCo reports look like::

    <report name="...">
      <sessioninfo id="..." start="1700000000000" dump="..."/>
      <package name="com/acme">
        <class name="com/acme/Foo" sourcefilename="Foo.java">
          <method name="bar" desc="()V" line="10">
            <counter type="LINE" missed="1" covered="3"/>
          </method>
          <counter type="LINE" missed="1" covered="3"/>
        </class>
        <sourcefile name="Foo.java">
          <line nr="10" mi="0" ci="3" mb="0" cb="0"/>
        </sourcefile>
        <counter type="LINE" missed="1" covered="3"/>
      </package>
      <counter type="LINE" missed="1" covered="3"/>
    </report>

Multi-module reports wrap packages in ``<group>`` elements; packages are
collected wherever they appear below the root.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from jcc2c.errors import MissingElementError, NumericFormatError
from jcc2c.models import (
    Counter,
    JacocoClass,
    JacocoMethod,
    JacocoPackage,
    JacocoReport,
    JacocoSourceFile,
    LineRecord,
)

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"-?[0-9]+")


def _int_attr(element: XmlElement, key: str, default: int = 0) -> int:
    value = element.get(key)
    if value is None:
        return default
    if not _INTEGER_RE.fullmatch(value):
        raise NumericFormatError(
            f"Attribute '{key}' of <{element.tag}> is not an integer: {value!r}"
        )
    return int(value)


def _method_line(element: XmlElement) -> int:
    # Synthetic and generated methods may carry no usable line number.
    value = element.get("line", "")
    return int(value) if _INTEGER_RE.fullmatch(value) else 0


def _parse_counters(element: XmlElement) -> list[Counter]:
    return [
        Counter(
            kind=counter.get("type", ""),
            missed=_int_attr(counter, "missed"),
            covered=_int_attr(counter, "covered"),
        )
        for counter in element.findall("counter")
    ]


def _parse_line(element: XmlElement) -> LineRecord:
    return LineRecord(
        number=_int_attr(element, "nr"),
        missed_instructions=_int_attr(element, "mi"),
        covered_instructions=_int_attr(element, "ci"),
        missed_branches=_int_attr(element, "mb"),
        covered_branches=_int_attr(element, "cb"),
    )


def _parse_method(element: XmlElement) -> JacocoMethod:
    return JacocoMethod(
        name=element.get("name", ""),
        descriptor=element.get("desc", ""),
        line=_method_line(element),
        counters=_parse_counters(element),
    )


def _parse_class(element: XmlElement) -> JacocoClass:
    return JacocoClass(
        name=element.get("name", ""),
        methods=[_parse_method(method) for method in element.findall("method")],
        counters=_parse_counters(element),
    )


def _parse_source_file(element: XmlElement) -> JacocoSourceFile:
    return JacocoSourceFile(
        name=element.get("name", ""),
        lines=[_parse_line(line) for line in element.findall("line")],
    )


def _parse_package(element: XmlElement) -> JacocoPackage:
    package = JacocoPackage(
        name=element.get("name", ""),
        classes=[_parse_class(cls) for cls in element.findall("class")],
        source_files=[_parse_source_file(sf) for sf in element.findall("sourcefile")],
        counters=_parse_counters(element),
    )
    logger.debug(
        "Read package %s: %d classes, %d source files",
        package.name,
        len(package.classes),
        len(package.source_files),
    )
    return package


def _session_start(root: XmlElement) -> int:
    session_info = root.find("sessioninfo")
    if session_info is None:
        raise MissingElementError("Could not find the 'sessioninfo' XML element.")
    if session_info.get("start") is None:
        raise MissingElementError("The 'sessioninfo' XML element has no 'start' attribute.")
    return _int_attr(session_info, "start")


def parse_report(root: XmlElement) -> JacocoReport:
    """Convert the root ``<report>`` element into a :class:`JacocoReport`.

    Raises:
        MissingElementError: If ``sessioninfo/@start`` is absent.
        NumericFormatError: If a count attribute is not an integer.
    """
    if root.tag != "report":
        logger.warning("JaCoCo XML root is not <report>: %s", root.tag)

    start = _session_start(root)
    packages = [_parse_package(package) for package in root.iter("package")]
    return JacocoReport(
        session_start_ms=start,
        name=root.get("name", ""),
        packages=packages,
        counters=_parse_counters(root),
    )
