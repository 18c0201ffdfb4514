"""Serialize the Cobertura report model to XML."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from jcc2c.counters import format_decimal

if TYPE_CHECKING:
    from jcc2c.models import (
        CoberturaClass,
        CoberturaLine,
        CoberturaMethod,
        CoberturaPackage,
        CoberturaReport,
        CoverageMetrics,
    )


def _set_metrics(element: ET.Element, metrics: CoverageMetrics) -> None:
    element.set("line-rate", format_decimal(metrics.line_rate))
    element.set("branch-rate", format_decimal(metrics.branch_rate))
    element.set("complexity", format_decimal(metrics.complexity))


def _add_lines(parent: ET.Element, lines: list[CoberturaLine]) -> None:
    lines_elem = ET.SubElement(parent, "lines")
    for line in lines:
        line_elem = ET.SubElement(lines_elem, "line")
        line_elem.set("number", str(line.number))
        line_elem.set("hits", str(line.hits))
        if not line.branch:
            line_elem.set("branch", "false")
            continue

        line_elem.set("branch", "true")
        line_elem.set("condition-coverage", line.condition_coverage)
        conditions_elem = ET.SubElement(line_elem, "conditions")
        for condition in line.conditions:
            condition_elem = ET.SubElement(conditions_elem, "condition")
            condition_elem.set("number", str(condition.number))
            condition_elem.set("type", condition.type)
            condition_elem.set("coverage", f"{condition.coverage_percent}%")


def _method_element(method: CoberturaMethod) -> ET.Element:
    elem = ET.Element("method")
    elem.set("name", method.name)
    elem.set("signature", method.signature)
    _set_metrics(elem, method.metrics)
    _add_lines(elem, method.lines)
    return elem


def _class_element(cls: CoberturaClass) -> ET.Element:
    elem = ET.Element("class")
    elem.set("name", cls.name)
    elem.set("filename", cls.filename)
    methods_elem = ET.SubElement(elem, "methods")
    methods_elem.extend([_method_element(method) for method in cls.methods])
    _set_metrics(elem, cls.metrics)
    _add_lines(elem, cls.lines)
    return elem


def _package_element(package: CoberturaPackage) -> ET.Element:
    elem = ET.Element("package")
    elem.set("name", package.name)
    classes_elem = ET.SubElement(elem, "classes")
    classes_elem.extend([_class_element(cls) for cls in package.classes])
    _set_metrics(elem, package.metrics)
    return elem


def build_element(report: CoberturaReport) -> ET.Element:
    """Build the ``<coverage>`` element tree for *report*."""
    coverage = ET.Element("coverage")
    coverage.set("timestamp", str(report.timestamp))

    sources = ET.SubElement(coverage, "sources")
    for source_root in report.sources:
        ET.SubElement(sources, "source").text = source_root

    packages = ET.SubElement(coverage, "packages")
    packages.extend([_package_element(package) for package in report.packages])

    _set_metrics(coverage, report.metrics)
    return coverage


def to_bytes(report: CoberturaReport) -> bytes:
    """Return *report* as UTF-8 XML with a declaration and 2-space indentation."""
    root = build_element(report)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="UTF-8", xml_declaration=True) + b"\n"
