"""JaCoCo to Cobertura report conversion.

The converter walks the JaCoCo report top-down (report, package, class,
method) and builds the matching Cobertura node at every level. Metrics are
always computed from the counters JaCoCo already aggregated on the source
node; they are never re-derived from the converted children.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from jcc2c import cobertura
from jcc2c.counters import metrics_for
from jcc2c.document import parse_document, read_document, write_document
from jcc2c.jacoco import parse_report
from jcc2c.line_ranges import assign_method_lines
from jcc2c.models import (
    CoberturaClass,
    CoberturaCondition,
    CoberturaLine,
    CoberturaMethod,
    CoberturaPackage,
    CoberturaReport,
)
from jcc2c.naming import DEFAULT_SOURCE_EXTENSION, basename, dotted_name, guess_filename

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from jcc2c.models import (
        JacocoClass,
        JacocoMethod,
        JacocoPackage,
        JacocoReport,
        LineRecord,
    )

logger = logging.getLogger(__name__)

_MILLIS_PER_SECOND = 1000


def _to_seconds(millis: int) -> int:
    seconds = abs(millis) // _MILLIS_PER_SECOND
    return -seconds if millis < 0 else seconds


def branch_percentage(covered: int, total: int, *, legacy: bool = False) -> int:
    """Return the whole-percent share of covered branches on a line.

    With ``legacy=True`` the covered count is integer-divided by the total
    before scaling, which is how older releases computed it: every partially
    covered line reports 0%.
    """
    if total <= 0:
        return 0
    if legacy:
        return 100 * (covered // total)
    return 100 * covered // total


class ReportConverter:
    """Convert JaCoCo XML coverage reports into Cobertura XML coverage reports."""

    def __init__(
        self,
        *,
        source_extension: str = DEFAULT_SOURCE_EXTENSION,
        legacy_branch_percentage: bool = False,
    ) -> None:
        self.source_extension = source_extension.lstrip(".")
        self.legacy_branch_percentage = legacy_branch_percentage

    # ── Entry points ─────────────────────────────────────────────

    def convert(
        self,
        input_path: str | Path,
        output_path: str | Path,
        source_roots: Sequence[str | Path],
    ) -> CoberturaReport:
        """Convert the report at *input_path* and write it to *output_path*.

        Either path may be ``-`` for stdin/stdout. The output is only opened
        once the whole conversion has succeeded in memory.

        Returns:
            The converted report.
        """
        root = read_document(input_path)
        report = self.convert_report(parse_report(root), source_roots)
        write_document(cobertura.to_bytes(report), output_path)
        return report

    def convert_bytes(self, data: bytes, source_roots: Sequence[str | Path]) -> bytes:
        """Convert an in-memory JaCoCo document to Cobertura XML bytes."""
        root = parse_document(io.BytesIO(data))
        return cobertura.to_bytes(self.convert_report(parse_report(root), source_roots))

    def convert_report(
        self, report: JacocoReport, source_roots: Sequence[str | Path]
    ) -> CoberturaReport:
        """Build the Cobertura model of a parsed JaCoCo report."""
        result = CoberturaReport(
            timestamp=_to_seconds(report.session_start_ms),
            sources=[str(root) for root in source_roots],
            packages=[self._convert_package(package) for package in report.packages],
            metrics=metrics_for(report),
        )
        logger.info(
            "Converted %d packages and %d classes", len(result.packages), result.class_count
        )
        return result

    # ── Tree levels ──────────────────────────────────────────────

    def _convert_package(self, package: JacocoPackage) -> CoberturaPackage:
        return CoberturaPackage(
            name=dotted_name(package.name),
            classes=[self._convert_class(cls, package) for cls in package.classes],
            metrics=metrics_for(package),
        )

    def _convert_class(self, cls: JacocoClass, package: JacocoPackage) -> CoberturaClass:
        filename = guess_filename(cls.name, self.source_extension)
        all_lines = package.lines_for(basename(filename))
        if cls.methods and not all_lines:
            logger.debug("No line data for %s in package %s", filename, package.name)

        methods = [
            self._convert_method(method, method_lines)
            for method, method_lines in assign_method_lines(cls.methods, all_lines)
        ]
        return CoberturaClass(
            name=dotted_name(cls.name),
            filename=filename,
            methods=methods,
            metrics=metrics_for(cls),
            lines=self._convert_lines(all_lines),
        )

    def _convert_method(self, method: JacocoMethod, lines: list[LineRecord]) -> CoberturaMethod:
        return CoberturaMethod(
            name=method.name,
            signature=method.descriptor,
            metrics=metrics_for(method),
            lines=self._convert_lines(lines),
        )

    # ── Line tables ──────────────────────────────────────────────

    def _convert_lines(self, lines: Sequence[LineRecord]) -> list[CoberturaLine]:
        return [self._convert_line(line) for line in lines]

    def _convert_line(self, line: LineRecord) -> CoberturaLine:
        hits = 1 if line.is_hit else 0
        if not line.has_branches:
            return CoberturaLine(number=line.number, hits=hits)

        percentage = branch_percentage(
            line.covered_branches, line.branch_total, legacy=self.legacy_branch_percentage
        )
        return CoberturaLine(
            number=line.number,
            hits=hits,
            branch=True,
            covered_branches=line.covered_branches,
            total_branches=line.branch_total,
            conditions=[CoberturaCondition(number=0, type="jump", coverage_percent=percentage)],
        )
