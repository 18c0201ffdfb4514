"""Tests for the JaCoCo to Cobertura conversion (converter.py).

Covers the report/package/class/method walk, method line assignment,
per-line branch annotations and whole-document output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from defusedxml import ElementTree

from jcc2c.converter import ReportConverter, branch_percentage
from jcc2c.errors import MissingElementError, ReportParseError
from jcc2c.models import (
    BRANCH,
    COMPLEXITY,
    LINE,
    Counter,
    JacocoClass,
    JacocoMethod,
    JacocoPackage,
    JacocoReport,
    JacocoSourceFile,
    LineRecord,
)

if TYPE_CHECKING:
    from pathlib import Path

    from jcc2c.models import CoberturaReport


def _scenario_report() -> JacocoReport:
    # Methods at lines 5 and 15; a partly covered branch on line 7.
    line_numbers = [5, 6, 7, 8, 9, 15, 16, 17, 18, 20]
    lines = []
    for number in line_numbers:
        if number == 7:
            lines.append(LineRecord(number, 0, 2, missed_branches=1, covered_branches=1))
        elif number in (9, 18):
            lines.append(LineRecord(number, missed_instructions=3))
        else:
            lines.append(LineRecord(number, covered_instructions=1))
    cls = JacocoClass(
        name="com/acme/Foo",
        methods=[
            JacocoMethod("run", "()V", 5, [Counter(LINE, 1, 4)]),
            JacocoMethod("stop", "()V", 15, [Counter(LINE, 1, 4)]),
        ],
        counters=[Counter(LINE, missed=2, covered=8), Counter(BRANCH, missed=1, covered=1)],
    )
    package = JacocoPackage(
        name="com/acme",
        classes=[cls],
        source_files=[JacocoSourceFile("Foo.java", lines)],
        counters=[Counter(LINE, 2, 8), Counter(BRANCH, 1, 1), Counter(COMPLEXITY, 1, 3)],
    )
    return JacocoReport(
        session_start_ms=1700000000000,
        packages=[package],
        counters=[Counter(LINE, 2, 8)],
    )


def _convert(report: JacocoReport, **kwargs: bool) -> CoberturaReport:
    return ReportConverter(**kwargs).convert_report(report, ["src/main/java"])


# ── Report level ─────────────────────────────────────────────────


class TestReportLevel:
    def test_timestamp_in_whole_seconds(self) -> None:
        assert _convert(_scenario_report()).timestamp == 1700000000

    def test_timestamp_truncates(self) -> None:
        report = JacocoReport(session_start_ms=1700000000999)
        assert _convert(report).timestamp == 1700000000

    def test_sources_recorded_verbatim(self) -> None:
        result = ReportConverter().convert_report(
            JacocoReport(session_start_ms=0), ["src/main/java", "does/not/exist", "."]
        )
        assert result.sources == ["src/main/java", "does/not/exist", "."]

    def test_package_names_are_dotted(self) -> None:
        result = _convert(_scenario_report())
        assert [p.name for p in result.packages] == ["com.acme"]

    def test_package_metrics_from_package_counters(self) -> None:
        package = _convert(_scenario_report()).packages[0]
        assert package.metrics.line_rate == 0.8
        assert package.metrics.branch_rate == 0.5
        assert package.metrics.complexity == 4.0

    def test_report_metrics_missing_kinds_are_zero(self) -> None:
        metrics = _convert(_scenario_report()).metrics
        assert metrics.line_rate == 0.8
        assert metrics.branch_rate == 0.0
        assert metrics.complexity == 0.0

    def test_empty_report(self) -> None:
        result = _convert(JacocoReport(session_start_ms=42_000))
        assert result.timestamp == 42
        assert result.packages == []


# ── Class and method level ───────────────────────────────────────


class TestClassLevel:
    def test_scenario_class(self) -> None:
        cls = _convert(_scenario_report()).packages[0].classes[0]
        assert cls.name == "com.acme.Foo"
        assert cls.filename == "com/acme/Foo.java"
        assert cls.metrics.line_rate == 0.8
        assert cls.metrics.branch_rate == 0.5
        assert len(cls.lines) == 10

    def test_methods_receive_their_ranges(self) -> None:
        cls = _convert(_scenario_report()).packages[0].classes[0]
        run, stop = cls.methods
        assert run.name == "run"
        assert run.signature == "()V"
        assert [line.number for line in run.lines] == [5, 6, 7, 8, 9]
        assert [line.number for line in stop.lines] == [15, 16, 17, 18, 20]

    def test_method_lines_union_equals_class_lines(self) -> None:
        cls = _convert(_scenario_report()).packages[0].classes[0]
        method_numbers = sorted(line.number for m in cls.methods for line in m.lines)
        assert method_numbers == sorted(line.number for line in cls.lines)

    def test_method_metrics_from_method_counters(self) -> None:
        run = _convert(_scenario_report()).packages[0].classes[0].methods[0]
        assert run.metrics.line_rate == 0.8
        assert run.metrics.branch_rate == 0.0

    def test_inner_class_shares_outer_source_file(self) -> None:
        report = _scenario_report()
        report.packages[0].classes.append(
            JacocoClass(name="com/acme/Foo$Inner", methods=[JacocoMethod("x", "()V", 16)])
        )
        inner = _convert(report).packages[0].classes[1]
        assert inner.name == "com.acme.Foo$Inner"
        assert inner.filename == "com/acme/Foo.java"
        assert len(inner.lines) == 10
        assert [line.number for line in inner.methods[0].lines] == [16, 17, 18, 20]

    def test_class_without_source_file_has_empty_tables(self) -> None:
        report = _scenario_report()
        report.packages[0].classes.append(
            JacocoClass(name="com/acme/Ghost", methods=[JacocoMethod("x", "()V", 1)])
        )
        ghost = _convert(report).packages[0].classes[1]
        assert ghost.lines == []
        assert ghost.methods[0].lines == []

    def test_custom_source_extension(self) -> None:
        report = _scenario_report()
        report.packages[0].source_files[0].name = "Foo.kt"
        package = ReportConverter(source_extension=".kt").convert_report(report, []).packages[0]
        assert package.classes[0].filename == "com/acme/Foo.kt"
        assert len(package.classes[0].lines) == 10


# ── Line tables ──────────────────────────────────────────────────


class TestLineTable:
    def test_branch_line(self) -> None:
        cls = _convert(_scenario_report()).packages[0].classes[0]
        line = next(line for line in cls.lines if line.number == 7)
        assert line.branch is True
        assert line.hits == 1
        assert line.condition_coverage == "50% (1/2)"
        assert len(line.conditions) == 1
        assert line.conditions[0].type == "jump"
        assert line.conditions[0].number == 0
        assert line.conditions[0].coverage_percent == 50

    def test_plain_hit_line(self) -> None:
        cls = _convert(_scenario_report()).packages[0].classes[0]
        line = next(line for line in cls.lines if line.number == 20)
        assert line.branch is False
        assert line.hits == 1
        assert line.conditions == []

    def test_missed_line(self) -> None:
        cls = _convert(_scenario_report()).packages[0].classes[0]
        line = next(line for line in cls.lines if line.number == 9)
        assert line.hits == 0

    def test_legacy_branch_percentage(self) -> None:
        cls = _convert(_scenario_report(), legacy_branch_percentage=True).packages[0].classes[0]
        line = next(line for line in cls.lines if line.number == 7)
        assert line.condition_coverage == "0% (1/2)"


@pytest.mark.parametrize(
    ("covered", "total", "legacy", "expected"),
    [
        (1, 2, False, 50),
        (2, 3, False, 66),
        (4, 4, False, 100),
        (0, 4, False, 0),
        (1, 2, True, 0),
        (2, 3, True, 0),
        (4, 4, True, 100),
        (0, 0, False, 0),
    ],
)
def test_branch_percentage(covered: int, total: int, legacy: bool, expected: int) -> None:
    assert branch_percentage(covered, total, legacy=legacy) == expected


# ── Whole documents ──────────────────────────────────────────────

_JACOCO_XML = b"""\
<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<!DOCTYPE report PUBLIC "-//JACOCO//DTD Report 1.1//EN" "report.dtd">
<report name="demo">
  <sessioninfo id="host-1" start="1700000000000" dump="1700000001000"/>
  <package name="com/acme">
    <class name="com/acme/Foo" sourcefilename="Foo.java">
      <method name="&lt;init&gt;" desc="()V" line="3">
        <counter type="LINE" missed="0" covered="1"/>
        <counter type="COMPLEXITY" missed="0" covered="1"/>
      </method>
      <method name="bar" desc="(I)Z" line="5">
        <counter type="LINE" missed="1" covered="1"/>
        <counter type="BRANCH" missed="1" covered="1"/>
        <counter type="COMPLEXITY" missed="1" covered="1"/>
      </method>
      <counter type="LINE" missed="1" covered="2"/>
      <counter type="BRANCH" missed="1" covered="1"/>
      <counter type="COMPLEXITY" missed="1" covered="2"/>
    </class>
    <sourcefile name="Foo.java">
      <line nr="3" mi="0" ci="3" mb="0" cb="0"/>
      <line nr="5" mi="0" ci="2" mb="1" cb="1"/>
      <line nr="6" mi="2" ci="0" mb="0" cb="0"/>
    </sourcefile>
    <counter type="LINE" missed="1" covered="2"/>
    <counter type="BRANCH" missed="1" covered="1"/>
    <counter type="COMPLEXITY" missed="1" covered="2"/>
  </package>
  <counter type="LINE" missed="1" covered="2"/>
  <counter type="BRANCH" missed="1" covered="1"/>
  <counter type="COMPLEXITY" missed="1" covered="2"/>
</report>
"""

_COBERTURA_XML = """\
<?xml version='1.0' encoding='UTF-8'?>
<coverage timestamp="1700000000" line-rate="0.6666666666666666" branch-rate="0.5" complexity="3.0">
  <sources>
    <source>src/main/java</source>
  </sources>
  <packages>
    <package name="com.acme" line-rate="0.6666666666666666" branch-rate="0.5" complexity="3.0">
      <classes>
        <class name="com.acme.Foo" filename="com/acme/Foo.java" line-rate="0.6666666666666666" branch-rate="0.5" complexity="3.0">
          <methods>
            <method name="&lt;init&gt;" signature="()V" line-rate="1.0" branch-rate="0.0" complexity="1.0">
              <lines>
                <line number="3" hits="1" branch="false" />
              </lines>
            </method>
            <method name="bar" signature="(I)Z" line-rate="0.5" branch-rate="0.5" complexity="2.0">
              <lines>
                <line number="5" hits="1" branch="true" condition-coverage="50% (1/2)">
                  <conditions>
                    <condition number="0" type="jump" coverage="50%" />
                  </conditions>
                </line>
                <line number="6" hits="0" branch="false" />
              </lines>
            </method>
          </methods>
          <lines>
            <line number="3" hits="1" branch="false" />
            <line number="5" hits="1" branch="true" condition-coverage="50% (1/2)">
              <conditions>
                <condition number="0" type="jump" coverage="50%" />
              </conditions>
            </line>
            <line number="6" hits="0" branch="false" />
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>
"""


class TestConvertDocuments:
    def test_convert_bytes_matches_expected_document(self) -> None:
        output = ReportConverter().convert_bytes(_JACOCO_XML, ["src/main/java"])
        assert output.decode("utf-8") == _COBERTURA_XML

    def test_conversion_is_deterministic(self) -> None:
        converter = ReportConverter()
        first = converter.convert_bytes(_JACOCO_XML, ["src"])
        second = converter.convert_bytes(_JACOCO_XML, ["src"])
        assert first == second

    def test_zero_total_rate_renders_nan(self) -> None:
        xml = _JACOCO_XML.replace(
            b'<counter type="BRANCH" missed="1" covered="1"/>\n    <counter type="COMPLEXITY" missed="1" covered="2"/>\n  </package>',
            b'<counter type="BRANCH" missed="0" covered="0"/>\n    <counter type="COMPLEXITY" missed="1" covered="2"/>\n  </package>',
        )
        root = ElementTree.fromstring(ReportConverter().convert_bytes(xml, ["."]))
        assert root.find("packages/package").get("branch-rate") == "NaN"

    def test_convert_files(self, tmp_path: Path) -> None:
        input_path = tmp_path / "jacoco.xml"
        input_path.write_bytes(_JACOCO_XML)
        output_path = tmp_path / "cobertura.xml"

        report = ReportConverter().convert(input_path, output_path, ["src/main/java"])

        assert report.class_count == 1
        assert output_path.read_text(encoding="utf-8") == _COBERTURA_XML

    def test_missing_sessioninfo_writes_nothing(self, tmp_path: Path) -> None:
        input_path = tmp_path / "jacoco.xml"
        input_path.write_bytes(b'<report name="x"><package name="p"/></report>')
        output_path = tmp_path / "cobertura.xml"

        with pytest.raises(MissingElementError):
            ReportConverter().convert(input_path, output_path, ["."])
        assert not output_path.exists()

    def test_malformed_input(self) -> None:
        with pytest.raises(ReportParseError):
            ReportConverter().convert_bytes(b"<report><sessioninfo", ["."])
