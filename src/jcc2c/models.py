"""Typed representation of JaCoCo input and Cobertura output reports.

Attribute values are parsed once, when the JaCoCo document is read, and
formatted back to text only when the Cobertura document is serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LINE = "LINE"
BRANCH = "BRANCH"
COMPLEXITY = "COMPLEXITY"


# ── JaCoCo (source) ──────────────────────────────────────────────


@dataclass(frozen=True)
class Counter:
    """A ``(missed, covered)`` pair for one coverage kind at one scope."""

    kind: str
    missed: int = 0
    covered: int = 0

    @property
    def total(self) -> int:
        """Return covered plus missed units."""
        return self.covered + self.missed


@dataclass(frozen=True)
class LineRecord:
    """Coverage of a single source line, as listed under ``<sourcefile>``."""

    number: int
    missed_instructions: int = 0
    covered_instructions: int = 0
    missed_branches: int = 0
    covered_branches: int = 0

    @property
    def branch_total(self) -> int:
        return self.missed_branches + self.covered_branches

    @property
    def has_branches(self) -> bool:
        return self.branch_total > 0

    @property
    def is_hit(self) -> bool:
        """Return True if at least one instruction on this line was executed."""
        return self.covered_instructions > 0


@dataclass
class JacocoMethod:
    """A method declaration; ``line`` is 0 when the report does not give one."""

    name: str
    descriptor: str
    line: int = 0
    counters: list[Counter] = field(default_factory=list)


@dataclass
class JacocoClass:
    name: str
    methods: list[JacocoMethod] = field(default_factory=list)
    counters: list[Counter] = field(default_factory=list)


@dataclass
class JacocoSourceFile:
    name: str
    lines: list[LineRecord] = field(default_factory=list)


@dataclass
class JacocoPackage:
    """A package with its classes and the per-file line tables."""

    name: str
    classes: list[JacocoClass] = field(default_factory=list)
    source_files: list[JacocoSourceFile] = field(default_factory=list)
    counters: list[Counter] = field(default_factory=list)

    def lines_for(self, basename: str) -> list[LineRecord]:
        """Return every line of the source files named *basename*, in order."""
        lines: list[LineRecord] = []
        for source_file in self.source_files:
            if source_file.name == basename:
                lines.extend(source_file.lines)
        return lines


@dataclass
class JacocoReport:
    """A complete JaCoCo report.

    ``session_start_ms`` is the start of the first recorded session, in
    milliseconds since the epoch.
    """

    session_start_ms: int
    name: str = ""
    packages: list[JacocoPackage] = field(default_factory=list)
    counters: list[Counter] = field(default_factory=list)


# ── Cobertura (target) ───────────────────────────────────────────


@dataclass(frozen=True)
class CoverageMetrics:
    """Derived ``line-rate``, ``branch-rate`` and ``complexity`` of one node."""

    line_rate: float = 0.0
    branch_rate: float = 0.0
    complexity: float = 0.0


@dataclass(frozen=True)
class CoberturaCondition:
    number: int
    type: str
    coverage_percent: int


@dataclass
class CoberturaLine:
    """One ``<line>`` entry of a class or method line table."""

    number: int
    hits: int
    branch: bool = False
    covered_branches: int = 0
    total_branches: int = 0
    conditions: list[CoberturaCondition] = field(default_factory=list)

    @property
    def condition_coverage(self) -> str:
        """Return the ``"50% (1/2)"`` annotation of a branch line."""
        percent = self.conditions[0].coverage_percent if self.conditions else 0
        return f"{percent}% ({self.covered_branches}/{self.total_branches})"


@dataclass
class CoberturaMethod:
    name: str
    signature: str
    metrics: CoverageMetrics = field(default_factory=CoverageMetrics)
    lines: list[CoberturaLine] = field(default_factory=list)


@dataclass
class CoberturaClass:
    name: str
    filename: str
    metrics: CoverageMetrics = field(default_factory=CoverageMetrics)
    methods: list[CoberturaMethod] = field(default_factory=list)
    lines: list[CoberturaLine] = field(default_factory=list)


@dataclass
class CoberturaPackage:
    name: str
    metrics: CoverageMetrics = field(default_factory=CoverageMetrics)
    classes: list[CoberturaClass] = field(default_factory=list)


@dataclass
class CoberturaReport:
    """A complete Cobertura report; ``timestamp`` is in whole seconds."""

    timestamp: int
    sources: list[str] = field(default_factory=list)
    packages: list[CoberturaPackage] = field(default_factory=list)
    metrics: CoverageMetrics = field(default_factory=CoverageMetrics)

    @property
    def class_count(self) -> int:
        return sum(len(package.classes) for package in self.packages)
