"""Clover XML report reader.

Clover is written by ``phpunit --coverage-clover``. Structure::

    <coverage generated="...">
      <project timestamp="...">
        <package name="Foo">
          <file name="/tmp/build/src/Bar.php">
            <class name="Bar" namespace="Foo">
              <metrics methods="2" coveredmethods="1" conditionals="0" .../>
            </class>
            <line num="9" type="method" name="__construct" crap="1" count="1"/>
            <line num="11" type="stmt" count="1"/>
            <metrics loc="17" ncloc="17" classes="1" .../>
          </file>
        </package>
        <file name="/tmp/build/functions.php">...</file>
        <metrics files="3" loc="114" ncloc="114" classes="3" .../>
      </project>
    </coverage>

Files without a namespace sit directly under <project>. They take part in
line annotation but not in class or method resolution.

The reader only shapes the XML into records. Attribute values stay strings
inside ReportMetrics until a consumer asks for an integer, so one malformed
fragment does not prevent reading the rest of the report.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum

from cloverlens.core.errors import MalformedReportError


class LineKind(str, Enum):
    """Clover <line type="..."> values."""

    STATEMENT = "stmt"
    METHOD = "method"
    CONDITIONAL = "cond"
    OTHER = "other"

    @classmethod
    def from_attribute(cls, value: str | None) -> LineKind:
        for kind in cls:
            if kind.value == value:
                return kind
        return cls.OTHER


def _to_int(value: str | None) -> int | None:
    """Parse an integer attribute; decimals are truncated, garbage yields None."""
    if value is None:
        return None
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True, slots=True)
class LineHit:
    """A single <line> entry of a file, in document order."""

    line_number: int
    kind: LineKind
    hit_count: int | None = None
    name: str | None = None
    crap: int | None = None

    @property
    def is_method(self) -> bool:
        return self.kind is LineKind.METHOD


@dataclass(frozen=True, slots=True)
class ReportMetrics:
    """Attributes of a <metrics> element with typed accessors."""

    fragment: str
    attributes: dict[str, str] = field(default_factory=dict)

    def get_int(self, name: str) -> int:
        """Return attribute *name* as int.

        Raises:
            MalformedReportError: The attribute is missing or not numeric.
        """
        value = _to_int(self.attributes.get(name))
        if value is None:
            raise MalformedReportError.missing_attribute(self.fragment, name)
        return value

    def get_optional_int(self, name: str) -> int | None:
        return _to_int(self.attributes.get(name))

    def require(self, *names: str) -> dict[str, int]:
        """Return all *names* as ints, failing before anything is consumed."""
        return {name: self.get_int(name) for name in names}


@dataclass(frozen=True, slots=True)
class ReportClass:
    name: str
    namespace: str | None
    metrics: ReportMetrics | None


@dataclass(frozen=True, slots=True)
class ReportFile:
    """A <file> entry with its classes and its lines in document order."""

    name: str
    classes: list[ReportClass] = field(default_factory=list)
    lines: list[LineHit] = field(default_factory=list)
    metrics: ReportMetrics | None = None

    @property
    def method_lines(self) -> list[LineHit]:
        return [line for line in self.lines if line.is_method]


@dataclass(frozen=True, slots=True)
class ReportPackage:
    name: str
    files: list[ReportFile] = field(default_factory=list)


@dataclass(slots=True)
class CoverageReport:
    """Parsed Clover report.

    ``files`` lists every <file> in document order (package members and
    namespace-less files alike); ``packages`` holds only package members.
    """

    project_metrics: list[ReportMetrics] = field(default_factory=list)
    packages: list[ReportPackage] = field(default_factory=list)
    files: list[ReportFile] = field(default_factory=list)


def _read_metrics(elem: ET.Element | None, fragment: str) -> ReportMetrics | None:
    if elem is None:
        return None
    return ReportMetrics(fragment=fragment, attributes=dict(elem.attrib))


def _read_line(elem: ET.Element) -> LineHit | None:
    num = _to_int(elem.get("num"))
    if num is None or num <= 0:
        return None
    return LineHit(
        line_number=num,
        kind=LineKind.from_attribute(elem.get("type")),
        hit_count=_to_int(elem.get("count")),
        name=elem.get("name"),
        crap=_to_int(elem.get("crap")),
    )


def _read_file(elem: ET.Element) -> ReportFile:
    name = elem.get("name") or elem.get("path") or ""
    classes = [
        ReportClass(
            name=class_elem.get("name", ""),
            namespace=class_elem.get("namespace"),
            metrics=_read_metrics(
                class_elem.find("metrics"), f"class '{class_elem.get('name', '')}' in {name}"
            ),
        )
        for class_elem in elem.findall("class")
    ]
    lines = [line for line in (_read_line(e) for e in elem.findall("line")) if line is not None]
    return ReportFile(
        name=name,
        classes=classes,
        lines=lines,
        metrics=_read_metrics(elem.find("metrics"), f"file {name}"),
    )


def parse_report(content: bytes | str) -> CoverageReport:
    """Parse Clover XML into a CoverageReport.

    Raises:
        MalformedReportError: The content is not well-formed XML.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise MalformedReportError.parse_error(str(e)) from e

    report = CoverageReport()
    parsed: dict[int, ReportFile] = {}

    for file_elem in root.iter("file"):
        report_file = _read_file(file_elem)
        parsed[id(file_elem)] = report_file
        report.files.append(report_file)

    for package_elem in root.iter("package"):
        report.packages.append(
            ReportPackage(
                name=package_elem.get("name", ""),
                files=[parsed[id(f)] for f in package_elem.findall("file")],
            )
        )

    for project_elem in root.iter("project"):
        for metrics_elem in project_elem.findall("metrics"):
            metrics = _read_metrics(metrics_elem, "project metrics")
            if metrics is not None:
                report.project_metrics.append(metrics)

    return report
