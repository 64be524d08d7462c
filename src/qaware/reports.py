# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers that turn Checkstyle, PMD and FindBugs XML reports into violations."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from lxml import etree

from .constants import CHECKSTYLE, FINDBUGS, PMD, TOOL_NAMES
from .models import AggregationResult, ProjectNode, Violation
from .modules import iter_leaves


class ReportParseError(RuntimeError):
    """Raised when a report file exists but does not match its tool's schema."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot parse report {path}: {reason}")
        self.path = path
        self.reason = reason


class _SchemaError(ValueError):
    """Internal signal for a schema mismatch, wrapped into :class:`ReportParseError`."""


@dataclass(frozen=True, slots=True)
class ReportContext:
    """Where the report being parsed came from."""

    tool: str
    module: ProjectNode
    source_set: str

    def relative(self, file_name: str | None) -> str | None:
        """Express *file_name* relative to the module directory when possible."""
        if not file_name:
            return None
        candidate = Path(file_name)
        try:
            return candidate.relative_to(self.module.directory).as_posix()
        except ValueError:
            return file_name

    def violation(
        self,
        *,
        severity: str,
        message: str,
        file: str | None = None,
        line: int | None = None,
        rule: str | None = None,
    ) -> Violation:
        return Violation(
            tool=self.tool,
            module=self.module.path,
            source_set=self.source_set,
            severity=severity,
            message=message,
            file=self.relative(file),
            line=line,
            rule=rule,
        )


ReportTransform = Callable[[etree._Element, ReportContext], Sequence[Violation]]

_XML_PARSER: Final = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def _localname(element: etree._Element) -> str:
    """Return the tag of *element* without its namespace (PMD 5+ reports are namespaced)."""
    return etree.QName(element).localname


def _require(element: etree._Element, attribute: str) -> str:
    value = element.get(attribute)
    if value is None or not value.strip():
        raise _SchemaError(f"<{_localname(element)}> on line {element.sourceline} lacks required '{attribute}'")
    return value


def _optional_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _text(element: etree._Element | None) -> str:
    if element is None:
        return ""
    return " ".join("".join(element.itertext()).split())


def parse_checkstyle(root: etree._Element, ctx: ReportContext) -> Sequence[Violation]:
    """Parse ``<checkstyle><file><error/></file></checkstyle>`` reports."""

    results: list[Violation] = []
    for file_node in root.iterfind("{*}file"):
        file_name = file_node.get("name")
        for error in file_node.iterfind("{*}error"):
            results.append(
                ctx.violation(
                    severity=_require(error, "severity"),
                    message=_require(error, "message").strip(),
                    file=file_name,
                    line=_optional_int(error.get("line")),
                    rule=error.get("source"),
                )
            )
    return results


def parse_pmd(root: etree._Element, ctx: ReportContext) -> Sequence[Violation]:
    """Parse ``<pmd><file><violation/></file><error/></pmd>`` reports."""

    results: list[Violation] = []
    for file_node in root.iterfind("{*}file"):
        file_name = file_node.get("name")
        for violation in file_node.iterfind("{*}violation"):
            message = _text(violation)
            if not message:
                raise _SchemaError(f"<violation> on line {violation.sourceline} has no message")
            ruleset, rule = violation.get("ruleset"), violation.get("rule")
            results.append(
                ctx.violation(
                    severity=_require(violation, "priority"),
                    message=message,
                    file=file_name,
                    line=_optional_int(violation.get("beginline")),
                    rule=f"{ruleset}/{rule}" if ruleset and rule else rule,
                )
            )
    for error in root.iterfind("{*}error"):
        results.append(
            ctx.violation(
                severity="error",
                message=_require(error, "msg").strip(),
                file=error.get("filename"),
            )
        )
    return results


def parse_findbugs(root: etree._Element, ctx: ReportContext) -> Sequence[Violation]:
    """Parse ``<BugCollection><BugInstance/></BugCollection>`` reports written with messages."""

    results: list[Violation] = []
    for bug in root.iterfind("{*}BugInstance"):
        bug_type = _require(bug, "type")
        category = _require(bug, "category")
        message = _text(bug.find("{*}LongMessage")) or _text(bug.find("{*}ShortMessage")) or bug_type
        source_line = bug.find("{*}SourceLine")
        file_name = source_line.get("sourcepath") if source_line is not None else None
        line = _optional_int(source_line.get("start")) if source_line is not None else None
        results.append(
            ctx.violation(severity=category, message=message, file=file_name, line=line, rule=bug_type)
        )
    return results


@dataclass(frozen=True, slots=True)
class XmlReportParser:
    """Parse one tool's XML report file, validating its root element."""

    tool: str
    root_tag: str
    transform: ReportTransform

    def parse(self, path: Path, *, module: ProjectNode, source_set: str) -> list[Violation]:
        """Return the violations recorded in *path*.

        Raises:
            ReportParseError: If the file is not well-formed XML, has the wrong
                root element, or a violation lacks a required field.
        """

        try:
            document = etree.parse(str(path), _XML_PARSER)
        except (etree.XMLSyntaxError, OSError) as exc:
            raise ReportParseError(path, str(exc)) from exc
        root = document.getroot()
        if _localname(root) != self.root_tag:
            raise ReportParseError(path, f"expected <{self.root_tag}> root element, found <{_localname(root)}>")
        ctx = ReportContext(tool=self.tool, module=module, source_set=source_set)
        try:
            return list(self.transform(root, ctx))
        except _SchemaError as exc:
            raise ReportParseError(path, str(exc)) from exc


REPORT_PARSERS: Final[dict[str, XmlReportParser]] = {
    CHECKSTYLE: XmlReportParser(CHECKSTYLE, "checkstyle", parse_checkstyle),
    PMD: XmlReportParser(PMD, "pmd", parse_pmd),
    FINDBUGS: XmlReportParser(FINDBUGS, "BugCollection", parse_findbugs),
}


class ReportAggregator:
    """Merge every module's tool reports into one ordered result.

    Reports are read sequentially in (module, tool, source set) order so the
    output is reproducible between runs. Missing reports count as zero
    violations; unreadable ones abort the aggregation.
    """

    def __init__(self, parsers: dict[str, XmlReportParser] | None = None) -> None:
        self.parsers = dict(REPORT_PARSERS if parsers is None else parsers)

    @staticmethod
    def report_path(module: ProjectNode, tool: str, source_set: str) -> Path:
        return module.reports_dir(tool) / f"{source_set}.xml"

    def collect(self, modules: Iterable[ProjectNode]) -> AggregationResult:
        result = AggregationResult()
        for module in modules:
            for tool in TOOL_NAMES:
                parser = self.parsers.get(tool)
                if parser is None:
                    continue
                for source_set in module.source_sets:
                    path = self.report_path(module, tool, source_set)
                    if not path.is_file():
                        continue
                    result.extend(parser.parse(path, module=module, source_set=source_set))
        return result

    def collect_tree(self, root: ProjectNode) -> AggregationResult:
        """Collect reports of every leaf module under *root*."""

        return self.collect(iter_leaves(root))


__all__ = [
    "REPORT_PARSERS",
    "ReportAggregator",
    "ReportContext",
    "ReportParseError",
    "XmlReportParser",
    "parse_checkstyle",
    "parse_findbugs",
    "parse_pmd",
]
