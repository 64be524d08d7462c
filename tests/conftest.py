# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from qaware.models import ProjectNode
from qaware.modules import build_module_tree

CHECKSTYLE_ONE_ERROR = """<?xml version="1.0" encoding="UTF-8"?>
<checkstyle version="8.0">
  <file name="{module_dir}/src/main/java/demo/App.java">
    <error line="12" column="5" severity="error"
           message="Line is longer than 120 characters (found 131)."
           source="com.puppycrawl.tools.checkstyle.checks.sizes.LineLengthCheck"/>
  </file>
  <file name="{module_dir}/src/main/java/demo/Clean.java"/>
</checkstyle>
"""

PMD_TWO_VIOLATIONS = """<?xml version="1.0" encoding="UTF-8"?>
<pmd version="5.8.1" timestamp="2017-05-04T10:00:00.000">
  <file name="{module_dir}/src/main/java/demo/Service.java">
    <violation beginline="8" endline="8" begincolumn="1" endcolumn="30" rule="UnusedImports"
               ruleset="Import Statements" package="demo" priority="4">
Avoid unused imports such as 'java.util.List'
    </violation>
    <violation beginline="20" endline="22" begincolumn="9" endcolumn="9" rule="EmptyCatchBlock"
               ruleset="Empty Code" package="demo" priority="3">
Avoid empty catch blocks
    </violation>
  </file>
</pmd>
"""

FINDBUGS_ONE_BUG = """<?xml version="1.0" encoding="UTF-8"?>
<BugCollection version="3.0.1" sequence="0" timestamp="1493892000000" analysisTimestamp="1493892000000" release="">
  <Project projectName="moduleA"/>
  <BugInstance type="NP_NULL_ON_SOME_PATH" priority="1" rank="6" abbrev="NP" category="CORRECTNESS">
    <ShortMessage>Possible null pointer dereference</ShortMessage>
    <LongMessage>Possible null pointer dereference of value in demo.App.run()</LongMessage>
    <Class classname="demo.App" primary="true">
      <SourceLine classname="demo.App" start="3" end="40" sourcefile="App.java" sourcepath="demo/App.java"/>
    </Class>
    <SourceLine classname="demo.App" start="17" end="17" sourcefile="App.java" sourcepath="demo/App.java"/>
  </BugInstance>
  <FindBugsSummary total_classes="4" total_bugs="1"/>
</BugCollection>
"""

PMD_NAMESPACED_ONE_VIOLATION = """<?xml version="1.0" encoding="UTF-8"?>
<pmd xmlns="http://pmd.sourceforge.net/report/2.0.0"
     xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
     xsi:schemaLocation="http://pmd.sourceforge.net/report/2.0.0 http://pmd.sourceforge.net/report_2_0_0.xsd"
     version="5.8.1" timestamp="2017-05-04T10:00:00.000">
  <file name="{module_dir}/src/main/java/demo/Repository.java">
    <violation beginline="31" endline="31" begincolumn="9" endcolumn="40" rule="UnusedLocalVariable"
               ruleset="Unused Code" package="demo" class="Repository" method="load" priority="3">
Avoid unused local variables such as 'cursor'.
    </violation>
  </file>
  <error filename="{module_dir}/src/main/java/demo/Broken.java" msg="Error while parsing Broken.java"/>
</pmd>
"""

ReportWriter = Callable[[ProjectNode, str, str, str], Path]


@pytest.fixture
def two_module_project(tmp_path: Path) -> ProjectNode:
    """Return a root grouping project with ``moduleA`` and ``moduleB`` leaves."""
    return build_module_tree(tmp_path, ["moduleA", "moduleB"])


@pytest.fixture
def write_report() -> ReportWriter:
    """Return a helper writing ``<reports>/<tool>/<source_set>.xml`` for a module."""

    def _write(module: ProjectNode, tool: str, source_set: str, content: str) -> Path:
        target = module.reports_dir(tool) / f"{source_set}.xml"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content.format(module_dir=module.directory), encoding="utf-8")
        return target

    return _write


@pytest.fixture
def report_samples() -> dict[str, str]:
    """Return one sample report per tool, keyed by tool name."""
    return {
        "checkstyle": CHECKSTYLE_ONE_ERROR,
        "pmd": PMD_TWO_VIOLATIONS,
        "findbugs": FINDBUGS_ONE_BUG,
    }


@pytest.fixture
def pmd_namespaced_sample() -> str:
    """Return a PMD 5.x report, which declares the PMD report namespace."""
    return PMD_NAMESPACED_ONE_VIOLATION
