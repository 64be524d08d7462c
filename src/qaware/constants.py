# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across qaware modules."""

from __future__ import annotations

from typing import Final

CODE_QUALITY_DIR: Final[str] = "code-quality"
BUNDLED_RESOURCE_PACKAGE: Final[str] = "qaware"
BUNDLED_RESOURCE_ROOT: Final[str] = f"data/{CODE_QUALITY_DIR}"

CHECKSTYLE: Final[str] = "checkstyle"
PMD: Final[str] = "pmd"
FINDBUGS: Final[str] = "findbugs"

# Aggregation order of the report schemas.
TOOL_NAMES: Final[tuple[str, ...]] = (CHECKSTYLE, PMD, FINDBUGS)

DEFAULT_SOURCE_SETS: Final[tuple[str, ...]] = ("main", "test")
BUILD_DIR_NAME: Final[str] = "build"
REPORTS_DIR_NAME: Final[str] = "reports"

BUILD_STEP: Final[str] = "build"
CHECK_STEP: Final[str] = "check"
CHECK_CODE_QUALITY_ERRORS_STEP: Final[str] = "checkCodeQualityErrors"

CHECKSTYLE_RULES: Final[str] = "checkstyle/checkstyle-rules.xml"
CHECKSTYLE_SUPPRESSIONS: Final[str] = "checkstyle/checkstyle-suppressions.xml"
CHECKSTYLE_STYLESHEET: Final[str] = "checkstyle/checkstyle-noframes-severity-sorted.xsl"
PMD_RULES: Final[str] = "pmd/pmd-rules-general.xml"
PMD_STYLESHEET: Final[str] = "pmd/pmd-nicerhtml.xsl"
FINDBUGS_EXCLUDE: Final[str] = "findbugs/findbugs-exclude.xml"
FINDBUGS_STYLESHEET: Final[str] = "findbugs/default.xsl"

BUNDLED_RESOURCES: Final[tuple[str, ...]] = (
    CHECKSTYLE_RULES,
    CHECKSTYLE_SUPPRESSIONS,
    CHECKSTYLE_STYLESHEET,
    PMD_RULES,
    PMD_STYLESHEET,
    FINDBUGS_EXCLUDE,
    FINDBUGS_STYLESHEET,
)

GATE_BANNER: Final[str] = (
    "Rule violations were found at modules, please look at Checkstyle, Pmd or Findbugs reports:"
)
