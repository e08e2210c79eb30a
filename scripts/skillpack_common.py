#!/usr/bin/env python3
"""
Go Skills - Common Module

Shared infrastructure for the skill package scripts (validator, link checker,
installer). This module contains:
- Type definitions (Level, ValidationResult, ValidationReport)
- Skill package layout constants
- Frontmatter parsing
- Package-name resolution and terminal formatting helpers

All scripts import from this module so that they agree on the package layout
and report format.
"""

from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

# =============================================================================
# Type Definitions
# =============================================================================

# Result levels
# - CRITICAL: fatal for the package and for the run (exit code 1)
# - WARNING: always reported, never blocks
# - INFO: informational only
# - PASSED: check passed
Level = Literal["CRITICAL", "WARNING", "INFO", "PASSED"]

LEVELS: tuple[Level, ...] = ("CRITICAL", "WARNING", "INFO", "PASSED")

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # No CRITICAL results
EXIT_CRITICAL = 1  # At least one CRITICAL result, or a setup error

# =============================================================================
# Skill Package Layout
# =============================================================================

# Casing is significant: "skill.md" does not satisfy this requirement
DESCRIPTOR_FILENAME = "SKILL.md"
REFERENCES_DIRNAME = "references"
PROVENANCE_FILENAME = "GENERATION.md"

REQUIRED_FIELDS = ("name", "description")
METADATA_FIELDS = ("author", "version", "language", "category")

# Link targets with this prefix resolve under the package's references/ dir
REFERENCES_LINK_PREFIX = f"{REFERENCES_DIRNAME}/"

# Kebab-case package names
NAME_PATTERN = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")

# Frontmatter block: "---" on the first line up to the next "---" line
FRONTMATTER_PATTERN = re.compile(r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def get_repo_root() -> Path:
    """Get the repository root directory (parent of scripts/)."""
    return Path(__file__).resolve().parent.parent


def get_skills_root() -> Path:
    """Get the directory holding one subdirectory per skill package."""
    return get_repo_root() / "skills"


# Catalog file expected at the top of a skills root
CATALOG_FILENAME = "catalog.toml"

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Single check outcome.

    Attributes:
        level: Result level (CRITICAL, WARNING, INFO, PASSED)
        message: Human-readable description of the result
        package: Skill package the check belongs to
        file: Optional file path related to the result, relative to the package
    """

    level: Level
    message: str
    package: str | None = None
    file: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, str | None] = {"level": self.level, "message": self.message}
        if self.package is not None:
            result["package"] = self.package
        if self.file is not None:
            result["file"] = self.file
        return result


@dataclass
class ValidationReport:
    """Results of one run over a list of skill packages.

    Results are kept in the order they were produced: by package, then by
    check order. Call ``begin_package`` before recording the checks of a
    package; every result added afterwards is attributed to it.
    """

    results: list[ValidationResult] = field(default_factory=list)
    packages: list[str] = field(default_factory=list)
    current_package: str | None = None

    def begin_package(self, name: str) -> None:
        """Start recording results for a package."""
        self.current_package = name
        if name not in self.packages:
            self.packages.append(name)

    def add(self, level: Level, message: str, file: str | None = None) -> None:
        """Add a result for the current package."""
        self.results.append(ValidationResult(level, message, self.current_package, file))

    def passed(self, message: str, file: str | None = None) -> None:
        """Add a passed check."""
        self.add("PASSED", message, file)

    def info(self, message: str, file: str | None = None) -> None:
        """Add an info message."""
        self.add("INFO", message, file)

    def warning(self, message: str, file: str | None = None) -> None:
        """Add a warning - always reported, never affects the exit code."""
        self.add("WARNING", message, file)

    def critical(self, message: str, file: str | None = None) -> None:
        """Add a fatal error for the current package."""
        self.add("CRITICAL", message, file)

    @property
    def has_critical(self) -> bool:
        """Check if any CRITICAL results exist."""
        return any(r.level == "CRITICAL" for r in self.results)

    @property
    def exit_code(self) -> int:
        """Exit code for the whole run. Warnings never change it."""
        return EXIT_CRITICAL if self.has_critical else EXIT_OK

    def count_by_level(self, package: str | None = None) -> dict[str, int]:
        """Get count of results by level, optionally for one package."""
        counts: dict[str, int] = {level: 0 for level in LEVELS}
        for r in self.results:
            if package is None or r.package == package:
                counts[r.level] += 1
        return counts

    def package_names(self) -> list[str]:
        """Packages in the order they were checked."""
        return list(self.packages)

    def results_for(self, package: str) -> list[ValidationResult]:
        """All results recorded for a package."""
        return [r for r in self.results if r.package == package]

    def error_count(self, package: str | None = None) -> int:
        """Number of CRITICAL results, for one package or for the run."""
        return self.count_by_level(package)["CRITICAL"]

    def package_failed(self, package: str) -> bool:
        """Check whether a package has at least one CRITICAL result."""
        return self.error_count(package) > 0

    def failed_packages(self) -> list[str]:
        """Packages with at least one CRITICAL result, in check order."""
        return [name for name in self.packages if self.package_failed(name)]

    def summary_line(self) -> str:
        """One-line tally of packages, errors and warnings."""
        total = len(self.packages)
        failed = len(self.failed_packages())
        counts = self.count_by_level()
        return (
            f"{total} package(s) checked: {total - failed} passed, {failed} failed "
            f"({counts['CRITICAL']} error(s), {counts['WARNING']} warning(s))"
        )

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "exit_code": self.exit_code,
            "counts": self.count_by_level(),
            "packages": {
                name: {
                    "passed": not self.package_failed(name),
                    "counts": self.count_by_level(name),
                    "results": [r.to_dict() for r in self.results_for(name)],
                }
                for name in self.packages
            },
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass
class LiveValidationReport(ValidationReport):
    """Report that prints every result the moment it is recorded.

    CRITICAL results go to stderr, everything else to stdout.
    """

    show_passed: bool = True

    def begin_package(self, name: str) -> None:
        super().begin_package(name)
        print(f"\n{colorize(name, 'BOLD')}")

    def add(self, level: Level, message: str, file: str | None = None) -> None:
        super().add(level, message, file)
        result = self.results[-1]
        if level in ("PASSED", "INFO") and not self.show_passed:
            return
        stream = sys.stderr if level == "CRITICAL" else sys.stdout
        print(f"  {format_result(result)}", file=stream)


@dataclass
class FrontmatterResult:
    """Outcome of parsing the frontmatter block of a descriptor file.

    Exactly one of ``data`` and ``error`` is set.
    """

    data: dict[str, Any] | None = None
    body: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# Frontmatter Parsing
# =============================================================================


def parse_frontmatter(content: str) -> FrontmatterResult:
    """Parse the YAML frontmatter block at the start of a descriptor file.

    The block must open on the very first line with ``---`` and close with a
    line holding only ``---``. LF and CRLF line endings are both accepted.

    Returns:
        FrontmatterResult with the parsed mapping and the prose body, or with
        the reason the block could not be parsed.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if match is None:
        return FrontmatterResult(body=content, error="missing frontmatter block (expected leading and closing '---')")

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        detail = str(e).replace("\n", " ")
        return FrontmatterResult(body=content, error=f"invalid YAML frontmatter: {detail}")

    if not isinstance(data, dict):
        return FrontmatterResult(body=content, error="frontmatter is not a key-value mapping")

    return FrontmatterResult(data=data, body=content[match.end() :])


def is_empty_value(value: Any) -> bool:
    """Check if a frontmatter value counts as missing.

    None, blank strings and empty lists/mappings are empty. Numbers and
    booleans are values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


# =============================================================================
# Package Name Resolution
# =============================================================================


def is_valid_kebab_case(name: str) -> bool:
    """Check if name follows kebab-case convention."""
    return bool(NAME_PATTERN.match(name))


def discover_skill_names(root: Path) -> list[str]:
    """List candidate package directories under root.

    Hidden and underscore-prefixed directories are skipped. Names are sorted
    so the report order is stable.
    """
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith((".", "_")))


def resolve_skill_names(
    root: Path,
    explicit: list[str] | None = None,
    discover: bool = False,
    catalog_path: Path | None = None,
) -> list[str]:
    """Decide which packages a script should process.

    Explicit names win, then directory discovery, then the catalog (by
    default the catalog.toml at the top of root).

    Raises:
        skill_catalog.CatalogError: if the catalog has to be read and cannot be
    """
    if explicit:
        return list(explicit)
    if discover:
        return discover_skill_names(root)

    from skill_catalog import load_catalog, skill_names

    return skill_names(load_catalog(catalog_path or root / CATALOG_FILENAME))


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

# ANSI color codes
COLORS = {
    "CRITICAL": "\033[91m",  # Red
    "WARNING": "\033[95m",  # Magenta - never blocks, always reported
    "INFO": "\033[90m",  # Gray
    "PASSED": "\033[92m",  # Green
    "RESET": "\033[0m",  # Reset
    "BOLD": "\033[1m",  # Bold
}

# Short tags printed in front of each result
TAGS = {
    "CRITICAL": "FAIL",
    "WARNING": "WARN",
    "INFO": "INFO",
    "PASSED": "OK",
}


def colorize(text: str, level: str) -> str:
    """Apply color to text based on level."""
    color = COLORS.get(level, "")
    return f"{color}{text}{COLORS['RESET']}"


def format_result(result: ValidationResult, show_file: bool = False) -> str:
    """Format a single result for terminal output."""
    parts = [f"{colorize('[' + TAGS[result.level] + ']', result.level)} {result.message}"]
    if show_file and result.file:
        parts.append(f" ({result.file})")
    return "".join(parts)


def print_banner(title: str) -> None:
    """Print the opening line of a run."""
    print(colorize(title, "BOLD"))


def print_run_footer(report: ValidationReport, ok_message: str, fail_message: str) -> None:
    """Print the tally line and final status of a run."""
    print("\n" + "=" * 60)
    print(report.summary_line())
    if report.exit_code == EXIT_OK:
        print(colorize(f"\n{ok_message}\n", "PASSED"))
    else:
        print(colorize(f"\n{fail_message}\n", "CRITICAL"), file=sys.stderr)


def print_json(report: ValidationReport) -> None:
    """Print a report as JSON."""
    print(report.to_json())
