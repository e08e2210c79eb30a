#!/usr/bin/env python3
"""
Go Skills - Skill Package Validator

Validates the structure of every skill package in the repository:
1. The skill directory exists
2. SKILL.md exists with exact casing (skill.md does not count)
3. SKILL.md starts with valid YAML frontmatter
4. Frontmatter has non-empty 'name' and 'description'
5. Optional 'metadata' block (author, version, language, category)
6. references/ directory exists (empty is a warning)
7. GENERATION.md exists

Every package is checked even when an earlier one fails.

Usage:
    python scripts/validate_skills.py
    python scripts/validate_skills.py --skill effective-go --skill golang-testing
    python scripts/validate_skills.py --skills-root path/to/skills --discover
    python scripts/validate_skills.py --json

Exit codes:
    0 - No errors (warnings allowed)
    1 - At least one package has an error, or setup failed
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from skill_catalog import CatalogError
from skillpack_common import (
    CATALOG_FILENAME,
    DESCRIPTOR_FILENAME,
    METADATA_FIELDS,
    PROVENANCE_FILENAME,
    REFERENCES_DIRNAME,
    REQUIRED_FIELDS,
    LiveValidationReport,
    ValidationReport,
    get_skills_root,
    is_empty_value,
    parse_frontmatter,
    print_banner,
    print_json,
    print_run_footer,
    resolve_skill_names,
)


def validate_skill_dir(skill_path: Path, report: ValidationReport) -> bool:
    """Validate the package directory exists."""
    try:
        if not skill_path.exists():
            report.critical(f"Skill directory missing: {skill_path}")
            return False
        if not skill_path.is_dir():
            report.critical(f"Skill path is not a directory: {skill_path}")
            return False
    except OSError as e:
        report.critical(f"Cannot access skill directory {skill_path}: {e.strerror or e}")
        return False

    report.passed(f"Directory exists: {skill_path}")
    return True


def validate_descriptor_casing(skill_path: Path, report: ValidationReport) -> bool:
    """Validate SKILL.md exists with exact casing.

    Entries are listed and compared as strings because an existence check on
    SKILL.md succeeds for skill.md on case-insensitive filesystems.
    """
    try:
        entries = [p.name for p in skill_path.iterdir()]
    except OSError as e:
        report.critical(f"Cannot list {skill_path}: {e.strerror or e}")
        return False

    has_exact = DESCRIPTOR_FILENAME in entries
    wrong_case = sorted(n for n in entries if n.lower() == DESCRIPTOR_FILENAME.lower() and n != DESCRIPTOR_FILENAME)

    if wrong_case and not has_exact:
        report.critical(
            f"Found {wrong_case[0]} instead of {DESCRIPTOR_FILENAME} (wrong casing)",
            wrong_case[0],
        )
        return False

    if wrong_case:
        report.warning(
            f"Both {', '.join(wrong_case)} and {DESCRIPTOR_FILENAME} exist "
            f"(duplicate descriptor casing, using {DESCRIPTOR_FILENAME})",
            DESCRIPTOR_FILENAME,
        )

    if not has_exact:
        report.critical(f"{DESCRIPTOR_FILENAME} missing in {skill_path.name}", DESCRIPTOR_FILENAME)
        return False

    report.passed(f"{DESCRIPTOR_FILENAME} exists with correct casing", DESCRIPTOR_FILENAME)
    return True


def validate_frontmatter(skill_path: Path, report: ValidationReport) -> dict[str, Any] | None:
    """Read SKILL.md and parse its frontmatter block."""
    descriptor = skill_path / DESCRIPTOR_FILENAME
    try:
        content = descriptor.read_text(encoding="utf-8")
    except OSError as e:
        report.critical(f"Cannot read {DESCRIPTOR_FILENAME}: {e.strerror or e}", DESCRIPTOR_FILENAME)
        return None
    except UnicodeDecodeError as e:
        report.critical(f"{DESCRIPTOR_FILENAME} is not valid UTF-8: {e.reason}", DESCRIPTOR_FILENAME)
        return None

    parsed = parse_frontmatter(content)
    if not parsed.ok:
        report.critical(f"Missing or invalid frontmatter in {DESCRIPTOR_FILENAME}: {parsed.error}", DESCRIPTOR_FILENAME)
        return None

    report.passed("Valid YAML frontmatter", DESCRIPTOR_FILENAME)
    return parsed.data


def validate_required_fields(frontmatter: dict[str, Any], skill_name: str, report: ValidationReport) -> None:
    """Validate each required field is present and non-empty."""
    for field_name in REQUIRED_FIELDS:
        if is_empty_value(frontmatter.get(field_name)):
            report.critical(f"Missing required frontmatter field: {field_name}", DESCRIPTOR_FILENAME)
        else:
            report.passed(f"Frontmatter has {field_name}", DESCRIPTOR_FILENAME)

    name = frontmatter.get("name")
    if not is_empty_value(name) and name != skill_name:
        report.info(f"Skill name '{name}' differs from directory name '{skill_name}'", DESCRIPTOR_FILENAME)


def validate_metadata(frontmatter: dict[str, Any], report: ValidationReport) -> None:
    """Record the optional metadata block. Never an error."""
    metadata = frontmatter.get("metadata")
    if is_empty_value(metadata):
        report.warning("No metadata field in frontmatter", DESCRIPTOR_FILENAME)
        return
    if not isinstance(metadata, dict):
        report.warning(
            f"'metadata' should be a mapping, got {type(metadata).__name__}",
            DESCRIPTOR_FILENAME,
        )
        return

    report.passed("Has metadata field", DESCRIPTOR_FILENAME)
    for key in METADATA_FIELDS:
        if not is_empty_value(metadata.get(key)):
            report.info(f"  - {key}: {metadata[key]}", DESCRIPTOR_FILENAME)


def validate_references_dir(skill_path: Path, report: ValidationReport) -> None:
    """Validate references/ exists. An empty directory is only a warning."""
    refs_dir = skill_path / REFERENCES_DIRNAME
    try:
        if not refs_dir.exists():
            report.critical(f"{REFERENCES_DIRNAME} directory missing in {skill_path.name}", f"{REFERENCES_DIRNAME}/")
            return
        if not refs_dir.is_dir():
            report.critical(f"{REFERENCES_DIRNAME} is not a directory", REFERENCES_DIRNAME)
            return
        docs = [p for p in refs_dir.iterdir() if p.is_file() and p.suffix == ".md"]
    except OSError as e:
        report.critical(f"Cannot access {REFERENCES_DIRNAME}/: {e.strerror or e}", f"{REFERENCES_DIRNAME}/")
        return

    report.passed(f"{REFERENCES_DIRNAME}/ directory exists with {len(docs)} files", f"{REFERENCES_DIRNAME}/")
    if not docs:
        report.warning(f"{REFERENCES_DIRNAME}/ directory is empty", f"{REFERENCES_DIRNAME}/")


def validate_provenance(skill_path: Path, report: ValidationReport) -> None:
    """Validate GENERATION.md exists."""
    try:
        present = (skill_path / PROVENANCE_FILENAME).is_file()
    except OSError as e:
        report.critical(f"Cannot access {PROVENANCE_FILENAME}: {e.strerror or e}", PROVENANCE_FILENAME)
        return
    if not present:
        report.critical(f"{PROVENANCE_FILENAME} missing in {skill_path.name}", PROVENANCE_FILENAME)
        return
    report.passed(f"{PROVENANCE_FILENAME} exists", PROVENANCE_FILENAME)


def validate_skill(root_dir: Path, skill_name: str, report: ValidationReport) -> None:
    """Run every check for one package, in order."""
    report.begin_package(skill_name)
    skill_path = root_dir / skill_name

    if not validate_skill_dir(skill_path, report):
        return
    if not validate_descriptor_casing(skill_path, report):
        return

    frontmatter = validate_frontmatter(skill_path, report)
    if frontmatter is not None:
        validate_required_fields(frontmatter, skill_name, report)
        validate_metadata(frontmatter, report)

    validate_references_dir(skill_path, report)
    validate_provenance(skill_path, report)


def validate(root_dir: Path, skill_names: list[str], report: ValidationReport | None = None) -> ValidationReport:
    """Validate every named package under root_dir.

    Args:
        root_dir: Directory with one subdirectory per package
        skill_names: Packages to check, in report order
        report: Report to record into (a fresh one by default)

    Returns:
        The report with one group of results per package

    Raises:
        ValueError: if skill_names is empty
    """
    if not skill_names:
        raise ValueError("skill_names must not be empty")

    if report is None:
        report = ValidationReport()
    for skill_name in skill_names:
        validate_skill(root_dir, skill_name, report)
    return report


# =============================================================================
# CLI Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate the structure of the Go skill packages")
    parser.add_argument(
        "--skills-root",
        type=Path,
        default=None,
        help="Directory holding the skill packages (default: skills/ in this repository)",
    )
    parser.add_argument(
        "--skill",
        action="append",
        dest="skills",
        metavar="NAME",
        help="Validate only this skill (repeatable)",
    )
    parser.add_argument(
        "--discover",
        action="store_true",
        help="Validate every package directory under the skills root instead of the catalog list",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help=f"Skill catalog to read the package list from (default: {CATALOG_FILENAME} in the skills root)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only show warnings and errors")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0=ok, 1=errors)
    """
    args = build_parser().parse_args(argv)
    root_dir = (args.skills_root or get_skills_root()).resolve()

    if not root_dir.is_dir():
        print(f"Error: skills root {root_dir} is not a directory", file=sys.stderr)
        return 1

    try:
        skill_names = resolve_skill_names(root_dir, args.skills, args.discover, args.catalog)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not skill_names:
        print(f"Error: no skill packages to validate under {root_dir}", file=sys.stderr)
        return 1

    if args.json:
        report = validate(root_dir, skill_names)
        print_json(report)
        return report.exit_code

    print_banner("Validating Go skills structure...")
    report = validate(root_dir, skill_names, LiveValidationReport(show_passed=not args.quiet))
    print_run_footer(report, "All validations passed!", "Validation failed!")
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
