#!/usr/bin/env python3
"""
Go Skills - Link Checker

Checks markdown links in each skill's SKILL.md:
- Links to references/ files must point at existing files
- Other links (external URLs, anchors, sibling files) are not checked

Usage:
    python scripts/check_links.py
    python scripts/check_links.py --skill golang-testing
    python scripts/check_links.py --json

Exit codes:
    0 - All reference links resolve
    1 - A reference link is broken, a SKILL.md is missing, or setup failed
"""

from __future__ import annotations

import argparse
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from skill_catalog import CatalogError
from skillpack_common import (
    CATALOG_FILENAME,
    DESCRIPTOR_FILENAME,
    REFERENCES_DIRNAME,
    REFERENCES_LINK_PREFIX,
    LiveValidationReport,
    ValidationReport,
    get_skills_root,
    print_banner,
    print_json,
    print_run_footer,
    resolve_skill_names,
)

# [text](target)
MD_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


@dataclass
class MarkdownLink:
    text: str
    url: str

    @property
    def is_reference(self) -> bool:
        return self.url.startswith(REFERENCES_LINK_PREFIX)

    @property
    def reference_path(self) -> str:
        """Target relative to references/, without any #anchor."""
        return self.url[len(REFERENCES_LINK_PREFIX) :].split("#", 1)[0]


def extract_links(markdown: str) -> list[MarkdownLink]:
    """Extract all inline [text](url) links in document order."""
    return [MarkdownLink(text, url.strip()) for text, url in MD_LINK_PATTERN.findall(markdown)]


def check_reference_link(link: MarkdownLink, refs_dir: Path, report: ValidationReport) -> bool:
    """Check a references/ link resolves to an existing file inside references/."""
    target = link.reference_path
    if not target:
        report.critical(f"Reference file not found: {link.url}", DESCRIPTOR_FILENAME)
        return False

    target = os.path.normpath(target)
    if os.path.isabs(target) or target == ".." or target.startswith(".." + os.sep):
        report.critical(f"Reference link points outside {REFERENCES_DIRNAME}/: {link.url}", DESCRIPTOR_FILENAME)
        return False

    try:
        found = (refs_dir / target).is_file()
    except OSError as e:
        report.critical(f"Cannot access reference file {link.url}: {e.strerror or e}", DESCRIPTOR_FILENAME)
        return False
    if not found:
        report.critical(f"Reference file not found: {link.url}", DESCRIPTOR_FILENAME)
        return False

    report.passed(f"{link.url} exists", f"{REFERENCES_DIRNAME}/{target}")
    return True


def check_skill_links(root_dir: Path, skill_name: str, report: ValidationReport) -> None:
    """Check every reference link in one package's SKILL.md."""
    report.begin_package(skill_name)
    skill_path = root_dir / skill_name
    descriptor = skill_path / DESCRIPTOR_FILENAME

    # Exact casing, same rule as the validator
    try:
        has_descriptor = DESCRIPTOR_FILENAME in {p.name for p in skill_path.iterdir()}
    except OSError:
        has_descriptor = False
    if not has_descriptor:
        report.critical(f"{DESCRIPTOR_FILENAME} not found in {skill_name}", DESCRIPTOR_FILENAME)
        return

    try:
        content = descriptor.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        report.critical(f"Cannot read {DESCRIPTOR_FILENAME}: {e}", DESCRIPTOR_FILENAME)
        return

    links = extract_links(content)
    report.info(f"Found {len(links)} links", DESCRIPTOR_FILENAME)

    refs_dir = skill_path / REFERENCES_DIRNAME
    reference_links = [link for link in links if link.is_reference]
    valid = sum(1 for link in reference_links if check_reference_link(link, refs_dir, report))

    report.info(f"{valid}/{len(reference_links)} reference links valid", DESCRIPTOR_FILENAME)


def check_links(root_dir: Path, skill_names: list[str], report: ValidationReport | None = None) -> ValidationReport:
    """Check reference links for every named package under root_dir."""
    if report is None:
        report = ValidationReport()
    for skill_name in skill_names:
        check_skill_links(root_dir, skill_name, report)
    return report


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0=ok, 1=broken links)
    """
    parser = argparse.ArgumentParser(description="Check references/ links in the Go skill packages")
    parser.add_argument("--skills-root", type=Path, default=None, help="Directory holding the skill packages")
    parser.add_argument("--skill", action="append", dest="skills", metavar="NAME", help="Check only this skill (repeatable)")
    parser.add_argument("--discover", action="store_true", help="Check every package directory under the skills root")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help=f"Skill catalog to read the package list from (default: {CATALOG_FILENAME} in the skills root)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only show broken links")
    args = parser.parse_args(argv)

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
        print(f"Error: no skill packages to check under {root_dir}", file=sys.stderr)
        return 1

    if args.json:
        report = check_links(root_dir, skill_names)
        print_json(report)
        return report.exit_code

    print_banner("Checking markdown links...")
    report = check_links(root_dir, skill_names, LiveValidationReport(show_passed=not args.quiet))
    print_run_footer(report, "All links valid!", "Link check failed!")
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
