#!/usr/bin/env python3
"""
Go Skills - Skill Installer

Copies skill packages into the Claude Code skills directory.

Destinations:
    global (-g/--global)  ~/.claude/skills/<skill>/
    local  (default)      ./.claude/skills/<skill>/

An existing copy of a skill is removed before the new copy is made. Package
structure is not checked here; run validate_skills.py first.

Usage:
    python scripts/install_skills.py                     # all skills, local
    python scripts/install_skills.py --global            # all skills, global
    python scripts/install_skills.py --skill golang-testing
    python scripts/install_skills.py --skill '*' --dry-run
    python scripts/install_skills.py --list

Exit codes:
    0 - All selected skills installed
    1 - Unknown skill requested, setup failed, or a copy failed
"""

from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path

from skill_catalog import CatalogError, SkillMeta, load_catalog, skill_names, skills_by_category
from skillpack_common import CATALOG_FILENAME, get_skills_root

# Selection value meaning "every skill in the catalog"
ALL_SKILLS = "*"


class UnknownSkillError(Exception):
    """Raised when the requested skill is not in the catalog."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(f"Unknown skill: {name}")
        self.name = name
        self.available = available


def resolve_selection(selection: str | None, available: list[str]) -> list[str]:
    """Turn the --skill value into the list of skills to install.

    Raises:
        UnknownSkillError: if selection names a skill that is not available
    """
    if selection is None or selection == ALL_SKILLS:
        return list(available)
    if selection not in available:
        raise UnknownSkillError(selection, available)
    return [selection]


def resolve_destination(global_scope: bool) -> Path:
    """Get the skills directory for the requested scope."""
    if global_scope:
        return Path.home() / ".claude" / "skills"
    return Path.cwd() / ".claude" / "skills"


def install_skill(source_root: Path, dest_root: Path, name: str) -> Path:
    """Copy one skill tree, replacing any previous copy.

    Returns:
        Path of the installed copy

    Raises:
        OSError: if the source is missing or the copy fails
    """
    source_dir = source_root / name
    target_dir = dest_root / name

    if not source_dir.is_dir():
        raise FileNotFoundError(f"source directory not found: {source_dir}")

    if target_dir.is_dir() and not target_dir.is_symlink():
        shutil.rmtree(target_dir)
    elif target_dir.exists() or target_dir.is_symlink():
        target_dir.unlink()

    shutil.copytree(source_dir, target_dir)
    return target_dir


def print_catalog(entries: list[SkillMeta]) -> None:
    """Print available skills grouped by category."""
    print("Available skills:")
    for category, members in skills_by_category(entries).items():
        if not members:
            continue
        print(f"\n  {category}:")
        for meta in members:
            print(f"    {meta.name} [{meta.language}] - {meta.description}")


def main(argv: list[str] | None = None) -> int:
    """Entry point for the installer CLI.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    parser = argparse.ArgumentParser(description="Install Go skills for Claude Code")
    parser.add_argument(
        "-g",
        "--global",
        dest="global_scope",
        action="store_true",
        help="Install into ~/.claude/skills instead of ./.claude/skills",
    )
    parser.add_argument(
        "--skill",
        default=None,
        metavar="NAME",
        help=f"Install only this skill ('{ALL_SKILLS}' or omitted installs all)",
    )
    parser.add_argument("--skills-root", type=Path, default=None, help="Directory holding the skill packages")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help=f"Skill catalog listing the installable skills (default: {CATALOG_FILENAME} in the skills root)",
    )
    parser.add_argument("--list", action="store_true", help="List available skills and exit")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be installed without copying")
    args = parser.parse_args(argv)
    source_root = (args.skills_root or get_skills_root()).resolve()

    try:
        entries = load_catalog(args.catalog or source_root / CATALOG_FILENAME)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list:
        print_catalog(entries)
        return 0

    print("Go Skills Installer")

    available = skill_names(entries)
    try:
        to_install = resolve_selection(args.skill, available)
    except UnknownSkillError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        print(f"Available skills: {', '.join(e.available)}", file=sys.stderr)
        print("Installation failed", file=sys.stderr)
        return 1

    dest_root = resolve_destination(args.global_scope)

    if args.dry_run:
        for name in to_install:
            print(f"  [DRY RUN] Would install: {source_root / name} -> {dest_root / name}")
        print(f"\n[DRY RUN] Would install {len(to_install)} skill(s) to {dest_root}")
        return 0

    try:
        dest_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error: cannot create {dest_root}: {e.strerror or e}", file=sys.stderr)
        return 1

    failed: list[str] = []
    for name in to_install:
        try:
            install_skill(source_root, dest_root, name)
        except OSError as e:
            print(f"  [FAIL] Failed to install {name}: {e}", file=sys.stderr)
            failed.append(name)
            continue
        print(f"  [OK] Installed: {name}")

    installed = len(to_install) - len(failed)
    print(f"\nInstalled {installed} skill(s) to:")
    print(f"  {dest_root}")

    if failed:
        print(f"Installation failed for: {', '.join(failed)}", file=sys.stderr)
        return 1

    if args.global_scope:
        print("\nSkills installed globally. They will be available to all Claude Code projects.")
    else:
        print("\nSkills installed locally. They will be available in the current project.")
    print("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
