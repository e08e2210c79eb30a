"""Shared fixtures: build skill package trees under tmp_path."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SCRIPTS_DIR = PROJECT_ROOT / "scripts"

SKILL_NAMES = [
    "effective-go",
    "go-concurrency-patterns",
    "golang-code-review",
    "golang-testing",
]

VALID_SKILL_MD = """---
name: {name}
description: Test skill {name}
metadata:
  author: tester
  version: "1.0.0"
  language: en
  category: core
---

# {name}

See the [guide](references/guide.md).
"""

MakeSkill = Callable[..., Path]


def run_script(script: str, *args: str, cwd: Path | None = None, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    """Run one of the scripts/ CLIs with the current interpreter."""
    cmd = [sys.executable, str(SCRIPTS_DIR / script), *args]
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30, cwd=cwd, env=env)


def write_skill(
    root: Path,
    name: str,
    *,
    descriptor: str | None = None,
    descriptor_name: str = "SKILL.md",
    references: bool = True,
    reference_files: tuple[str, ...] = ("guide.md",),
    provenance: bool = True,
) -> Path:
    """Create one skill package. Defaults produce a fully valid package."""
    skill_dir = root / name
    skill_dir.mkdir(parents=True, exist_ok=True)

    content = VALID_SKILL_MD.format(name=name) if descriptor is None else descriptor
    (skill_dir / descriptor_name).write_text(content, encoding="utf-8")

    if references:
        refs = skill_dir / "references"
        refs.mkdir(exist_ok=True)
        for ref in reference_files:
            (refs / ref).write_text(f"# {ref}\n", encoding="utf-8")

    if provenance:
        (skill_dir / "GENERATION.md").write_text("# Generation\n\n- Version: 1.0.0\n", encoding="utf-8")

    return skill_dir


def write_catalog(path: Path, names: list[str]) -> Path:
    """Write a minimal catalog listing names in order."""
    blocks = [
        f'[[skill]]\nname = "{name}"\ndescription = "Test skill {name}"\ncategory = "core"\nlanguage = "en"\n'
        for name in names
    ]
    path.write_text("\n".join(blocks), encoding="utf-8")
    return path


def case_sensitive_fs(path: Path) -> bool:
    """Check whether SKILL.md and skill.md can coexist under path."""
    probe = path / "CaseProbe"
    probe.write_text("x")
    try:
        return not (path / "caseprobe").exists()
    finally:
        probe.unlink()


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    root = tmp_path / "skills"
    root.mkdir()
    return root


@pytest.fixture
def make_skill(skills_root: Path) -> MakeSkill:
    """Factory creating packages under skills_root."""

    def _make(name: str, **kwargs: object) -> Path:
        return write_skill(skills_root, name, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def valid_tree(skills_root: Path) -> Path:
    """Four complete, valid packages plus a catalog listing them."""
    for name in SKILL_NAMES:
        write_skill(skills_root, name)
    write_catalog(skills_root / "catalog.toml", SKILL_NAMES)
    return skills_root
