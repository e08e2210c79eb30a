#!/usr/bin/env python3
"""
Go Skills - Skill Catalog

Loads the skill catalog (skills/catalog.toml): the ordered list of shipped
skills with their description, category, language, upstream source and tags.
The catalog is the default package list for the validator, the link checker
and the installer.

Catalog format:
    [[skill]]
    name = "effective-go"
    description = "Apply Go best practices, idioms, and conventions"
    category = "core"          # core | testing | concurrency | review
    language = "en"            # en | zh
    source = "https://go.dev/doc/effective_go"   # optional
    tags = ["best-practices", "idioms"]          # optional
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from skillpack_common import is_valid_kebab_case

VALID_CATEGORIES = ("core", "testing", "concurrency", "review")
VALID_LANGUAGES = ("en", "zh")

CATALOG_REQUIRED_FIELDS = ["name", "description", "category", "language"]


class CatalogError(Exception):
    """Raised when the skill catalog is missing or malformed."""


@dataclass
class SkillMeta:
    """One catalog entry."""

    name: str
    description: str
    category: str
    language: str
    source: str | None = None
    tags: list[str] = field(default_factory=list)


def _parse_entry(index: int, entry: Any) -> SkillMeta:
    if not isinstance(entry, dict):
        raise CatalogError(f"skill #{index} must be a table")

    for key in CATALOG_REQUIRED_FIELDS:
        value = entry.get(key)
        if not isinstance(value, str) or not value.strip():
            raise CatalogError(f"skill #{index}: missing or empty '{key}'")

    name = entry["name"]
    if not is_valid_kebab_case(name):
        raise CatalogError(f"skill #{index}: name '{name}' must be kebab-case")
    if entry["category"] not in VALID_CATEGORIES:
        raise CatalogError(f"{name}: invalid category '{entry['category']}'. Valid: {', '.join(VALID_CATEGORIES)}")
    if entry["language"] not in VALID_LANGUAGES:
        raise CatalogError(f"{name}: invalid language '{entry['language']}'. Valid: {', '.join(VALID_LANGUAGES)}")

    source = entry.get("source")
    if source is not None and not isinstance(source, str):
        raise CatalogError(f"{name}: 'source' must be a string")

    tags = entry.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise CatalogError(f"{name}: 'tags' must be a list of strings")

    return SkillMeta(
        name=name,
        description=entry["description"],
        category=entry["category"],
        language=entry["language"],
        source=source,
        tags=list(tags),
    )


def load_catalog(path: Path) -> list[SkillMeta]:
    """Load and check the catalog at path.

    Returns:
        Entries in file order

    Raises:
        CatalogError: if the file cannot be read or an entry is invalid
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise CatalogError(f"cannot read catalog {path}: {e.strerror or e}") from e
    except tomllib.TOMLDecodeError as e:
        raise CatalogError(f"invalid TOML in {path}: {e}") from e

    raw_entries = data.get("skill", [])
    if not isinstance(raw_entries, list) or not raw_entries:
        raise CatalogError(f"{path} defines no [[skill]] entries")

    entries: list[SkillMeta] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_entries, start=1):
        meta = _parse_entry(index, raw)
        if meta.name in seen:
            raise CatalogError(f"duplicate skill name '{meta.name}'")
        seen.add(meta.name)
        entries.append(meta)
    return entries


def skill_names(entries: list[SkillMeta]) -> list[str]:
    """Catalog skill names in file order."""
    return [e.name for e in entries]


def skills_by_category(entries: list[SkillMeta]) -> dict[str, list[SkillMeta]]:
    """Group entries by category. Every category is present, possibly empty."""
    grouped: dict[str, list[SkillMeta]] = {c: [] for c in VALID_CATEGORIES}
    for entry in entries:
        grouped[entry.category].append(entry)
    return grouped


def skills_by_language(entries: list[SkillMeta]) -> dict[str, list[SkillMeta]]:
    """Group entries by language. Every language is present, possibly empty."""
    grouped: dict[str, list[SkillMeta]] = {lang: [] for lang in VALID_LANGUAGES}
    for entry in entries:
        grouped[entry.language].append(entry)
    return grouped
