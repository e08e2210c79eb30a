#!/usr/bin/env python3
"""Tests for skillpack_common.py - report type, frontmatter parsing, name resolution."""

from pathlib import Path

import pytest
from conftest import SKILL_NAMES, write_catalog
from skill_catalog import CatalogError
from skillpack_common import (
    EXIT_CRITICAL,
    EXIT_OK,
    ValidationReport,
    discover_skill_names,
    is_empty_value,
    is_valid_kebab_case,
    parse_frontmatter,
    resolve_skill_names,
)


class TestParseFrontmatter:
    """Tests for locating and parsing the leading '---' block."""

    def test_lf_block_parses(self) -> None:
        """A block with LF endings parses into a mapping and a body."""
        result = parse_frontmatter("---\nname: demo\ndescription: A demo\n---\n# Body\n")
        assert result.ok
        assert result.data == {"name": "demo", "description": "A demo"}
        assert result.body == "# Body\n"

    def test_crlf_block_parses(self) -> None:
        """A block with CRLF endings parses."""
        result = parse_frontmatter("---\r\nname: demo\r\ndescription: A demo\r\n---\r\n# Body\r\n")
        assert result.ok
        assert result.data == {"name": "demo", "description": "A demo"}
        assert result.body.startswith("# Body")

    def test_nested_metadata_is_kept(self) -> None:
        """Nested mappings are returned as dicts."""
        result = parse_frontmatter("---\nname: demo\nmetadata:\n  author: me\n  version: '2'\n---\n")
        assert result.ok
        assert result.data is not None
        assert result.data["metadata"] == {"author": "me", "version": "2"}

    def test_no_leading_delimiter_fails(self) -> None:
        """Content not starting with --- has no frontmatter."""
        result = parse_frontmatter("# Title\n---\nname: demo\n---\n")
        assert not result.ok
        assert result.data is None
        assert "missing frontmatter block" in (result.error or "")

    def test_delimiter_must_be_on_first_line(self) -> None:
        """A blank line before --- is not accepted."""
        result = parse_frontmatter("\n---\nname: demo\n---\n")
        assert not result.ok

    def test_unclosed_block_fails(self) -> None:
        """An opening --- without a closing line fails."""
        result = parse_frontmatter("---\nname: demo\ndescription: never closed\n")
        assert not result.ok
        assert "missing frontmatter block" in (result.error or "")

    def test_closing_delimiter_must_be_alone_on_line(self) -> None:
        """Text after the closing --- does not close the block."""
        result = parse_frontmatter("---\nname: demo\n---not-a-delimiter\n")
        assert not result.ok

    def test_invalid_yaml_fails(self) -> None:
        """A YAML syntax error is reported as invalid frontmatter."""
        result = parse_frontmatter("---\nname: [unclosed\n---\n")
        assert not result.ok
        assert "invalid YAML frontmatter" in (result.error or "")

    def test_scalar_block_is_not_a_mapping(self) -> None:
        """A scalar block is rejected."""
        result = parse_frontmatter("---\njust a sentence\n---\n")
        assert not result.ok
        assert result.error == "frontmatter is not a key-value mapping"

    def test_list_block_is_not_a_mapping(self) -> None:
        """A list block is rejected."""
        result = parse_frontmatter("---\n- a\n- b\n---\n")
        assert not result.ok


class TestIsEmptyValue:
    """Tests for what counts as a missing field value."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_empty(self, value: object) -> None:
        """None, blank strings and empty containers are empty."""
        assert is_empty_value(value)

    @pytest.mark.parametrize("value", ["x", 0, False, ["a"], {"k": "v"}])
    def test_not_empty(self, value: object) -> None:
        """Text, numbers, booleans and filled containers are values."""
        assert not is_empty_value(value)


class TestValidationReport:
    """Tests for result accumulation and the pass/fail outcome."""

    def test_results_are_attributed_to_current_package(self) -> None:
        """Results belong to the most recently begun package."""
        report = ValidationReport()
        report.begin_package("a")
        report.passed("ok")
        report.begin_package("b")
        report.critical("broken")
        assert [r.package for r in report.results] == ["a", "b"]
        assert report.package_names() == ["a", "b"]
        assert report.results_for("b")[0].message == "broken"

    def test_warnings_do_not_fail(self) -> None:
        """Warnings and info never change the exit code."""
        report = ValidationReport()
        report.begin_package("a")
        report.warning("careful")
        report.info("fyi")
        assert not report.has_critical
        assert report.exit_code == EXIT_OK
        assert not report.package_failed("a")

    def test_critical_fails_only_its_package(self) -> None:
        """An error fails its own package and the run."""
        report = ValidationReport()
        report.begin_package("a")
        report.passed("ok")
        report.begin_package("b")
        report.critical("broken")
        assert report.exit_code == EXIT_CRITICAL
        assert report.failed_packages() == ["b"]
        assert report.error_count("a") == 0
        assert report.error_count("b") == 1
        assert report.error_count() == 1

    def test_summary_line(self) -> None:
        """The tally line counts packages, errors and warnings."""
        report = ValidationReport()
        report.begin_package("a")
        report.warning("w")
        report.begin_package("b")
        report.critical("c1")
        report.critical("c2")
        assert report.summary_line() == "2 package(s) checked: 1 passed, 1 failed (2 error(s), 1 warning(s))"

    def test_to_dict_groups_by_package(self) -> None:
        """JSON output groups results under their package."""
        report = ValidationReport()
        report.begin_package("a")
        report.passed("ok", "SKILL.md")
        data = report.to_dict()
        assert data["exit_code"] == 0
        packages = data["packages"]
        assert isinstance(packages, dict)
        assert packages["a"]["passed"] is True
        assert packages["a"]["results"] == [
            {"level": "PASSED", "message": "ok", "package": "a", "file": "SKILL.md"}
        ]


class TestNameResolution:
    """Tests for choosing which packages a script processes."""

    def test_kebab_case(self) -> None:
        """Package names must be kebab-case."""
        assert is_valid_kebab_case("go-concurrency-patterns")
        assert not is_valid_kebab_case("Go_Skills")
        assert not is_valid_kebab_case("trailing-")

    def test_discover_skips_hidden_and_files(self, skills_root: Path) -> None:
        """Discovery lists visible directories in sorted order."""
        for name in ("zeta", "alpha", ".git", "_drafts"):
            (skills_root / name).mkdir()
        (skills_root / "catalog.toml").write_text("")
        assert discover_skill_names(skills_root) == ["alpha", "zeta"]

    def test_discover_missing_root(self, tmp_path: Path) -> None:
        """Discovery under a missing root finds nothing."""
        assert discover_skill_names(tmp_path / "nope") == []

    def test_explicit_names_win(self, skills_root: Path) -> None:
        """Explicit names take precedence over discovery."""
        (skills_root / "other").mkdir()
        assert resolve_skill_names(skills_root, ["golang-testing"], discover=True) == ["golang-testing"]

    def test_catalog_order(self, skills_root: Path) -> None:
        """Catalog names keep file order."""
        catalog = write_catalog(skills_root / "catalog.toml", list(reversed(SKILL_NAMES)))
        assert resolve_skill_names(skills_root, catalog_path=catalog) == list(reversed(SKILL_NAMES))

    def test_missing_catalog_raises(self, skills_root: Path) -> None:
        """A missing catalog raises CatalogError."""
        with pytest.raises(CatalogError):
            resolve_skill_names(skills_root, catalog_path=skills_root / "missing.toml")
