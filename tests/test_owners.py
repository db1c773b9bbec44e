"""Tests for covdelta.owners: CODEOWNERS parsing and resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from covdelta.owners import CodeOwners, CodeOwnersError, OwnerRule

if TYPE_CHECKING:
    from pathlib import Path


_CODEOWNERS = """\
# Default owners
*               @org/everyone

*.js            @org/frontend
/docs/          @org/docs
apps/           @org/apps
/scripts/*      @org/tooling
**/logs         @org/ops
src/legacy/     # unowned
\\#notes        @org/notes
"""


@pytest.fixture
def owners() -> CodeOwners:
    return CodeOwners.from_text(_CODEOWNERS)


class TestOwnerRuleParse:
    def test_blank_line(self) -> None:
        assert OwnerRule.parse("   ") is None

    def test_comment_line(self) -> None:
        assert OwnerRule.parse("# comment") is None

    def test_pattern_and_owners(self) -> None:
        rule = OwnerRule.parse("*.py @a @b  # trailing comment")
        assert rule is not None
        assert rule.pattern == "*.py"
        assert rule.owners == ("@a", "@b")

    def test_pattern_without_owners(self) -> None:
        rule = OwnerRule.parse("vendor/")
        assert rule is not None
        assert rule.owners == ()


class TestResolveOwners:
    def test_default_rule(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("README.md") == ["@org/everyone"]

    def test_extension_at_any_depth(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("src/app/index.js") == ["@org/frontend"]

    def test_anchored_directory(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("docs/guide/intro.md") == ["@org/docs"]
        assert owners.resolve_owners("src/docs/intro.md") == ["@org/everyone"]

    def test_unanchored_directory_any_depth(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("apps/web/main.rb") == ["@org/apps"]
        assert owners.resolve_owners("packages/apps/main.rb") == ["@org/apps"]

    def test_directory_pattern_needs_contents(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("apps") == ["@org/everyone"]

    def test_direct_children_only(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("scripts/build.sh") == ["@org/tooling"]
        assert owners.resolve_owners("scripts/ci/build.sh") == ["@org/everyone"]

    def test_double_star(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("logs/today.txt") == ["@org/ops"]
        assert owners.resolve_owners("var/app/logs/today.txt") == ["@org/ops"]

    def test_last_match_wins(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("apps/web/index.js") == ["@org/apps"]

    def test_rule_without_owners_unowns(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("src/legacy/old.rb") == []

    def test_escaped_hash(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("#notes") == ["@org/notes"]

    def test_leading_dot_slash_normalized(self, owners: CodeOwners) -> None:
        assert owners.resolve_owners("./docs/a.md") == ["@org/docs"]

    def test_no_rules(self) -> None:
        assert CodeOwners().resolve_owners("anything.rb") == []

    def test_negated_pattern_ignored(self) -> None:
        owners = CodeOwners.from_text("*.rb @ruby\n!spec/*.rb @nobody\n")
        assert len(owners.rules) == 1
        assert owners.resolve_owners("spec/a.rb") == ["@ruby"]

    def test_question_mark(self) -> None:
        owners = CodeOwners.from_text("/lib/v?.rb @versions\n")
        assert owners.resolve_owners("lib/v1.rb") == ["@versions"]
        assert owners.resolve_owners("lib/v10.rb") == []


class TestFromFile:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "CODEOWNERS"
        path.write_text("*.rb @ruby\n", encoding="utf-8")
        owners = CodeOwners.from_file(path)
        assert owners.source == path
        assert owners.resolve_owners("a.rb") == ["@ruby"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CodeOwnersError, match="Cannot read CODEOWNERS"):
            CodeOwners.from_file(tmp_path / "missing")


class TestFromDirectory:
    def test_finds_github_location(self, tmp_path: Path) -> None:
        (tmp_path / ".github").mkdir()
        (tmp_path / ".github" / "CODEOWNERS").write_text("* @gh\n", encoding="utf-8")
        owners = CodeOwners.from_directory(tmp_path)
        assert owners.resolve_owners("a.rb") == ["@gh"]

    def test_root_location_preferred(self, tmp_path: Path) -> None:
        (tmp_path / "CODEOWNERS").write_text("* @root\n", encoding="utf-8")
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "CODEOWNERS").write_text("* @docs\n", encoding="utf-8")
        assert CodeOwners.from_directory(tmp_path).resolve_owners("a.rb") == ["@root"]

    def test_searches_parent_directories(self, tmp_path: Path) -> None:
        (tmp_path / "CODEOWNERS").write_text("* @parent\n", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        owners = CodeOwners.from_directory(nested)
        assert owners.source == (tmp_path / "CODEOWNERS").resolve()

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "CODEOWNERS").write_text("* @cwd\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert CodeOwners.from_directory().resolve_owners("x") == ["@cwd"]
