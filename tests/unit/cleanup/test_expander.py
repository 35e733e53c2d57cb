"""Unit tests for pattern expansion and the cleanup scanner."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from cleanctl.cleanup.expander import CleanupScanner, expand_pattern, has_inner_wildcard
from cleanctl.cleanup.models import CleanupCategory, CleanupPathDefinition
from cleanctl.core.cancel import CancellationToken
from cleanctl.errors import SizeStatError


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Temporary home with a few cache, log and container entries."""
    home_dir = tmp_path / "home"
    caches = home_dir / "Library" / "Caches"
    (caches / "AppA").mkdir(parents=True)
    (caches / "AppA" / "blob").write_bytes(b"x" * 100)
    (caches / "Homebrew" / "pkg").mkdir(parents=True)
    (caches / "Homebrew" / "pkg" / "bottle").write_bytes(b"x" * 200)
    (home_dir / "Library" / "Logs").mkdir(parents=True)
    (home_dir / "Library" / "Logs" / "app.log").write_bytes(b"x" * 50)
    container = home_dir / "Library" / "Containers" / "com.example.app"
    (container / "Data" / "Library" / "Caches").mkdir(parents=True)
    (container / "Data" / "Library" / "Caches" / "c").write_bytes(b"x" * 30)
    return home_dir


def _definition(pattern: str, category: CleanupCategory) -> CleanupPathDefinition:
    return CleanupPathDefinition(pattern=pattern, category=category, description=pattern)


class TestExpandPattern:
    """Tests for expand_pattern."""

    def test_literal_existing(self, home: Path) -> None:
        """A pattern without wildcard returns itself when it exists."""
        assert expand_pattern("~/Library/Logs", home) == [f"{home}/Library/Logs"]

    def test_literal_missing(self, home: Path) -> None:
        """A missing literal pattern yields nothing."""
        assert expand_pattern("~/Library/Nope", home) == []

    def test_literal_dangling_symlink(self, home: Path, tmp_path: Path) -> None:
        """A dangling symlink counts as existing."""
        link = home / "dangling"
        os.symlink(tmp_path / "nowhere", link)
        assert expand_pattern("~/dangling", home) == [str(link)]

    def test_wildcard_lists_children(self, home: Path) -> None:
        """The wildcard lists the prefix's immediate children, sorted."""
        assert expand_pattern("~/Library/Caches/*", home) == [
            f"{home}/Library/Caches/AppA",
            f"{home}/Library/Caches/Homebrew",
        ]

    def test_wildcard_one_level_only(self, home: Path) -> None:
        """Segments after the wildcard are ignored."""
        result = expand_pattern("~/Library/Containers/*/Data/Library/Caches/*", home)
        assert result == [f"{home}/Library/Containers/com.example.app"]

    def test_missing_prefix(self, home: Path) -> None:
        """A missing prefix yields nothing."""
        assert expand_pattern("~/Library/Missing/*", home) == []

    def test_unreadable_prefix(self, home: Path) -> None:
        """An unreadable prefix yields nothing instead of raising."""
        with patch("cleanctl.cleanup.expander.os.listdir", side_effect=PermissionError("denied")):
            assert expand_pattern("~/Library/Caches/*", home) == []

    def test_absolute_pattern(self, tmp_path: Path) -> None:
        """Absolute patterns are not touched by home expansion."""
        (tmp_path / "a").mkdir()
        assert expand_pattern(f"{tmp_path}/*") == [f"{tmp_path}/a"]


class TestHasInnerWildcard:
    """Tests for has_inner_wildcard."""

    def test_trailing_wildcard(self) -> None:
        """A final-segment wildcard has nothing after it."""
        assert has_inner_wildcard("~/Library/Caches/*") is False

    def test_inner_wildcard(self) -> None:
        """Further segments after the wildcard are detected."""
        assert has_inner_wildcard("/Volumes/*/.Trashes/*") is True

    def test_no_wildcard(self) -> None:
        """Literal patterns have no wildcard."""
        assert has_inner_wildcard("~/Library/Logs") is False


class TestCleanupScanner:
    """Tests for CleanupScanner."""

    def test_groups_in_definition_order(self, home: Path) -> None:
        """Items are grouped by category in definition order."""
        definitions = (
            _definition("~/Library/Logs/*", CleanupCategory.LOGS),
            _definition("~/Library/Caches/*", CleanupCategory.USER_CACHES),
        )
        result = CleanupScanner(definitions, home=home).scan()

        assert [g.category for g in result.groups] == [
            CleanupCategory.LOGS,
            CleanupCategory.USER_CACHES,
        ]
        assert result.groups[0].items[0].size_bytes == 50

    def test_sizes_measured(self, home: Path) -> None:
        """Directory items carry the size of their contents."""
        definitions = (_definition("~/Library/Caches/*", CleanupCategory.USER_CACHES),)
        result = CleanupScanner(definitions, home=home).scan()

        sizes = {item.name: item.size_bytes for item in result.items}
        assert sizes == {"AppA": 100, "Homebrew": 200}
        assert result.total_size == 300

    def test_ancestor_dropped(self, home: Path) -> None:
        """An item containing another item is not listed twice."""
        definitions = (
            _definition("~/Library/Caches/*", CleanupCategory.USER_CACHES),
            _definition("~/Library/Caches/Homebrew/*", CleanupCategory.HOMEBREW),
        )
        result = CleanupScanner(definitions, home=home).scan()

        paths = [item.path for item in result.items]
        assert f"{home}/Library/Caches/Homebrew" not in paths
        assert f"{home}/Library/Caches/Homebrew/pkg" in paths
        assert result.total_size == 300

    def test_duplicate_paths_kept_once(self, home: Path) -> None:
        """A path produced by two definitions appears once."""
        definitions = (
            _definition("~/Library/Logs/*", CleanupCategory.LOGS),
            _definition("~/Library/Logs/app.log", CleanupCategory.LOGS),
        )
        result = CleanupScanner(definitions, home=home).scan()
        assert [item.name for item in result.items] == ["app.log"]

    def test_inner_wildcard_items_deselected(self, home: Path) -> None:
        """Items from patterns with an inner wildcard are not selected."""
        definitions = (
            _definition(
                "~/Library/Containers/*/Data/Library/Caches/*", CleanupCategory.USER_CACHES
            ),
        )
        result = CleanupScanner(definitions, home=home).scan()

        assert len(result.items) == 1
        assert result.items[0].is_selected is False
        assert result.groups[0].selected_count == 0

    def test_unsafe_paths_rejected(self, home: Path) -> None:
        """Expanded paths that fail validation are dropped and reported."""
        (home / "Documents").mkdir()
        (home / "Documents" / "thesis.pdf").write_text("work")
        definitions = (_definition("~/Documents/*", CleanupCategory.USER_CACHES),)

        result = CleanupScanner(definitions, home=home).scan()

        assert result.items == []
        assert result.rejected == [f"{home}/Documents/thesis.pdf"]

    def test_include_unsafe_keeps_paths(self, home: Path) -> None:
        """include_unsafe keeps paths that fail validation."""
        (home / "Documents").mkdir()
        (home / "Documents" / "thesis.pdf").write_text("work")
        definitions = (_definition("~/Documents/*", CleanupCategory.USER_CACHES),)

        result = CleanupScanner(definitions, home=home, include_unsafe=True).scan()
        assert [item.name for item in result.items] == ["thesis.pdf"]

    def test_size_failure_recorded(self, home: Path) -> None:
        """Paths that cannot be measured become issues."""
        definitions = (_definition("~/Library/Logs/*", CleanupCategory.LOGS),)
        with patch(
            "cleanctl.cleanup.expander.get_size",
            side_effect=SizeStatError("Cannot stat"),
        ):
            result = CleanupScanner(definitions, home=home).scan()

        assert result.items == []
        assert len(result.issues) == 1
        assert result.issues[0].path == f"{home}/Library/Logs/app.log"

    def test_cancelled_before_start(self, home: Path) -> None:
        """A cancelled token stops every definition."""
        token = CancellationToken()
        token.cancel()
        definitions = (_definition("~/Library/Logs/*", CleanupCategory.LOGS),)

        result = CleanupScanner(definitions, home=home).scan(cancel_token=token)

        assert result.cancelled is True
        assert result.groups == []

    def test_nothing_found(self, home: Path) -> None:
        """Missing locations give an empty result."""
        definitions = (_definition("~/Nope/*", CleanupCategory.NPM),)
        result = CleanupScanner(definitions, home=home).scan()
        assert result.groups == []
        assert result.total_size == 0
