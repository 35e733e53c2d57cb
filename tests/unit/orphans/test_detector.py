"""Unit tests for leftover classification and the orphan detector."""

import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest
from cleanctl.core.cancel import CancellationToken
from cleanctl.orphans.detector import (
    AppIndex,
    MatchStatus,
    OrphanDetector,
    classify_token,
    extract_app_name,
    extract_token,
    is_reverse_dns,
    is_system_item,
)
from cleanctl.orphans.models import InstalledApp, LeftoverCategory, LeftoverConfidence, LeftoverFile
from cleanctl.orphans.registry import StaticAppRegistry
from cleanctl.orphans.search_paths import user_library_paths

INSTALLED = (
    InstalledApp(
        name="Editor Pro",
        bundle_identifier="com.example.editor",
        path="/Applications/Editor Pro.app",
    ),
    InstalledApp(
        name="Slack",
        bundle_identifier="com.tinyspeck.slackmacgap",
        path="/Applications/Slack.app",
    ),
)

KNOWN = ("com.oldvendor.tool",)


@pytest.fixture
def index() -> AppIndex:
    """Index of the installed apps plus one remembered identifier."""
    return AppIndex.build(INSTALLED, KNOWN)


class TestTokenHelpers:
    """Tests for token derivation helpers."""

    @pytest.mark.parametrize(
        ("name", "token"),
        [
            ("com.example.editor.plist", "com.example.editor"),
            ("com.example.editor.savedState", "com.example.editor"),
            ("com.example.editor.binarycookies", "com.example.editor"),
            ("group.com.example.shared", "com.example.shared"),
            ("Editor Pro", "Editor Pro"),
        ],
    )
    def test_extract_token(self, name: str, token: str) -> None:
        """Known suffixes and the group prefix are stripped."""
        assert extract_token(name) == token

    def test_is_reverse_dns(self) -> None:
        """Only dotted names with a known first segment are identifiers."""
        assert is_reverse_dns("com.example.editor") is True
        assert is_reverse_dns("io.github.tool") is True
        assert is_reverse_dns("Editor Pro") is False
        assert is_reverse_dns("notes.txt") is False

    def test_extract_app_name(self) -> None:
        """The last identifier segment is the app name."""
        assert extract_app_name("com.example.editor") == "editor"
        assert extract_app_name("Editor Pro") == "Editor Pro"

    def test_is_system_item(self) -> None:
        """Operating system items are recognized."""
        assert is_system_item("com.apple.Safari.plist") is True
        assert is_system_item("iCloud") is True
        assert is_system_item("com.example.editor") is False


class TestClassifyToken:
    """Tests for classify_token."""

    @pytest.mark.parametrize(
        "name",
        [
            "com.example.editor",
            "com.example.editor.plist",
            "COM.EXAMPLE.EDITOR",
            "com.example.editor.helper",
            "group.com.example.editor",
        ],
    )
    def test_installed_identifier_owned(self, name: str, index: AppIndex) -> None:
        """Installed identifiers and their sub-identifiers are owned."""
        match = classify_token(name, index)
        assert match.status == MatchStatus.OWNED
        assert match.confidence == LeftoverConfidence.HIGH

    @pytest.mark.parametrize("name", ["Slack", "Editor Pro", "editorpro-cache", "Slack Helper"])
    def test_installed_name_owned(self, name: str, index: AppIndex) -> None:
        """Names containing an installed app name are owned."""
        assert classify_token(name, index).status == MatchStatus.OWNED

    def test_system_item_skipped(self, index: AppIndex) -> None:
        """Apple items are classified as system."""
        assert classify_token("com.apple.Safari.plist", index).status == MatchStatus.SYSTEM

    def test_developer_match_medium(self, index: AppIndex) -> None:
        """Same developer as a known app gives MEDIUM."""
        match = classify_token("com.example.oldapp.plist", index)
        assert match.status == MatchStatus.ORPHAN
        assert match.confidence == LeftoverConfidence.MEDIUM
        assert match.related_bundle_id == "com.example.oldapp"

    def test_remembered_developer_medium(self, index: AppIndex) -> None:
        """Developers of remembered apps count as known."""
        match = classify_token("com.oldvendor.gone", index)
        assert match.confidence == LeftoverConfidence.MEDIUM

    def test_developer_name_in_filename_low(self, index: AppIndex) -> None:
        """A known developer name inside a plain name gives LOW."""
        match = classify_token("OldVendor Stuff", index)
        assert match.status == MatchStatus.ORPHAN
        assert match.confidence == LeftoverConfidence.LOW
        assert match.related_bundle_id is None

    def test_app_name_match_low(self, index: AppIndex) -> None:
        """A plain name matching a known app name gives LOW."""
        match = classify_token("Tool", index)
        assert match.status == MatchStatus.ORPHAN
        assert match.confidence == LeftoverConfidence.LOW

    @pytest.mark.parametrize("name", ["RandomThing", "net.unknown.widget", "x"])
    def test_no_signal_unrelated(self, name: str, index: AppIndex) -> None:
        """Names without an owner signal are not reported."""
        assert classify_token(name, index).status == MatchStatus.UNRELATED

    def test_installed_identifiers_never_orphan(self) -> None:
        """An exact installed identifier is never an orphan."""
        apps = [
            InstalledApp(name=f"App {i}", bundle_identifier=f"com.vendor{i % 3}.app{i}", path="/x")
            for i in range(30)
        ]
        index = AppIndex.build(apps)
        for app in apps:
            assert classify_token(app.bundle_identifier, index).status == MatchStatus.OWNED


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Temporary home with leftovers in two library folders."""
    home_dir = tmp_path / "home"
    prefs = home_dir / "Library" / "Preferences"
    prefs.mkdir(parents=True)
    (prefs / "com.example.editor.plist").write_bytes(b"x" * 5)
    (prefs / "com.example.oldapp.plist").write_bytes(b"x" * 7)
    (prefs / "com.apple.finder.plist").write_bytes(b"x")
    (prefs / ".GlobalPreferences.plist").write_bytes(b"x")

    support = home_dir / "Library" / "Application Support"
    (support / "OldVendor Stuff").mkdir(parents=True)
    (support / "OldVendor Stuff" / "data").write_bytes(b"x" * 10)
    (support / "RandomThing").mkdir()
    return home_dir


class TestOrphanDetector:
    """Tests for OrphanDetector.scan."""

    def test_scan_finds_leftovers(self, home: Path) -> None:
        """Only leftovers with an owner signal are reported."""
        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN, max_workers=2)
        result = detector.scan(user_library_paths(home))

        by_name = {leftover.name: leftover for leftover in result.leftovers}
        assert set(by_name) == {"com.example.oldapp.plist", "OldVendor Stuff"}

        plist = by_name["com.example.oldapp.plist"]
        assert plist.category == LeftoverCategory.PREFERENCES
        assert plist.confidence == LeftoverConfidence.MEDIUM
        assert plist.related_bundle_id == "com.example.oldapp"
        assert plist.size_bytes == 7
        assert plist.mtime is not None

        folder = by_name["OldVendor Stuff"]
        assert folder.category == LeftoverCategory.APPLICATION_SUPPORT
        assert folder.confidence == LeftoverConfidence.LOW
        assert folder.size_bytes == 10

    def test_sorted_by_size(self, home: Path) -> None:
        """Leftovers are ordered largest first."""
        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN)
        result = detector.scan(user_library_paths(home))
        sizes = [leftover.size_bytes for leftover in result.leftovers]
        assert sizes == sorted(sizes, reverse=True)
        assert result.total_size == 17

    def test_by_category_and_threshold(self, home: Path) -> None:
        """Results can be grouped and filtered by confidence."""
        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN)
        result = detector.scan(user_library_paths(home))

        groups = result.by_category()
        assert set(groups) == {LeftoverCategory.PREFERENCES, LeftoverCategory.APPLICATION_SUPPORT}
        assert [lf.name for lf in result.at_least(LeftoverConfidence.MEDIUM)] == [
            "com.example.oldapp.plist"
        ]
        assert result.at_least(LeftoverConfidence.HIGH) == []

    def test_measure_sizes_disabled(self, home: Path) -> None:
        """Sizes are 0 when measuring is disabled."""
        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN, measure_sizes=False)
        result = detector.scan(user_library_paths(home))
        assert all(leftover.size_bytes == 0 for leftover in result.leftovers)

    def test_category_callback_on_calling_thread(self, home: Path) -> None:
        """Per-root results are published from the calling thread."""
        calls: list[tuple[str, LeftoverCategory, tuple[LeftoverFile, ...], str]] = []

        def on_category(
            root: str, category: LeftoverCategory, leftovers: tuple[LeftoverFile, ...]
        ) -> None:
            calls.append((root, category, leftovers, threading.current_thread().name))

        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN, max_workers=4)
        roots = user_library_paths(home)
        result = detector.scan(roots, on_category=on_category)

        assert len(calls) == len(roots)
        assert {call[3] for call in calls} == {threading.current_thread().name}
        published = [lf for call in calls for lf in call[2]]
        assert sorted(lf.path for lf in published) == sorted(lf.path for lf in result.leftovers)

    def test_cancelled(self, home: Path) -> None:
        """A cancelled token skips every root."""
        token = CancellationToken()
        token.cancel()
        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN)

        result = detector.scan(user_library_paths(home), cancel_token=token)

        assert result.cancelled is True
        assert result.leftovers == []

    def test_unreadable_root_reported(self, home: Path) -> None:
        """Roots that exist but cannot be listed are reported."""
        prefs = str(home / "Library" / "Preferences")
        real_listdir = os.listdir

        def fake_listdir(path: str) -> list[str]:
            if path == prefs:
                raise PermissionError("denied")
            return real_listdir(path)

        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN)
        with patch("cleanctl.orphans.detector.os.listdir", side_effect=fake_listdir):
            result = detector.scan(user_library_paths(home))

        assert result.unreadable_roots == [prefs]
        assert [lf.name for lf in result.leftovers] == ["OldVendor Stuff"]

    def test_installed_app_leftovers_never_reported(self, home: Path) -> None:
        """Files of installed apps stay out of the results."""
        detector = OrphanDetector(INSTALLED, known_identifiers=KNOWN)
        result = detector.scan(user_library_paths(home))
        assert all(
            not lf.name.startswith("com.example.editor") for lf in result.leftovers
        )

    def test_from_registry(self) -> None:
        """A detector can be built from a registry snapshot."""
        detector = OrphanDetector.from_registry(
            StaticAppRegistry(INSTALLED), known_identifiers=KNOWN
        )
        assert "com.example.editor" in detector.index.installed_ids
        assert detector.classify("com.oldvendor.x").confidence == LeftoverConfidence.MEDIUM
