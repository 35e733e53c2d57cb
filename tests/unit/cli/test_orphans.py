"""Unit tests for the orphans commands."""

import json
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from cleanctl.cli.main import app
from cleanctl.deletion.executor import DeletionResult
from cleanctl.orphans.detector import OrphanScanResult
from cleanctl.orphans.models import LeftoverCategory, LeftoverConfidence, LeftoverFile
from typer.testing import CliRunner

runner = CliRunner()

HIGH = LeftoverFile(
    path="/Users/me/Library/Caches/com.gone.app",
    size_bytes=4096,
    category=LeftoverCategory.CACHE,
    confidence=LeftoverConfidence.HIGH,
    related_bundle_id="com.gone.app",
)
MEDIUM = LeftoverFile(
    path="/Users/me/Library/Preferences/com.example.old.plist",
    size_bytes=1024,
    category=LeftoverCategory.PREFERENCES,
    confidence=LeftoverConfidence.MEDIUM,
    related_bundle_id="com.example.old",
)
LOW = LeftoverFile(
    path="/Users/me/Library/Application Support/Example Stuff",
    size_bytes=512,
    category=LeftoverCategory.APPLICATION_SUPPORT,
    confidence=LeftoverConfidence.LOW,
)


@pytest.fixture
def mock_detector() -> Iterator[MagicMock]:
    """Patch the registry and detector used by the orphans commands."""
    with (
        patch("cleanctl.cli.commands.orphans.BundleAppRegistry") as mock_registry,
        patch("cleanctl.cli.commands.orphans.remember_identifiers", return_value=frozenset()),
        patch("cleanctl.cli.commands.orphans.OrphanDetector") as detector,
    ):
        mock_registry.return_value.apps.return_value = ()
        detector.return_value.scan.return_value = OrphanScanResult(leftovers=[HIGH, MEDIUM, LOW])
        yield detector


class TestOrphansScan:
    """Tests for cleanctl orphans scan."""

    def test_lists_all_confidences(self, mock_detector: MagicMock) -> None:
        """By default every confidence level is shown."""
        result = runner.invoke(app, ["orphans", "scan"])

        assert result.exit_code == 0
        assert "Application Leftovers" in result.stdout
        assert "Found 3 leftover(s), 5.5 KB total" in result.stdout

    def test_min_confidence(self, mock_detector: MagicMock) -> None:
        """--min-confidence filters lower levels."""
        result = runner.invoke(app, ["orphans", "scan", "--min-confidence", "medium"])

        assert result.exit_code == 0
        assert "Found 2 leftover(s), 5.0 KB total" in result.stdout

    def test_json_output(self, mock_detector: MagicMock) -> None:
        """JSON output carries confidence and related identifiers."""
        result = runner.invoke(app, ["orphans", "scan", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["confidence"] for item in data] == ["high", "medium", "low"]
        assert data[0]["related_bundle_id"] == "com.gone.app"

    def test_nothing_found(self, mock_detector: MagicMock) -> None:
        """An empty sweep says so."""
        mock_detector.return_value.scan.return_value = OrphanScanResult()
        result = runner.invoke(app, ["orphans", "scan"])

        assert result.exit_code == 0
        assert "No application leftovers found." in result.stdout

    def test_unreadable_roots_warned(self, mock_detector: MagicMock) -> None:
        """Roots that could not be listed are reported."""
        mock_detector.return_value.scan.return_value = OrphanScanResult(
            unreadable_roots=["/Users/me/Library/Containers"]
        )
        result = runner.invoke(app, ["orphans", "scan"])

        assert result.exit_code == 0
        assert "Cannot read" in result.stderr

    def test_system_roots_excluded_by_default(self, mock_detector: MagicMock) -> None:
        """System roots are only searched on request."""
        runner.invoke(app, ["orphans", "scan"])
        roots = mock_detector.return_value.scan.call_args.args[0]
        assert not any(root.startswith("/Library/") for root, _ in roots)

        runner.invoke(app, ["orphans", "scan", "--system"])
        roots = mock_detector.return_value.scan.call_args.args[0]
        assert any(root.startswith("/Library/") for root, _ in roots)


class TestOrphansClean:
    """Tests for cleanctl orphans clean."""

    def test_cleans_high_confidence_only(self, mock_detector: MagicMock) -> None:
        """By default only HIGH leftovers are deleted."""
        with (
            patch("cleanctl.cli.commands.orphans.DeletionExecutor") as mock_executor,
            patch("cleanctl.cli.commands.orphans.StateManager") as mock_state,
        ):
            mock_executor.return_value.execute.return_value = DeletionResult(
                success_count=1,
                failed_count=0,
                errors=(),
                freed_bytes=4096,
                deleted=(HIGH.path,),
            )
            result = runner.invoke(app, ["orphans", "clean", "--yes"])

        assert result.exit_code == 0
        assert mock_executor.return_value.execute.call_args.args[0] == [HIGH]
        assert "Moved 1 item(s) to the trash, 4.0 KB freed" in result.stdout
        mock_state.return_value.record_batch.assert_called_once()

    def test_dry_run(self, mock_detector: MagicMock) -> None:
        """--dry-run does not prompt."""
        with (
            patch("cleanctl.cli.commands.orphans.DeletionExecutor") as mock_executor,
            patch("cleanctl.cli.commands.orphans.StateManager"),
        ):
            mock_executor.return_value.execute.return_value = DeletionResult(
                success_count=3, failed_count=0, errors=(), freed_bytes=5632, dry_run=True
            )
            result = runner.invoke(
                app, ["orphans", "clean", "--dry-run", "--min-confidence", "low"]
            )

        assert result.exit_code == 0
        mock_executor.assert_called_once_with(dry_run=True)
        assert "Would move 3 item(s)" in result.stdout

    def test_nothing_to_clean(self, mock_detector: MagicMock) -> None:
        """Without matching leftovers nothing runs."""
        mock_detector.return_value.scan.return_value = OrphanScanResult(leftovers=[LOW])
        with patch("cleanctl.cli.commands.orphans.DeletionExecutor") as mock_executor:
            result = runner.invoke(app, ["orphans", "clean", "--yes"])

        assert result.exit_code == 0
        assert "No application leftovers to clean." in result.stdout
        mock_executor.assert_not_called()
