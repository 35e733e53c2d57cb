"""Unit tests for leftover search roots."""

from pathlib import Path

from cleanctl.orphans.models import LeftoverCategory
from cleanctl.orphans.search_paths import SYSTEM_LIBRARY_ROOTS, all_paths, user_library_paths
from cleanctl.safety.policy import default_policy
from cleanctl.safety.validator import ValidationKind, validate


def test_user_roots_under_home(tmp_path: Path) -> None:
    """User roots live under the given home's Library."""
    roots = user_library_paths(tmp_path)
    assert all(root.startswith(str(tmp_path / "Library")) for root, _ in roots)
    assert (str(tmp_path / "Library" / "Preferences"), LeftoverCategory.PREFERENCES) in roots


def test_all_paths_order(tmp_path: Path) -> None:
    """User roots come before system roots."""
    roots = all_paths(tmp_path)
    user = user_library_paths(tmp_path)
    assert roots[: len(user)] == user
    assert roots[len(user) :] == SYSTEM_LIBRARY_ROOTS


def test_all_paths_without_system(tmp_path: Path) -> None:
    """System roots can be excluded."""
    assert all_paths(tmp_path, include_system=False) == user_library_paths(tmp_path)


def test_leftovers_under_every_root_are_deletable(tmp_path: Path) -> None:
    """A leftover found under any root passes path validation."""
    policy = default_policy(tmp_path)
    rejected = [
        (root, validate(f"{root}/com.gone.App", policy).kind)
        for root, _ in all_paths(tmp_path)
    ]
    assert [item for item in rejected if item[1] != ValidationKind.SAFE] == []
