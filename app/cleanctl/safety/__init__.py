"""Deletion safety policy and path validation.

This package decides whether a concrete path may be deleted. It holds the
protected-path and allow-list catalogs and the stateless validator
functions built on them.
"""

from cleanctl.safety.policy import SafetyPolicy, current_policy, default_policy
from cleanctl.safety.validator import (
    ValidationKind,
    ValidationResult,
    filter_safe_paths,
    get_size,
    path_exists,
    require_safe,
    validate,
    validate_batch,
)

__all__ = [
    "SafetyPolicy",
    "ValidationKind",
    "ValidationResult",
    "current_policy",
    "default_policy",
    "filter_safe_paths",
    "get_size",
    "path_exists",
    "require_safe",
    "validate",
    "validate_batch",
]
