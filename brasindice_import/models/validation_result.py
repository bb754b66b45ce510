from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ValidationResult",
]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the pre-flight check run before a full parse."""
    is_valid: bool
    row_count: int
    error_count: int
    file_size_kb: int
    estimated_duration_seconds: int
    message: str
