from __future__ import annotations

import logging
import math

from ..constants import EXPECTED_COLUMN_COUNT, ESTIMATED_LINES_PER_SECOND, VALIDATION_SAMPLE_SIZE
from ..models.validation_result import ValidationResult
from ..parsing.tokenizer import split_line
from .file_parser import split_content
from .formatting import format_count_pt_br, round_half_up

"""Pre-flight validation: a cheap structural check before a full parse.

Only the first VALIDATION_SAMPLE_SIZE lines are tokenized. The duration
estimate assumes a fixed ESTIMATED_LINES_PER_SECOND throughput.
"""

__all__ = [
    "validate",
]

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = "Erro ao validar arquivo"


def validate(content: str, file_size_bytes: int, *, strip_carriage_returns: bool = True) -> ValidationResult:
    """Check the first lines for the expected column count.

    Never raises: any exception is reported as a single invalid result.
    """
    file_size_kb = round_half_up(file_size_bytes / 1024)
    try:
        lines = split_content(content, strip_carriage_returns=strip_carriage_returns)
        samples = min(VALIDATION_SAMPLE_SIZE, len(lines))
        error_count = sum(
            1 for line in lines[:samples] if len(split_line(line)) != EXPECTED_COLUMN_COUNT
        )
        row_count = len(lines)
        if error_count > 0:
            message = (
                f"{error_count} linha(s) com formato inválido nas primeiras {samples} linhas"
            )
        else:
            message = f"{format_count_pt_br(row_count)} produtos encontrados"
        return ValidationResult(
            is_valid=error_count == 0 and row_count > 0,
            row_count=row_count,
            error_count=error_count,
            file_size_kb=file_size_kb,
            estimated_duration_seconds=math.ceil(row_count / ESTIMATED_LINES_PER_SECOND),
            message=message,
        )
    except Exception as e:
        logger.warning("validation failed: %s", e)
        return ValidationResult(
            is_valid=False,
            row_count=0,
            error_count=1,
            file_size_kb=file_size_kb,
            estimated_duration_seconds=0,
            message=str(e) or VALIDATION_FAILED_MESSAGE,
        )
