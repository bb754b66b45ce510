from __future__ import annotations

from ..models.import_result import ImportResult
from ..models.parse_result import ParseResult
from .formatting import format_metric

"""SUMMARY line rendering for the import CLI.

Format:
SUMMARY rows={total} parsed={parsed} errors={errors} inserted={n} updated={n}
unchanged={n} skipped={n} elapsed_sec={elapsed} throughput_rps={throughput}
"""

__all__ = [
    "render_summary_line",
]


def render_summary_line(
    parse_result: ParseResult, import_result: ImportResult, elapsed_seconds: float
) -> str:
    """Render the SUMMARY line for one import run.

    ``errors`` counts parse errors plus failed store batches.

    Examples:
        >>> from brasindice_import.models import ImportResult, ImportStats, ParseResult, ParseStats
        >>> parsed = ParseResult(success=True, stats=ParseStats(total=400, parsed=400, errors=0))
        >>> imported = ImportResult(success=True, stats=ImportStats(read=400, inserted=400))
        >>> render_summary_line(parsed, imported, 2.0)
        'SUMMARY rows=400 parsed=400 errors=0 inserted=400 updated=0 unchanged=0 skipped=0 elapsed_sec=2 throughput_rps=200'
    """
    stats = import_result.stats
    throughput = parse_result.stats.total / elapsed_seconds if elapsed_seconds > 0 else 0.0
    return (
        f"SUMMARY rows={parse_result.stats.total} "
        f"parsed={parse_result.stats.parsed} "
        f"errors={stats.errors} "
        f"inserted={stats.inserted} "
        f"updated={stats.updated} "
        f"unchanged={stats.unchanged} "
        f"skipped={stats.skipped} "
        f"elapsed_sec={format_metric(round(elapsed_seconds, 6))} "
        f"throughput_rps={format_metric(round(throughput, 1))}"
    )
