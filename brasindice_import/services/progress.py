from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.import_result import ImportProgress

"""Progress display with tqdm (TTY only).

A single tqdm instance follows the importer's ImportProgress notifications.
In non-TTY environments (CI, redirected output) no bar is created so the log
output stays free of ANSI control sequences.
"""

__all__ = [
    "ImportProgressBar",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ImportProgressBar:
    """tqdm bar usable directly as the importer's ``on_progress`` callback."""

    def __init__(self, total_rows: int, *, description: str = "Importing rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.position = 0
        self.last_phase: str | None = None

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def __call__(self, progress: ImportProgress) -> None:
        self.last_phase = progress.phase
        # parsing は件数の通知のみ。バーは進めない
        if progress.phase == "parsing":
            if self.enabled and self.pbar is not None:
                self.pbar.set_postfix(phase=progress.phase)
            return
        advance = max(progress.current - self.position, 0)
        self.position = max(self.position, progress.current)
        if self.enabled and self.pbar is not None:
            if advance:
                self.pbar.update(advance)
            self.pbar.set_postfix(phase=progress.phase)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ImportProgressBar:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
