from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path


@dataclass
class FilterResult:
    """
    Outcome of filtering one image in a batch run.
    Exactly one of `output` / `error` is set.
    """
    source: Path
    output: Path | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
