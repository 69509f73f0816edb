from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

"""ImportBatch: the committed payload handed to the bulk-create collaborator."""

__all__ = [
    "ImportBatch",
]


@dataclass(frozen=True)
class ImportBatch:
    """Committed records (payload dicts stamped with jobId/position/assignedTo).

    Built once at commit time and not retained by the session afterwards.
    """
    records: list[dict[str, Any]] = field(default_factory=list)
    file_name: str | None = None

    def __len__(self) -> int:
        return len(self.records)

    def chunks(self, size: int) -> Iterator[list[dict[str, Any]]]:
        """Split into consecutive chunks of at most ``size`` records."""
        if size < 1:
            raise ValueError(f"chunk size must be positive: {size}")
        for start in range(0, len(self.records), size):
            yield self.records[start:start + size]

    def to_json(self) -> str:
        return json.dumps({"candidates": self.records}, ensure_ascii=False, indent=2)
