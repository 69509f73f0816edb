from __future__ import annotations

import json
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from ..models.batch import ImportBatch

"""Hand-off of a committed ImportBatch to the bulk-create collaborator.

The bulk-import endpoint accepts at most 100 candidates per request, so the
batch is sent in chunks. The collaborator itself (HTTP client, auth) lives
outside this package and is represented by the CandidateSink protocol.
"""

__all__ = [
    "CandidateSink",
    "ChunkMetrics",
    "HandOffError",
    "HandOffResult",
    "JsonFileSink",
    "hand_off",
]


class HandOffError(Exception):
    pass


class CandidateSink(Protocol):
    def bulk_create(self, records: Sequence[dict[str, Any]]) -> Any: ...


@dataclass(frozen=True)
class ChunkMetrics:
    """Timing of a single bulk_create call."""
    chunk_size: int
    elapsed_seconds: float
    start_time: float  # time.time()
    end_time: float


@dataclass(frozen=True)
class HandOffResult:
    submitted: int
    chunks: int
    responses: list[Any] = field(default_factory=list)


def hand_off(
    batch: ImportBatch,
    sink: CandidateSink,
    *,
    chunk_size: int = 100,
    metrics_callback: Callable[[ChunkMetrics], None] | None = None,
) -> HandOffResult:
    """Send ``batch`` to ``sink`` in chunks of at most ``chunk_size``.

    Parameters
    ----------
    batch: committed records
    sink: bulk-create collaborator
    chunk_size: records per bulk_create call (endpoint limit: 100)
    metrics_callback: receives ChunkMetrics after every call, failed ones
        included. Not invoked for an empty batch.
    """
    submitted = 0
    responses: list[Any] = []
    for index, chunk in enumerate(batch.chunks(chunk_size)):
        start_time = time.time()
        try:
            responses.append(sink.bulk_create(chunk))
        except Exception as e:
            raise HandOffError(
                f"bulk create failed on chunk {index + 1} after {submitted} records: {e}"
            ) from e
        finally:
            end_time = time.time()
            if metrics_callback is not None:
                metrics_callback(
                    ChunkMetrics(
                        chunk_size=len(chunk),
                        elapsed_seconds=end_time - start_time,
                        start_time=start_time,
                        end_time=end_time,
                    )
                )
        submitted += len(chunk)
    return HandOffResult(submitted=submitted, chunks=len(responses), responses=responses)


class JsonFileSink:
    """Sink that collects chunks and writes them as one JSON document.

    Used for dry runs: the file holds exactly what the bulk-create endpoint
    would have received, one request body per chunk.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.requests: list[dict[str, Any]] = []

    def bulk_create(self, records: Sequence[dict[str, Any]]) -> dict[str, Any]:
        body = {"candidates": list(records)}
        self.requests.append(body)
        self.path.write_text(json.dumps(self.requests, ensure_ascii=False, indent=2), encoding="utf-8")
        return {"success": True, "count": len(records)}
