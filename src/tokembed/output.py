"""JSON output and console summary for embedding records."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

import numpy as np

from tokembed.core.domain import OutputRecord
from tokembed.embedding import vector_norm
from tokembed.errors import OutputWriteError

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW = 10


def write_record(record: OutputRecord, path: str | Path) -> Path:
    """Atomically write ``record`` as JSON to ``path``, replacing any existing file.

    The payload goes to a temporary file next to the target which is then
    ``os.replace``d over it, so a failed write leaves the target untouched.
    The parent directory must already exist.
    """

    target = Path(path)
    payload = record.to_dict()
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_path = Path(fh.name)
            json.dump(payload, fh, indent=2)
            fh.write("\n")
        os.replace(tmp_path, target)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write embedding to {target}: {exc}", target) from exc
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
    logger.info("Wrote %d-dimension embedding to %s", record.dimension, target)
    return target


def format_summary(
    text: str,
    vector: Sequence[float] | np.ndarray,
    *,
    preview: int = DEFAULT_PREVIEW,
) -> list[str]:
    """Build the human-readable lines describing a normalized embedding."""

    values = np.asarray(vector, dtype=np.float32)
    count = max(0, min(preview, len(values)))
    shown = ", ".join(f"{float(value):.6f}" for value in values[:count])
    return [
        f"Input text: {text}",
        f"Embedding dimension: {len(values)}",
        f"First {count} values: [{shown}]",
        f"Embedding norm: {vector_norm(values):.6f}",
    ]


__all__ = ["DEFAULT_PREVIEW", "format_summary", "write_record"]
