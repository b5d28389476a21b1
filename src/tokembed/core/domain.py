"""Domain objects for tokembed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

EMBEDDING_DIMENSION = 384


@dataclass(frozen=True)
class TokenSequence:
    """Token ids produced for one input string, with the parallel attention mask."""

    ids: tuple[int, ...]
    attention_mask: tuple[int, ...]
    type_ids: tuple[int, ...] = field(default_factory=tuple)
    tokens: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if len(self.ids) != len(self.attention_mask):
            raise ValueError(
                "Token ids and attention mask differ in length: "
                f"{len(self.ids)} != {len(self.attention_mask)}."
            )
        for name in ("type_ids", "tokens"):
            values = getattr(self, name)
            if values and len(values) != len(self.ids):
                raise ValueError(f"Token {name} must match the number of token ids.")
        if any(value not in (0, 1) for value in self.attention_mask):
            raise ValueError("Attention mask values must be 0 or 1.")

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def is_empty(self) -> bool:
        return not self.ids


@dataclass(frozen=True)
class OutputRecord:
    """The persisted artifact: a normalized embedding and its dimension."""

    dimension: int
    embedding: np.ndarray
    text: str | None = None
    token_count: int | None = None

    def __post_init__(self) -> None:
        if self.dimension != EMBEDDING_DIMENSION:
            raise ValueError(
                f"Output dimension must be {EMBEDDING_DIMENSION}, got {self.dimension}."
            )
        if len(self.embedding) != self.dimension:
            raise ValueError(
                "Embedding length does not match dimension: "
                f"{len(self.embedding)} != {self.dimension}."
            )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "dimension": self.dimension,
            "embedding": [float(value) for value in self.embedding],
        }
        if self.text is not None:
            payload["text"] = self.text
        if self.token_count is not None:
            payload["token_count"] = self.token_count
        return payload


__all__ = ["EMBEDDING_DIMENSION", "OutputRecord", "TokenSequence"]
