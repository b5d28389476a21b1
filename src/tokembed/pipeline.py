"""Embedding pipeline combining tokenization, placeholder embedding and output."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from tokembed.core.domain import EMBEDDING_DIMENSION, OutputRecord, TokenSequence
from tokembed.embedding import DEFAULT_EPSILON, PseudoEmbedder, normalize
from tokembed.output import write_record
from tokembed.tokenizer import TokenizerAdapter, clean_text


@dataclass
class EmbeddingResult:
    """Output of the embedding pipeline."""

    text: str
    tokens: TokenSequence
    raw: np.ndarray
    embedding: np.ndarray

    def to_record(self) -> OutputRecord:
        return OutputRecord(
            dimension=len(self.embedding),
            embedding=self.embedding,
            text=self.text,
            token_count=len(self.tokens),
        )


@dataclass
class EmbeddingPipeline:
    """Coordinate tokenize -> embed -> normalize for a single input."""

    tokenizer: TokenizerAdapter
    embedder: PseudoEmbedder = field(default_factory=PseudoEmbedder)
    epsilon: float = DEFAULT_EPSILON

    def __post_init__(self) -> None:
        if self.embedder.dimension != EMBEDDING_DIMENSION:
            raise ValueError(
                f"Embedder dimension must be {EMBEDDING_DIMENSION}, "
                f"got {self.embedder.dimension}."
            )

    def run(self, text: str) -> EmbeddingResult:
        text = clean_text(text)
        tokens = self.tokenizer.tokenize(text)
        raw = self.embedder.embed(tokens)
        embedding = normalize(raw, epsilon=self.epsilon)
        return EmbeddingResult(text=text, tokens=tokens, raw=raw, embedding=embedding)

    def run_to_file(self, text: str, path: str | Path) -> EmbeddingResult:
        """Run the pipeline and persist the normalized vector to ``path``."""

        result = self.run(text)
        write_record(result.to_record(), path)
        return result


__all__ = ["EmbeddingPipeline", "EmbeddingResult"]
