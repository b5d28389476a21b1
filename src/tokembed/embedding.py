"""Placeholder embedding and normalization helpers for tokembed.

No trained model is involved: the vector for a token sequence is derived from
BLAKE2b hashes of every ``(position, token id, mask)`` triple. The values are
reproducible and sensitive to token identity and order, but carry no meaning.
"""

from __future__ import annotations

import hashlib
import logging
import struct
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from tokembed.core.domain import EMBEDDING_DIMENSION, TokenSequence

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-12
_DIGEST_SIZE = 64
_WORDS_PER_BLOCK = _DIGEST_SIZE // 4
_PERSON = b"tokembed-v1"


@dataclass(frozen=True)
class PseudoEmbedder:
    """Deterministic stand-in for a sentence embedding model."""

    dimension: int = EMBEDDING_DIMENSION
    seed: int = 0

    def __post_init__(self) -> None:
        _validate_dimension(self.dimension)
        if not -(2**63) <= self.seed <= 2**63 - 1:
            raise ValueError(
                f"Embedding seed must fit in a signed 64-bit integer, got {self.seed}."
            )

    def embed(self, tokens: TokenSequence) -> np.ndarray:
        """Return the raw (unnormalized) vector for ``tokens``.

        An empty sequence yields the all-zero vector.
        """

        raw = np.zeros(self.dimension, dtype=np.float64)
        key = struct.pack("<q", self.seed)
        for position, (token_id, mask) in enumerate(zip(tokens.ids, tokens.attention_mask)):
            raw += self._token_contribution(key, position, token_id, mask)
        if tokens.is_empty:
            logger.debug("Empty token sequence; returning zero vector")
        return raw.astype(np.float32)

    def _token_contribution(
        self, key: bytes, position: int, token_id: int, mask: int
    ) -> np.ndarray:
        blocks = -(-self.dimension // _WORDS_PER_BLOCK)
        stream = b"".join(
            hashlib.blake2b(
                struct.pack("<QQBI", position, token_id, mask, block),
                digest_size=_DIGEST_SIZE,
                key=key,
                person=_PERSON,
            ).digest()
            for block in range(blocks)
        )
        words = np.frombuffer(stream, dtype="<u4")[: self.dimension]
        # map uint32 onto [-1, 1)
        return words.astype(np.float64) / 2.0**31 - 1.0


def embed(tokens: TokenSequence, *, seed: int = 0) -> np.ndarray:
    """Embed ``tokens`` into a raw 384-dimension placeholder vector."""

    return PseudoEmbedder(seed=seed).embed(tokens)


def vector_norm(vector: Sequence[float] | np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(vector, dtype=np.float64)))


def normalize(
    vector: Sequence[float] | np.ndarray, *, epsilon: float = DEFAULT_EPSILON
) -> np.ndarray:
    """Rescale ``vector`` to unit Euclidean norm.

    Vectors whose norm does not exceed ``epsilon`` are returned unchanged instead
    of being divided by (nearly) zero.
    """

    values = np.asarray(vector, dtype=np.float32)
    norm = vector_norm(values)
    if not norm > epsilon:
        logger.warning(
            "Embedding norm %.3g not above %.3g; skipping normalization", norm, epsilon
        )
        return values
    return (values.astype(np.float64) / norm).astype(np.float32)


def _validate_dimension(value: int) -> int:
    if value <= 0:
        raise ValueError("Embedding dimension must be positive.")
    return int(value)


__all__ = ["DEFAULT_EPSILON", "PseudoEmbedder", "embed", "normalize", "vector_norm"]
