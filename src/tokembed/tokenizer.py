"""Tokenizer adapter around Hugging Face ``tokenizers`` definitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tokenizers import Tokenizer

from tokembed.config import TokenizerSettings
from tokembed.core.domain import TokenSequence
from tokembed.errors import ConfigurationError

logger = logging.getLogger(__name__)


def clean_text(text: str) -> str:
    """Replace lone surrogates so ``text`` is valid Unicode for the tokenizer.

    Undecodable argv bytes arrive as ``surrogateescape`` code points; those are
    restored to their bytes first, then any invalid UTF-8 becomes U+FFFD.
    """

    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode("utf-8", "surrogatepass")
    return raw.decode("utf-8", "replace")


@dataclass(frozen=True)
class TokenizerAdapter:
    """A loaded tokenizer definition exposing ``text -> TokenSequence``."""

    path: Path
    tokenizer: Tokenizer
    add_special_tokens: bool = False

    def tokenize(self, text: str) -> TokenSequence:
        """Encode ``text`` into token ids and the matching attention mask."""

        encoding = self.tokenizer.encode(
            clean_text(text), add_special_tokens=self.add_special_tokens
        )
        sequence = TokenSequence(
            ids=tuple(encoding.ids),
            attention_mask=tuple(encoding.attention_mask),
            type_ids=tuple(encoding.type_ids),
            tokens=tuple(encoding.tokens),
        )
        logger.debug("Ids: %s", list(sequence.ids))
        logger.debug("Mask: %s", list(sequence.attention_mask))
        logger.debug("Token type ids: %s", list(sequence.type_ids))
        return sequence


def load_tokenizer(
    path: str | Path,
    *,
    add_special_tokens: bool = False,
    max_length: int | None = None,
    pad_to_length: int | None = None,
) -> TokenizerAdapter:
    """Load a ``tokenizer.json`` definition from ``path``.

    Raises ``ConfigurationError`` naming the path when the file is missing,
    unreadable or not a valid tokenizer definition.
    """

    tokenizer_path = Path(path)
    if not tokenizer_path.is_file():
        raise ConfigurationError(f"Tokenizer file not found: {tokenizer_path}", tokenizer_path)
    try:
        tokenizer = Tokenizer.from_file(str(tokenizer_path))
    except Exception as exc:  # tokenizers raises a bare Exception for parse errors
        raise ConfigurationError(
            f"Failed to load tokenizer from {tokenizer_path}: {exc}", tokenizer_path
        ) from exc
    if max_length is not None:
        if max_length <= 0:
            raise ConfigurationError(
                f"Tokenizer max_length must be positive, got {max_length}.", tokenizer_path
            )
        tokenizer.enable_truncation(max_length=max_length)
    if pad_to_length is not None:
        if pad_to_length <= 0:
            raise ConfigurationError(
                f"Tokenizer pad_to_length must be positive, got {pad_to_length}.",
                tokenizer_path,
            )
        tokenizer.enable_padding(length=pad_to_length)
    logger.info(
        "Loaded tokenizer from %s (vocab size %d)",
        tokenizer_path,
        tokenizer.get_vocab_size(),
    )
    return TokenizerAdapter(
        path=tokenizer_path,
        tokenizer=tokenizer,
        add_special_tokens=add_special_tokens,
    )


def load_tokenizer_from_settings(settings: TokenizerSettings) -> TokenizerAdapter:
    return load_tokenizer(
        settings.path,
        add_special_tokens=settings.add_special_tokens,
        max_length=settings.max_length,
        pad_to_length=settings.pad_to_length,
    )


__all__ = ["TokenizerAdapter", "clean_text", "load_tokenizer", "load_tokenizer_from_settings"]
