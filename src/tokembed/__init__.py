"""tokembed: tokenizer-backed placeholder text embeddings."""

__version__ = "0.1.0"
