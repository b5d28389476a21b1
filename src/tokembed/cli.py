"""Command line interface for tokembed."""

from __future__ import annotations

import logging

import click

from tokembed.config import DEFAULT_TOKENIZER_PATH, TokembedConfig, resolve_config
from tokembed.embedding import PseudoEmbedder
from tokembed.errors import ConfigurationError, TokembedError
from tokembed.output import format_summary
from tokembed.pipeline import EmbeddingPipeline
from tokembed.tokenizer import load_tokenizer_from_settings

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_pipeline(config: TokembedConfig) -> EmbeddingPipeline:
    tokenizer = load_tokenizer_from_settings(config.tokenizer)
    return EmbeddingPipeline(
        tokenizer=tokenizer,
        embedder=PseudoEmbedder(seed=config.embedding.seed),
        epsilon=config.embedding.epsilon,
    )


@click.command()
@click.option("--text", "-t", required=True, help="Input text to convert to an embedding")
@click.option(
    "--tokenizer-path",
    "-k",
    default=None,
    help=f"Path to the tokenizer definition (default: {DEFAULT_TOKENIZER_PATH})",
)
def main(text: str, tokenizer_path: str | None) -> None:
    """Convert text to a placeholder 384-dimension embedding."""
    try:
        config = resolve_config()
    except ConfigurationError as exc:
        raise click.ClickException(f"Error loading config: {exc}") from exc
    if tokenizer_path is not None:
        config = config.with_tokenizer_path(tokenizer_path)
    _configure_logging(config.log_level)

    logger.info("Initializing embedding pipeline...")
    try:
        pipeline = _build_pipeline(config)
    except TokembedError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        result = pipeline.run_to_file(text, config.output.path)
    except TokembedError as exc:
        raise click.ClickException(str(exc)) from exc

    for line in format_summary(result.text, result.embedding, preview=config.output.preview):
        click.echo(line)
    click.echo(f"Saved embedding to {config.output.path}")


__all__ = ["main"]
