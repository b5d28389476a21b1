"""Configuration loader for tokembed."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from tokembed.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TOKEMBED_CONFIG"
DEFAULT_CONFIG_PATH = "tokembed.yaml"
DEFAULT_TOKENIZER_PATH = "tokenizer.json"
DEFAULT_OUTPUT_PATH = "embedding.json"
SEED_MIN = -(2**63)
SEED_MAX = 2**63 - 1


@dataclass(frozen=True)
class TokenizerSettings:
    """Where the tokenizer definition lives and how it encodes text."""

    path: str = DEFAULT_TOKENIZER_PATH
    add_special_tokens: bool = False
    max_length: int | None = None
    pad_to_length: int | None = None


@dataclass(frozen=True)
class EmbeddingSettings:
    """Parameters of the placeholder embedding and its normalization."""

    seed: int = 0
    epsilon: float = 1e-12


@dataclass(frozen=True)
class OutputSettings:
    """Configuration for the output file and console summary."""

    path: str = DEFAULT_OUTPUT_PATH
    preview: int = 10


@dataclass(frozen=True)
class TokembedConfig:
    """Typed configuration container."""

    tokenizer: TokenizerSettings = field(default_factory=TokenizerSettings)
    embedding: EmbeddingSettings = field(default_factory=EmbeddingSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    log_level: str = "WARNING"

    def with_tokenizer_path(self, path: str | Path) -> "TokembedConfig":
        """Return a copy pointing at a different tokenizer definition."""

        return replace(self, tokenizer=replace(self.tokenizer, path=str(path)))


def load_config(path: str | Path) -> TokembedConfig:
    """Load configuration from a YAML file."""

    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read config file {config_path}: {exc}", config_path
        ) from exc
    try:
        data: Any = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Malformed config file {config_path}: {exc}", config_path
        ) from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping.", config_path
        )
    try:
        return _coerce_config(data)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid value in config file {config_path}: {exc}", config_path
        ) from exc


def resolve_config(env: Mapping[str, str] | None = None) -> TokembedConfig:
    """Locate and load the active configuration, then apply environment overrides.

    ``TOKEMBED_CONFIG`` names an explicit YAML file, which must exist. Without it
    a ``tokembed.yaml`` in the working directory is used when present, and the
    built-in defaults otherwise.
    """

    env = os.environ if env is None else env
    explicit = env.get(CONFIG_ENV_VAR)
    if explicit:
        config = load_config(explicit)
    elif Path(DEFAULT_CONFIG_PATH).is_file():
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = TokembedConfig()
    return _apply_env_overrides(config, env)


def _apply_env_overrides(config: TokembedConfig, env: Mapping[str, str]) -> TokembedConfig:
    output_path = env.get("TOKEMBED_OUTPUT")
    if output_path:
        config = replace(config, output=replace(config.output, path=output_path))
    log_level = env.get("TOKEMBED_LOG_LEVEL")
    if log_level:
        config = replace(config, log_level=log_level.upper())
    seed = env.get("TOKEMBED_SEED")
    if seed:
        try:
            seed_value = _seed(seed)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid TOKEMBED_SEED {seed!r}: {exc}") from exc
        config = replace(config, embedding=replace(config.embedding, seed=seed_value))
    return config


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, Mapping):
        raise TypeError(f"'{name}' must be a mapping")
    return value


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("expected an integer, got a boolean")
    return int(value)


def _seed(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("seed must be an integer, got a boolean")
    seed = int(value)
    if not SEED_MIN <= seed <= SEED_MAX:
        raise ValueError(f"seed must fit in a signed 64-bit integer, got {seed}")
    return seed


def _epsilon(value: Any) -> float:
    epsilon = float(value)
    if not math.isfinite(epsilon) or epsilon <= 0:
        raise ValueError(f"epsilon must be a positive finite number, got {value!r}")
    return epsilon


def _coerce_config(data: Mapping[str, Any]) -> TokembedConfig:
    tokenizer_data = _section(data, "tokenizer")
    tokenizer = TokenizerSettings(
        path=str(tokenizer_data.get("path", DEFAULT_TOKENIZER_PATH)),
        add_special_tokens=bool(tokenizer_data.get("add_special_tokens", False)),
        max_length=_optional_int(tokenizer_data.get("max_length")),
        pad_to_length=_optional_int(tokenizer_data.get("pad_to_length")),
    )
    embedding_data = _section(data, "embedding")
    embedding = EmbeddingSettings(
        seed=_seed(embedding_data.get("seed", 0)),
        epsilon=_epsilon(embedding_data.get("epsilon", 1e-12)),
    )
    output_data = _section(data, "output")
    output = OutputSettings(
        path=str(output_data.get("path", DEFAULT_OUTPUT_PATH)),
        preview=int(output_data.get("preview", 10)),
    )
    log_level = str(data.get("log_level", "WARNING")).upper()
    logger.debug("Loaded config: tokenizer=%s output=%s", tokenizer.path, output.path)
    return TokembedConfig(
        tokenizer=tokenizer,
        embedding=embedding,
        output=output,
        log_level=log_level,
    )


__all__ = [
    "EmbeddingSettings",
    "OutputSettings",
    "TokembedConfig",
    "TokenizerSettings",
    "load_config",
    "resolve_config",
]
