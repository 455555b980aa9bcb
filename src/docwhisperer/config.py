"""docwhisperer configuration loader.

Layers, lowest priority first; later layers win key by key:

  defaults  →  ~/.docwhisperer/config.yaml  →  ./docwhisperer.yaml  →  env vars

Command-line flags are applied by the CLI on top of the returned object.
The global file holds model defaults only: any key that looks like a
credential is rejected, API keys belong in the environment.
"""

from __future__ import annotations

import os
import re
import warnings
from collections.abc import Iterator
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

GLOBAL_CONFIG_PATH: Path = Path.home() / ".docwhisperer" / "config.yaml"
PROJECT_CONFIG_NAME: str = "docwhisperer.yaml"

# Matches api_key, apikey, api-secret, auth_token, token, client_secret,
# password, credentials; not max_tokens or min_score.
_CREDENTIAL_KEY = re.compile(
    r"api[_\-]?(key|secret)|(^|_)token$|(^|_)secret$|passw(ord|d)|credential",
    re.IGNORECASE,
)

# Environment variable → (section, field)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "DOCWHISPERER_EMBEDDING_MODEL": ("embedding", "model"),
    "DOCWHISPERER_GENERATION_MODEL": ("generation", "model"),
    "DOCWHISPERER_DB": ("storage", "db_path"),
}


class ConfigError(ValueError):
    """A config file is unreadable, malformed, out of range, or holds a secret."""


@dataclass
class EmbeddingCfg:
    """``embedding:`` section; defaults to all-MiniLM-L6-v2 served by a local Ollama."""

    model: str = "ollama/all-minilm"
    dimensions: int = 384


@dataclass
class GenerationCfg:
    model: str = "ollama/llama3"
    num_retries: int = 3
    max_tokens: int = 1024


@dataclass
class ChunkingCfg:
    max_len: int = 500
    overlap: int = 50


@dataclass
class RetrievalCfg:
    max_results: int = 5
    min_score: float = 0.0


@dataclass
class MemoryCfg:
    max_messages: int = 10


@dataclass
class StorageCfg:
    db_path: str = ".docwhisperer.db"


@dataclass
class DocWhispererConfig:
    embedding: EmbeddingCfg = field(default_factory=EmbeddingCfg)
    generation: GenerationCfg = field(default_factory=GenerationCfg)
    chunking: ChunkingCfg = field(default_factory=ChunkingCfg)
    retrieval: RetrievalCfg = field(default_factory=RetrievalCfg)
    memory: MemoryCfg = field(default_factory=MemoryCfg)
    storage: StorageCfg = field(default_factory=StorageCfg)


_SECTIONS: dict[str, type] = {
    f.name: f.default_factory  # type: ignore[misc]
    for f in fields(DocWhispererConfig)
}


def _read_layer(path: Path) -> dict[str, Any]:
    """Parse one YAML layer; a missing or empty file is an empty layer."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"'{path}' must contain a mapping at the top level.")
    for key in data:
        if key not in _SECTIONS:
            warnings.warn(
                f"Unknown config section '{key}' in '{path}' (ignored).",
                UserWarning,
                stacklevel=3,
            )
    return data


def _walk_keys(data: dict[str, Any], prefix: str = "") -> Iterator[tuple[str, str]]:
    """Yield ``(dotted_path, key)`` for every key in a nested mapping."""
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        yield dotted, str(key)
        if isinstance(value, dict):
            yield from _walk_keys(value, f"{dotted}.")


def _reject_credentials(data: dict[str, Any], source: Path) -> None:
    for dotted, key in _walk_keys(data):
        if _CREDENTIAL_KEY.search(key):
            raise ConfigError(
                f"'{source}' contains a forbidden key '{dotted}'. "
                f"Remove it and set the secret as an environment variable instead, "
                f"e.g. export {key.upper().replace('-', '_')}=..."
            )


def _merge(layers: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    """Merge layers section by section; later layers override earlier keys."""
    merged: dict[str, dict[str, Any]] = {name: {} for name in _SECTIONS}
    for layer in layers:
        for name in _SECTIONS:
            section = layer.get(name)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise ConfigError(
                    f"Config section '{name}' must be a mapping, got {type(section).__name__}."
                )
            merged[name].update(section)
    return merged


def _build_section(name: str, values: dict[str, Any]) -> Any:
    cls = _SECTIONS[name]
    defaults = cls()
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in values:
            continue
        kind = type(getattr(defaults, f.name))
        try:
            kwargs[f.name] = kind(values[f.name])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid config value for {name}.{f.name}: {exc}") from exc
    return cls(**kwargs)


def _validate(cfg: DocWhispererConfig) -> None:
    """Raise ConfigError for values the pipeline cannot run with."""
    ch = cfg.chunking
    if ch.max_len < 1:
        raise ConfigError(f"chunking.max_len must be >= 1, got {ch.max_len}")
    if not 0 <= ch.overlap < ch.max_len:
        raise ConfigError(
            f"chunking.overlap must be in [0, max_len), got {ch.overlap} (max_len={ch.max_len})"
        )
    for dotted, value in (
        ("embedding.dimensions", cfg.embedding.dimensions),
        ("retrieval.max_results", cfg.retrieval.max_results),
        ("memory.max_messages", cfg.memory.max_messages),
    ):
        if value < 1:
            raise ConfigError(f"{dotted} must be >= 1, got {value}")


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> DocWhispererConfig:
    """Return the merged configuration for *project_dir* (default: CWD).

    Args:
        project_dir: Directory holding ``docwhisperer.yaml``.
        global_config_path: Global config file; ``~/.docwhisperer/config.yaml``
            unless given.

    Raises:
        ConfigError: A layer is malformed, a value is out of range, or the
            global file contains a credential-like key.
    """
    global_path = global_config_path or GLOBAL_CONFIG_PATH
    global_layer = _read_layer(global_path)
    _reject_credentials(global_layer, global_path)
    project_layer = _read_layer((project_dir or Path.cwd()) / PROJECT_CONFIG_NAME)

    merged = _merge([global_layer, project_layer])
    for env_var, (section, key) in _ENV_OVERRIDES.items():
        if value := os.environ.get(env_var):
            merged[section][key] = value

    cfg = DocWhispererConfig(**{name: _build_section(name, merged[name]) for name in _SECTIONS})
    _validate(cfg)
    return cfg


_GLOBAL_HEADER = """\
# docwhisperer global configuration: model defaults only.
# Never put API keys here; export them instead, e.g. OPENAI_API_KEY=sk-...
"""


def ensure_global_config(global_config_path: Path | None = None) -> Path:
    """Write the global config with default models unless it already exists.

    The directory is created private (0700) and the file owner-only (0600).
    """
    target = global_config_path or GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    if target.exists():
        return target

    defaults = DocWhispererConfig()
    body = yaml.safe_dump(
        {
            "embedding": asdict(defaults.embedding),
            "generation": {"model": defaults.generation.model},
        },
        sort_keys=False,
    )
    target.write_text(_GLOBAL_HEADER + "\n" + body, encoding="utf-8")
    target.chmod(0o600)
    return target
