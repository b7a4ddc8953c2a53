"""Configuration loading for codeindex (.codeindex.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".codeindex.yml"

FORMAT_SUMMARY = "summary"
FORMAT_STRUCTURED = "structured"
FORMAT_FULL = "full"
OUTPUT_FORMATS: tuple[str, ...] = (FORMAT_SUMMARY, FORMAT_STRUCTURED, FORMAT_FULL)
DEFAULT_FORMAT = FORMAT_STRUCTURED

HASH_XXHASH = "xxhash"
HASH_SHA256 = "sha256"
HASH_ALGORITHMS: tuple[str, ...] = (HASH_XXHASH, HASH_SHA256)
DEFAULT_HASH = HASH_XXHASH

STORE_REPO = "repo"
STORE_CONFIG = "config"
STORE_BOTH = "both"
STORE_LOCATIONS: tuple[str, ...] = (STORE_REPO, STORE_CONFIG, STORE_BOTH)

DEFAULT_MAX_CANDIDATES = 100
DEFAULT_MAX_OUTPUT_KB = 100


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AdapterOverride:
    """Per-language adjustments to an adapter's ignore and priority rules."""

    ignore_dirs: List[str] = field(default_factory=list)
    ignore_globs: List[str] = field(default_factory=list)
    priority_files: List[str] = field(default_factory=list)
    replace_defaults: bool = False


@dataclass
class QmdConfig:
    """Optional registration of the index with a qmd collection."""

    collection: Optional[str] = None
    embed: bool = False
    context: Optional[str] = None
    mask: Optional[str] = None


@dataclass
class IndexConfig:
    """Run parameters for a codebase index generation."""

    root: Path = field(default_factory=lambda: Path("."))
    output_format: str = DEFAULT_FORMAT
    output_path: Optional[str] = None
    store: str = STORE_REPO
    encrypt: bool = False
    encryption_key: Optional[str] = None
    hash_algorithm: str = DEFAULT_HASH
    max_candidates: int = DEFAULT_MAX_CANDIDATES
    max_output_kb: int = DEFAULT_MAX_OUTPUT_KB
    languages: List[str] = field(default_factory=list)
    adapter_overrides: Dict[str, AdapterOverride] = field(default_factory=dict)
    qmd: Optional[QmdConfig] = None
    verbose: bool = False


def load_config(config_path: Path) -> IndexConfig:
    """Load configuration from disk, returning defaults when the file is missing."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return IndexConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = IndexConfig(root=root)

    output_data = _as_dict(data.get("output"))
    if output_data:
        output_format = _as_choice(output_data.get("format"), OUTPUT_FORMATS)
        if output_format:
            config.output_format = output_format
        config.output_path = _as_str(output_data.get("path"))
        store = _as_choice(output_data.get("store"), STORE_LOCATIONS)
        if store:
            config.store = store
        max_kb = _as_int(output_data.get("max_kb"))
        if max_kb and max_kb > 0:
            config.max_output_kb = max_kb

    hash_algorithm = _as_choice(data.get("hash"), HASH_ALGORITHMS)
    if hash_algorithm:
        config.hash_algorithm = hash_algorithm

    max_candidates = _as_int(data.get("max_candidates"))
    if max_candidates and max_candidates > 0:
        config.max_candidates = max_candidates

    config.languages = [name.lower() for name in _as_str_list(data.get("languages"))]

    adapters_data = _as_dict(data.get("adapters"))
    for name, raw in adapters_data.items():
        override_data = _as_dict(raw)
        if not override_data:
            continue
        config.adapter_overrides[str(name).lower()] = AdapterOverride(
            ignore_dirs=_as_str_list(override_data.get("ignore_dirs")),
            ignore_globs=_as_str_list(override_data.get("ignore_globs")),
            priority_files=_as_str_list(override_data.get("priority_files")),
            replace_defaults=_as_bool(override_data.get("replace_defaults")) or False,
        )

    config.encrypt = _as_bool(data.get("encrypt")) or False

    qmd_data = _as_dict(data.get("qmd"))
    if qmd_data:
        qmd = QmdConfig(
            collection=_as_str(qmd_data.get("collection")),
            embed=_as_bool(qmd_data.get("embed")) or False,
            context=_as_str(qmd_data.get("context")),
            mask=_as_str(qmd_data.get("mask")),
        )
        if qmd.collection:
            config.qmd = qmd

    config.verbose = _as_bool(data.get("verbose")) or False
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_choice(value: Any, choices: Sequence[str]) -> Optional[str]:
    text = _as_str(value)
    if text is None:
        return None
    lowered = text.strip().lower()
    return lowered if lowered in choices else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AdapterOverride",
    "ConfigError",
    "IndexConfig",
    "QmdConfig",
    "load_config",
]
