"""Language adapters and the registry that detects which ones apply."""

from __future__ import annotations

import os
import threading
from importlib import metadata
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence

from .base import Adapter
from .flutter import FlutterAdapter
from .golang import GoAdapter
from .python import PythonAdapter
from .typescript import TypeScriptAdapter
from ..logging import get_logger

_ENTRY_POINT_GROUP = "codeindex.adapters"

_BUILTIN_FACTORIES: tuple[Callable[[], Adapter], ...] = (
    GoAdapter,
    PythonAdapter,
    TypeScriptAdapter,
    FlutterAdapter,
)

logger = get_logger("adapters")


class Registry:
    """Holds known adapters and detects which apply to a repository.

    A registry is an ordinary caller-owned value: create one, optionally
    register extra adapters, and pass it to the pipeline.
    """

    def __init__(self, *, include_builtins: bool = True) -> None:
        self._adapters: Dict[str, Adapter] = {}
        self._lock = threading.RLock()
        if include_builtins:
            for factory in _BUILTIN_FACTORIES:
                self.register(factory())

    def register(self, adapter: Adapter) -> None:
        if not isinstance(adapter, Adapter):
            raise TypeError(f"Expected an Adapter instance, got {type(adapter).__name__}")
        if not adapter.name:
            raise ValueError(f"{adapter.__class__.__name__} does not declare a name")
        with self._lock:
            self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        with self._lock:
            return self._adapters.get(name)

    def all(self) -> List[Adapter]:
        with self._lock:
            return [self._adapters[name] for name in sorted(self._adapters)]

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._adapters)

    def get_by_names(self, names: Sequence[str]) -> List[Adapter]:
        """Return the named adapters sorted by name, skipping unknown names."""
        with self._lock:
            selected: Dict[str, Adapter] = {}
            for name in names:
                adapter = self._adapters.get(name.strip().lower())
                if adapter is None:
                    logger.warning("Unknown language adapter requested: %s", name)
                    continue
                selected[adapter.name] = adapter
        return [selected[name] for name in sorted(selected)]

    def detect(self, repo_root: str | Path) -> List[Adapter]:
        """Return adapters whose detection files exist at the root or one level down."""
        root = Path(repo_root)
        subdirs = _visible_subdirectories(root)
        with self._lock:
            adapters = list(self._adapters.values())
        detected = [adapter for adapter in adapters if _matches(root, subdirs, adapter)]
        return sorted(detected, key=lambda adapter: adapter.name)

    def load_plugins(self) -> List[str]:
        """Register adapters exposed through the ``codeindex.adapters`` entry point group."""
        loaded: List[str] = []
        for entry in _iter_entry_points():
            try:
                obj = entry.load()
            except Exception as exc:  # pragma: no cover
                raise RuntimeError(f"Failed to load adapter entry point '{entry.name}': {exc}") from exc
            adapter = _coerce_adapter(obj)
            self.register(adapter)
            loaded.append(adapter.name)
        return loaded


def combined_ignore_dirs(adapters: Iterable[Adapter]) -> List[str]:
    return _union(adapter.ignore_dirs for adapter in adapters)


def combined_ignore_globs(adapters: Iterable[Adapter]) -> List[str]:
    return _union(adapter.ignore_globs for adapter in adapters)


def combined_extensions(adapters: Iterable[Adapter]) -> List[str]:
    return _union(adapter.file_extensions for adapter in adapters)


def combined_config_patterns(adapters: Iterable[Adapter]) -> List[str]:
    return _union(adapter.config_patterns for adapter in adapters)


def _union(groups: Iterable[Sequence[str]]) -> List[str]:
    seen: set[str] = set()
    result: List[str] = []
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                result.append(item)
    return result


def _visible_subdirectories(root: Path) -> List[Path]:
    try:
        with os.scandir(root) as entries:
            return sorted(
                Path(entry.path)
                for entry in entries
                if not entry.name.startswith(".") and entry.is_dir()
            )
    except OSError:
        return []


def _matches(root: Path, subdirs: Sequence[Path], adapter: Adapter) -> bool:
    for detection_file in adapter.detection_files:
        if _exists(root / detection_file):
            return True
        if any(_exists(subdir / detection_file) for subdir in subdirs):
            return True
    return False


def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


def _coerce_adapter(obj: object) -> Adapter:
    if isinstance(obj, Adapter):
        return obj
    if isinstance(obj, type) and issubclass(obj, Adapter):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Adapter):
            return instance
    raise TypeError("Adapter entry point must be an Adapter subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "Adapter",
    "FlutterAdapter",
    "GoAdapter",
    "PythonAdapter",
    "Registry",
    "TypeScriptAdapter",
    "combined_config_patterns",
    "combined_extensions",
    "combined_ignore_dirs",
    "combined_ignore_globs",
]
