"""Navigable, size-bounded semantic indexes of source repositories."""

from .adapters import Registry
from .adapters.base import Adapter
from .config import AdapterOverride, ConfigError, IndexConfig, QmdConfig, load_config
from .manager import IndexManager, NoAdaptersDetectedError
from .models import DirNode, FileEntry, IndexResult, ScanResult, SymbolInfo
from .scanner import Scanner
from .synthesis import Synthesizer

__all__ = [
    "Adapter",
    "AdapterOverride",
    "ConfigError",
    "DirNode",
    "FileEntry",
    "IndexConfig",
    "IndexManager",
    "IndexResult",
    "NoAdaptersDetectedError",
    "QmdConfig",
    "Registry",
    "ScanResult",
    "Scanner",
    "SymbolInfo",
    "Synthesizer",
    "load_config",
]
