"""Flutter / Dart adapter."""

from __future__ import annotations

from .base import Adapter
from ..extract.dart_symbols import extract_dart_symbols
from ..models import SymbolInfo


class FlutterAdapter(Adapter):
    """Handles Flutter and plain Dart packages with regex heuristics."""

    name = "flutter"
    detection_files = ("pubspec.yaml",)
    file_extensions = (".dart",)
    ignore_dirs = (".dart_tool", "build", ".pub-cache")
    ignore_globs = ("*.g.dart", "*.freezed.dart")
    entrypoint_patterns = ("main.dart", "lib/main.dart")
    config_patterns = ("pubspec.yaml", "analysis_options.yaml")
    path_bonuses = (("lib", 10), ("screens", 5), ("widgets", 5))

    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        return extract_dart_symbols(path, content)
