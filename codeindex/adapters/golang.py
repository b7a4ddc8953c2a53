"""Go adapter."""

from __future__ import annotations

from .base import Adapter
from ..extract.go_symbols import extract_go_symbols
from ..models import SymbolInfo


class GoAdapter(Adapter):
    """Handles Go modules; symbols come from tree-sitter with a regex fallback."""

    name = "go"
    detection_files = ("go.mod", "go.sum")
    file_extensions = (".go",)
    ignore_dirs = ("vendor", "testdata")
    ignore_globs = ("*_test.go", "*.generated.go", "mock_*.go")
    entrypoint_patterns = ("main.go", "cmd/*/main.go")
    config_patterns = ("go.mod", "go.sum", "Makefile")
    path_bonuses = (("cmd", 15), ("internal", 10), ("pkg", 10))

    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        return extract_go_symbols(path, content)
