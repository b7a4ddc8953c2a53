"""TypeScript / JavaScript adapter."""

from __future__ import annotations

from .base import Adapter
from ..extract.typescript_symbols import extract_typescript_symbols
from ..models import SymbolInfo


class TypeScriptAdapter(Adapter):
    """Handles TypeScript and JavaScript packages with regex heuristics."""

    name = "typescript"
    detection_files = ("tsconfig.json", "package.json")
    file_extensions = (".ts", ".tsx", ".js", ".jsx")
    ignore_dirs = ("node_modules", "dist", "build", ".next", "coverage")
    ignore_globs = ("*.min.js", "*.bundle.js", "*.d.ts", "*.map")
    entrypoint_patterns = ("index.ts", "index.js", "main.ts", "app.ts", "server.ts")
    config_patterns = ("package.json", "tsconfig.json", "webpack.config.js", "vite.config.ts")
    path_bonuses = (("src", 10), ("pages", 10), ("app", 10), ("routes", 5))

    def score_file(self, path: str, depth: int, is_entrypoint: bool, is_config: bool) -> int:
        score = super().score_file(path, depth, is_entrypoint, is_config)
        name = path.rsplit("/", 1)[-1]
        if ".test." in name or ".spec." in name or ".stories." in name:
            score -= 10
        return score

    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        return extract_typescript_symbols(path, content)
