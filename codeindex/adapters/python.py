"""Python adapter."""

from __future__ import annotations

from .base import Adapter
from ..extract.python_symbols import extract_python_symbols
from ..models import SymbolInfo


class PythonAdapter(Adapter):
    """Handles Python projects; symbols come from ``ast`` with a regex fallback."""

    name = "python"
    detection_files = ("pyproject.toml", "requirements.txt", "setup.py", "Pipfile")
    file_extensions = (".py",)
    ignore_dirs = ("__pycache__", ".venv", "venv", ".tox", ".eggs", "*.egg-info")
    ignore_globs = ("*.pyc", "*_pb2.py", "*_pb2_grpc.py")
    entrypoint_patterns = ("main.py", "app.py", "__main__.py", "manage.py")
    config_patterns = ("pyproject.toml", "setup.py", "setup.cfg", "requirements.txt")
    path_bonuses = (("src", 10), ("api", 5), ("core", 5))

    def score_file(self, path: str, depth: int, is_entrypoint: bool, is_config: bool) -> int:
        score = super().score_file(path, depth, is_entrypoint, is_config)
        if path.endswith("__init__.py"):
            score -= 15
        elif path.endswith("conftest.py"):
            score -= 10
        return score

    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        return extract_python_symbols(path, content)
