"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping, Sequence

from codeindex.adapters import Registry
from codeindex.adapters.base import Adapter
from codeindex.models import ScanResult
from codeindex.scanner import Scanner


class RepoBuilder:
    """Utility for writing files into a throwaway repository and rescanning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self.registry = Registry()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def adapters(self) -> list[Adapter]:
        """Return the adapters detected for the current repository contents."""
        return self.registry.detect(self.root)

    def scan(self, adapters: Sequence[Adapter] | None = None, **scanner_options: object) -> ScanResult:
        """Return a fresh scan of the repository contents."""
        scanner = Scanner(**scanner_options)  # type: ignore[arg-type]
        return scanner.scan(self.root, adapters if adapters is not None else self.adapters())

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["RepoBuilder"]
