"""Base class for language adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Tuple

from ..models import SymbolInfo


class Adapter(ABC):
    """Stateless capability descriptor for one language or ecosystem.

    Subclasses declare their rules as class attributes and implement
    :meth:`extract_symbols`. Adapters never hold repository state, so a single
    instance can be shared across scans and threads.
    """

    name: str = ""
    detection_files: Tuple[str, ...] = ()
    file_extensions: Tuple[str, ...] = ()
    ignore_dirs: Tuple[str, ...] = ()
    ignore_globs: Tuple[str, ...] = ()
    entrypoint_patterns: Tuple[str, ...] = ()
    config_patterns: Tuple[str, ...] = ()
    # (directory segment, bonus) pairs applied by the default score_file.
    path_bonuses: Tuple[Tuple[str, int], ...] = ()

    def score_file(self, path: str, depth: int, is_entrypoint: bool, is_config: bool) -> int:
        """Return the language-specific modifier added on top of the universal score."""
        segments = path.split("/")[:-1]
        score = 0
        for segment, bonus in self.path_bonuses:
            if segment in segments:
                score += bonus
        return score

    @abstractmethod
    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        """Return a shallow symbol table for ``content``; must not raise."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
