"""Symbol extraction over the selected candidate files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Sequence

from ..adapters.base import Adapter
from ..logging import get_logger
from ..models import FileEntry, SymbolInfo

# Only the head of a file is parsed; declarations past this point are ignored.
SYMBOL_READ_LIMIT = 32 * 1024

logger = get_logger("extract")


def extract_candidates(root: str | Path, candidates: Iterable[FileEntry], adapters: Sequence[Adapter]) -> None:
    """Attach a ``SymbolInfo`` to every candidate, in place.

    Runs sequentially; the candidate set is bounded. Files with no language tag
    (manifests and other config files) or that cannot be read receive an
    empty ``SymbolInfo``.
    """
    root_path = Path(root)
    by_name: Dict[str, Adapter] = {adapter.name: adapter for adapter in adapters}
    for entry in candidates:
        adapter = by_name.get(entry.language or "")
        if adapter is None:
            entry.symbols = SymbolInfo()
            continue
        content = read_partial(root_path / entry.path, SYMBOL_READ_LIMIT)
        if content is None:
            entry.symbols = SymbolInfo()
            continue
        entry.symbols = safe_extract(adapter, entry.path, content)


def read_partial(path: Path, limit: int) -> bytes | None:
    try:
        with path.open("rb") as handle:
            return handle.read(limit)
    except OSError as exc:
        logger.debug("Skipping unreadable file %s: %s", path, exc)
        return None


def safe_extract(adapter: Adapter, path: str, content: bytes) -> SymbolInfo:
    """Run ``adapter.extract_symbols`` and absorb any failure into an empty result."""
    try:
        return adapter.extract_symbols(path, content)
    except Exception as exc:  # noqa: BLE001 - extraction must never abort a run
        logger.debug("Symbol extraction failed for %s via %s: %s", path, adapter.name, exc)
        return SymbolInfo()


__all__ = ["SYMBOL_READ_LIMIT", "extract_candidates", "read_partial", "safe_extract"]
