"""File scoring and candidate selection."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .adapters.base import Adapter
from .ignore import IgnoreRule
from .models import FileEntry

ENTRYPOINT_BONUS = 40
CONFIG_BONUS = 30
GENERATED_PENALTY = 100
PRIORITY_BONUS = 50

_DEPTH_BONUS = {0: 60, 1: 40, 2: 20}


def depth_bonus(depth: int) -> int:
    return _DEPTH_BONUS.get(depth, 0)


def score_file(
    entry: FileEntry,
    adapter: Optional[Adapter],
    priority_rules: Sequence[IgnoreRule] = (),
) -> int:
    """Return the composite score for ``entry``.

    The adapter contributes a path-based modifier only; the flag bonuses are
    added here so toggling a flag moves the score by a fixed amount.
    """
    score = 0
    if adapter is not None:
        score += adapter.score_file(entry.path, entry.depth, entry.is_entrypoint, entry.is_config)
    if entry.is_entrypoint:
        score += ENTRYPOINT_BONUS
    if entry.is_config:
        score += CONFIG_BONUS
    score += depth_bonus(entry.depth)
    if entry.is_generated:
        score -= GENERATED_PENALTY
    if any(rule.matches(entry.path, False) for rule in priority_rules):
        score += PRIORITY_BONUS
    return score


def rank_files(files: Iterable[FileEntry]) -> List[FileEntry]:
    return sorted(files, key=lambda entry: (-entry.score, entry.path))


def select_candidates(files: Iterable[FileEntry], max_candidates: int) -> List[FileEntry]:
    """Return the ``max_candidates`` highest-scoring files, ties broken by path."""
    if max_candidates <= 0:
        return []
    return rank_files(files)[:max_candidates]


__all__ = [
    "CONFIG_BONUS",
    "ENTRYPOINT_BONUS",
    "GENERATED_PENALTY",
    "PRIORITY_BONUS",
    "depth_bonus",
    "rank_files",
    "score_file",
    "select_candidates",
]
