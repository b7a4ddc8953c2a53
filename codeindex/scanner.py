"""Concurrent repository scanner."""

from __future__ import annotations

import hashlib
import os
import queue
import re
import threading
import time
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

import xxhash

from .adapters.base import Adapter
from .config import DEFAULT_HASH, DEFAULT_MAX_CANDIDATES, HASH_SHA256, AdapterOverride
from .ignore import IgnoreRule, IgnoreRules, build_ignore_rule, compile_ignore_rules
from .logging import get_logger
from .models import BYTES_PER_TOKEN, DirNode, FileEntry, ScanResult
from .scoring import score_file, select_candidates

HASH_READ_LIMIT = 1024 * 1024
GENERATED_MARKER_WINDOW = 1024

_GENERATED_NAME_PATTERNS = (
    "*.pb.go",
    "*_gen.go",
    "zz_generated*",
    "*.generated.*",
    "*_pb2.py",
    "*.g.dart",
    "*.freezed.dart",
    "*.min.js",
)
_GENERATED_MARKER_RE = re.compile(rb"Code generated .* DO NOT EDIT|@generated")

logger = get_logger("scanner")

# Queue sentinel; compared by identity.
_STOP = object()


@dataclass
class _WorkItem:
    abs_path: str
    rel_path: str
    depth: int


class _ScanState:
    """Per-scan counters owned by the producer thread."""

    def __init__(self) -> None:
        self.total_files = 0
        self.total_dirs = 0
        self.ignored_files = 0
        self.ignored_dirs = 0
        self.other_files: List[str] = []


class Scanner:
    """Walks a repository and scores every eligible file.

    The calling thread walks the tree and feeds a bounded work queue; a pool of
    worker threads stats, hashes and classifies files; a single collector
    thread gathers the resulting entries.
    """

    def __init__(
        self,
        *,
        hash_algorithm: str = DEFAULT_HASH,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        workers: Optional[int] = None,
    ) -> None:
        self.hash_algorithm = hash_algorithm
        self.max_candidates = max_candidates
        self.workers = max(1, workers or os.cpu_count() or 1)

    def scan(
        self,
        root: str | Path,
        adapters: Sequence[Adapter],
        overrides: Optional[Mapping[str, AdapterOverride]] = None,
    ) -> ScanResult:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        started = time.perf_counter()
        active = sorted(adapters, key=lambda adapter: adapter.name)
        rules = compile_ignore_rules(root_path, active, overrides)
        priority_rules = _priority_rules(active, overrides or {})

        work: queue.Queue = queue.Queue(maxsize=self.workers * 4)
        results: queue.Queue = queue.Queue(maxsize=self.workers * 4)
        collected: List[FileEntry] = []

        collector = threading.Thread(target=_collect, args=(results, collected), name="codeindex-collector")
        collector.start()
        workers = [
            threading.Thread(
                target=self._work,
                args=(work, results, active, priority_rules),
                name=f"codeindex-worker-{index}",
            )
            for index in range(self.workers)
        ]
        for worker in workers:
            worker.start()

        state = _ScanState()
        tree = DirNode(name=".", path="", depth=0)
        try:
            self._walk(root_path, "", tree, rules, work, state, is_root=True)
        finally:
            # Workers drain first so every entry reaches the result queue
            # before the collector is told to stop.
            for _ in workers:
                work.put(_STOP)
            for worker in workers:
                worker.join()
            results.put(_STOP)
            collector.join()

        files = sorted(collected, key=lambda entry: entry.path)
        _prune(tree)
        result = ScanResult(
            files=files,
            candidates=select_candidates(files, self.max_candidates),
            dir_tree=tree,
            other_files=sorted(state.other_files),
            total_files=state.total_files,
            total_dirs=state.total_dirs,
            ignored_files=state.ignored_files,
            ignored_dirs=state.ignored_dirs,
            total_bytes=sum(entry.size for entry in files),
            elapsed=time.perf_counter() - started,
        )
        logger.info(
            "Scanned %d files (%d eligible, %d candidates) in %.2fs",
            result.total_files,
            len(result.files),
            len(result.candidates),
            result.elapsed,
        )
        return result

    def _walk(
        self,
        directory: Path,
        rel_dir: str,
        node: DirNode,
        rules: IgnoreRules,
        work: queue.Queue,
        state: _ScanState,
        *,
        is_root: bool = False,
    ) -> None:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            if is_root:
                raise
            logger.warning("Skipping unreadable directory %s: %s", rel_dir or ".", exc)
            return

        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError:
                continue

            if is_dir:
                if rules.ignore_dir(entry.name, rel_path):
                    state.ignored_dirs += 1
                    continue
                state.total_dirs += 1
                child = DirNode(name=entry.name, path=rel_path, depth=node.depth + 1)
                node.children.append(child)
                self._walk(Path(entry.path), rel_path, child, rules, work, state)
            elif is_file:
                if rules.ignore_file(rel_path):
                    state.ignored_files += 1
                    continue
                state.total_files += 1
                if rules.is_eligible(entry.name):
                    node.files.append(entry.name)
                    work.put(_WorkItem(abs_path=entry.path, rel_path=rel_path, depth=rel_path.count("/")))
                else:
                    state.other_files.append(rel_path)

    def _work(
        self,
        work: queue.Queue,
        results: queue.Queue,
        adapters: Sequence[Adapter],
        priority_rules: Sequence[IgnoreRule],
    ) -> None:
        while True:
            item = work.get()
            if item is _STOP:
                return
            try:
                entry = self._process(item, adapters, priority_rules)
            except OSError as exc:
                logger.debug("Skipping %s: %s", item.rel_path, exc)
                continue
            except Exception:  # noqa: BLE001 - keep the worker draining the queue
                logger.exception("Unexpected error while scanning %s", item.rel_path)
                continue
            results.put(entry)

    def _process(
        self,
        item: _WorkItem,
        adapters: Sequence[Adapter],
        priority_rules: Sequence[IgnoreRule],
    ) -> FileEntry:
        stat_result = os.stat(item.abs_path)
        with open(item.abs_path, "rb") as handle:
            head = handle.read(HASH_READ_LIMIT)

        name = item.rel_path.rsplit("/", 1)[-1]
        adapter = language_for(name, adapters)
        entry = FileEntry(
            path=item.rel_path,
            size=stat_result.st_size,
            mtime=stat_result.st_mtime,
            hash=hash_bytes(head, self.hash_algorithm),
            depth=item.depth,
            estimated_tokens=stat_result.st_size // BYTES_PER_TOKEN,
            language=adapter.name if adapter else None,
            is_entrypoint=adapter is not None and _matches_any(item.rel_path, name, adapter.entrypoint_patterns),
            is_config=any(_matches_any(item.rel_path, name, a.config_patterns) for a in adapters),
            is_generated=is_generated(name, head),
        )
        entry.score = score_file(entry, adapter, priority_rules)
        return entry


def hash_bytes(data: bytes, algorithm: str = DEFAULT_HASH) -> str:
    if algorithm == HASH_SHA256:
        return hashlib.sha256(data).hexdigest()
    return xxhash.xxh64(data).hexdigest()


def is_generated(name: str, head: bytes) -> bool:
    if any(fnmatchcase(name, pattern) for pattern in _GENERATED_NAME_PATTERNS):
        return True
    return _GENERATED_MARKER_RE.search(head[:GENERATED_MARKER_WINDOW]) is not None


def language_for(name: str, adapters: Sequence[Adapter]) -> Optional[Adapter]:
    """Return the first adapter, in name order, that handles ``name``'s extension."""
    suffix = Path(name).suffix.lower()
    if not suffix:
        return None
    for adapter in adapters:
        if suffix in (ext.lower() for ext in adapter.file_extensions):
            return adapter
    return None


def _matches_any(rel_path: str, name: str, patterns: Sequence[str]) -> bool:
    return any(fnmatchcase(name, pattern) or fnmatchcase(rel_path, pattern) for pattern in patterns)


def _priority_rules(
    adapters: Sequence[Adapter], overrides: Mapping[str, AdapterOverride]
) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for adapter in adapters:
        override = overrides.get(adapter.name)
        if override is None:
            continue
        for pattern in override.priority_files:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)
    return rules


def _collect(results: queue.Queue, collected: List[FileEntry]) -> None:
    while True:
        item = results.get()
        if item is _STOP:
            return
        collected.append(item)


def _prune(node: DirNode) -> bool:
    """Drop subtrees without eligible files; return whether ``node`` keeps content."""
    node.children = [child for child in node.children if _prune(child)]
    node.files.sort()
    return bool(node.files or node.children)


__all__ = ["GENERATED_MARKER_WINDOW", "HASH_READ_LIMIT", "Scanner", "hash_bytes", "is_generated", "language_for"]
