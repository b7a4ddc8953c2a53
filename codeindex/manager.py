"""Pipeline orchestration for index generation."""

from __future__ import annotations

import re
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import List, Tuple

from .adapters import Registry
from .adapters.base import Adapter
from .config import IndexConfig
from .extract import extract_candidates
from .logging import get_logger
from .models import IndexResult
from .qmd import QmdError, QmdRegistrar
from .scanner import Scanner, hash_bytes
from .stores import OutputStore
from .synthesis import Synthesizer, categorize

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]+")


class NoAdaptersDetectedError(RuntimeError):
    """Raised when no language adapter applies to the repository."""


def derive_repo_slugs(name: str) -> Tuple[str, str]:
    """Return ``(file_slug, var_slug)`` for a repository name.

    ``my-repo.v2`` becomes ``("my_repo_v2", "MY_REPO_V2")``.
    """
    slug = _NON_ALNUM_RE.sub("_", name).strip("_") or "repo"
    return slug.lower(), slug.upper()


class IndexManager:
    """Coordinates detection, scanning, extraction, rendering and persistence."""

    def __init__(
        self,
        config: IndexConfig,
        registry: Registry | None = None,
        scanner: Scanner | None = None,
        synthesizer: Synthesizer | None = None,
        qmd_registrar: QmdRegistrar | None = None,
    ) -> None:
        self.config = config
        self.root = Path(config.root).expanduser().resolve()
        self.registry = registry or Registry()
        self.scanner = scanner or Scanner(
            hash_algorithm=config.hash_algorithm,
            max_candidates=config.max_candidates,
        )
        self._synthesizer = synthesizer
        self._qmd_registrar = qmd_registrar
        self.repo_name = self.root.name or "repo"
        self.file_slug, self.var_slug = derive_repo_slugs(self.repo_name)
        self.logger = get_logger("manager")

    def generate(self) -> IndexResult:
        """Build the index in memory without writing anything."""
        if not self.root.exists():
            raise FileNotFoundError(f"Repository path not found: {self.root}")
        started = time.perf_counter()
        generated_at = datetime.now(UTC)
        self.logger.info("Indexing %s", self.root)

        adapters = self._select_adapters()
        languages = [adapter.name for adapter in adapters]
        self.logger.info("Using adapters: %s", ", ".join(languages))

        scan = self.scanner.scan(self.root, adapters, self.config.adapter_overrides)
        extract_candidates(self.root, scan.candidates, adapters)
        self.logger.debug("Extracted symbols from %d candidates", len(scan.candidates))

        synthesizer = self._synthesizer or Synthesizer(
            self.repo_name,
            languages,
            max_output_kb=self.config.max_output_kb,
        )
        content = synthesizer.render(scan, self.config.output_format, generated_at)
        summary = synthesizer.render_summary(scan, generated_at)

        result = IndexResult(
            content=content,
            summary=summary,
            format=self.config.output_format,
            content_hash=hash_bytes(content.encode("utf-8"), self.config.hash_algorithm),
            repo_name=self.repo_name,
            languages=languages,
            file_count=len(scan.files),
            total_files=scan.total_files,
            duration=time.perf_counter() - started,
            generated_at=generated_at,
            categories=categorize(scan.candidates),
        )
        self.logger.info(
            "Generated %s index for %s (%d files, %d bytes) in %.2fs",
            result.format,
            result.repo_name,
            result.file_count,
            len(content.encode("utf-8")),
            result.duration,
        )
        return result

    def run(self) -> IndexResult:
        """Generate the index, persist it and optionally register it with qmd."""
        result = self.generate()
        store = OutputStore(
            self.root,
            self.file_slug,
            output_path=self.config.output_path,
            store=self.config.store,
            encrypt=self.config.encrypt,
            encryption_key=self.config.encryption_key,
        )
        written = store.write(result.content)
        result.output_path = str(written)

        if self.config.qmd is not None:
            registrar = self._qmd_registrar or QmdRegistrar(self.config.qmd)
            try:
                registrar.register(written)
            except (QmdError, OSError) as exc:
                self.logger.warning("qmd registration failed: %s", exc)
        return result

    def _select_adapters(self) -> List[Adapter]:
        if self.config.languages:
            adapters = self.registry.get_by_names(self.config.languages)
            if not adapters:
                raise NoAdaptersDetectedError(
                    f"None of the requested languages are supported: {', '.join(self.config.languages)}. "
                    f"Available adapters: {', '.join(self.registry.names())}"
                )
            return adapters

        adapters = self.registry.detect(self.root)
        if not adapters:
            raise NoAdaptersDetectedError(
                f"No supported languages detected in {self.root}. "
                f"Add a manifest (for example go.mod or pyproject.toml) or pass --languages "
                f"with one of: {', '.join(self.registry.names())}"
            )
        return adapters


__all__ = ["IndexManager", "NoAdaptersDetectedError", "derive_repo_slugs"]
