"""Output location policy for rendered indexes."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from . import encryption
from ..config import STORE_BOTH, STORE_CONFIG, STORE_LOCATIONS, STORE_REPO
from ..logging import get_logger

OUTPUT_DIRNAME = ".codeindex"
ENCRYPTED_SUFFIX = ".enc"

logger = get_logger("stores.output")


class OutputStore:
    """Writes an index to the repository, the user's home directory, or both.

    The primary destination must succeed; the secondary copy written for
    ``store="both"`` only logs a warning on failure.
    """

    def __init__(
        self,
        root: Path,
        file_slug: str,
        *,
        output_path: Optional[str] = None,
        store: str = STORE_REPO,
        encrypt: bool = False,
        encryption_key: Optional[str] = None,
        home: Optional[Path] = None,
    ) -> None:
        if store not in STORE_LOCATIONS:
            raise ValueError(f"Unknown store location '{store}'. Expected one of: {', '.join(STORE_LOCATIONS)}")
        self.root = Path(root)
        self.file_slug = file_slug
        self.output_path = output_path
        self.store = store
        self.encrypt = encrypt
        self.encryption_key = encryption_key
        self.home = Path(home) if home is not None else Path.home()

    @property
    def filename(self) -> str:
        return f"{self.file_slug}_INDEX.md"

    def repo_path(self) -> Path:
        return self.root / OUTPUT_DIRNAME / self.filename

    def config_path(self) -> Path:
        return self.home / OUTPUT_DIRNAME / self.filename

    def primary_path(self) -> Path:
        if self.output_path:
            custom = Path(self.output_path).expanduser()
            return custom if custom.is_absolute() else self.root / custom
        if self.store == STORE_CONFIG:
            return self.config_path()
        return self.repo_path()

    def secondary_paths(self) -> List[Path]:
        if self.store != STORE_BOTH:
            return []
        primary = self.primary_path()
        return [path for path in (self.repo_path(), self.config_path()) if path != primary]

    def write(self, content: str) -> Path:
        """Persist ``content`` and return the primary path actually written."""
        if self.encrypt and not self.encryption_key:
            raise ValueError("Encryption enabled but no encryption key provided")
        payload = encryption.encrypt(content, self.encryption_key) if self.encrypt else content

        primary = self._target(self.primary_path())
        _write_text(primary, payload)
        logger.info("Wrote index to %s", primary)

        for secondary in self.secondary_paths():
            target = self._target(secondary)
            try:
                _write_text(target, payload)
            except OSError as exc:
                logger.warning("Failed to write secondary copy to %s: %s", target, exc)
            else:
                logger.debug("Wrote secondary copy to %s", target)
        return primary

    def _target(self, path: Path) -> Path:
        if self.encrypt:
            return path.with_name(path.name + ENCRYPTED_SUFFIX)
        return path


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


__all__ = ["ENCRYPTED_SUFFIX", "OUTPUT_DIRNAME", "OutputStore"]
