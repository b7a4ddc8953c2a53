"""Registration of generated indexes with a ``qmd`` search collection."""

from __future__ import annotations

import re
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import QmdConfig
from .logging import get_logger

STATUS_TIMEOUT = 10
UPDATE_TIMEOUT = 60
COLLECTION_TIMEOUT = 60
CONTEXT_TIMEOUT = 10
EMBED_TIMEOUT = 10 * 60

logger = get_logger("qmd")

Runner = Callable[..., str]


class QmdError(RuntimeError):
    """Raised when the index cannot be registered with qmd."""


class QmdRegistrar:
    """Creates or refreshes a qmd collection pointing at the index directory."""

    def __init__(
        self,
        config: Optional[QmdConfig],
        runner: Runner | None = None,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self.config = config
        self._runner = runner or self._default_runner
        self._which = which

    def register(self, index_path: Path | str) -> bool:
        """Register ``index_path``; returns ``False`` when no collection is configured."""
        if self.config is None or not self.config.collection:
            return False

        qmd = self._which("qmd")
        if not qmd:
            raise QmdError("qmd not found in PATH")

        index_path = Path(index_path)
        collection = self.config.collection
        index_dir = str(index_path.parent)
        mask = self.config.mask or (index_path.name if index_path.suffix == ".md" else "**/*.md")
        logger.info("Registering with qmd: collection=%s path=%s mask=%s", collection, index_dir, mask)

        if self._collection_exists(qmd, collection):
            logger.info("Collection '%s' exists, updating", collection)
            self._try([qmd, "update", "-c", collection], UPDATE_TIMEOUT, "qmd update failed")
        else:
            self._create_collection(qmd, collection, index_dir, mask)

        if self.config.context:
            self._try(
                [qmd, "context", "add", f"qmd://{collection}", self.config.context],
                CONTEXT_TIMEOUT,
                "Failed to add qmd context",
            )

        if self.config.embed:
            logger.info("Running qmd embed (this may take a while)")
            self._try([qmd, "embed", "-c", collection], EMBED_TIMEOUT, "qmd embed failed")

        logger.info("Registered with qmd as collection '%s'", collection)
        return True

    def _collection_exists(self, qmd: str, collection: str) -> bool:
        try:
            output = self._runner([qmd, "status", "--json"], timeout=STATUS_TIMEOUT)
        except (subprocess.SubprocessError, OSError) as exc:
            logger.debug("qmd status failed, assuming collection is missing: %s", exc)
            return False
        pattern = r'"name"\s*:\s*"' + re.escape(collection) + '"'
        return re.search(pattern, output or "") is not None

    def _create_collection(self, qmd: str, collection: str, index_dir: str, mask: str) -> None:
        args: List[str] = [qmd, "collection", "add", index_dir, "--name", collection]
        if mask:
            args.extend(["--mask", mask])
        try:
            self._runner(args, timeout=COLLECTION_TIMEOUT)
        except subprocess.TimeoutExpired as exc:
            raise QmdError(f"qmd collection add timed out after {COLLECTION_TIMEOUT}s") from exc
        except (subprocess.SubprocessError, OSError) as exc:
            raise QmdError(f"Failed to create qmd collection: {_describe(exc)}") from exc

    def _try(self, args: List[str], timeout: int, message: str) -> None:
        try:
            self._runner(args, timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("%s: timed out after %ss", message, timeout)
        except (subprocess.SubprocessError, OSError) as exc:
            logger.warning("%s: %s", message, _describe(exc))

    @staticmethod
    def _default_runner(args: Iterable[str], *, timeout: int) -> str:
        completed = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
        return completed.stdout


def _describe(exc: BaseException) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        output = (exc.stderr or exc.stdout or "").strip()
        return output or str(exc)
    return str(exc)


__all__ = ["QmdError", "QmdRegistrar"]
