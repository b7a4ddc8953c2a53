"""Ignore-rule compilation for repository scans."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .adapters import (
    combined_config_patterns,
    combined_extensions,
    combined_ignore_dirs,
    combined_ignore_globs,
)
from .adapters.base import Adapter
from .config import AdapterOverride
from .logging import get_logger

ALWAYS_IGNORED_DIRS = frozenset({".git", ".svn", ".hg", ".idea", ".vscode"})

logger = get_logger("ignore")


@dataclass
class IgnoreRule:
    """A gitignore-style pattern."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern.rstrip("/")

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern.lstrip("/")

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def parse_gitignore(path: Path) -> List[IgnoreRule]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return []
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return []

    rules: List[IgnoreRule] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _last_match_ignores(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


@dataclass
class IgnoreRules:
    """Compiled ignore decisions for one scan."""

    gitignore: List[IgnoreRule] = field(default_factory=list)
    dir_rules: List[IgnoreRule] = field(default_factory=list)
    file_rules: List[IgnoreRule] = field(default_factory=list)
    extensions: frozenset[str] = frozenset()
    config_patterns: tuple[str, ...] = ()

    def ignore_dir(self, name: str, rel_path: str) -> bool:
        if name in ALWAYS_IGNORED_DIRS:
            return True
        if any(rule.matches(rel_path, True) for rule in self.dir_rules):
            return True
        return _last_match_ignores(rel_path, True, self.gitignore)

    def ignore_file(self, rel_path: str) -> bool:
        if _last_match_ignores(rel_path, False, self.gitignore):
            return True
        return any(rule.matches(rel_path, False) for rule in self.file_rules)

    def is_eligible(self, name: str) -> bool:
        suffix = Path(name).suffix.lower()
        if suffix and suffix in self.extensions:
            return True
        return any(fnmatchcase(name, pattern) for pattern in self.config_patterns)


def compile_ignore_rules(
    root: Path,
    adapters: Sequence[Adapter],
    overrides: Optional[Mapping[str, AdapterOverride]] = None,
) -> IgnoreRules:
    """Merge adapter defaults, user overrides and ``.gitignore`` into one rule set.

    Overrides are keyed by adapter name and only apply to adapters in
    ``adapters``. ``replace_defaults`` swaps the adapter's own ignore lists for
    the override's instead of extending them.
    """
    overrides = overrides or {}
    defaults = [
        adapter
        for adapter in adapters
        if not (adapter.name in overrides and overrides[adapter.name].replace_defaults)
    ]
    dir_patterns = combined_ignore_dirs(defaults)
    file_patterns = combined_ignore_globs(defaults)
    for adapter in adapters:
        override = overrides.get(adapter.name)
        if override is not None:
            dir_patterns.extend(override.ignore_dirs)
            file_patterns.extend(override.ignore_globs)

    unknown = sorted(set(overrides) - {adapter.name for adapter in adapters})
    if unknown:
        logger.debug("Ignoring overrides for inactive adapters: %s", ", ".join(unknown))

    dir_rules = [build_ignore_rule(pattern.rstrip("/") + "/") for pattern in dict.fromkeys(dir_patterns)]
    file_rules = [build_ignore_rule(pattern) for pattern in dict.fromkeys(file_patterns)]
    return IgnoreRules(
        gitignore=parse_gitignore(Path(root) / ".gitignore"),
        dir_rules=[rule for rule in dir_rules if rule is not None],
        file_rules=[rule for rule in file_rules if rule is not None],
        extensions=frozenset(ext.lower() for ext in combined_extensions(adapters)),
        config_patterns=tuple(combined_config_patterns(adapters)),
    )


__all__ = [
    "ALWAYS_IGNORED_DIRS",
    "IgnoreRule",
    "IgnoreRules",
    "build_ignore_rule",
    "compile_ignore_rules",
    "parse_gitignore",
]
