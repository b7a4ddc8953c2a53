"""Markdown section builders shared by the index tiers.

Every builder returns a list of lines (possibly empty when the section has
nothing to say). Inputs are sorted before emission so identical scans render
identical text regardless of worker arrival order.
"""

from __future__ import annotations

from datetime import datetime
from fnmatch import fnmatchcase
from typing import Dict, Iterable, List, Sequence

from .constants import (
    CATEGORY_ORDER,
    CATEGORY_OTHER,
    CATEGORY_RULES,
    DIRECTORY_CAPABILITIES,
    MAX_FILES_PER_DIR,
    MAX_IMPORTANT_FILES,
    MAX_KEY_MODULES,
    MAX_SYMBOLS_PER_FILE,
    MAX_TREE_DEPTH,
    OPERATIONAL_PATTERNS,
    PURPOSE_HINTS,
    RISK_LABELS,
    TEST_FILE_SUFFIXES,
)
from ..models import DirNode, FileEntry, ScanResult


def header(repo_name: str, title: str, languages: Sequence[str], scan: ScanResult) -> List[str]:
    lines = [
        f"# {repo_name} - {title}",
        "",
        f"**Languages:** {', '.join(languages) if languages else 'none'}",
        f"**Files:** {scan.total_files} total, {len(scan.candidates)} indexed",
        "",
    ]
    purpose = infer_purpose(scan.candidates)
    if purpose:
        lines.extend([purpose, ""])
    return lines


def infer_purpose(candidates: Iterable[FileEntry]) -> str:
    frameworks = set(collect_frameworks(candidates))
    hints = [description for tags, description in PURPOSE_HINTS if tags & frameworks]
    if not hints:
        return ""
    return f"This appears to be a {' / '.join(hints)}."


def collect_frameworks(candidates: Iterable[FileEntry]) -> List[str]:
    found: set[str] = set()
    for entry in candidates:
        if entry.symbols is not None:
            found.update(entry.symbols.frameworks)
    return sorted(found)


def entrypoints(candidates: Iterable[FileEntry]) -> List[FileEntry]:
    return sorted((entry for entry in candidates if entry.is_entrypoint), key=lambda entry: entry.path)


def entry_points_section(candidates: Sequence[FileEntry]) -> List[str]:
    found = entrypoints(candidates)
    if not found:
        return []
    lines = ["## Entry Points", ""]
    for entry in found:
        line = f"- `{entry.path}`"
        if entry.symbols is not None and entry.symbols.package:
            line += f" (package: {entry.symbols.package})"
        lines.append(line)
    lines.append("")
    return lines


def layout_section(tree: DirNode, *, with_files: bool) -> List[str]:
    lines = ["## Repository Layout", "", "```"]
    _write_tree(tree, "", 0, with_files, lines)
    lines.extend(["```", ""])
    return lines


def _write_tree(node: DirNode, prefix: str, depth: int, with_files: bool, lines: List[str]) -> None:
    if depth > MAX_TREE_DEPTH:
        return
    files = sorted(node.files)
    if with_files:
        lines.append(f"{prefix}{node.name}/")
        if len(files) > MAX_FILES_PER_DIR:
            shown = MAX_FILES_PER_DIR - 1
            lines.extend(f"{prefix}  {name}" for name in files[:shown])
            lines.append(f"{prefix}  ... and {len(files) - shown} more files")
        else:
            lines.extend(f"{prefix}  {name}" for name in files)
    else:
        suffix = f" ({len(files)} files)" if files else ""
        lines.append(f"{prefix}{node.name}/{suffix}")
    for child in sorted(node.children, key=lambda child: child.name):
        _write_tree(child, prefix + "  ", depth + 1, with_files, lines)


def categorize(candidates: Iterable[FileEntry]) -> Dict[str, List[str]]:
    """Assign every candidate path to exactly one category.

    Categories appear in rule order and only when non-empty; members are
    sorted by path.
    """
    grouped: Dict[str, List[str]] = {}
    for entry in candidates:
        grouped.setdefault(category_for(entry.path), []).append(entry.path)
    return {name: sorted(grouped[name]) for name in CATEGORY_ORDER if name in grouped}


def category_for(path: str) -> str:
    parts = path.lower().split("/")
    directories, name = set(parts[:-1]), parts[-1]
    for category, keywords, name_globs in CATEGORY_RULES:
        if directories & keywords:
            return category
        if any(fnmatchcase(name, pattern) for pattern in name_globs):
            return category
    return CATEGORY_OTHER


def categories_section(categories: Dict[str, List[str]]) -> List[str]:
    lines = ["## File Categories", ""]
    for category, paths in categories.items():
        lines.append(f"### {category} ({len(paths)})")
        lines.append("")
        lines.extend(f"- `{path}`" for path in paths)
        lines.append("")
    return lines


def capabilities(tree: DirNode) -> Dict[str, tuple[str, ...]]:
    found: Dict[str, tuple[str, ...]] = {}
    for child in sorted(tree.children, key=lambda child: child.name):
        caps = DIRECTORY_CAPABILITIES.get(child.name.lower())
        if caps:
            found[child.name] = caps
    return found


def capabilities_section(tree: DirNode) -> List[str]:
    found = capabilities(tree)
    if not found:
        return []
    lines = ["## Primary Capabilities", ""]
    lines.extend(f"- **{name}**: {', '.join(caps)}" for name, caps in found.items())
    lines.append("")
    return lines


def key_modules_section(candidates: Iterable[FileEntry]) -> List[str]:
    by_dir: Dict[str, List[str]] = {}
    for entry in candidates:
        if "/" in entry.path:
            by_dir.setdefault(entry.path.split("/", 1)[0], []).append(entry.path)
    modules = [(name, sorted(paths)) for name, paths in sorted(by_dir.items()) if len(paths) >= 2]
    if not modules:
        return []
    lines = ["## Key Modules", ""]
    for name, paths in modules[:MAX_KEY_MODULES]:
        lines.extend([f"### {name}", ""])
        caps = DIRECTORY_CAPABILITIES.get(name.lower())
        if caps:
            lines.extend([f"Provides {', '.join(caps)}.", ""])
        lines.append("Files:")
        lines.extend(f"- `{path}`" for path in paths)
        lines.append("")
    return lines


def important_files_section(candidates: Sequence[FileEntry]) -> List[str]:
    lines = ["## Important Files", ""]
    for entry in candidates[:MAX_IMPORTANT_FILES]:
        lines.extend([f"### `{entry.path}`", ""])
        symbols = entry.symbols
        if symbols is None:
            continue
        if symbols.package:
            lines.extend([f"**Package:** {symbols.package}", ""])
        if symbols.types:
            names = [f"`{item.name}` ({item.kind})" for item in symbols.types]
            lines.extend([f"**Types:** {_capped(names)}", ""])
        if symbols.functions:
            names = [f"`{item.name}`" for item in symbols.functions]
            lines.extend([f"**Functions:** {_capped(names)}", ""])
        if symbols.frameworks:
            lines.extend([f"**Frameworks:** {', '.join(symbols.frameworks)}", ""])
    return lines


def _capped(items: Sequence[str]) -> str:
    if len(items) <= MAX_SYMBOLS_PER_FILE:
        return ", ".join(items)
    shown = list(items[:MAX_SYMBOLS_PER_FILE])
    shown.append(f"... +{len(items) - MAX_SYMBOLS_PER_FILE} more")
    return ", ".join(shown)


def token_budget_section(candidates: Iterable[FileEntry]) -> List[str]:
    large: List[FileEntry] = []
    oversized: List[FileEntry] = []
    for entry in sorted(candidates, key=lambda entry: entry.path):
        category = entry.token_budget_category()
        if category == "large":
            large.append(entry)
        elif category == "oversized":
            oversized.append(entry)
    if not large and not oversized:
        return []

    lines = ["## Token Budget", "", "Some files exceed recommended token limits for single reads.", ""]
    if oversized:
        lines.extend(["### Oversized (>25k tokens): use grep or chunked reads", ""])
        lines.extend(f"- `{entry.path}` (~{entry.estimated_tokens // 1000}k tokens)" for entry in oversized)
        lines.append("")
    if large:
        lines.extend(["### Large (10k-25k tokens): read with care", ""])
        lines.extend(f"- `{entry.path}` (~{entry.estimated_tokens // 1000}k tokens)" for entry in large)
        lines.append("")
    lines.extend([
        "**Tip:** for oversized files, grep for the relevant section or read with an offset and limit.",
        "",
    ])
    return lines


def operational_files(paths: Iterable[str]) -> Dict[str, List[str]]:
    notes: Dict[str, List[str]] = {}
    all_paths = sorted(set(paths))
    for group, patterns in OPERATIONAL_PATTERNS:
        matched = [path for path in all_paths if _is_operational(path, patterns)]
        if matched:
            notes[group] = matched
    return notes


def _is_operational(path: str, patterns: Sequence[str]) -> bool:
    name = path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if pattern.endswith("/"):
            if f"/{pattern}" in f"/{path}":
                return True
        elif fnmatchcase(name, pattern):
            return True
    return False


def operational_section(scan: ScanResult) -> List[str]:
    notes = operational_files([entry.path for entry in scan.files] + list(scan.other_files))
    if not notes:
        return []
    lines = ["## Operational Notes", ""]
    for group, paths in notes.items():
        lines.extend([f"**{group}:** {', '.join(f'`{path}`' for path in paths)}", ""])
    return lines


def risk_areas(candidates: Iterable[FileEntry]) -> Dict[str, List[str]]:
    grouped: Dict[str, set[str]] = {}
    for entry in candidates:
        if entry.symbols is None:
            continue
        for tag in entry.symbols.risk_tags:
            grouped.setdefault(tag, set()).add(entry.path)
    return {tag: sorted(grouped[tag]) for tag in sorted(grouped)}


def risk_section(candidates: Iterable[FileEntry]) -> List[str]:
    risks = risk_areas(candidates)
    if not risks:
        return []
    lines = ["## Risk / Caution Areas", ""]
    for tag, paths in risks.items():
        label = RISK_LABELS.get(tag, tag.replace("-", " ").title())
        lines.append(f"**{label}:**")
        lines.extend(f"- `{path}`" for path in paths)
        lines.append("")
    return lines


def navigation_hints(scan: ScanResult) -> List[str]:
    top_level = {child.name for child in scan.dir_tree.children}
    hints: List[str] = []
    if {"cmd", "internal"} <= top_level:
        hints.append("Follows Go standard layout (cmd/, internal/)")
    if "pkg" in top_level:
        hints.append("Has public packages in pkg/")
    if "src" in top_level:
        hints.append("Sources live under src/")
    if "lib" in top_level and any(entry.language == "flutter" for entry in scan.files):
        hints.append("Dart sources live under lib/")
    if {"pages", "app"} & top_level and any(entry.language == "typescript" for entry in scan.files):
        hints.append("Uses file-based routing (pages/ or app/)")

    test_count = sum(1 for path in _all_paths(scan) if _is_test_file(path))
    if test_count:
        hints.append(f"Has {test_count} test files")
    return hints


def _all_paths(scan: ScanResult) -> List[str]:
    return [entry.path for entry in scan.files] + list(scan.other_files)


def _is_test_file(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    if name.endswith(TEST_FILE_SUFFIXES):
        return True
    return name.startswith("test_") and name.endswith(".py")


def navigation_section(scan: ScanResult) -> List[str]:
    hints = navigation_hints(scan)
    if not hints:
        return []
    lines = ["## Navigation Hints", ""]
    lines.extend(f"- {hint}" for hint in hints)
    lines.append("")
    return lines


def footer(generated_at: datetime, scan: ScanResult) -> List[str]:
    return [
        "---",
        "",
        f"*Index generated at {generated_at.isoformat(timespec='seconds')}*",
        "",
        f"*Scan time: {scan.elapsed:.2f}s*",
        "",
    ]


__all__ = [
    "capabilities",
    "categorize",
    "category_for",
    "collect_frameworks",
    "entrypoints",
    "infer_purpose",
    "operational_files",
    "risk_areas",
]
