"""Regex heuristics for Dart and Flutter sources."""

from __future__ import annotations

import re

from .tags import DART_FRAMEWORKS, dart_risk_tags, detect_frameworks_by_substring
from ..models import FunctionInfo, SymbolInfo, TypeInfo

_LIBRARY_RE = re.compile(r"^library\s+([\w.]+)\s*;", re.MULTILINE)
_IMPORT_RE = re.compile(r"^import\s+['\"]([^'\"]+)['\"]", re.MULTILINE)
_CLASS_RE = re.compile(
    r"^(?:abstract\s+)?(?:base\s+|final\s+|sealed\s+|interface\s+)?class\s+(\w+)(?:<[^>{]*>)?(?:\s+extends\s+(\w+))?",
    re.MULTILINE,
)
_MIXIN_RE = re.compile(r"^(?:base\s+)?mixin\s+(\w+)", re.MULTILINE)
_ENUM_RE = re.compile(r"^enum\s+(\w+)", re.MULTILINE)
# Top-level only: class members are indented.
_FUNC_RE = re.compile(
    r"^(?:[A-Za-z_][\w<>?, \t]*?[ \t]+)?(\w+)[ \t]*\([^)]*\)\s*(?:async\s*\*?\s*)?(?:\{|=>)",
    re.MULTILINE,
)

_WIDGET_BASES = {"StatelessWidget", "StatefulWidget", "Widget", "HookWidget", "ConsumerWidget"}
_STATE_BASES = {"State", "ConsumerState"}
_KEYWORDS = {"if", "for", "while", "switch", "catch", "return", "class", "mixin", "enum"}


def extract_dart_symbols(path: str, content: bytes) -> SymbolInfo:
    text = content.decode("utf-8", errors="replace")
    info = SymbolInfo()

    match = _LIBRARY_RE.search(text)
    if match:
        info.package = match.group(1)
    info.imports = list(dict.fromkeys(_IMPORT_RE.findall(text)))

    for name, base in _CLASS_RE.findall(text):
        kind = "class"
        if base in _WIDGET_BASES:
            kind = "widget"
        elif base in _STATE_BASES:
            kind = "state"
        info.types.append(TypeInfo(name=name, kind=kind, is_exported=_is_public(name)))
    for name in _MIXIN_RE.findall(text):
        info.types.append(TypeInfo(name=name, kind="mixin", is_exported=_is_public(name)))
    for name in _ENUM_RE.findall(text):
        info.types.append(TypeInfo(name=name, kind="enum", is_exported=_is_public(name)))

    for name in _FUNC_RE.findall(text):
        if name in _KEYWORDS:
            continue
        info.functions.append(FunctionInfo(name=name, is_exported=_is_public(name)))

    info.frameworks = detect_frameworks_by_substring(info.imports, DART_FRAMEWORKS)
    info.risk_tags = dart_risk_tags(text, info.imports)
    return info


def _is_public(name: str) -> bool:
    return not name.startswith("_")


__all__ = ["extract_dart_symbols"]
