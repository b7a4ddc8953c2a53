"""Regex heuristics for TypeScript and JavaScript sources."""

from __future__ import annotations

import re
from typing import List

from .tags import TYPESCRIPT_FRAMEWORKS, detect_frameworks_by_substring, typescript_risk_tags
from ..models import FunctionInfo, SymbolInfo, TypeInfo

_IMPORT_FROM_RE = re.compile(r"^\s*(?:import|export)\s+[^;]*?\bfrom\s+['\"]([^'\"]+)['\"]", re.MULTILINE | re.DOTALL)
_IMPORT_BARE_RE = re.compile(r"^\s*import\s+['\"]([^'\"]+)['\"]", re.MULTILINE)
_REQUIRE_RE = re.compile(r"require\(\s*['\"]([^'\"]+)['\"]\s*\)")
_CLASS_RE = re.compile(r"^(export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(\w+)", re.MULTILINE)
_INTERFACE_RE = re.compile(r"^(export\s+)?interface\s+(\w+)", re.MULTILINE)
_TYPE_ALIAS_RE = re.compile(r"^(export\s+)?type\s+(\w+)\s*(?:<[^>]*>)?\s*=", re.MULTILINE)
_ENUM_RE = re.compile(r"^(export\s+)?(?:const\s+)?enum\s+(\w+)", re.MULTILINE)
_FUNC_RE = re.compile(r"^(export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(\w+)", re.MULTILINE)
_ARROW_RE = re.compile(
    r"^export\s+(?:const|let)\s+(\w+)\s*(?::[^=]+)?=\s*(?:async\s+)?(?:\([^)]*\)|\w+)\s*(?::[^=]+)?=>",
    re.MULTILINE,
)


def extract_typescript_symbols(path: str, content: bytes) -> SymbolInfo:
    text = content.decode("utf-8", errors="replace")
    info = SymbolInfo()

    imports: List[str] = []
    imports.extend(_IMPORT_FROM_RE.findall(text))
    imports.extend(_IMPORT_BARE_RE.findall(text))
    imports.extend(_REQUIRE_RE.findall(text))
    info.imports = list(dict.fromkeys(imports))

    for pattern, kind in (
        (_CLASS_RE, "class"),
        (_INTERFACE_RE, "interface"),
        (_TYPE_ALIAS_RE, "type"),
        (_ENUM_RE, "enum"),
    ):
        for exported, name in pattern.findall(text):
            info.types.append(TypeInfo(name=name, kind=kind, is_exported=bool(exported)))

    for exported, name in _FUNC_RE.findall(text):
        info.functions.append(FunctionInfo(name=name, is_exported=bool(exported)))
    for name in _ARROW_RE.findall(text):
        info.functions.append(FunctionInfo(name=name, is_exported=True))

    info.frameworks = detect_frameworks_by_substring(info.imports, TYPESCRIPT_FRAMEWORKS)
    info.risk_tags = typescript_risk_tags(text, info.imports)
    return info


__all__ = ["extract_typescript_symbols"]
