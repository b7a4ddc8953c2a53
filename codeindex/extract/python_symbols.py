"""Python symbol extraction using the standard library ``ast`` module."""

from __future__ import annotations

import ast
import re
from typing import List, Optional

from .tags import PYTHON_FRAMEWORKS, detect_frameworks_by_substring, python_risk_tags
from ..logging import get_logger
from ..models import FunctionInfo, SymbolInfo, TypeInfo

logger = get_logger("extract.python")

_ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"}

_IMPORT_RE = re.compile(r"^(?:from\s+(\S+)\s+)?import\s+(.+)$", re.MULTILINE)
_CLASS_RE = re.compile(r"^class\s+(\w+)\s*(?:\(([^)]*)\))?\s*:", re.MULTILINE)
_FUNC_RE = re.compile(r"^(?:async\s+)?def\s+(\w+)\s*\(", re.MULTILINE)
_ASSIGN_RE = re.compile(r"^([A-Za-z_]\w*)\s*(?::[^=]+)?=(?!=)", re.MULTILINE)


def extract_python_symbols(path: str, content: bytes) -> SymbolInfo:
    text = content.decode("utf-8", errors="replace")
    try:
        tree = ast.parse(text, filename=path)
    except (SyntaxError, ValueError) as exc:
        logger.debug("Could not parse %s (%s); using regex extraction", path, exc)
        return extract_python_symbols_regex(path, content)

    info = SymbolInfo(package=module_name(path))
    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            info.functions.append(_function_info(node, receiver=None))
        elif isinstance(node, ast.ClassDef):
            type_info = _class_info(node)
            info.types.append(type_info)
            for child in node.body:
                if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
                    info.functions.append(_function_info(child, receiver=node.name))
        elif isinstance(node, (ast.Assign, ast.AnnAssign)):
            for name in _assigned_names(node):
                _record_assignment(info, name)

    # Imports nested in try/if blocks count too; ast.walk visits top-level ones first.
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            info.imports.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            info.imports.append("." * node.level + (node.module or ""))
    info.imports = _unique(info.imports)

    _tag(info, text)
    return info


def extract_python_symbols_regex(path: str, content: bytes) -> SymbolInfo:
    text = content.decode("utf-8", errors="replace")
    info = SymbolInfo(package=module_name(path))

    imports: List[str] = []
    for source, names in _IMPORT_RE.findall(text):
        if source:
            imports.append(source)
            continue
        for part in names.split("#", 1)[0].split(","):
            module = part.split(" as ", 1)[0].strip()
            if module:
                imports.append(module)
    info.imports = _unique(imports)

    for name, bases in _CLASS_RE.findall(text):
        info.types.append(TypeInfo(name=name, kind=_kind_from_bases(bases), is_exported=_is_public(name)))
    for name in _FUNC_RE.findall(text):
        info.functions.append(FunctionInfo(name=name, is_exported=_is_public(name)))
    for name in _ASSIGN_RE.findall(text):
        _record_assignment(info, name)

    _tag(info, text)
    return info


def module_name(path: str) -> str:
    """Return the dotted module name implied by a relative path."""
    parts = [part for part in path.replace("\\", "/").split("/") if part]
    if not parts:
        return ""
    last = parts[-1]
    if last.endswith(".py"):
        last = last[: -len(".py")]
    parts[-1] = last
    if last == "__init__" and len(parts) > 1:
        parts = parts[:-1]
    if parts and parts[0] == "src" and len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts)


def _tag(info: SymbolInfo, text: str) -> None:
    info.frameworks = detect_frameworks_by_substring(info.imports, PYTHON_FRAMEWORKS)
    info.risk_tags = python_risk_tags(text, info.imports)


def _function_info(node: ast.FunctionDef | ast.AsyncFunctionDef, receiver: Optional[str]) -> FunctionInfo:
    prefix = "async def" if isinstance(node, ast.AsyncFunctionDef) else "def"
    signature = f"{prefix} {node.name}({ast.unparse(node.args)})"
    if node.returns is not None:
        signature += f" -> {ast.unparse(node.returns)}"
    return FunctionInfo(
        name=node.name,
        is_exported=_is_public(node.name),
        is_method=receiver is not None,
        receiver=receiver,
        signature=signature,
    )


def _class_info(node: ast.ClassDef) -> TypeInfo:
    info = TypeInfo(name=node.name, kind=_class_kind(node), is_exported=_is_public(node.name))
    for child in node.body:
        if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
            info.methods.append(child.name)
        elif isinstance(child, (ast.Assign, ast.AnnAssign)):
            info.fields.extend(_assigned_names(child))
    return info


def _class_kind(node: ast.ClassDef) -> str:
    base_names = {_terminal_name(base) for base in node.bases}
    if base_names & _ENUM_BASES:
        return "enum"
    if "Protocol" in base_names:
        return "protocol"
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if _terminal_name(target) == "dataclass":
            return "dataclass"
    return "class"


def _kind_from_bases(bases: str) -> str:
    names = {part.strip().rsplit(".", 1)[-1] for part in bases.split(",")}
    if names & _ENUM_BASES:
        return "enum"
    if "Protocol" in names:
        return "protocol"
    return "class"


def _terminal_name(node: ast.expr) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Subscript):
        return _terminal_name(node.value)
    return ""


def _assigned_names(node: ast.Assign | ast.AnnAssign) -> List[str]:
    targets = node.targets if isinstance(node, ast.Assign) else [node.target]
    names: List[str] = []
    for target in targets:
        if isinstance(target, ast.Name):
            names.append(target.id)
        elif isinstance(target, ast.Tuple):
            names.extend(elt.id for elt in target.elts if isinstance(elt, ast.Name))
    return names


def _record_assignment(info: SymbolInfo, name: str) -> None:
    if name.startswith("__") and name.endswith("__"):
        return
    stripped = name.lstrip("_")
    if stripped and stripped.upper() == stripped and any(ch.isalpha() for ch in stripped):
        info.constants.append(name)
    else:
        info.variables.append(name)


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(item for item in items if item))


__all__ = ["extract_python_symbols", "extract_python_symbols_regex", "module_name"]
