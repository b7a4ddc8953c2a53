"""Go symbol extraction backed by tree-sitter, with a regex fallback."""

from __future__ import annotations

import re
import threading
from typing import Iterable, List, Optional

from tree_sitter_language_pack import get_parser

from .tags import GO_FRAMEWORKS, detect_frameworks_by_prefix, go_risk_tags
from ..logging import get_logger
from ..models import FunctionInfo, SymbolInfo, TypeInfo

logger = get_logger("extract.go")

_PARSERS = threading.local()
_PARSER_UNAVAILABLE = threading.Event()

_PACKAGE_RE = re.compile(r"^\s*package\s+(\w+)", re.MULTILINE)
_IMPORT_LINE_RE = re.compile(r'^\s*import\s+(?:\w+\s+|_\s+|\.\s+)?"([^"]+)"', re.MULTILINE)
_IMPORT_BLOCK_RE = re.compile(r"^\s*import\s*\((.*?)\)", re.MULTILINE | re.DOTALL)
_QUOTED_RE = re.compile(r'"([^"]+)"')
_FUNC_RE = re.compile(r"^func\s+(?:\(\s*(?:\w+\s+)?\*?\s*(\w+)[^)]*\)\s*)?(\w+)\s*[\[(]", re.MULTILINE)
_TYPE_RE = re.compile(r"^\s*type\s+(\w+)\s+(struct|interface)?", re.MULTILINE)
_CONST_RE = re.compile(r"^const\s+(\w+)", re.MULTILINE)
_VAR_RE = re.compile(r"^var\s+(\w+)", re.MULTILINE)


def extract_go_symbols(path: str, content: bytes) -> SymbolInfo:
    """Parse ``content`` with the tree-sitter Go grammar.

    Trees containing syntax errors are not trusted; the regex extractor is used
    for them instead, as it is when the parser itself fails.
    """
    parser = _parser()
    if parser is None:
        return extract_go_symbols_regex(content)
    try:
        tree = parser.parse(content)
    except Exception as exc:  # pragma: no cover - parser failures are rare
        logger.debug("tree-sitter failed on %s: %s", path, exc)
        return extract_go_symbols_regex(content)
    root = tree.root_node
    if root.has_error:
        logger.debug("Syntax errors in %s; using regex extraction", path)
        return extract_go_symbols_regex(content)

    info = SymbolInfo()
    for node in root.named_children:
        if node.type == "package_clause":
            info.package = _first_identifier(node, content)
        elif node.type == "import_declaration":
            info.imports.extend(_collect_imports(node, content))
        elif node.type == "function_declaration":
            info.functions.append(_function_info(node, content, receiver=None))
        elif node.type == "method_declaration":
            info.functions.append(_function_info(node, content, receiver=_receiver_type(node, content)))
        elif node.type == "type_declaration":
            info.types.extend(_collect_types(node, content))
        elif node.type == "const_declaration":
            info.constants.extend(_collect_value_names(node, content, "const_spec"))
        elif node.type == "var_declaration":
            info.variables.extend(_collect_value_names(node, content, "var_spec"))

    _tag(info, content)
    return info


def extract_go_symbols_regex(content: bytes) -> SymbolInfo:
    text = content.decode("utf-8", errors="replace")
    info = SymbolInfo()
    match = _PACKAGE_RE.search(text)
    if match:
        info.package = match.group(1)

    imports = [m.group(1) for m in _IMPORT_LINE_RE.finditer(text)]
    for block in _IMPORT_BLOCK_RE.finditer(text):
        imports.extend(_QUOTED_RE.findall(block.group(1)))
    info.imports = _unique(imports)

    for receiver, name in _FUNC_RE.findall(text):
        info.functions.append(
            FunctionInfo(
                name=name,
                is_exported=_is_exported(name),
                is_method=bool(receiver),
                receiver=receiver or None,
            )
        )
    for name, kind in _TYPE_RE.findall(text):
        info.types.append(TypeInfo(name=name, kind=kind or "type", is_exported=_is_exported(name)))
    info.constants = _CONST_RE.findall(text)
    info.variables = _VAR_RE.findall(text)

    _tag(info, content)
    return info


def _parser():  # type: ignore[no-untyped-def]
    """Return this thread's Go parser, or ``None`` once loading has failed."""
    if _PARSER_UNAVAILABLE.is_set():
        return None
    parser = getattr(_PARSERS, "go", None)
    if parser is None:
        try:
            parser = get_parser("go")
        except Exception as exc:
            _PARSER_UNAVAILABLE.set()
            logger.warning("Go grammar unavailable, using regex extraction: %s", exc)
            return None
        _PARSERS.go = parser
    return parser


def _tag(info: SymbolInfo, content: bytes) -> None:
    info.frameworks = detect_frameworks_by_prefix(info.imports, GO_FRAMEWORKS)
    info.risk_tags = go_risk_tags(content.decode("utf-8", errors="replace"), info.imports)


def _node_text(node, source: bytes) -> str:  # type: ignore[no-untyped-def]
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _first_identifier(node, source: bytes) -> Optional[str]:  # type: ignore[no-untyped-def]
    for child in node.named_children:
        if child.type in {"package_identifier", "identifier"}:
            return _node_text(child, source)
    return None


def _collect_imports(node, source: bytes) -> List[str]:  # type: ignore[no-untyped-def]
    imports: List[str] = []
    for child in node.named_children:
        if child.type == "import_spec":
            path_node = child.child_by_field_name("path")
            if path_node is not None:
                imports.append(_node_text(path_node, source).strip('"`'))
        elif child.type == "import_spec_list":
            imports.extend(_collect_imports(child, source))
    return imports


def _function_info(node, source: bytes, receiver: Optional[str]) -> FunctionInfo:  # type: ignore[no-untyped-def]
    name_node = node.child_by_field_name("name")
    name = _node_text(name_node, source) if name_node else ""
    return FunctionInfo(
        name=name,
        is_exported=_is_exported(name),
        is_method=node.type == "method_declaration",
        receiver=receiver,
        signature=_signature(node, source),
    )


def _signature(node, source: bytes) -> str:  # type: ignore[no-untyped-def]
    body = node.child_by_field_name("body")
    end = body.start_byte if body is not None else node.end_byte
    return " ".join(source[node.start_byte : end].decode("utf-8", errors="ignore").split())


def _receiver_type(node, source: bytes) -> Optional[str]:  # type: ignore[no-untyped-def]
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return None
    found = _find_first(receiver, "type_identifier")
    return _node_text(found, source) if found is not None else None


def _find_first(node, node_type: str):  # type: ignore[no-untyped-def]
    for child in node.named_children:
        if child.type == node_type:
            return child
        found = _find_first(child, node_type)
        if found is not None:
            return found
    return None


def _collect_types(node, source: bytes) -> List[TypeInfo]:  # type: ignore[no-untyped-def]
    types: List[TypeInfo] = []
    for spec in node.named_children:
        if spec.type not in {"type_spec", "type_alias"}:
            continue
        name_node = spec.child_by_field_name("name")
        if name_node is None:
            continue
        name = _node_text(name_node, source)
        type_node = spec.child_by_field_name("type")
        info = TypeInfo(name=name, kind="type", is_exported=_is_exported(name))
        if type_node is not None and type_node.type == "struct_type":
            info.kind = "struct"
            info.fields = list(_struct_fields(type_node, source))
        elif type_node is not None and type_node.type == "interface_type":
            info.kind = "interface"
            info.methods = list(_interface_methods(type_node, source))
        types.append(info)
    return types


def _struct_fields(node, source: bytes) -> Iterable[str]:  # type: ignore[no-untyped-def]
    for child in node.named_children:
        if child.type != "field_declaration_list":
            continue
        for field in child.named_children:
            if field.type != "field_declaration":
                continue
            for name_node in field.children_by_field_name("name"):
                yield _node_text(name_node, source)


def _interface_methods(node, source: bytes) -> Iterable[str]:  # type: ignore[no-untyped-def]
    for child in node.named_children:
        if child.type in {"method_elem", "method_spec"}:
            name_node = child.child_by_field_name("name")
            if name_node is not None:
                yield _node_text(name_node, source)


def _collect_value_names(node, source: bytes, spec_type: str) -> List[str]:  # type: ignore[no-untyped-def]
    names: List[str] = []
    for child in node.named_children:
        if child.type == spec_type:
            names.extend(_node_text(name, source) for name in child.children_by_field_name("name"))
        elif child.type.endswith("_spec_list"):
            names.extend(_collect_value_names(child, source, spec_type))
    return names


def _is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


def _unique(items: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


__all__ = ["extract_go_symbols", "extract_go_symbols_regex"]
