"""Core data models shared across codeindex components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

# Token budget thresholds for a single read of a file.
TOKEN_THRESHOLD_SAFE = 10_000
TOKEN_THRESHOLD_LARGE = 25_000
BYTES_PER_TOKEN = 4


@dataclass
class FunctionInfo:
    """A function or method declared in a source file."""

    name: str
    is_exported: bool = False
    is_method: bool = False
    receiver: Optional[str] = None
    signature: Optional[str] = None


@dataclass
class TypeInfo:
    """A type definition (struct, class, interface, enum, ...)."""

    name: str
    kind: str
    is_exported: bool = False
    fields: List[str] = field(default_factory=list)
    methods: List[str] = field(default_factory=list)


@dataclass
class SymbolInfo:
    """Shallow per-file symbol table plus framework and risk tags."""

    package: Optional[str] = None
    imports: List[str] = field(default_factory=list)
    functions: List[FunctionInfo] = field(default_factory=list)
    types: List[TypeInfo] = field(default_factory=list)
    constants: List[str] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)
    frameworks: List[str] = field(default_factory=list)
    risk_tags: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.package
            or self.imports
            or self.functions
            or self.types
            or self.constants
            or self.variables
        )


@dataclass
class FileEntry:
    """Metadata for one scanned file.

    Everything except ``symbols`` is fixed once the scanner creates the entry;
    ``symbols`` is attached later, and only for candidates.
    """

    path: str
    size: int
    mtime: float
    hash: str
    depth: int
    estimated_tokens: int
    language: Optional[str] = None
    is_entrypoint: bool = False
    is_config: bool = False
    is_generated: bool = False
    score: int = 0
    symbols: Optional[SymbolInfo] = None

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def token_budget_category(self) -> str:
        """Return ``safe``, ``large`` or ``oversized`` for a full read of the file."""
        if self.estimated_tokens < TOKEN_THRESHOLD_SAFE:
            return "safe"
        if self.estimated_tokens < TOKEN_THRESHOLD_LARGE:
            return "large"
        return "oversized"


@dataclass
class DirNode:
    """A directory in the pruned tree; files are kept as plain names."""

    name: str
    path: str
    depth: int = 0
    children: List["DirNode"] = field(default_factory=list)
    files: List[str] = field(default_factory=list)


@dataclass
class ScanResult:
    """Aggregate output of a repository scan."""

    files: List[FileEntry] = field(default_factory=list)
    candidates: List[FileEntry] = field(default_factory=list)
    dir_tree: DirNode = field(default_factory=lambda: DirNode(name=".", path=""))
    other_files: List[str] = field(default_factory=list)
    total_files: int = 0
    total_dirs: int = 0
    ignored_files: int = 0
    ignored_dirs: int = 0
    total_bytes: int = 0
    elapsed: float = 0.0


@dataclass
class IndexResult:
    """Rendered index plus run metadata returned to callers."""

    content: str
    summary: str
    format: str
    content_hash: str
    repo_name: str
    languages: List[str]
    file_count: int
    total_files: int
    duration: float
    generated_at: datetime
    categories: Dict[str, List[str]] = field(default_factory=dict)
    output_path: Optional[str] = None


__all__ = [
    "BYTES_PER_TOKEN",
    "DirNode",
    "FileEntry",
    "FunctionInfo",
    "IndexResult",
    "ScanResult",
    "SymbolInfo",
    "TOKEN_THRESHOLD_LARGE",
    "TOKEN_THRESHOLD_SAFE",
    "TypeInfo",
]
