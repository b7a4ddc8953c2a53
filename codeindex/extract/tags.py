"""Framework and risk tag tables shared by the per-language extractors."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

# Ordered (pattern, tag) pairs; tags come out in table order.
GO_FRAMEWORKS: Tuple[Tuple[str, str], ...] = (
    ("github.com/gin-gonic/gin", "gin"),
    ("github.com/labstack/echo", "echo"),
    ("github.com/gofiber/fiber", "fiber"),
    ("github.com/gorilla/mux", "gorilla"),
    ("net/http", "stdlib-http"),
    ("github.com/spf13/cobra", "cobra"),
    ("github.com/urfave/cli", "cli"),
    ("google.golang.org/grpc", "grpc"),
    ("github.com/graphql-go/graphql", "graphql"),
    ("gorm.io/gorm", "gorm"),
    ("github.com/jmoiron/sqlx", "sqlx"),
)

PYTHON_FRAMEWORKS: Tuple[Tuple[str, str], ...] = (
    ("flask", "flask"),
    ("django", "django"),
    ("fastapi", "fastapi"),
    ("starlette", "starlette"),
    ("tornado", "tornado"),
    ("aiohttp", "aiohttp"),
    ("sqlalchemy", "sqlalchemy"),
    ("pandas", "pandas"),
    ("numpy", "numpy"),
    ("tensorflow", "tensorflow"),
    ("torch", "pytorch"),
    ("pytest", "pytest"),
    ("unittest", "unittest"),
    ("celery", "celery"),
)

TYPESCRIPT_FRAMEWORKS: Tuple[Tuple[str, str], ...] = (
    ("react", "react"),
    ("vue", "vue"),
    ("angular", "angular"),
    ("svelte", "svelte"),
    ("next", "nextjs"),
    ("express", "express"),
    ("fastify", "fastify"),
    ("nest", "nestjs"),
    ("prisma", "prisma"),
    ("typeorm", "typeorm"),
    ("mongoose", "mongoose"),
    ("jest", "jest"),
    ("mocha", "mocha"),
    ("graphql", "graphql"),
    ("apollo", "apollo"),
)

DART_FRAMEWORKS: Tuple[Tuple[str, str], ...] = (
    ("flutter", "flutter"),
    ("provider", "provider"),
    ("bloc", "bloc"),
    ("riverpod", "riverpod"),
    ("getx", "getx"),
    ("dio", "dio"),
    ("http", "http"),
    ("sqflite", "sqflite"),
    ("hive", "hive"),
    ("firebase", "firebase"),
    ("test", "test"),
)

GO_RISK_IMPORTS: Tuple[Tuple[str, str], ...] = (
    ("crypto", "crypto"),
    ("database", "database"),
    ("sql", "database"),
    ("sync", "concurrency"),
    ("context", "concurrency"),
    ("auth", "auth"),
    ("oauth", "auth"),
    ("jwt", "auth"),
    ("bcrypt", "auth"),
    ("os/exec", "subprocess"),
    ("unsafe", "unsafe"),
    ("reflect", "reflection"),
    ("cgo", "cgo"),
    ("net/http", "network"),
)

PYTHON_RISK_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("crypto", "crypto"),
    ("hashlib", "crypto"),
    ("bcrypt", "auth"),
    ("jwt", "auth"),
    ("oauth", "auth"),
    ("sql", "database"),
    ("asyncio", "concurrency"),
    ("threading", "concurrency"),
    ("multiprocessing", "concurrency"),
    ("subprocess", "subprocess"),
    ("os.system", "subprocess"),
    ("eval(", "code-execution"),
    ("exec(", "code-execution"),
    ("requests", "network"),
    ("urllib", "network"),
)

TYPESCRIPT_RISK_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("crypto", "crypto"),
    ("bcrypt", "auth"),
    ("jwt", "auth"),
    ("passport", "auth"),
    ("sql", "database"),
    ("prisma", "database"),
    ("typeorm", "database"),
    ("mongoose", "database"),
    ("eval(", "code-execution"),
    ("Function(", "code-execution"),
    ("innerHTML", "xss-risk"),
    ("dangerouslySetInnerHTML", "xss-risk"),
    ("child_process", "subprocess"),
    ("exec(", "subprocess"),
    ("spawn(", "subprocess"),
    ("axios", "network"),
    ("fetch(", "network"),
)

DART_RISK_IMPORTS: Tuple[Tuple[str, str], ...] = (
    ("crypto", "crypto"),
    ("encrypt", "crypto"),
    ("firebase_auth", "auth"),
    ("sqflite", "database"),
    ("hive", "database"),
    ("http", "network"),
    ("dio", "network"),
    ("process", "subprocess"),
)

_SECRETS_RE = re.compile(r"password|secret|token|apikey|api_key")
_GO_ROUTINE_RE = re.compile(r"\bgo\s+\w+\(")
_GO_CHANNEL_RE = re.compile(r"\bchan\s+")


def detect_frameworks_by_prefix(imports: Iterable[str], table: Sequence[Tuple[str, str]]) -> List[str]:
    """Return tags whose pattern prefixes any import, in table order."""
    imports = list(imports)
    return [tag for pattern, tag in table if any(imp.startswith(pattern) for imp in imports)]


def detect_frameworks_by_substring(imports: Iterable[str], table: Sequence[Tuple[str, str]]) -> List[str]:
    """Return tags whose pattern occurs in any lowercased import, in table order."""
    lowered = [imp.lower() for imp in imports]
    return [tag for pattern, tag in table if any(pattern in imp for imp in lowered)]


def go_risk_tags(text: str, imports: Iterable[str]) -> List[str]:
    tags = set(_match_imports(imports, GO_RISK_IMPORTS))
    if _GO_ROUTINE_RE.search(text) or _GO_CHANNEL_RE.search(text):
        tags.add("concurrency")
    if _SECRETS_RE.search(text.lower()):
        tags.add("secrets")
    return sorted(tags)


def python_risk_tags(text: str, imports: Iterable[str]) -> List[str]:
    tags = set(_match_imports(imports, PYTHON_RISK_PATTERNS))
    lowered = text.lower()
    tags.update(tag for pattern, tag in PYTHON_RISK_PATTERNS if pattern in lowered)
    if _SECRETS_RE.search(lowered):
        tags.add("secrets")
    return sorted(tags)


def typescript_risk_tags(text: str, imports: Iterable[str]) -> List[str]:
    tags = set(_match_imports(imports, TYPESCRIPT_RISK_PATTERNS))
    # Raw text is matched case-sensitively.
    tags.update(tag for pattern, tag in TYPESCRIPT_RISK_PATTERNS if pattern in text)
    if _SECRETS_RE.search(text.lower()):
        tags.add("secrets")
    return sorted(tags)


def dart_risk_tags(text: str, imports: Iterable[str]) -> List[str]:
    return sorted(set(_match_imports(imports, DART_RISK_IMPORTS)))


def _match_imports(imports: Iterable[str], table: Sequence[Tuple[str, str]]) -> List[str]:
    found: List[str] = []
    for imp in imports:
        lowered = imp.lower()
        for pattern, tag in table:
            if pattern.lower() in lowered:
                found.append(tag)
    return found


__all__ = [
    "DART_FRAMEWORKS",
    "GO_FRAMEWORKS",
    "PYTHON_FRAMEWORKS",
    "TYPESCRIPT_FRAMEWORKS",
    "dart_risk_tags",
    "detect_frameworks_by_prefix",
    "detect_frameworks_by_substring",
    "go_risk_tags",
    "python_risk_tags",
    "typescript_risk_tags",
]
