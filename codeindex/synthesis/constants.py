"""Limits and lookup tables used when rendering an index."""

from __future__ import annotations

MAX_TREE_DEPTH = 3
MAX_FILES_PER_DIR = 12
MAX_IMPORTANT_FILES = 25
MAX_SYMBOLS_PER_FILE = 8
MAX_KEY_MODULES = 10
MAX_SUMMARY_AREAS = 8
MAX_SUMMARY_ENTRYPOINTS = 5
SUMMARY_BUDGET_BYTES = 3 * 1024

CATEGORY_OTHER = "Other"

# Ordered (category, directory keywords, file-name globs); first match wins.
CATEGORY_RULES: tuple[tuple[str, frozenset[str], tuple[str, ...]], ...] = (
    (
        "Backend / API",
        frozenset({
            "api", "apis", "handler", "handlers", "routes", "router", "routers", "controller",
            "controllers", "server", "endpoints", "middleware", "grpc", "rest", "graphql",
            "service", "services",
        }),
        ("*handler*", "*router*", "*controller*", "server.*"),
    ),
    (
        "Frontend / UI",
        frozenset({
            "components", "component", "pages", "views", "ui", "screens", "widgets",
            "frontend", "web", "public", "styles", "layouts", "hooks",
        }),
        ("*.tsx", "*.jsx", "*widget*", "*screen*"),
    ),
    (
        "Database / Storage",
        frozenset({
            "db", "database", "migrations", "store", "stores", "storage", "repository",
            "repositories", "dao", "sql", "persistence", "cache",
        }),
        ("*repository*", "*migration*", "*_db.*", "*store.*"),
    ),
    (
        "Domain / Models",
        frozenset({"models", "model", "domain", "entities", "entity", "types", "schemas", "schema"}),
        ("*model*", "*entity*", "*schema*"),
    ),
    (
        "CLI / Commands",
        frozenset({"cmd", "cli", "commands", "command", "bin", "scripts"}),
        ("cli.*", "*command*"),
    ),
    (
        "Utilities / Helpers",
        frozenset({"utils", "util", "helpers", "helper", "lib", "common", "shared", "pkg", "tools"}),
        ("*util*", "*helper*"),
    ),
    (
        "Testing",
        frozenset({"test", "tests", "__tests__", "spec", "testing", "e2e", "fixtures", "testdata"}),
        ("*_test.*", "test_*", "*.test.*", "*.spec.*", "conftest.py"),
    ),
    (
        "Documentation",
        frozenset({"docs", "doc", "documentation", "examples", "example"}),
        ("*.md", "*.rst"),
    ),
)

CATEGORY_ORDER: tuple[str, ...] = tuple(rule[0] for rule in CATEGORY_RULES) + (CATEGORY_OTHER,)

DIRECTORY_CAPABILITIES: dict[str, tuple[str, ...]] = {
    "api": ("API endpoints", "handlers"),
    "cmd": ("CLI commands", "entrypoints"),
    "components": ("UI components",),
    "config": ("configuration",),
    "controllers": ("request handling",),
    "db": ("database",),
    "docs": ("documentation",),
    "entities": ("domain entities",),
    "handlers": ("request handlers",),
    "hooks": ("React hooks",),
    "internal": ("internal packages",),
    "lib": ("shared libraries",),
    "middleware": ("middleware",),
    "migrations": ("database migrations",),
    "models": ("data models",),
    "pages": ("page components",),
    "pkg": ("packages",),
    "routes": ("routing", "endpoints"),
    "scripts": ("automation scripts",),
    "services": ("business logic",),
    "src": ("application sources",),
    "store": ("state management",),
    "test": ("testing",),
    "tests": ("testing",),
    "utils": ("utilities", "helpers"),
    "views": ("UI views",),
}

# (framework tags, description); hints are emitted in this order.
PURPOSE_HINTS: tuple[tuple[frozenset[str], str], ...] = (
    (frozenset({"gin", "echo", "fiber", "gorilla", "express", "fastify", "nestjs", "fastapi", "flask", "django"}), "web service/API"),
    (frozenset({"react", "vue", "angular", "svelte", "nextjs"}), "frontend application"),
    (frozenset({"flutter"}), "mobile application"),
    (frozenset({"cobra", "cli"}), "CLI tool"),
    (frozenset({"grpc"}), "gRPC service"),
    (frozenset({"pandas", "numpy", "tensorflow", "pytorch"}), "data / ML project"),
)

OPERATIONAL_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Build", ("Makefile", "build.sh", "build.gradle", "pom.xml", "Cargo.toml", "Taskfile.yml")),
    ("Test", ("test.sh", "pytest.ini", "tox.ini", "jest.config.js", "jest.config.ts", "vitest.config.ts")),
    ("Docker", ("Dockerfile", "Dockerfile.*", "docker-compose.yml", "docker-compose.yaml", "compose.yaml")),
    ("CI/CD", (".github/workflows/", ".gitlab-ci.yml", "Jenkinsfile", ".circleci/")),
    ("Config", ("config.yaml", "config.yml", "config.json", ".env.example")),
    ("Package", ("go.mod", "package.json", "requirements.txt", "pyproject.toml", "Gemfile", "pubspec.yaml")),
)

RISK_LABELS: dict[str, str] = {
    "auth": "Authentication",
    "cgo": "Cgo",
    "code-execution": "Code Execution",
    "concurrency": "Concurrency",
    "crypto": "Cryptography",
    "database": "Database",
    "network": "Network",
    "reflection": "Reflection",
    "secrets": "Secrets",
    "subprocess": "Subprocess",
    "unsafe": "Unsafe",
    "xss-risk": "XSS Risk",
}

TEST_FILE_SUFFIXES: tuple[str, ...] = (
    "_test.go",
    "_test.py",
    ".test.ts",
    ".test.tsx",
    ".test.js",
    ".spec.ts",
    ".spec.js",
    "_test.dart",
)


__all__ = [
    "CATEGORY_ORDER",
    "CATEGORY_OTHER",
    "CATEGORY_RULES",
    "DIRECTORY_CAPABILITIES",
    "MAX_FILES_PER_DIR",
    "MAX_IMPORTANT_FILES",
    "MAX_KEY_MODULES",
    "MAX_SUMMARY_AREAS",
    "MAX_SUMMARY_ENTRYPOINTS",
    "MAX_SYMBOLS_PER_FILE",
    "MAX_TREE_DEPTH",
    "OPERATIONAL_PATTERNS",
    "PURPOSE_HINTS",
    "RISK_LABELS",
    "SUMMARY_BUDGET_BYTES",
    "TEST_FILE_SUFFIXES",
]
