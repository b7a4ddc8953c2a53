"""Tests for attaching symbols to scan candidates."""

from __future__ import annotations

from codeindex.adapters import GoAdapter
from codeindex.adapters.base import Adapter
from codeindex.extract import SYMBOL_READ_LIMIT, extract_candidates, safe_extract
from codeindex.models import SymbolInfo
from tests._fixtures.repo_builder import RepoBuilder


class _ExplodingAdapter(Adapter):
    name = "boom"

    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        raise RuntimeError("parser exploded")


def test_every_candidate_receives_symbols(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "go.mod": "module m\n",
            "main.go": "package main\n\nfunc main() {}\n",
        }
    )
    adapters = [GoAdapter()]
    result = repo_builder.scan(adapters)

    extract_candidates(repo_builder.path(), result.candidates, adapters)

    symbols = {entry.path: entry.symbols for entry in result.candidates}
    assert symbols["go.mod"] == SymbolInfo()
    assert symbols["main.go"] is not None
    assert symbols["main.go"].package == "main"


def test_unreadable_candidate_gets_empty_symbols(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module m\n", "main.go": "package main\n"})
    adapters = [GoAdapter()]
    result = repo_builder.scan(adapters)
    (repo_builder.path() / "main.go").unlink()

    extract_candidates(repo_builder.path(), result.candidates, adapters)

    main = next(entry for entry in result.candidates if entry.path == "main.go")
    assert main.symbols == SymbolInfo()


def test_safe_extract_absorbs_adapter_failures() -> None:
    assert safe_extract(_ExplodingAdapter(), "x.boom", b"") == SymbolInfo()


def test_symbols_come_from_the_leading_window_only(repo_builder: RepoBuilder) -> None:
    padding = ("// " + "x" * 77 + "\n") * (SYMBOL_READ_LIMIT // 80 + 10)
    repo_builder.write({"go.mod": "module m\n"})
    (repo_builder.path() / "main.go").write_text(
        "package main\n\nfunc Early() {}\n\n" + padding + "func Late() {}\n",
        encoding="utf-8",
    )
    adapters = [GoAdapter()]
    result = repo_builder.scan(adapters)

    extract_candidates(repo_builder.path(), result.candidates, adapters)

    symbols = {entry.path: entry.symbols for entry in result.candidates}["main.go"]
    assert symbols is not None
    names = [fn.name for fn in symbols.functions]
    assert "Early" in names
    assert "Late" not in names
