"""Tests for adapter detection and the registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeindex.adapters import (
    GoAdapter,
    PythonAdapter,
    Registry,
    combined_config_patterns,
    combined_extensions,
    combined_ignore_dirs,
    combined_ignore_globs,
)
from codeindex.adapters.base import Adapter
from codeindex.models import SymbolInfo
from tests._fixtures.repo_builder import RepoBuilder


class _RubyAdapter(Adapter):
    name = "ruby"
    detection_files = ("Gemfile",)
    file_extensions = (".rb",)

    def extract_symbols(self, path: str, content: bytes) -> SymbolInfo:
        return SymbolInfo()


def test_registry_lists_builtin_adapters_sorted() -> None:
    registry = Registry()

    assert registry.names() == ["flutter", "go", "python", "typescript"]
    assert [adapter.name for adapter in registry.all()] == registry.names()


def test_detect_finds_manifest_at_root(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module example.com/app\n"})

    detected = Registry().detect(repo_builder.path())

    assert [adapter.name for adapter in detected] == ["go"]


def test_detect_finds_manifest_one_level_down(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "backend/go.mod": "module example.com/backend\n",
            "web/package.json": "{}\n",
        }
    )

    detected = Registry().detect(repo_builder.path())

    assert [adapter.name for adapter in detected] == ["go", "typescript"]


def test_detect_ignores_manifests_deeper_than_one_level(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"services/api/pyproject.toml": "[project]\n"})

    assert Registry().detect(repo_builder.path()) == []


def test_detect_skips_hidden_subdirectories(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".cache/package.json": "{}\n"})

    assert Registry().detect(repo_builder.path()) == []


def test_detect_returns_empty_for_empty_directory(tmp_path: Path) -> None:
    assert Registry().detect(tmp_path) == []


def test_get_by_names_skips_unknown_names() -> None:
    registry = Registry()

    adapters = registry.get_by_names(["Python", "cobol", "go"])

    assert [adapter.name for adapter in adapters] == ["go", "python"]


def test_register_custom_adapter() -> None:
    registry = Registry(include_builtins=False)
    registry.register(_RubyAdapter())

    assert registry.names() == ["ruby"]
    assert registry.get("ruby") is not None


def test_register_rejects_non_adapters() -> None:
    registry = Registry(include_builtins=False)

    with pytest.raises(TypeError):
        registry.register(object())  # type: ignore[arg-type]


def test_register_rejects_nameless_adapter() -> None:
    class _Nameless(_RubyAdapter):
        name = ""

    with pytest.raises(ValueError):
        Registry(include_builtins=False).register(_Nameless())


def test_combined_rules_are_unions_in_adapter_order() -> None:
    adapters = [GoAdapter(), PythonAdapter()]

    assert combined_extensions(adapters) == [".go", ".py"]
    dirs = combined_ignore_dirs(adapters)
    assert dirs[:2] == ["vendor", "testdata"]
    assert "__pycache__" in dirs
    assert len(dirs) == len(set(dirs))


class _FakeEntryPoint:
    def __init__(self, name: str, obj: object) -> None:
        self.name = name
        self._obj = obj

    def load(self) -> object:
        return self._obj


def test_load_plugins_registers_entry_point_adapters(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "codeindex.adapters._iter_entry_points",
        lambda: [_FakeEntryPoint("ruby", _RubyAdapter)],
    )
    registry = Registry()

    assert registry.load_plugins() == ["ruby"]
    assert "ruby" in registry.names()


def test_load_plugins_rejects_non_adapters(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "codeindex.adapters._iter_entry_points",
        lambda: [_FakeEntryPoint("bad", 42)],
    )

    with pytest.raises(TypeError):
        Registry().load_plugins()


def test_combined_globs_and_config_patterns() -> None:
    adapters = [GoAdapter(), PythonAdapter()]

    assert "*_test.go" in combined_ignore_globs(adapters)
    assert combined_config_patterns(adapters)[:3] == ["go.mod", "go.sum", "Makefile"]
