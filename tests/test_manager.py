"""End-to-end tests for the IndexManager pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeindex.config import IndexConfig, QmdConfig
from codeindex.manager import IndexManager, NoAdaptersDetectedError, derive_repo_slugs
from codeindex.qmd import QmdError
from codeindex.scanner import hash_bytes
from codeindex.stores import decrypt
from tests._fixtures.repo_builder import RepoBuilder


def _go_service(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "go.mod": "module example.com/users\n\ngo 1.22\n",
            "cmd/main.go": """
                package main

                import "example.com/users/internal/service"

                func main() {
                    service.NewUser("ada")
                }
            """,
            "internal/service/user.go": """
                package service

                type User struct {
                    Name string
                }

                func NewUser(name string) *User {
                    return &User{Name: name}
                }
            """,
        }
    )


class _RecordingRegistrar:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.paths: list[Path] = []

    def register(self, index_path: Path) -> bool:
        self.paths.append(Path(index_path))
        if self.error is not None:
            raise self.error
        return True


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("my-repo", ("my_repo", "MY_REPO")),
        ("My Repo.v2", ("my_repo_v2", "MY_REPO_V2")),
        ("--weird__name--", ("weird_name", "WEIRD_NAME")),
        ("...", ("repo", "REPO")),
    ],
)
def test_derive_repo_slugs(name: str, expected: tuple[str, str]) -> None:
    assert derive_repo_slugs(name) == expected


def test_generate_indexes_go_service(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)
    manager = IndexManager(IndexConfig(root=repo_builder.path()))

    result = manager.generate()

    assert result.languages == ["go"]
    assert result.repo_name == "repo"
    assert result.file_count == 3
    assert result.format == "structured"
    assert "## Entry Points" in result.content
    assert "- `cmd/main.go`" in result.content
    assert "internal/service/user.go" in result.content
    assert result.categories["CLI / Commands"] == ["cmd/main.go"]
    assert result.categories["Backend / API"] == ["internal/service/user.go"]
    assert result.content_hash == hash_bytes(result.content.encode("utf-8"))
    assert result.summary.startswith("# repo - Quick Reference")
    assert result.output_path is None
    assert not (repo_builder.path() / ".codeindex").exists()


def test_full_tier_lists_struct_under_important_files(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)
    manager = IndexManager(IndexConfig(root=repo_builder.path(), output_format="full"))

    content = manager.generate().content

    important = content.split("## Important Files", 1)[1]
    assert "### `internal/service/user.go`" in important
    assert "`User` (struct)" in important


def test_explicit_languages_skip_detection(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"tool.py": "def run():\n    pass\n"})

    result = IndexManager(IndexConfig(root=repo_builder.path(), languages=["python"])).generate()

    assert result.languages == ["python"]
    assert result.file_count == 1


def test_no_adapters_raises_actionable_error(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"notes.txt": "nothing to index\n"})

    with pytest.raises(NoAdaptersDetectedError, match="--languages"):
        IndexManager(IndexConfig(root=repo_builder.path())).generate()


def test_unknown_languages_raise(repo_builder: RepoBuilder) -> None:
    with pytest.raises(NoAdaptersDetectedError):
        IndexManager(IndexConfig(root=repo_builder.path(), languages=["cobol"])).generate()


def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        IndexManager(IndexConfig(root=tmp_path / "missing")).generate()


def test_run_writes_index_to_repository(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)

    result = IndexManager(IndexConfig(root=repo_builder.path())).run()

    expected = repo_builder.path() / ".codeindex" / "repo_INDEX.md"
    assert result.output_path == str(expected)
    assert expected.read_text(encoding="utf-8") == result.content


def test_run_encrypts_when_configured(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)
    config = IndexConfig(root=repo_builder.path(), encrypt=True, encryption_key="pw")

    result = IndexManager(config).run()

    written = Path(result.output_path or "")
    assert written.name == "repo_INDEX.md.enc"
    assert decrypt(written.read_text(encoding="utf-8"), "pw").decode("utf-8") == result.content


def test_run_without_encryption_key_propagates(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)
    config = IndexConfig(root=repo_builder.path(), encrypt=True)

    with pytest.raises(ValueError):
        IndexManager(config).run()


def test_run_registers_with_qmd(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)
    registrar = _RecordingRegistrar()
    config = IndexConfig(root=repo_builder.path(), qmd=QmdConfig(collection="users"))

    result = IndexManager(config, qmd_registrar=registrar).run()  # type: ignore[arg-type]

    assert registrar.paths == [Path(result.output_path or "")]


def test_qmd_failures_are_warnings(repo_builder: RepoBuilder) -> None:
    _go_service(repo_builder)
    registrar = _RecordingRegistrar(error=QmdError("qmd not found in PATH"))
    config = IndexConfig(root=repo_builder.path(), qmd=QmdConfig(collection="users"))

    result = IndexManager(config, qmd_registrar=registrar).run()  # type: ignore[arg-type]

    assert result.output_path is not None
    assert Path(result.output_path).exists()
