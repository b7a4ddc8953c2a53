"""Tests for output location policy."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeindex.stores import OutputStore, decrypt


def test_default_path_is_inside_repository(tmp_path: Path) -> None:
    store = OutputStore(tmp_path / "repo", "my_repo", home=tmp_path / "home")

    written = store.write("# Index\n")

    assert written == tmp_path / "repo" / ".codeindex" / "my_repo_INDEX.md"
    assert written.read_text(encoding="utf-8") == "# Index\n"
    assert not (tmp_path / "home").exists()


def test_config_store_writes_to_home(tmp_path: Path) -> None:
    store = OutputStore(tmp_path / "repo", "my_repo", store="config", home=tmp_path / "home")

    written = store.write("# Index\n")

    assert written == tmp_path / "home" / ".codeindex" / "my_repo_INDEX.md"


def test_both_store_writes_secondary_copy(tmp_path: Path) -> None:
    store = OutputStore(tmp_path / "repo", "my_repo", store="both", home=tmp_path / "home")

    written = store.write("# Index\n")

    assert written == store.repo_path()
    assert store.config_path().read_text(encoding="utf-8") == "# Index\n"


def test_secondary_failure_does_not_abort(tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    # A regular file where the output directory should be makes the secondary write fail.
    (home / ".codeindex").write_text("blocker", encoding="utf-8")
    store = OutputStore(tmp_path / "repo", "my_repo", store="both", home=home)

    written = store.write("# Index\n")

    assert written.exists()


def test_relative_custom_path_resolves_against_root(tmp_path: Path) -> None:
    store = OutputStore(tmp_path / "repo", "my_repo", output_path="docs/INDEX.md", home=tmp_path / "home")

    assert store.write("x") == tmp_path / "repo" / "docs" / "INDEX.md"


def test_encrypted_output_gets_enc_suffix(tmp_path: Path) -> None:
    store = OutputStore(
        tmp_path / "repo",
        "my_repo",
        encrypt=True,
        encryption_key="pw",
        home=tmp_path / "home",
    )

    written = store.write("# Secret\n")

    assert written.name == "my_repo_INDEX.md.enc"
    assert decrypt(written.read_text(encoding="utf-8"), "pw") == b"# Secret\n"


def test_encryption_without_key_is_rejected(tmp_path: Path) -> None:
    store = OutputStore(tmp_path / "repo", "my_repo", encrypt=True, home=tmp_path / "home")

    with pytest.raises(ValueError):
        store.write("# Secret\n")


def test_unknown_store_location_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        OutputStore(tmp_path, "x", store="cloud")
