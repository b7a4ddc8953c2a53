"""Tests for codeindex.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeindex.config import AdapterOverride, ConfigError, IndexConfig, QmdConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, IndexConfig)
    assert config.root == tmp_path.resolve()
    assert config.output_format == "structured"
    assert config.hash_algorithm == "xxhash"
    assert config.store == "repo"
    assert config.max_candidates == 100
    assert config.max_output_kb == 100
    assert config.languages == []
    assert config.adapter_overrides == {}
    assert config.qmd is None
    assert config.encrypt is False


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".codeindex.yml"
    config_file.write_text(
        """
output:
  format: full
  path: docs/INDEX.md
  store: both
  max_kb: 64
hash: sha256
max_candidates: 40
languages: [Go, python]
adapters:
  go:
    ignore_dirs: [mocks]
    ignore_globs: ["*_mock.go"]
    priority_files: ["internal/core/*.go"]
    replace_defaults: true
encrypt: true
qmd:
  collection: my-repo
  embed: true
  context: "Index of my repo"
verbose: yes
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.output_format == "full"
    assert config.output_path == "docs/INDEX.md"
    assert config.store == "both"
    assert config.max_output_kb == 64
    assert config.hash_algorithm == "sha256"
    assert config.max_candidates == 40
    assert config.languages == ["go", "python"]
    assert config.adapter_overrides == {
        "go": AdapterOverride(
            ignore_dirs=["mocks"],
            ignore_globs=["*_mock.go"],
            priority_files=["internal/core/*.go"],
            replace_defaults=True,
        )
    }
    assert config.encrypt is True
    assert config.qmd == QmdConfig(collection="my-repo", embed=True, context="Index of my repo", mask=None)
    assert config.verbose is True


def test_load_config_falls_back_on_invalid_values(tmp_path: Path) -> None:
    (tmp_path / ".codeindex.yml").write_text(
        """
output:
  format: verbose
  store: cloud
  max_kb: -3
hash: md5
max_candidates: lots
qmd:
  embed: true
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.output_format == "structured"
    assert config.store == "repo"
    assert config.max_output_kb == 100
    assert config.hash_algorithm == "xxhash"
    assert config.max_candidates == 100
    assert config.qmd is None


def test_load_config_accepts_comma_separated_languages(tmp_path: Path) -> None:
    (tmp_path / ".codeindex.yml").write_text("languages: go, typescript\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.languages == ["go", "typescript"]


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".codeindex.yml").write_text("output: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_requires_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".codeindex.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
