"""Tests for tiered rendering."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from codeindex.adapters import GoAdapter
from codeindex.extract import extract_candidates
from codeindex.models import ScanResult
from codeindex.synthesis import TRUNCATION_MARKER, Synthesizer, categorize, truncate_output
from tests._fixtures.repo_builder import RepoBuilder

GENERATED_AT = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


def _scan(repo_builder: RepoBuilder) -> ScanResult:
    repo_builder.write(
        {
            "go.mod": "module example.com/shop\n",
            "Makefile": "build:\n\tgo build ./...\n",
            "Dockerfile": "FROM golang:1.22\n",
            "cmd/shop/main.go": """
                package main

                import "github.com/gin-gonic/gin"

                func main() {
                    gin.Default().Run()
                }
            """,
            "internal/handlers/orders.go": """
                package handlers

                import "database/sql"

                type OrderHandler struct{ DB *sql.DB }

                func (h *OrderHandler) List() {}
            """,
            "internal/handlers/orders_helpers.go": "package handlers\n",
            "internal/models/order.go": "package models\n\ntype Order struct{ ID int }\n",
            "docs/guide.md": "# Guide\n",
        }
    )
    adapters = [GoAdapter()]
    scan = repo_builder.scan(adapters)
    extract_candidates(repo_builder.path(), scan.candidates, adapters)
    return scan


def test_structured_tier_lists_layout_entrypoints_and_categories(repo_builder: RepoBuilder) -> None:
    scan = _scan(repo_builder)

    content = Synthesizer("shop", ["go"]).render(scan, "structured", GENERATED_AT)

    assert content.startswith("# shop - Codebase Index")
    assert "This appears to be a web service/API." in content
    assert "## Repository Layout" in content
    assert "internal/" in content
    assert "handlers/ (2 files)" in content
    assert "## Entry Points" in content
    assert "- `cmd/shop/main.go` (package: main)" in content
    assert "### Backend / API (2)" in content
    assert "## Important Files" not in content
    assert "*Index generated at 2026-01-02T03:04:05+00:00*" in content


def test_categorization_covers_every_candidate_once(repo_builder: RepoBuilder) -> None:
    scan = _scan(repo_builder)

    categories = categorize(scan.candidates)
    members = [path for paths in categories.values() for path in paths]

    assert sorted(members) == sorted(entry.path for entry in scan.candidates)
    assert len(members) == len(set(members))
    assert categories["CLI / Commands"] == ["cmd/shop/main.go"]
    assert categories["Domain / Models"] == ["internal/models/order.go"]


def test_full_tier_adds_detail_sections(repo_builder: RepoBuilder) -> None:
    scan = _scan(repo_builder)

    content = Synthesizer("shop", ["go"]).render(scan, "full", GENERATED_AT)

    for heading in (
        "## Primary Capabilities",
        "## Key Modules",
        "## Important Files",
        "## Operational Notes",
        "## Risk / Caution Areas",
        "## Navigation Hints",
    ):
        assert heading in content
    assert "`OrderHandler` (struct)" in content
    assert "**Frameworks:** gin" in content
    assert "**Build:** `Makefile`" in content
    assert "**Docker:** `Dockerfile`" in content
    assert "**Database:**" in content
    assert "Follows Go standard layout (cmd/, internal/)" in content
    assert content.index("## Important Files") < content.index("## Risk / Caution Areas")


def test_full_tier_truncates_long_directory_listings(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module m\n"})
    repo_builder.write({f"pkg/file{index:02d}.go": "package pkg\n" for index in range(15)})
    scan = repo_builder.scan([GoAdapter()])

    content = Synthesizer("m", ["go"]).render(scan, "full", GENERATED_AT)

    assert "    file10.go" in content
    assert "file11.go" not in content.split("## Repository Layout", 1)[1].split("```", 2)[1]
    assert "... and 4 more files" in content


def test_summary_stays_small(repo_builder: RepoBuilder) -> None:
    scan = _scan(repo_builder)

    summary = Synthesizer("shop", ["go"]).render_summary(scan, GENERATED_AT)

    assert summary.startswith("# shop - Quick Reference")
    assert "**Entry Points:** `cmd/shop/main.go`" in summary
    assert "**Frameworks:** gin" in summary
    assert "`internal/` (internal packages)" in summary
    assert len(summary.encode("utf-8")) <= 3 * 1024


def test_summary_is_truncated_when_oversized(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module m\n"})
    repo_builder.write({f"cmd/{'tool' * 40}{index}/main.go": "package main\n" for index in range(40)})
    scan = repo_builder.scan([GoAdapter()])

    summary = Synthesizer("m", ["go"]).render(scan, "summary", GENERATED_AT)

    assert len(summary.encode("utf-8")) <= 3 * 1024


def test_render_is_deterministic(repo_builder: RepoBuilder) -> None:
    scan = _scan(repo_builder)
    synthesizer = Synthesizer("shop", ["go"])

    assert synthesizer.render(scan, "full", GENERATED_AT) == synthesizer.render(scan, "full", GENERATED_AT)


def test_unknown_tier_is_rejected() -> None:
    with pytest.raises(ValueError):
        Synthesizer("x", []).render(ScanResult(), "verbose")


def test_output_is_capped_by_max_output_kb(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module m\n"})
    repo_builder.write({f"internal/{'segment' * 10}{index}/file.go": "package x\n" for index in range(60)})
    scan = repo_builder.scan([GoAdapter()])

    content = Synthesizer("m", ["go"], max_output_kb=1).render(scan, "full", GENERATED_AT)

    assert len(content.encode("utf-8")) <= 1024
    assert content.rstrip().endswith(TRUNCATION_MARKER.format(limit=1024))


def test_truncate_output_cuts_at_line_boundary() -> None:
    content = "\n".join(f"line {index:03d}" for index in range(200))

    truncated = truncate_output(content, 300)

    assert len(truncated.encode("utf-8")) <= 300
    body = truncated.split("\n\n*[Index truncated")[0]
    assert all(line.startswith("line ") and len(line) == 8 for line in body.split("\n"))


def test_truncate_output_leaves_small_content_alone() -> None:
    assert truncate_output("short", 100) == "short"
