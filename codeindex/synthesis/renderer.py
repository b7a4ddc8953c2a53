"""Tiered Markdown rendering of a scan."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import List, Optional, Sequence

from . import sections
from .constants import MAX_SUMMARY_AREAS, MAX_SUMMARY_ENTRYPOINTS, SUMMARY_BUDGET_BYTES
from ..config import DEFAULT_MAX_OUTPUT_KB, FORMAT_FULL, FORMAT_STRUCTURED, FORMAT_SUMMARY, OUTPUT_FORMATS
from ..logging import get_logger
from ..models import ScanResult

TRUNCATION_MARKER = "*[Index truncated: output exceeded {limit} bytes]*"

logger = get_logger("synthesis")


class Synthesizer:
    """Renders a :class:`ScanResult` into one of the summary, structured or full tiers."""

    def __init__(
        self,
        repo_name: str,
        languages: Sequence[str],
        *,
        max_output_kb: int = DEFAULT_MAX_OUTPUT_KB,
    ) -> None:
        self.repo_name = repo_name
        self.languages = sorted(languages)
        self.max_output_kb = max_output_kb

    def render(self, scan: ScanResult, tier: str = FORMAT_STRUCTURED, generated_at: Optional[datetime] = None) -> str:
        if tier not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{tier}'. Expected one of: {', '.join(OUTPUT_FORMATS)}")
        generated_at = generated_at or datetime.now(UTC)
        if tier == FORMAT_SUMMARY:
            return self.render_summary(scan, generated_at)
        if tier == FORMAT_FULL:
            lines = self._full_lines(scan)
        else:
            lines = self._structured_lines(scan)
        lines.extend(sections.footer(generated_at, scan))
        return truncate_output("\n".join(lines), self.max_output_kb * 1024)

    def render_summary(self, scan: ScanResult, generated_at: Optional[datetime] = None) -> str:
        """Render the compact orientation block; never exceeds 3 KiB."""
        generated_at = generated_at or datetime.now(UTC)
        lines = sections.header(self.repo_name, "Quick Reference", self.languages, scan)

        areas = [
            f"`{name}/` ({', '.join(caps)})"
            for name, caps in list(sections.capabilities(scan.dir_tree).items())[:MAX_SUMMARY_AREAS]
        ]
        if areas:
            lines.extend([f"**Main Areas:** {', '.join(areas)}", ""])

        entries = sections.entrypoints(scan.candidates)[:MAX_SUMMARY_ENTRYPOINTS]
        if entries:
            lines.extend([f"**Entry Points:** {', '.join(f'`{entry.path}`' for entry in entries)}", ""])

        frameworks = sections.collect_frameworks(scan.candidates)
        if frameworks:
            lines.extend([f"**Frameworks:** {', '.join(frameworks)}", ""])

        lines.extend(
            [
                "Regenerate with `--format structured` or `--format full` for layout and per-file detail,",
                "or run `qmd search` against the registered collection.",
                "",
                f"*Index generated at {generated_at.isoformat(timespec='seconds')}*",
                "",
            ]
        )
        return truncate_output("\n".join(lines), SUMMARY_BUDGET_BYTES)

    def _structured_lines(self, scan: ScanResult) -> List[str]:
        lines = sections.header(self.repo_name, "Codebase Index", self.languages, scan)
        lines.extend(["> This index is organized by domain: every indexed file appears in exactly one category.", ""])
        lines.extend(sections.layout_section(scan.dir_tree, with_files=False))
        lines.extend(sections.entry_points_section(scan.candidates))
        lines.extend(sections.categories_section(sections.categorize(scan.candidates)))
        return lines

    def _full_lines(self, scan: ScanResult) -> List[str]:
        lines = sections.header(self.repo_name, "Codebase Index", self.languages, scan)
        lines.extend(["> This index is organized by domain, followed by per-file detail for the highest-ranked files.", ""])
        lines.extend(sections.layout_section(scan.dir_tree, with_files=True))
        lines.extend(sections.capabilities_section(scan.dir_tree))
        lines.extend(sections.entry_points_section(scan.candidates))
        lines.extend(sections.key_modules_section(scan.candidates))
        lines.extend(sections.categories_section(sections.categorize(scan.candidates)))
        lines.extend(sections.important_files_section(scan.candidates))
        lines.extend(sections.token_budget_section(scan.candidates))
        lines.extend(sections.operational_section(scan))
        lines.extend(sections.risk_section(scan.candidates))
        lines.extend(sections.navigation_section(scan))
        return lines


def truncate_output(content: str, max_bytes: int) -> str:
    """Cut ``content`` at a line boundary so it fits in ``max_bytes`` with a marker."""
    if max_bytes <= 0 or len(content.encode("utf-8")) <= max_bytes:
        return content
    marker = TRUNCATION_MARKER.format(limit=max_bytes)
    budget = max_bytes - len(marker.encode("utf-8")) - 2
    kept: List[str] = []
    used = 0
    for line in content.split("\n"):
        size = len(line.encode("utf-8")) + 1
        if used + size > budget:
            break
        kept.append(line)
        used += size
    logger.warning("Index output exceeded %d bytes; truncated", max_bytes)
    return "\n".join(kept) + "\n\n" + marker + "\n"


__all__ = ["Synthesizer", "TRUNCATION_MARKER", "truncate_output"]
