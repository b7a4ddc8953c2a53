"""Markdown synthesis for codebase indexes."""

from .renderer import TRUNCATION_MARKER, Synthesizer, truncate_output
from .sections import categorize, category_for

__all__ = ["Synthesizer", "TRUNCATION_MARKER", "categorize", "category_for", "truncate_output"]
