"""Report building and markdown output."""

from mr_conflict_checker.reporter.builder import build_report, generate_timestamp, summarize
from mr_conflict_checker.reporter.markdown import generate_report, render_markdown

__all__ = ["build_report", "generate_report", "generate_timestamp", "render_markdown", "summarize"]
