"""Memo content processing."""

from memobbs.content.processor import ProcessedContent, process_content, sanitize_html

__all__ = ["ProcessedContent", "process_content", "sanitize_html"]
