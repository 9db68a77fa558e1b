"""Attachment uploads stored on disk."""
