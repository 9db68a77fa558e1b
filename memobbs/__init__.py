"""memobbs: a personal Markdown memo board."""

__version__ = "0.1.0"
