"""Admin authentication: credential login and bearer tokens."""
