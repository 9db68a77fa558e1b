"""Core infrastructure: configuration, database, errors and base layers."""
