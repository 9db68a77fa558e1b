"""Request logging: database log table, middleware, exception handlers."""
