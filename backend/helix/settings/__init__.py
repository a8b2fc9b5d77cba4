"""Settings schema, key mapping, sanitization and errors."""
