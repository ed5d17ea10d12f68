"""Core shared utilities: exceptions and error codes."""
