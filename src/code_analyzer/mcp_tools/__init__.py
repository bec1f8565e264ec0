"""MCP tool modules. Each exposes ``register() -> (tools, handlers)``."""
