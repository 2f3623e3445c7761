"""MCP server for chat assistants."""
