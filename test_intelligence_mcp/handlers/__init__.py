"""MCP tool handlers, grouped by concern (workspace, core, git)."""
