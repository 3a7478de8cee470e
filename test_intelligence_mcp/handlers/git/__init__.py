"""Registry for git MCP tool definitions and handlers."""

from .changed_files import (
    TOOL_DEFINITION as CHANGED_FILES_TOOL,
    handle as handle_changed_files,
)

# All git tool definitions
TOOLS = [
    CHANGED_FILES_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "changed_files": handle_changed_files,
}


__all__ = [
    "TOOLS",
    "CHANGED_FILES_TOOL",
    "HANDLERS",
    "handle_changed_files",
]
