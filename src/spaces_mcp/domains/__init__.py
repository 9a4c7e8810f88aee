"""Domain modules for the Spaces MCP server."""
