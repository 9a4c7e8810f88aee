"""Spaces MCP server: quota-bounded tenant spaces on Kubernetes."""

__version__ = "0.1.0"
