"""Bright Data web-data tools served over CLI, REST, SSE and MCP."""

__version__ = "0.1.0"
