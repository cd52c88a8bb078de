"""Main entry point for the Bright Data MCP server."""

from __future__ import annotations

import sys

from brightdata_mcp.config import Settings, configure_logging
from brightdata_mcp.errors import ConfigError
from brightdata_mcp.server import run_server


def main() -> None:
    """Main entry point: ``brightdata-mcp [http|stdio] [host] [port]``."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(settings.log_level)

    transport = "http"
    host = settings.host
    port = settings.port

    if len(sys.argv) > 1:
        transport = sys.argv[1]
    if len(sys.argv) > 2:
        host = sys.argv[2]
    if len(sys.argv) > 3:
        port = int(sys.argv[3])

    if transport != "stdio":
        print(f"Starting Bright Data MCP server on {host}:{port} with {transport} transport...")
    run_server(transport=transport, host=host, port=port, settings=settings)


if __name__ == "__main__":
    main()
