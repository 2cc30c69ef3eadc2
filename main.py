#!/usr/bin/env python3
"""MCP Tool Server - Main entry point.

Serves MCP tools to a single client over stdin/stdout, one JSON-RPC
message per line. Log output goes to stderr only.

================================================================================
DEVELOPER GUIDE: Registering New Tools
================================================================================

1. CREATE YOUR TOOL
   Create a new module in src/mcp_tool_server/tools/ implementing ToolBase.
   See src/mcp_tool_server/tools/calculator.py for a complete example.

2. REGISTER THE TOOL HERE
   Import and register your tool in main() before server.serve().

EXAMPLE: Adding an Echo Tool
----------------------------

    from mcp_tool_server.tools.echo import EchoTool

    server.register_tool(EchoTool())

NOTES
-----
- Arguments are validated against the tool's input schema before
  execute() is called; invalid arguments become an error result.
- Exceptions raised by execute() are caught and reported to the client
  as an error result, never as a protocol error.
- Tools cannot be registered once the server is serving.

================================================================================
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mcp_tool_server import __version__
from mcp_tool_server.config import LOG_LEVELS, ConfigLoadError, ServerConfig, load_config
from mcp_tool_server.protocol.transport import StdioTransport
from mcp_tool_server.server import MCPServer
from mcp_tool_server.tools.calculator import CalculatorTool

logger = logging.getLogger("mcp_tool_server")


def main() -> int:
    """Run the MCP server.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="MCP Tool Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to server configuration YAML file (default: built-in settings)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=LOG_LEVELS,
        help="Logging level (overrides the config file)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-tool-server {__version__}",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config) if args.config else ServerConfig()
    except ConfigLoadError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level or config.log_level),
        format="[MCP] %(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        server = MCPServer(config)
    except OSError as e:
        logger.error("Error starting server: %s", e)
        return 1

    # Register built-in tools
    # -------------------------------------------------------------------------
    # DEVELOPER: Add your custom tools here using server.register_tool()
    # -------------------------------------------------------------------------
    server.register_tool(CalculatorTool())

    transport = StdioTransport()
    logger.info("MCP Tool Server started")
    if args.config:
        logger.info("Config loaded from: %s", args.config)

    with server:
        try:
            server.serve(transport)
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
            return 130  # Standard exit code for SIGINT

    return 0


if __name__ == "__main__":
    sys.exit(main())
