#!/usr/bin/env python3
"""
Tag Tree MCP Server
Maintains the tag graph of a workspace in memory and exposes it as tools.
The graph is rebuilt from a full scan at startup and kept current by a
file watcher.
"""

import asyncio
import json
import logging
import os
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .config import TagTreeConfig
from .core import TagTreeError
from .workspace import Workspace

# Configure logging to stderr (never stdout for MCP)
log_level = os.getenv("TAGTREE_LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


# Initialize server
app = Server("tag-tree")

# Workspace served by this process
workspace: Workspace | None = None


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tag graph tools."""
    return [
        Tool(
            name="tagtree_children",
            description="List tree children of a node, or the top-level nodes when no node is given. Children are grouped as linked both ways, inbound only, then outbound only.",
            inputSchema={
                "type": "object",
                "properties": {
                    "node": {
                        "type": "string",
                        "description": "Node name (omit for the top level)"
                    }
                }
            }
        ),
        Tool(
            name="tagtree_nodes",
            description="Snapshot of every node (tags and files) in the graph.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="tagtree_tags",
            description="Snapshot of every tag node in the graph.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="tagtree_complete",
            description="Suggest node names for a '#[' tag being typed on a line.",
            inputSchema={
                "type": "object",
                "properties": {
                    "line": {
                        "type": "string",
                        "description": "Full text of the line"
                    },
                    "character": {
                        "type": "integer",
                        "description": "Cursor column (defaults to end of line)"
                    }
                },
                "required": ["line"]
            }
        ),
        Tool(
            name="tagtree_drop",
            description="Manually link nodes into a target node's inbound set.",
            inputSchema={
                "type": "object",
                "properties": {
                    "names": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Names of the nodes to link"
                    },
                    "target": {
                        "type": "string",
                        "description": "Target node name"
                    }
                },
                "required": ["names", "target"]
            }
        ),
        Tool(
            name="tagtree_rescan",
            description="Rebuild the graph from a full scan of the workspace.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="tagtree_ping",
            description="Health check. Returns graph and file counts.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    if not workspace:
        return [TextContent(type="text", text=json.dumps({"error": "Workspace not initialized"}))]

    arguments = arguments or {}

    try:
        if name == "tagtree_children":
            children = workspace.children(arguments.get("node"))
            result = [child.to_dict() for child in children]
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

        elif name == "tagtree_nodes":
            result = [node.to_dict() for node in workspace.index.get_nodes()]
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

        elif name == "tagtree_tags":
            result = [node.to_dict() for node in workspace.index.get_tags()]
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

        elif name == "tagtree_complete":
            line = arguments["line"]
            character = arguments.get("character", len(line))
            suggestions = workspace.complete(line, character)
            result = {"active": suggestions is not None, "items": suggestions or []}
            return [TextContent(type="text", text=json.dumps(result))]

        elif name == "tagtree_drop":
            linked = workspace.drop(arguments["names"], arguments["target"])
            result = {"target": arguments["target"], "linked": linked}
            return [TextContent(type="text", text=json.dumps(result))]

        elif name == "tagtree_rescan":
            scanned = await workspace.rescan()
            result = {"scanned": scanned, **workspace.stats()}
            return [TextContent(type="text", text=json.dumps(result))]

        elif name == "tagtree_ping":
            result = {"status": "ok", **workspace.stats()}
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

    except TagTreeError as e:
        # Structured error response for known errors
        logger.warning(f"Tag tree error in {name}: {e}")
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]

    except Exception as e:
        # Unexpected errors
        logger.error(f"Unexpected error in {name}: {e}", exc_info=True)
        return [TextContent(type="text", text=json.dumps({"error": f"Internal error: {str(e)}"}))]


async def main():
    """Main entry point."""
    global workspace

    # Load configuration from environment
    config = TagTreeConfig.from_env()

    workspace = Workspace(config)
    await workspace.start()

    logger.info("Starting Tag Tree MCP Server...")

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        if workspace:
            await workspace.shutdown()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
