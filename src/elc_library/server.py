"""ELC Library MCP Server - FastMCP Implementation

Exposes the ELC Library to MCP clients. Staff log in, browse the catalog,
lend and take back books, watch the loan dashboard and consult the pedagogy
assistant.

Features exposed:
- Resources: Catalog, book search, loan dashboard, session, assistant transcript
- Tools: Login/logout, checkout and return, pedagogy assistant
- Prompts: Pedagogy consultation
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .config import LibraryConfig, get_config
from .observability import initialize_observability
from .prompts import all_prompts
from .resources import all_resources
from .tools import all_tools

# stderr for logs, stdout for MCP protocol
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "ELC Library MCP Server - circulation desk and pedagogy assistant for an "
    "English Language Centre. Log in with the login tool first. Use resources to "
    "browse the catalog and the loan dashboard, tools to check books out and in, "
    "and the pedagogy assistant or prompt for resource recommendations."
)


def create_server(config: LibraryConfig | None = None) -> FastMCP:
    """Build a FastMCP server with every resource, tool and prompt registered."""
    config = config or get_config()

    mcp = FastMCP(
        name=config.server_name,
        version=config.server_version,
        instructions=INSTRUCTIONS,
    )

    for resource in all_resources:
        uri = resource.get("uri_template", resource.get("uri"))
        if not uri:
            logger.error("Resource missing URI: %s", resource)
            continue

        logger.debug("Registering resource: %s with URI: %s", resource["name"], uri)
        mcp.resource(
            uri=uri,
            name=resource["name"],
            description=resource["description"],
            mime_type=resource["mime_type"],
        )(resource["handler"])

    logger.info("Registered %d resources", len(all_resources))

    tools = [
        tool
        for tool in all_tools
        if config.enable_assistant or tool["name"] != "ask_pedagogy_assistant"
    ]
    for tool in tools:
        logger.debug("Registering tool: %s", tool["name"])
        mcp.tool(
            name=tool["name"],
            description=tool["description"],
        )(tool["handler"])

    logger.info("Registered %d tools", len(tools))

    for prompt in all_prompts:
        logger.debug("Registering prompt: %s", prompt.__name__)
        mcp.prompt()(prompt)

    logger.info("Registered %d prompts", len(all_prompts))
    return mcp


def run(config: LibraryConfig | None = None) -> None:
    """Run the server on the configured transport until interrupted."""
    config = config or get_config()

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled - verbose protocol logging active")
    else:
        logging.getLogger().setLevel(config.log_level)
        logging.getLogger("fastmcp").setLevel(logging.WARNING)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, initiating shutdown...", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    initialize_observability()
    mcp = create_server(config)

    logger.info(
        "Starting %s v%s on %s transport",
        config.server_name,
        config.server_version,
        config.transport,
    )
    if config.transport == "streamable_http":
        mcp.run(transport="streamable-http", host=config.http_host, port=config.http_port)
    else:
        mcp.run(transport="stdio")


def main() -> None:
    """Console entry point for the MCP server."""
    try:
        config = get_config()
        logger.info("=" * 60)
        logger.info("ELC Library MCP Server")
        logger.info("Version: %s", config.server_version)
        logger.info("Transport: %s", config.transport)
        logger.info("Debug Mode: %s", config.debug)
        logger.info("=" * 60)

        run(config)

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Failed to start MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
