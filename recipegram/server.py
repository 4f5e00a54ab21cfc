from fastmcp import FastMCP
import sys
import logging
from contextlib import contextmanager
from typing import Optional

from .config import LOG_LEVEL, LOG_FORMAT
from .app import RecipegramApp
from .db.queries import register_db_tools

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Send log records to stderr; stdout carries the MCP stdio protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


@contextmanager
def connection_error_handler(operation_name: str):
    """Context manager to handle client disconnects gracefully."""
    try:
        yield
    except (BrokenPipeError, ConnectionResetError) as e:
        # Expected when the client goes away
        logger.warning(f"Client disconnected during {operation_name}: {e}")


def create_server(app: Optional[RecipegramApp] = None) -> FastMCP:
    """Create and configure the MCP server with all tools registered."""
    if app is None:
        app = RecipegramApp()
        app.start()

    mcp = FastMCP("Recipegram")
    register_db_tools(mcp, app)
    return mcp


def main():
    configure_logging()
    app = RecipegramApp()
    app.start()

    try:
        mcp = create_server(app)
        with connection_error_handler("server execution"):
            mcp.run()
    except KeyboardInterrupt:
        pass
    finally:
        app.close()


if __name__ == "__main__":
    main()
