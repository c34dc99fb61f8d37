"""Entry point for the rqmt-redline MCP server."""

from rqmt_redline.server import create_server


def main() -> None:
    """Run the rqmt-redline MCP server."""
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
