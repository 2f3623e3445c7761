"""Run the MCP server over stdio."""

from group_ledger.mcp.server import create_mcp_server


def main() -> None:
    create_mcp_server().run()


if __name__ == "__main__":
    main()
