"""Entry point: run the Poly Pizza MCP server on stdio."""

from cli.main import cli

if __name__ == "__main__":
    cli()
