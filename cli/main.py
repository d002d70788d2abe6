"""Poly Pizza MCP CLI: run the stdio server or exercise tools from a terminal."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click
import yaml
from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.table import Table

from core.config import Settings
from core.errors import ConfigError
from core.logging_config import setup_json_logging
from core.models import Model, ModelList, SearchResult, User, category_label
from server.mcp_server import PolyPizzaServer, serve
from tools.base import ToolResult
from tools.registry import build_registry

console = Console()
err_console = Console(stderr=True)


# ── Internal helpers ──────────────────────────────────────────────────────────


def _die(msg: str, code: int = 1) -> None:
    err_console.print(f"[red]Error:[/] {msg}")
    sys.exit(code)


def _settings(obj: dict) -> Settings:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        _die(str(e))
    setup_json_logging(obj["log_level"] or settings.log_level)
    return settings


def _load_file(path: str) -> dict:
    with open(path) as f:
        return yaml.safe_load(f) if path.endswith((".yaml", ".yml")) else json.load(f)


def _parse_arg(pair: str) -> tuple[str, Any]:
    """Split ``key=value``; the value is read as JSON when it parses, else kept as text."""
    key, sep, raw = pair.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--arg")
    try:
        return key, json.loads(raw)
    except json.JSONDecodeError:
        return key, raw


async def _call(settings: Settings, name: str, arguments: dict) -> ToolResult:
    server = PolyPizzaServer(settings)
    try:
        return await server.dispatcher.dispatch(name, arguments)
    finally:
        await server.aclose()


# ── Root group ────────────────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    default=None,
    envvar="LOG_LEVEL",
    help="Log level for stderr JSON logs (default INFO).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Poly Pizza MCP server. Runs `serve` when no command is given."""
    load_dotenv()
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve_cmd)


# ── serve ─────────────────────────────────────────────────────────────────────


@cli.command("serve")
@click.pass_obj
def serve_cmd(obj: dict) -> None:
    """Serve the tools to an MCP client over stdio."""
    settings = _settings(obj)
    asyncio.run(serve(settings))


# ── tools ─────────────────────────────────────────────────────────────────────


@cli.command("tools")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON schemas.")
def list_tools(json_output: bool) -> None:
    """List the available tools and their arguments."""
    schemas = build_registry().all_schemas()

    if json_output:
        click.echo(json.dumps({"tools": schemas}, indent=2))
        return

    table = Table(box=box.SIMPLE)
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Optional", style="dim")
    table.add_column("Description")
    for schema in schemas:
        props = schema["inputSchema"].get("properties", {})
        required = schema["inputSchema"].get("required", [])
        table.add_row(
            schema["name"],
            ", ".join(required) or "-",
            ", ".join(p for p in props if p not in required) or "-",
            schema["description"],
        )
    console.print(table)


# ── call ──────────────────────────────────────────────────────────────────────


@cli.command("call")
@click.argument("tool")
@click.option("--arg", "-a", "pairs", multiple=True, metavar="KEY=VALUE",
              help="Tool argument; repeatable. Values are parsed as JSON when possible.")
@click.option("--args-file", type=click.Path(exists=True),
              help="Read arguments from a YAML or JSON file.")
@click.option("--json", "json_output", is_flag=True, help="Print the full MCP envelope.")
@click.option("--table", "as_table", is_flag=True, help="Render models as a table.")
@click.pass_obj
def call(obj: dict, tool: str, pairs: tuple[str, ...], args_file: str | None,
         json_output: bool, as_table: bool) -> None:
    """Invoke one tool against the live API and print the result."""
    arguments: dict[str, Any] = _load_file(args_file) if args_file else {}
    arguments.update(_parse_arg(p) for p in pairs)

    settings = _settings(obj)
    result = asyncio.run(_call(settings, tool, arguments))

    if json_output:
        click.echo(json.dumps(result.to_envelope(), indent=2, ensure_ascii=False))
    elif as_table and result.success:
        _render(tool, result.output)
    else:
        click.echo(result.text)

    if not result.success:
        sys.exit(1)


# ── Rendering ─────────────────────────────────────────────────────────────────


def _models_table(models: list[Model], title: str | None = None) -> Table:
    table = Table(box=box.SIMPLE, title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Creator")
    table.add_column("Category")
    table.add_column("License")
    table.add_column("Tris", justify="right")
    table.add_column("Animated")
    for m in models:
        table.add_row(
            m.id,
            m.title,
            m.creator.name,
            category_label(m.category),
            m.license,
            str(m.tri_count),
            "yes" if m.animated else "",
        )
    return table


def _render(tool: str, payload: Any) -> None:
    if tool in {"search_models", "search_models_by_keyword"}:
        found = SearchResult.model_validate(payload)
        console.print(_models_table(found.results, title=f"{found.total} results"))
    elif tool == "get_list":
        lst = ModelList.model_validate(payload)
        console.print(_models_table(lst.models, title=f"{lst.title} by {lst.creator.name}"))
    elif tool == "get_user":
        user = User.model_validate(payload)
        console.print(f"[bold]{user.username}[/]  {user.bio}")
        for site, url in user.social_links.items():
            if url:
                console.print(f"  {site}: {url}")
        console.print(_models_table(user.models, title=f"{len(user.lists)} lists"))
    else:
        console.print(_models_table([Model.model_validate(payload)]))
