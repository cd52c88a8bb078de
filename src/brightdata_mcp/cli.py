"""Command-line access to the Bright Data tools."""

from __future__ import annotations

import asyncio
import base64
import json
from pathlib import Path
from typing import Any

import typer

from brightdata_mcp.config import Settings, configure_logging
from brightdata_mcp.core import AuthContext, Dispatcher, build_dispatcher
from brightdata_mcp.errors import ConfigError, DispatchError
from brightdata_mcp.models.envelope import ToolResult

app = typer.Typer(
    name="brightdata-cli",
    help="Bright Data web-data tools from the command line.",
    no_args_is_help=True,
    add_completion=False,
)


def get_dispatcher() -> tuple[Dispatcher, AuthContext]:
    """Build the dispatcher from the environment; the CLI presents the configured token."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2) from e
    configure_logging("WARNING" if settings.log_level == "INFO" else settings.log_level)
    return build_dispatcher(settings), AuthContext(token=settings.auth_token)


def run_tool(tool_name: str, parameters: dict[str, Any], raw: bool = False) -> ToolResult:
    """Dispatch a tool, print its content and exit non-zero on any error."""
    dispatcher, auth = get_dispatcher()
    try:
        result = asyncio.run(dispatcher.dispatch(tool_name, parameters, auth))
    except DispatchError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    if result.is_error:
        for text in result.texts():
            typer.echo(text, err=True)
        raise typer.Exit(code=1)

    if raw and result.raw_value is not None:
        typer.echo(json.dumps(result.raw_value, indent=2, ensure_ascii=False))
    else:
        for text in result.texts():
            typer.echo(text)
    return result


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    engine: str = typer.Option("google", "--engine", "-e", help="google, bing, yandex or duckduckgo"),
    cursor: str = typer.Option("0", "--cursor", "-c", help="Results page number"),
    raw: bool = typer.Option(False, "--raw", help="Print the raw provider response as JSON"),
) -> None:
    """Search the web."""
    run_tool("search_web", {"query": query, "engine": engine, "cursor": cursor}, raw)


@app.command()
def scrape(
    url: str = typer.Argument(..., help="URL to scrape"),
    output_format: str = typer.Option("markdown", "--format", "-f", help="markdown or raw"),
    raw: bool = typer.Option(False, "--raw", help="Print the raw provider response as JSON"),
) -> None:
    """Scrape a webpage."""
    run_tool("scrape_website", {"url": url, "format": output_format}, raw)


@app.command()
def extract(
    url: str = typer.Argument(..., help="URL to extract data from"),
    schema: str | None = typer.Option(
        None, "--schema", "-s", help='JSON object of field name to CSS selector, e.g. {"price": ".price"}'
    ),
    output_format: str = typer.Option("json", "--format", "-f", help="json or markdown"),
) -> None:
    """Extract structured data from a webpage."""
    parameters: dict[str, Any] = {"url": url, "format": output_format}
    if schema:
        try:
            parameters["schema"] = json.loads(schema)
        except json.JSONDecodeError as e:
            typer.echo(f"Error: --schema is not valid JSON: {e}", err=True)
            raise typer.Exit(code=1) from e
    run_tool("extract_data", parameters)


@app.command()
def screenshot(
    url: str = typer.Argument(..., help="URL to screenshot"),
    width: int = typer.Option(1280, "--width", "-w", help="Viewport width (320-1920)"),
    height: int = typer.Option(720, "--height", "-h", help="Viewport height (240-1080)"),
    full_page: bool = typer.Option(False, "--full-page", help="Capture full page height"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the image to this file"),
) -> None:
    """Take a screenshot of a webpage."""
    result = run_tool(
        "take_screenshot",
        {"url": url, "width": width, "height": height, "full_page": full_page},
    )
    if output is not None and isinstance(result.raw_value, dict):
        output.write_bytes(base64.b64decode(result.raw_value["screenshot_data"]))
        typer.echo(f"Saved screenshot to {output}")


@app.command()
def zones(
    query: str = typer.Argument(..., help="Search query"),
    zone: list[str] = typer.Option(..., "--zone", "-z", help="Zone name, repeat for several"),
    engine: str = typer.Option("google", "--engine", "-e", help="google, bing, yandex or duckduckgo"),
) -> None:
    """Run one search across several zones."""
    run_tool("multi_zone_search", {"query": query, "zones": zone, "engine": engine})


@app.command("tools")
def list_tools() -> None:
    """List the registered tools."""
    dispatcher, _ = get_dispatcher()
    for descriptor in dispatcher.describe_tools():
        typer.echo(f"{descriptor.name}\t{descriptor.description}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
