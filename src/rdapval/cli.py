"""CLI interface for rdapval using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from rdapval import __description__, __version__
from rdapval.config import OutputFormat, ValidatorConfig, load_config
from rdapval.models import ResponseMetadata, ResponseType, ServerType
from rdapval.schemas import generate_report_schema, save_report_schema, validate_report
from rdapval.validation import RDAPValidator, ResultCollector, ResultStatus

app = typer.Typer(
    name="rdapval",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

STATUS_STYLES = {
    ResultStatus.PASS: "green",
    ResultStatus.FAIL: "red",
    ResultStatus.INFO: "blue",
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"rdapval version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """rdapval - Conformance checker for RDAP server responses."""


def _setup_logging(config: ValidatorConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else LOG_LEVELS[config.logging.level]
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_config(config_path: Path | None) -> ValidatorConfig:
    try:
        return load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _check_choices(response_type: str, server_type: str, format: str | None) -> None:
    """Reject unknown option values before any work is done."""
    checks = [
        ("response type", response_type, [t.value for t in ResponseType]),
        ("server type", server_type, [t.value for t in ServerType]),
    ]
    if format is not None:
        checks.append(("format", format, [f.value for f in OutputFormat]))

    for label, value, valid in checks:
        if value not in valid:
            console.print(
                f"[red]Error:[/red] Invalid {label} '{escape(value)}'. "
                f"Must be one of: {', '.join(valid)}"
            )
            raise typer.Exit(1)


def _parse_headers(headers: list[str]) -> dict[str, str]:
    parsed = {}
    for header in headers:
        name, sep, value = header.partition(":")
        if not sep or not name.strip():
            console.print(f"[red]Error:[/red] Invalid header '{escape(header)}'. Expected NAME:VALUE")
            raise typer.Exit(1)
        parsed[name.strip()] = value.strip()
    return parsed


def _output_results(collector: ResultCollector, config: ValidatorConfig) -> None:
    output = config.output
    results = collector.filtered(errors_only=output.errors_only, show_info=output.show_info)

    if output.format == OutputFormat.JSON:
        data = collector.to_dict()
        data["results"] = [result.to_dict() for result in results]
        console.print(jsonlib.dumps(data, indent=2), markup=False, highlight=False, soft_wrap=True)
    elif output.format == OutputFormat.MARKDOWN:
        lines = [
            "# RDAP Validation Report",
            f"**Status:** {collector.status.value}",
            f"**Errors:** {collector.error_count}",
            "",
        ]
        if results:
            lines.append("## Results")
            for result in results:
                line = f"- **{result.status.value.upper()}** `{result.path}`: {result.message}"
                if result.reference:
                    line += f" ([ref]({result.reference}))"
                lines.append(line)
        for line in lines:
            console.print(line, markup=False, highlight=False, soft_wrap=True)
    else:  # table format
        status_color = STATUS_STYLES[collector.status]
        console.print(f"[{status_color}]Validation Status: {collector.status.value.upper()}[/{status_color}]")
        console.print(f"Errors: {collector.error_count}")

        if results:
            table = Table()
            table.add_column("Status", style="white")
            table.add_column("Path", style="cyan")
            table.add_column("Message", style="white")
            table.add_column("Reference", style="dim")

            for result in results:
                color = STATUS_STYLES[result.status]
                table.add_row(
                    f"[{color}]{result.status.value.upper()}[/{color}]",
                    escape(result.path),
                    escape(result.message),
                    escape(result.reference or ""),
                )

            console.print(table)
        elif output.errors_only:
            console.print("\n[green]No failures found![/green]")


def _apply_output_options(config: ValidatorConfig, format: str | None, errors_only: bool) -> None:
    if format is not None:
        config.output.format = OutputFormat(format)
    if errors_only:
        config.output.errors_only = True


@app.command()
def validate(
    url: Annotated[
        str,
        typer.Argument(help="RDAP URL to query, e.g. https://rdap.example/domain/example.com")
    ],
    response_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Expected response type (see 'rdapval types')")
    ] = "domain",
    server_type: Annotated[
        Optional[str],
        typer.Option("--server-type", "-s", help="Server type (default: from configuration, else vanilla)")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: table)")
    ] = None,
    errors_only: Annotated[
        bool,
        typer.Option("--errors-only", "-e", help="Only show failures and informational messages")
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .rdapval.json)")
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="HTTP timeout in seconds (default: 30)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Fetch an RDAP URL and validate the response."""
    validator_config = _load_config(config)
    server_type = server_type or validator_config.validation.default_server_type.value
    _check_choices(response_type, server_type, format)
    _apply_output_options(validator_config, format, errors_only)
    if timeout is not None:
        if timeout <= 0:
            console.print("[red]Error:[/red] --timeout must be > 0")
            raise typer.Exit(1)
        validator_config.fetch.timeout = timeout
    _setup_logging(validator_config, verbose)

    collector = ResultCollector()
    validator = RDAPValidator(validator_config, sink=collector)
    validator.create_default_profiles()
    validator.test_url(url, response_type, server_type)

    _output_results(collector, validator_config)
    raise typer.Exit(collector.exit_code)


@app.command()
def check(
    file: Annotated[
        Path,
        typer.Argument(help="File containing a saved RDAP response body")
    ],
    response_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Expected response type (see 'rdapval types')")
    ] = "domain",
    server_type: Annotated[
        Optional[str],
        typer.Option("--server-type", "-s", help="Server type (default: from configuration, else vanilla)")
    ] = None,
    url: Annotated[
        Optional[str],
        typer.Option("--url", "-u", help="URL the response was retrieved from")
    ] = None,
    status: Annotated[
        Optional[int],
        typer.Option("--status", help="HTTP status code of the response; enables protocol checks")
    ] = None,
    header: Annotated[
        Optional[list[str]],
        typer.Option("--header", "-H", help="Response header as NAME:VALUE (can be used multiple times)")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: table)")
    ] = None,
    errors_only: Annotated[
        bool,
        typer.Option("--errors-only", "-e", help="Only show failures and informational messages")
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .rdapval.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Validate a saved RDAP response body."""
    validator_config = _load_config(config)
    server_type = server_type or validator_config.validation.default_server_type.value
    _check_choices(response_type, server_type, format)
    _apply_output_options(validator_config, format, errors_only)
    headers = _parse_headers(header or [])
    _setup_logging(validator_config, verbose)

    if not file.is_file():
        console.print(f"[red]Error:[/red] File not found: {escape(str(file))}")
        raise typer.Exit(1)

    metadata = None
    if status is not None:
        metadata = ResponseMetadata(status, headers, url)
    elif headers:
        console.print("[yellow]Warning:[/yellow] --header is ignored without --status")

    collector = ResultCollector()
    validator = RDAPValidator(validator_config, sink=collector)
    validator.create_default_profiles()
    validator.validate_body(file.read_bytes(), response_type, server_type, metadata, url=url)

    _output_results(collector, validator_config)
    raise typer.Exit(collector.exit_code)


@app.command()
def types() -> None:
    """List the supported response and server types."""
    response_table = Table(title="Response types")
    response_table.add_column("Type", style="cyan")
    response_table.add_column("Description", style="white")
    for response_type in ResponseType:
        response_table.add_row(response_type.value, response_type.label)
    console.print(response_table)

    server_table = Table(title="Server types")
    server_table.add_column("Type", style="cyan")
    server_table.add_column("Description", style="white")
    for server_type in ServerType:
        server_table.add_row(server_type.value, escape(server_type.label))
    console.print(server_table)


@app.command()
def schema(
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Directory to write report.schema.json to (default: stdout)")
    ] = None,
    report: Annotated[
        Optional[Path],
        typer.Option("--validate", help="JSON report file to validate against the schema")
    ] = None,
) -> None:
    """Print the JSON report schema or validate a saved report."""
    if report is not None:
        try:
            with open(report, encoding="utf-8") as f:
                data = jsonlib.load(f)
        except (OSError, jsonlib.JSONDecodeError) as e:
            console.print(f"[red]Error:[/red] Cannot read report {escape(str(report))}: {escape(str(e))}")
            raise typer.Exit(1)

        errors = validate_report(data)
        if errors:
            console.print(f"[yellow]Found {len(errors)} schema violations:[/yellow]")
            for error in errors:
                console.print(f"  • {escape(error)}")
            raise typer.Exit(1)

        console.print("[green]Report is valid![/green]")
        return

    if out is not None:
        schema_file = save_report_schema(out)
        console.print(f"[green]Generated JSON schema:[/green] {escape(str(schema_file))}")
    else:
        console.print(
            jsonlib.dumps(generate_report_schema(), indent=2),
            markup=False, highlight=False, soft_wrap=True,
        )


if __name__ == "__main__":
    app()
