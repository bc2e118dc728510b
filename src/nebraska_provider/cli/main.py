"""
Main CLI entry point for the Nebraska provider.

This module provides the Click-based command-line interface: configuring
the provider against a server, printing schemas, and running resource and
data source operations from the shell.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from nebraska_provider import __version__
from nebraska_provider.cli.resource_commands import create_resource_group
from nebraska_provider.core.config import AUTH_MODES, load_config
from nebraska_provider.core.errors import ProviderError
from nebraska_provider.core.output import Outputter
from nebraska_provider.provider import DATA_SOURCES, RESOURCES, Provider, provider_schema

# Click context settings to enable -h as alias for --help
CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./nebraska.yaml, or $NEBRASKA_PROVIDER_CONFIG)",
)
@click.option(
    "--endpoint",
    default=None,
    help="Nebraska server URL (default: $NEBRASKA_ENDPOINT or http://localhost:8000)",
)
@click.option(
    "--auth-mode",
    type=click.Choice(AUTH_MODES),
    default=None,
    help="Auth mode of the server (default: $NEBRASKA_AUTH_MODE or noop)",
)
@click.option("--format", "output_format", type=click.Choice(["table", "json"]),
              default="table", help="Output format")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    endpoint: Optional[str],
    auth_mode: Optional[str],
    output_format: str,
    verbose: bool,
) -> None:
    """Nebraska provider - manage Nebraska update servers as code.

    Credentials are read from the configuration file or from the
    NEBRASKA_GH_TOKEN, NEBRASKA_USERNAME and NEBRASKA_PASSWORD variables.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["output"] = Outputter(output_format)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )

    try:
        ctx.obj["config"] = load_config(config, endpoint=endpoint, auth_mode=auth_mode)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def get_provider(ctx: click.Context) -> Provider:
    """Configure the provider once per invocation."""
    provider = ctx.obj.get("provider")
    if provider is not None:
        return provider

    provider = Provider()
    try:
        provider.configure(ctx.obj["config"])
    except ProviderError as e:
        ctx.obj["output"].diagnostic(e.diagnostic())
        ctx.exit(1)
    for warning in provider.api.warnings:
        ctx.obj["output"].diagnostic(warning)
    ctx.obj["provider"] = provider
    return provider


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Verify connectivity and authentication against the server."""
    provider = get_provider(ctx)
    output: Outputter = ctx.obj["output"]
    output.message(
        f"✓ Connected to {provider.api.endpoint} (auth_mode: {provider.api.auth_mode})",
        style="green",
    )


@cli.command()
@click.argument("type_name", required=False)
@click.option("--data-source", is_flag=True, help="Show the data source schema instead of the resource")
@click.pass_context
def schema(ctx: click.Context, type_name: Optional[str], data_source: bool) -> None:
    """Show the provider schema, or the schema of TYPE_NAME.

    TYPE_NAME is e.g. nebraska_channel (the nebraska_ prefix is optional).
    """
    output: Outputter = ctx.obj["output"]

    if not type_name:
        if output.output_format == "json":
            output.document(Provider.schema())
            return
        output.schema("provider", provider_schema())
        output.message(f"Resources: {', '.join(RESOURCES)}")
        output.message(f"Data sources: {', '.join(DATA_SOURCES)}")
        return

    if not type_name.startswith("nebraska_"):
        type_name = f"nebraska_{type_name}"

    registry = DATA_SOURCES if data_source else RESOURCES
    cls = registry.get(type_name)
    if cls is None:
        click.echo(f"Error: Unknown type: {type_name}", err=True)
        ctx.exit(1)

    kind = "data source" if data_source else "resource"
    if output.output_format == "table":
        output.message(cls.description)
    output.schema(f"{type_name} ({kind})", cls.schema())


for _type_name in RESOURCES:
    create_resource_group(cli, _type_name, get_provider)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
