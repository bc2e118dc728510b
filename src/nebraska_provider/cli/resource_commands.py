from __future__ import annotations

"""Resource and data source commands, one group per Nebraska entity."""

from pathlib import Path
from typing import Any, Callable, Dict

import click
import yaml

from nebraska_provider.core.errors import ProviderError
from nebraska_provider.core.output import Outputter
from nebraska_provider.provider import DATA_SOURCES, RESOURCES, Provider

# Click context settings to enable -h as alias for --help
CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def load_attributes(path: Path) -> Dict[str, Any]:
    """Load resource attributes from a YAML (or JSON) file.

    Raises:
        click.BadParameter: If the file is not a mapping of attributes
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.BadParameter(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a mapping of attributes")
    return data


def create_resource_group(
    cli: click.Group, type_name: str, get_provider: Callable[[click.Context], Provider]
) -> click.Group:
    """Create and return the command group for one entity type.

    Args:
        cli: Parent CLI group to attach to
        type_name: Registered type, e.g. nebraska_channel
        get_provider: Returns the configured provider for a context

    Returns:
        The entity command group
    """
    resource_cls = RESOURCES[type_name]
    data_source_cls = DATA_SOURCES[type_name]
    entity = type_name.removeprefix("nebraska_")

    @cli.group(entity, context_settings=CONTEXT_SETTINGS, help=resource_cls.description)
    def group() -> None:
        pass

    def run(ctx: click.Context, title: str, operation: Callable[[Provider], Any]) -> None:
        output: Outputter = ctx.obj["output"]
        provider = get_provider(ctx)
        try:
            state = operation(provider)
        except ProviderError as e:
            output.diagnostic(e.diagnostic())
            ctx.exit(1)
        if state is not None:
            output.state(title, state.to_attributes())

    file_option = click.option(
        "--file",
        "-f",
        "attributes_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        required=True,
        help="YAML or JSON file with the resource attributes",
    )

    def show(ctx: click.Context, **lookup: Any) -> None:
        """Look up an existing object (data source read)."""
        run(
            ctx,
            f"{type_name} (data source)",
            lambda p: p.data_source(type_name).read(
                **data_source_cls.parse_lookup(lookup)
            ),
        )

    show.__doc__ = f"Look up an existing {entity} by {', '.join(data_source_cls.lookup_keys)}."
    show_command = click.pass_context(show)
    for key in reversed(data_source_cls.lookup_keys):
        show_command = click.option(f"--{key.replace('_', '-')}", key, required=True)(show_command)
    group.command("show")(show_command)

    @group.command("create")
    @file_option
    @click.pass_context
    def create(ctx: click.Context, attributes_file: Path) -> None:
        """Create the object described in FILE."""
        attributes = load_attributes(attributes_file)
        run(ctx, type_name, lambda p: p.resource(type_name).create(resource_cls.parse(attributes)))

    @group.command("read")
    @file_option
    @click.pass_context
    def read(ctx: click.Context, attributes_file: Path) -> None:
        """Refresh the object described in FILE from the server."""
        attributes = load_attributes(attributes_file)
        run(ctx, type_name, lambda p: p.resource(type_name).read(resource_cls.parse(attributes)))

    @group.command("update")
    @file_option
    @click.pass_context
    def update(ctx: click.Context, attributes_file: Path) -> None:
        """Update the object described in FILE; the file must carry its id."""
        attributes = load_attributes(attributes_file)
        run(ctx, type_name, lambda p: p.resource(type_name).update(resource_cls.parse(attributes)))

    @group.command("delete")
    @file_option
    @click.pass_context
    def delete(ctx: click.Context, attributes_file: Path) -> None:
        """Delete the object described in FILE; the file must carry its id."""
        attributes = load_attributes(attributes_file)
        run(ctx, type_name, lambda p: p.resource(type_name).delete(resource_cls.parse(attributes)))
        ctx.obj["output"].message(f"✓ Deleted {entity}", style="green")

    return group
