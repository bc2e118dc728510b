from __future__ import annotations

"""Centralized output handling for CLI commands."""

import json
from typing import Any, Mapping

from rich.console import Console
from rich.table import Table
from rich.text import Text

from nebraska_provider.core.errors import Diagnostic, Severity
from nebraska_provider.resources.schema import Attribute


class Outputter:
    """Renders resource states, schemas and diagnostics.

    Table output goes through rich; json output is plain so it can be piped.
    """

    def __init__(self, output_format: str = "table", console: Console | None = None):
        """Initialize outputter.

        Args:
            output_format: "table" or "json"
            console: Console to print to (stdout by default)
        """
        self.output_format = output_format
        self.console = console or Console()
        self.err_console = Console(stderr=True)

    def state(self, title: str, attributes: Mapping[str, Any]) -> None:
        """Show the attributes of a single resource state."""
        if self.output_format == "json":
            self.console.print_json(json.dumps(dict(attributes)))
            return

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Attribute", style="cyan")
        table.add_column("Value")
        for name, value in attributes.items():
            table.add_row(name, Text(self._format_value(value)))
        self.console.print(table)

    def schema(self, title: str, attributes: Mapping[str, Attribute]) -> None:
        """Show a resource or data source schema."""
        if self.output_format == "json":
            self.console.print_json(
                json.dumps({name: attr.to_dict() for name, attr in attributes.items()})
            )
            return

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Attribute", style="cyan")
        table.add_column("Type")
        table.add_column("Mode")
        table.add_column("Description")
        for name, attr in attributes.items():
            table.add_row(name, attr.type, self._mode(attr), attr.full_description)
        self.console.print(table)

    def document(self, data: Mapping[str, Any]) -> None:
        """Print a JSON document regardless of the output format."""
        self.console.print_json(json.dumps(data))

    def message(self, text: str, style: str | None = None) -> None:
        self.console.print(text, style=style)

    def diagnostic(self, diag: Diagnostic) -> None:
        """Show a diagnostic on stderr."""
        if diag.severity == Severity.WARNING:
            self.err_console.print(f"Warning: {diag.summary}: {diag.detail}", style="yellow", markup=False)
            return
        self.err_console.print(f"Error: {diag.summary}: {diag.detail}", style="red", markup=False)

    @staticmethod
    def _mode(attr: Attribute) -> str:
        flags = []
        if attr.required:
            flags.append("required")
        elif attr.optional:
            flags.append("optional")
        if attr.computed:
            flags.append("computed")
        if attr.force_new:
            flags.append("force new")
        if attr.sensitive:
            flags.append("sensitive")
        return ", ".join(flags)

    @staticmethod
    def _format_value(value: Any) -> str:
        if value is None:
            return "-"
        if isinstance(value, (list, dict)):
            return json.dumps(value)
        return str(value)
