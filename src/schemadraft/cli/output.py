"""Output formatting for CLI commands."""

import json
from pprint import pprint
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from schemadraft.core.types import ValidationIssue
from schemadraft.engine.session import FieldSession
from schemadraft.exceptions import SchemaDraftError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print data as Rich table or JSON array.

        Args:
            title: Table title
            data: List of row dictionaries
            columns: Column names to display
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            table = Table(title=title, show_header=True, header_style="bold magenta")
            for col in columns:
                table.add_column(col)
            for row in data:
                table.add_row(*[str(row.get(col, "")) for col in columns])
            console.print(table)

    def print_session(self, session: FieldSession, issues: list[ValidationIssue]) -> None:
        """Print a session's field, relations and everything it would create.

        Args:
            session: Open field session
            issues: Validation result to report alongside
        """
        if self.json_mode:
            output = session.to_dict()
            output["issues"] = [issue.model_dump() for issue in issues]
            print(json.dumps(output, default=str, indent=2))
            return

        state = session.state
        field = state.field
        console.print(f"\n[bold]Field:[/bold] {session.collection}.{field.field or '?'}")
        console.print(f"Category: {session.category}")
        console.print(f"Type: {field.type or 'alias'}")
        if field.meta.special:
            console.print(f"Special: {', '.join(field.meta.special)}")
        if field.meta.interface:
            console.print(f"Interface: {field.meta.interface}")

        if state.relations:
            console.print(f"\n[bold]Relations ({len(state.relations)}):[/bold]")
            rel_table = Table(show_header=True, header_style="bold cyan")
            rel_table.add_column("Collection")
            rel_table.add_column("Field")
            rel_table.add_column("Related Collection")
            rel_table.add_column("One Field")
            rel_table.add_column("Junction Field")
            for relation in state.relations:
                rel_table.add_row(
                    relation.collection or "",
                    relation.field or "",
                    relation.related_collection or "",
                    relation.meta.one_field or "",
                    relation.meta.junction_field or "",
                )
            console.print(rel_table)

        generated = session.generation_info
        if generated:
            console.print(f"\n[bold]Will create ({len(generated)}):[/bold]")
            gen_table = Table(show_header=True, header_style="bold cyan")
            gen_table.add_column("Kind")
            gen_table.add_column("Name")
            for item in generated:
                gen_table.add_row(item.kind, item.name)
            console.print(gen_table)

        for collection, rows in state.new_rows.items():
            console.print(f"\n[bold]Seed rows for {collection} ({len(rows)}):[/bold]")
            for row in rows:
                console.print(f"  {row}", style="dim")

        if issues:
            console.print(f"\n[bold yellow]Issues ({len(issues)}):[/bold yellow]")
            for issue in issues:
                console.print(f"  {issue.path or '-'}: {issue.message}", style="yellow")
        else:
            console.print("\n✓ Ready to create", style="green")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, SchemaDraftError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            # For SchemaDraftError, include context if available
            if isinstance(error, SchemaDraftError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)

    def print_data(self, data: Any) -> None:
        """Print generic data (dict, list, etc.).

        Args:
            data: Data to print
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            pprint(data)
