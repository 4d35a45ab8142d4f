"""Catalog inspection commands."""

import typer

from schemadraft.cli.context import CLIContext
from schemadraft.cli.output import OutputFormatter


def collections_command(ctx: typer.Context) -> None:
    """List the collections in the catalog."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        catalog = cli_ctx.get_catalog()
        collections = catalog.list_collections()

        if cli_ctx.json_output:
            formatter.print_data(collections)
        else:
            table_data = []
            for name in collections:
                primary_key = catalog.get_primary_key_field(name)
                table_data.append(
                    {
                        "Name": name,
                        "Fields": len(catalog.list_fields(name)),
                        "Primary Key": (
                            f"{primary_key.field} ({primary_key.type})" if primary_key else ""
                        ),
                    }
                )

            formatter.print_table(
                f"Collections ({len(collections)} total)",
                table_data,
                ["Name", "Fields", "Primary Key"],
            )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
