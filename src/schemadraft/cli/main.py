"""SchemaDraft CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import schemadraft
from schemadraft.cli.context import CLIContext, get_database_url

# Create main Typer app
app = typer.Typer(
    name="schemadraft",
    help="SchemaDraft CLI - Plan the collections and fields a relational field needs",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    catalog: Annotated[
        str | None,
        typer.Option(
            "--catalog",
            "-c",
            help="JSON catalog snapshot file",
        ),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            envvar="SCHEMADRAFT_DATABASE_URL",
            help="Database URL to reflect the catalog from (any SQLAlchemy URL)",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log rule and scheduling activity to stderr",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    ctx.obj = CLIContext(
        catalog_path=catalog,
        database_url=get_database_url(database),
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"SchemaDraft v{schemadraft.__version__}")


# Register commands
from schemadraft.cli.commands import catalog, plan  # noqa: E402

app.command(name="plan")(plan.plan_command)
app.command(name="load")(plan.load_command)
app.command(name="collections")(catalog.collections_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
