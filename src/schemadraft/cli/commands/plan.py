"""Field planning commands."""

from typing import Annotated

import typer

from schemadraft.cli.context import CLIContext
from schemadraft.cli.output import OutputFormatter
from schemadraft.cli.parsing import parse_assignment
from schemadraft.engine.session import NEW_FIELD, FieldSession, initialize, teardown


def plan_command(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection the field is added to")],
    category: Annotated[
        str,
        typer.Argument(help="Field category (standard, m2o, o2m, m2m, m2a, translations, ...)"),
    ],
    field: Annotated[
        str | None,
        typer.Option("--field", "-f", help="Name of the new field"),
    ] = None,
    assignments: Annotated[
        list[str] | None,
        typer.Option(
            "--set",
            "-s",
            help="State assignment path=value, applied in order (repeatable)",
        ),
    ] = None,
    auto_fill: Annotated[
        bool,
        typer.Option("--auto-fill/--no-auto-fill", help="Derive junction names automatically"),
    ] = True,
    reverse: Annotated[
        str | None,
        typer.Option("--reverse", "-r", help="Reverse o2m alias for an m2o field"),
    ] = None,
) -> None:
    """Plan a new field and show every collection and field it needs.

    Examples:

        schemadraft --catalog schema.json plan articles m2m --field tags

        schemadraft plan articles translations

        schemadraft plan pages m2a --field blocks \\
            --set 'relations.1.meta.one_allowed_collections=["text","image"]'

        schemadraft plan posts m2o --field author \\
            --set relations.0.related_collection=users --reverse posts
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)
    session: FieldSession | None = None

    try:
        parsed = [parse_assignment(item) for item in assignments or []]

        session = initialize(
            cli_ctx.get_catalog(),
            collection,
            NEW_FIELD,
            category,
            settings=cli_ctx.get_settings(),
        )
        if not auto_fill:
            session.set_auto_fill(False)
        if field:
            session.set("field.field", field)
        for path, value in parsed:
            session.set(path, value)
        if reverse:
            session.set_reverse_field(reverse)
        session.settle()

        formatter.print_session(session, session.validate())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        teardown(session)


def load_command(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name")],
    field: Annotated[str, typer.Argument(help="Existing field name")],
    category: Annotated[str, typer.Argument(help="Field category")],
) -> None:
    """Load an existing field and show its relations.

    Examples:

        schemadraft --database sqlite:///app.db load posts author m2o
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)
    session: FieldSession | None = None

    try:
        session = initialize(
            cli_ctx.get_catalog(),
            collection,
            field,
            category,
            settings=cli_ctx.get_settings(),
        )
        formatter.print_session(session, session.validate())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        teardown(session)
