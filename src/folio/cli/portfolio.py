"""
CLI: ``folio portfolio`` - project management from the terminal.

The CLI has no login; ``--user`` names the owner and ``--paid`` grants the
pro entitlement for the invocation.
"""

from __future__ import annotations

import typer

from folio.cli.utils import (
    console,
    fail_if_error,
    make_context,
    output_result,
    print_dict,
    print_table,
)

app = typer.Typer(no_args_is_help=True)

_PROJECT_COLUMNS = ["id", "title", "slug", "visibility", "is_published", "template_key", "updated_at"]

UserOpt = typer.Option(..., "--user", "-u", help="Owner user id")
PaidOpt = typer.Option(False, "--paid", help="Caller holds the pro entitlement")
DatabaseOpt = typer.Option(None, "--database", "-d", help="Database path")
JsonOpt = typer.Option(False, "--json", help="JSON output")


@app.command("list")
def list_projects(
    user: str = UserOpt,
    database: str | None = DatabaseOpt,
    json_out: bool = JsonOpt,
) -> None:
    """List the user's portfolios."""
    from folio.ops.projects import list_projects as _list

    ctx, _ = make_context(database, user=user)
    output_result(_list(ctx), as_json=json_out, title="Portfolios", columns=_PROJECT_COLUMNS)


@app.command("create")
def create_project(
    title: str = typer.Argument(..., help="Portfolio title"),
    template: str = typer.Option("classic", "--template", "-t", help="Template key, see `folio portfolio templates`"),
    user: str = UserOpt,
    paid: bool = PaidOpt,
    database: str | None = DatabaseOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Create a portfolio with the default sections."""
    from folio.ops.projects import create_project as _create
    from folio.ops.requests import CreateProjectRequest

    ctx, _ = make_context(database, user=user, paid=paid)
    result = _create(ctx, CreateProjectRequest(title=title, template_key=template))
    if json_out:
        output_result(result, as_json=True)
        return
    fail_if_error(result)
    project = result.data.project
    console.print(f"[green]Created[/green] {project.title} ([cyan]{project.slug}[/cyan]) id={project.id}")


@app.command("show")
def show_project(
    project_id: str = typer.Argument(..., help="Portfolio id"),
    user: str = UserOpt,
    paid: bool = PaidOpt,
    database: str | None = DatabaseOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Show a portfolio with its sections."""
    from folio.ops.projects import get_project

    ctx, _ = make_context(database, user=user, paid=paid)
    result = get_project(ctx, project_id)
    if json_out:
        output_result(result, as_json=True)
        return
    fail_if_error(result)
    detail = result.data
    print_dict({c: getattr(detail.project, c) for c in _PROJECT_COLUMNS}, title=detail.project.title)
    print_table(
        [
            {"order": s.order, "key": s.key, "label": s.label, "enabled": s.is_enabled, "items": len(s.items)}
            for s in detail.sections
        ],
        title="Sections",
    )


@app.command("update")
def update_project(
    project_id: str = typer.Argument(..., help="Portfolio id"),
    title: str | None = typer.Option(None, "--title"),
    slug: str | None = typer.Option(None, "--slug"),
    visibility: str | None = typer.Option(None, "--visibility", help="public, unlisted, private"),
    template: str | None = typer.Option(None, "--template", "-t"),
    user: str = UserOpt,
    paid: bool = PaidOpt,
    database: str | None = DatabaseOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Change title, slug, visibility or template."""
    from folio.ops.projects import update_project as _update
    from folio.ops.requests import UpdateProjectRequest

    ctx, _ = make_context(database, user=user, paid=paid)
    request = UpdateProjectRequest(
        project_id=project_id,
        title=title,
        slug=slug,
        visibility=visibility,
        template_key=template,
    )
    output_result(_update(ctx, request), as_json=json_out, title="Updated Portfolio")


@app.command("publish")
def publish_project(
    project_id: str = typer.Argument(..., help="Portfolio id"),
    unpublish: bool = typer.Option(False, "--unpublish", help="Take the portfolio offline"),
    user: str = UserOpt,
    paid: bool = PaidOpt,
    database: str | None = DatabaseOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Publish (or unpublish) a portfolio."""
    from folio.ops.projects import set_publish

    ctx, _ = make_context(database, user=user, paid=paid)
    output_result(set_publish(ctx, project_id, not unpublish), as_json=json_out, title="Publish State")


@app.command("delete")
def delete_project(
    project_id: str = typer.Argument(..., help="Portfolio id"),
    user: str = UserOpt,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    database: str | None = DatabaseOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Delete a portfolio and all of its content."""
    from folio.ops.projects import delete_project as _delete

    if not yes:
        typer.confirm(f"Delete portfolio {project_id}?", abort=True)
    ctx, _ = make_context(database, user=user)
    output_result(_delete(ctx, project_id), as_json=json_out, title="Deleted")


@app.command("export")
def export_project(
    project_id: str = typer.Argument(..., help="Portfolio id"),
    user: str = UserOpt,
    paid: bool = PaidOpt,
    database: str | None = DatabaseOpt,
) -> None:
    """Print the public document JSON (drafts included)."""
    from folio.content.public import render_public_json
    from folio.ops.projects import preview_project

    ctx, _ = make_context(database, user=user, paid=paid)
    result = preview_project(ctx, project_id)
    fail_if_error(result)
    typer.echo(render_public_json(result.data))


@app.command("public")
def public_document(
    slug: str = typer.Argument(..., help="Portfolio slug"),
    database: str | None = DatabaseOpt,
) -> None:
    """Print the public document of a published portfolio, as anyone would see it."""
    from folio.content.public import render_public_json
    from folio.ops.projects import get_public_document

    ctx, _ = make_context(database)
    result = get_public_document(ctx, slug)
    fail_if_error(result)
    typer.echo(render_public_json(result.data))


@app.command("templates")
def list_templates(json_out: bool = JsonOpt) -> None:
    """List the rendering templates and the tier each one needs."""
    from folio.content.constants import TEMPLATE_LABELS, TEMPLATE_TIERS

    rows = [
        {"key": key.value, "label": label, "tier": TEMPLATE_TIERS[key].value}
        for key, label in TEMPLATE_LABELS.items()
    ]
    if json_out:
        console.print_json(data=rows)
        return
    print_table(rows, title="Templates")
