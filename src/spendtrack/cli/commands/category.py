"""Category management commands."""

import click
from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService, DEFAULT_CUSTOM_COLOR, DEFAULT_CUSTOM_ICON
from spendtrack.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories in display order."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found. Run 'init-defaults' to create default categories.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        marker = "" if cat.is_default else " (custom)"
        click.echo(f"{cat.icon} {cat.name} (ID: {cat.id}, {cat.color}){marker}")


@category_group.command("create")
@click.argument("name")
@click.option("--color", default=DEFAULT_CUSTOM_COLOR, show_default=True, help="Hex color")
@click.option("--icon", default=DEFAULT_CUSTOM_ICON, help="Display icon")
@click.pass_context
def create_category(ctx, name: str, color: str, icon: str):
    """Create a new category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(name=name, color=color, icon=icon)
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("name")
@click.pass_context
def delete_category(ctx, name: str):
    """Delete a custom category by name."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category = service.require_category(name)
        service.delete_category(category.id)
        click.echo(f"Deleted category '{category.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete-custom")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_custom_categories(ctx, yes: bool):
    """Delete every custom (non-default) category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    if not yes:
        click.confirm("Delete all custom categories?", abort=True)

    deleted = service.delete_custom_categories()
    click.echo(f"Deleted {deleted} custom categories.")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
