"""Categorization rule commands."""

import click
from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService
from spendtrack.domain.entities import MatchType
from spendtrack.domain.errors import DomainError
from spendtrack.domain.rule import RuleService

MATCH_TYPE_CHOICE = click.Choice([m.value for m in MatchType], case_sensitive=False)


def _recategorized_message(count: int) -> str:
    return f"Recategorized {count} transaction(s)"


@click.group()
def rule_group():
    """Manage merchant categorization rules."""
    pass


@rule_group.command("list")
@click.option("--category", help="Only show rules for this category")
@click.option("--active-only", is_flag=True, help="Hide disabled rules")
@click.pass_context
def list_rules(ctx, category: str | None, active_only: bool):
    """List rules in evaluation order."""
    db = ctx.obj["db"]
    service = RuleService(db)
    category_service = CategoryService(db)

    category_id = None
    if category is not None:
        try:
            category_id = category_service.require_category(category).id
        except DomainError as e:
            handle_domain_error(ctx, e)

    rules = service.list_rules(active_only=active_only, category_id=category_id)
    if not rules:
        click.echo("No rules found.")
        return

    names = {cat.id: cat.name for cat in category_service.list_categories()}
    click.echo(f"\n{'ID':<6} {'Priority':<9} {'Match':<12} {'Pattern':<30} {'Category':<20} Active")
    click.echo("-" * 88)
    for r in rules:
        category_name = names.get(r.category_id, f"#{r.category_id}")
        active = "yes" if r.is_active else "no"
        click.echo(
            f"{r.id:<6} {r.priority:<9} {r.match_type.value:<12} {r.pattern:<30} {category_name:<20} {active}"
        )


@rule_group.command("add")
@click.argument("category")
@click.argument("pattern")
@click.option("--match-type", type=MATCH_TYPE_CHOICE, default=MatchType.CONTAINS.value, show_default=True)
@click.option("--priority", type=int, default=0, show_default=True, help="Higher priorities are evaluated first")
@click.option(
    "--recategorize/--no-recategorize",
    default=None,
    help="Move existing matching transactions into the category (asks if not given)",
)
@click.pass_context
def add_rule(ctx, category: str, pattern: str, match_type: str, priority: int, recategorize: bool | None):
    """Add a rule assigning CATEGORY to merchants matching PATTERN.

    When stored transactions already match the pattern, you are asked
    whether to move them into CATEGORY.

    Examples:
        spendtrack rule add Food ZOMATO
        spendtrack rule add Transport "^UBER" --match-type REGEX --priority 110
    """
    db = ctx.obj["db"]
    service = RuleService(db)
    category_service = CategoryService(db)

    try:
        target = category_service.require_category(category)
        if recategorize is None and pattern.strip():
            matching = service.count_matching(pattern.strip(), MatchType(match_type))
            recategorize = matching > 0 and click.confirm(
                f"{matching} transaction(s) match '{pattern}'. Move them to '{target.name}'?",
                default=True,
            )
        rule_id, updated = service.add_rule(
            category_id=target.id,
            pattern=pattern,
            match_type=MatchType(match_type),
            priority=priority,
            recategorize=bool(recategorize),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Added rule {rule_id}: {match_type} '{pattern}' -> {target.name}")
    if recategorize:
        click.echo(_recategorized_message(updated))


@rule_group.command("edit")
@click.argument("rule_id", type=int)
@click.option("--category", help="New target category")
@click.option("--pattern", help="New pattern")
@click.option("--match-type", type=MATCH_TYPE_CHOICE, help="New match type")
@click.option("--priority", type=int, help="New priority")
@click.option(
    "--recategorize/--no-recategorize",
    default=None,
    help="Move matching transactions when the category changes (asks if not given)",
)
@click.pass_context
def edit_rule(
    ctx,
    rule_id: int,
    category: str | None,
    pattern: str | None,
    match_type: str | None,
    priority: int | None,
    recategorize: bool | None,
):
    """Edit a rule.

    When the target category changes and stored transactions match the
    rule, you are asked whether to move them to the new category.
    """
    db = ctx.obj["db"]
    service = RuleService(db)
    category_service = CategoryService(db)

    try:
        category_id = None
        if category is not None:
            category_id = category_service.require_category(category).id

        affected = service.count_affected(
            rule_id,
            category_id,
            pattern=pattern,
            match_type=MatchType(match_type) if match_type is not None else None,
        )
        if affected > 0 and recategorize is None:
            recategorize = click.confirm(
                f"{affected} transaction(s) match this rule. Move them to '{category}'?",
                default=True,
            )

        updated = service.update_rule(
            rule_id,
            category_id=category_id,
            pattern=pattern,
            match_type=MatchType(match_type) if match_type is not None else None,
            priority=priority,
            recategorize=bool(recategorize) and affected > 0,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated rule {rule_id}")
    if updated:
        click.echo(_recategorized_message(updated))


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule and re-run categorization on existing transactions."""
    db = ctx.obj["db"]
    service = RuleService(db)

    try:
        updated = service.delete_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted rule {rule_id}")
    click.echo(_recategorized_message(updated))


@rule_group.command("toggle")
@click.argument("rule_id", type=int)
@click.pass_context
def toggle_rule(ctx, rule_id: int):
    """Enable or disable a rule."""
    db = ctx.obj["db"]
    service = RuleService(db)

    try:
        is_active = service.toggle_active(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Rule {rule_id} {'enabled' if is_active else 'disabled'}")


@rule_group.command("test")
@click.argument("merchant")
@click.argument("pattern")
@click.option("--match-type", type=MATCH_TYPE_CHOICE, default=MatchType.CONTAINS.value, show_default=True)
@click.pass_context
def test_rule(ctx, merchant: str, pattern: str, match_type: str):
    """Check whether PATTERN would match MERCHANT."""
    db = ctx.obj["db"]
    service = RuleService(db)

    if service.test_rule(merchant, pattern, MatchType(match_type)):
        click.echo(f"Match: '{pattern}' ({match_type}) matches '{merchant}'")
    else:
        click.echo(f"No match: '{pattern}' ({match_type}) does not match '{merchant}'")


@rule_group.command("count")
@click.argument("pattern")
@click.option("--match-type", type=MATCH_TYPE_CHOICE, default=MatchType.CONTAINS.value, show_default=True)
@click.pass_context
def count_matches(ctx, pattern: str, match_type: str):
    """Count stored transactions PATTERN would match."""
    db = ctx.obj["db"]
    service = RuleService(db)

    count = service.count_matching(pattern, MatchType(match_type))
    click.echo(f"{count} transaction(s) match '{pattern}' ({match_type})")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
