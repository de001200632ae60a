"""CLI entry point for Budget Meals."""

import json
from contextlib import ExitStack

import click

from . import __version__
from .config import DEFAULT_MEALS_COUNT, load_settings
from .errors import BudgetMealsError, NoViableMealsError
from .export import export_plan
from .filters import filter_recipes
from .llm import LLMClient
from .log import setup_logging
from .planner import FamilyParams, MealPlan, MealPlanner, parse_kid_ages
from .pricing import build_default_resolver
from .recipes import load_catalog
from .scaler import format_scale_info
from .sources import AIRecipeSource, CatalogRecipeSource, RecipeSource


def display_plan(plan: MealPlan) -> None:
    """Display the selected meals."""
    click.echo()
    click.echo("=" * 60)
    click.echo("MEAL PLAN")
    click.echo("=" * 60)

    for i, meal in enumerate(plan.meals, 1):
        click.echo(f"\n{i}. {meal.name}")
        click.echo(f"   Servings: {format_scale_info(meal)}")
        click.echo(
            f"   Cost: ${meal.pricing.total_cost:.2f} "
            f"(${meal.pricing.cost_per_serving:.2f}/serving)"
        )

    click.echo()
    click.echo("-" * 60)
    click.echo(f"Meals: {len(plan.meals)} | Total: ${plan.total_cost:.2f} of ${plan.budget:.2f}")
    click.echo("-" * 60)


def display_shopping_list(plan: MealPlan) -> None:
    """Display the categorized shopping list."""
    shopping = plan.shopping_list
    click.echo()
    click.echo("=" * 60)
    click.echo("SHOPPING LIST")
    click.echo("=" * 60)

    for group in shopping.categories.values():
        click.echo(f"\n{group.label} (${group.total:.2f})")
        for item in group.items:
            click.echo(f"  • {item.grocery_description}  ${item.price:.2f}")
            if item.bulk_option and item.bulk_option.recommended:
                click.echo(
                    f"    Bulk {item.bulk_option.bulk_size:g} {item.bulk_option.bulk_unit}: "
                    f"${item.bulk_option.bulk_price:.2f} (save ${item.bulk_option.savings:.2f})"
                )

    totals = shopping.totals
    click.echo()
    click.echo("-" * 60)
    click.echo(
        f"Items: {totals.total_items} | Total: ${totals.total_cost:.2f} | "
        f"Avg/item: ${totals.average_per_item:.2f}"
    )
    if totals.potential_savings > 0:
        click.echo(f"Potential bulk savings: ${totals.potential_savings:.2f}")
    click.echo("-" * 60)


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="budget-meals")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Budget Meals: weekly family meal plans within a grocery budget.

    Picks recipes that fit the budget, scales them to the family, and builds a
    consolidated, priced shopping list.
    """
    setup_logging("debug" if verbose else "warning")


# ============================================================================
# Planning Commands
# ============================================================================


@cli.command()
@click.option("--budget", "-b", type=float, required=True, help="Weekly grocery budget in dollars")
@click.option("--adults", "-a", type=int, default=2, show_default=True, help="Number of adults")
@click.option("--kids", "-k", type=int, default=0, show_default=True, help="Number of kids")
@click.option("--kid-ages", help="Comma-separated kid ages (e.g., '4,8')")
@click.option("--zip", "zip_code", help="5-digit ZIP code for regional pricing")
@click.option(
    "--meals", "-m", type=int, default=DEFAULT_MEALS_COUNT, show_default=True, help="Meals to plan"
)
@click.option("--allergies", help="Comma-separated allergies or dislikes (e.g., 'dairy, peanut')")
@click.option(
    "--catalog", type=click.Path(exists=True, dir_okay=False), help="Recipe catalog JSON file"
)
@click.option("--ai", "use_ai", is_flag=True, help="Generate recipes with the language model")
@click.option("--live-pricing/--offline-pricing", default=None, help="Look up live store prices")
@click.option(
    "--regenerate",
    "-r",
    type=int,
    multiple=True,
    help="Replace meal number N with an alternative (repeatable)",
)
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), help="Export to .json, .csv, or .md"
)
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
def plan(
    budget: float,
    adults: int,
    kids: int,
    kid_ages: str | None,
    zip_code: str | None,
    meals: int,
    allergies: str | None,
    catalog: str | None,
    use_ai: bool,
    live_pricing: bool | None,
    regenerate: tuple[int, ...],
    output: str | None,
    as_json: bool,
):
    """Plan a week of meals and build the shopping list."""
    settings = load_settings()
    if live_pricing is not None:
        settings.live_pricing = live_pricing

    try:
        params = FamilyParams(
            weekly_budget=budget,
            adults=adults,
            kids=kids,
            kid_ages=parse_kid_ages(kid_ages),
            zip_code=zip_code,
            meals_count=meals,
            allergies=allergies,
        )

        if use_ai and not settings.openai_api_key:
            click.echo("✗ --ai requires OPENAI_API_KEY to be set.", err=True)
            raise SystemExit(1)

        with ExitStack() as stack:
            source: RecipeSource
            if use_ai:
                llm = stack.enter_context(
                    LLMClient(
                        settings.openai_api_key, settings.llm_model, timeout=settings.http_timeout
                    )
                )
                source = AIRecipeSource(llm, meals_count=meals)
            else:
                source = CatalogRecipeSource(catalog or settings.catalog_path)

            resolver = stack.enter_context(build_default_resolver(settings))
            planner = MealPlanner(source, resolver)
            meal_plan = planner.plan_meals(params)

            for number in regenerate:
                replacement = planner.regenerate_meal(number - 1)
                if replacement is None:
                    click.echo(f"⚠️  Could not regenerate meal {number}", err=True)
                else:
                    click.echo(f"↻ Meal {number} is now {replacement.name}", err=True)

        if meal_plan.is_empty:
            raise NoViableMealsError("; ".join(meal_plan.warnings) or "No meals found")

    except BudgetMealsError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if as_json:
        click.echo(json.dumps(meal_plan.to_dict(), indent=2, ensure_ascii=False))
    else:
        display_plan(meal_plan)
        display_shopping_list(meal_plan)
        for warning in meal_plan.warnings:
            click.echo(f"⚠️  {warning}")

    if output:
        try:
            used_format = export_plan(meal_plan, output)
        except (ValueError, OSError) as e:
            click.echo(f"✗ Export failed: {e}", err=True)
            raise SystemExit(1) from None
        click.echo(f"✓ Exported {used_format.upper()} to {output}", err=as_json)


# ============================================================================
# Pricing & Catalog Commands
# ============================================================================


@cli.command()
@click.argument("name")
@click.argument("amount", type=float)
@click.argument("unit")
@click.option("--location", "-l", help="ZIP code or state for regional pricing")
@click.option("--live-pricing/--offline-pricing", default=None, help="Look up live store prices")
def price(name: str, amount: float, unit: str, location: str | None, live_pricing: bool | None):
    """Price AMOUNT UNIT of an ingredient NAME."""
    settings = load_settings()
    if live_pricing is not None:
        settings.live_pricing = live_pricing

    if amount <= 0:
        click.echo("✗ Amount must be positive.", err=True)
        raise SystemExit(1)

    with build_default_resolver(settings) as resolver:
        quote = resolver.price(name, amount, unit, location)

    click.echo(f"{amount:g} {unit} {name}: ${quote.price:.2f}")
    click.echo(f"  Source: {quote.source} ({quote.confidence})")
    if quote.store:
        click.echo(f"  Store: {quote.store}")
    if quote.product:
        click.echo(f"  Product: {quote.product}")


@cli.command("catalog")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Recipe catalog JSON file",
)
@click.option("--allergies", help="Hide recipes matching these allergies")
def catalog_cmd(catalog_path: str | None, allergies: str | None):
    """List recipes in the catalog."""
    settings = load_settings()
    try:
        recipes = load_catalog(catalog_path or settings.catalog_path)
    except BudgetMealsError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    shown = filter_recipes(recipes, allergies)
    for recipe in shown:
        tags = f" [{', '.join(recipe.tags)}]" if recipe.tags else ""
        click.echo(
            f"{recipe.id:<28} {recipe.name} "
            f"({recipe.servings} servings, {recipe.difficulty}){tags}"
        )

    click.echo(f"\n{len(shown)} of {len(recipes)} recipes")


# ============================================================================
# Entry Point
# ============================================================================


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
