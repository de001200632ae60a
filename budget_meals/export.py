"""Meal plan and shopping list export in various formats."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .planner import MealPlan

CSV_HEADER = [
    "Category",
    "Item",
    "Amount",
    "Unit",
    "Buy",
    "Price",
    "Bulk Available",
    "Bulk Price",
    "Used In Meals",
]


def export_to_json(plan: MealPlan, filepath: str | Path) -> None:
    """
    Export a meal plan and its shopping list to JSON.

    Args:
        plan: The meal plan
        filepath: Output file path
    """
    data: dict[str, Any] = {
        "exported_at": datetime.now().isoformat(),
        **plan.to_dict(),
    }

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def export_to_csv(plan: MealPlan, filepath: str | Path) -> None:
    """Export the shopping list to CSV, one row per item."""
    with open(filepath, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for group in plan.shopping_list.categories.values():
            for item in group.items:
                bulk = item.bulk_option
                writer.writerow(
                    [
                        group.label,
                        item.name,
                        item.amount,
                        item.unit,
                        item.grocery_description,
                        f"{item.price:.2f}",
                        "Yes" if bulk else "No",
                        f"{bulk.bulk_price:.2f}" if bulk else "",
                        "; ".join(item.used_in_meals),
                    ]
                )


def export_to_markdown(plan: MealPlan, filepath: str | Path) -> None:
    """Export a printable meal plan and shopping list as Markdown."""
    shopping = plan.shopping_list
    lines = [
        "# Family Budget Meals",
        "",
        f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*",
        f"*Location: {shopping.location or 'National Average'}*",
        "",
        "## Meals",
        "",
    ]

    for i, meal in enumerate(plan.meals, 1):
        lines.append(
            f"{i}. **{meal.name}** ({meal.scaled_servings} servings, "
            f"${meal.pricing.total_cost:.2f})"
        )

    lines.extend(["", "## Shopping List", ""])
    for group in shopping.categories.values():
        lines.append(f"### {group.label}")
        lines.append("")
        for item in group.items:
            line = f"- [ ] {item.grocery_description}: ${item.price:.2f}"
            if item.bulk_option and item.bulk_option.recommended:
                line += f" (Bulk: ${item.bulk_option.bulk_price:.2f})"
            lines.append(line)
        lines.append("")

    totals = shopping.totals
    lines.extend(
        [
            "---",
            "",
            f"**Estimated Total:** ${totals.total_cost:.2f} "
            f"(budget ${plan.budget:.2f})",
        ]
    )
    if totals.potential_savings > 0:
        lines.append(f"**Potential Bulk Savings:** ${totals.potential_savings:.2f}")
    for warning in plan.warnings:
        lines.append(f"> ⚠ {warning}")

    with open(filepath, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


def export_plan(plan: MealPlan, filepath: str | Path) -> str:
    """
    Export a plan, choosing the format from the file extension.

    Args:
        plan: The meal plan
        filepath: Output path ending in .json, .csv, or .md

    Returns:
        The format used for export

    Raises:
        ValueError: If the extension is not supported
    """
    path = Path(filepath)
    format_map = {
        ".json": "json",
        ".csv": "csv",
        ".md": "md",
        ".markdown": "md",
    }
    format = format_map.get(path.suffix.lower())

    if format == "json":
        export_to_json(plan, path)
    elif format == "csv":
        export_to_csv(plan, path)
    elif format == "md":
        export_to_markdown(plan, path)
    else:
        raise ValueError(
            f"Unsupported export format: {path.suffix or '(none)'} (use .json, .csv, or .md)"
        )

    return format
