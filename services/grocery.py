"""
Grocery List Service

Functions for combining several recipes' ingredients into one shopping
list. Quantities are summed in base units and only within one base unit:
'flour' in grams and 'flour' in milliliters stay on separate lines.
"""

import logging
from decimal import Decimal
from itertools import groupby
from operator import itemgetter

from constants import NO_RECIPES_SELECTED, NO_VALID_RECIPES, REPORT_SEPARATOR
from models.records import AggregatedLine
from .parsing import format_display_quantity
from .units import display_label, from_base, to_base

logger = logging.getLogger(__name__)

TRACE_THRESHOLD = Decimal('0.01')


def _plural(word, count):
    return word if count == 1 else f"{word}s"


def _contributions(recipes_with_multipliers):
    """Yield (group key, ingredient line, scaled base quantity) per line."""
    for recipe, multiplier in recipes_with_multipliers:
        for line in recipe.ingredients:
            quantity = line.quantity if line.quantity is not None else Decimal(0)
            base_qty, base_unit = to_base(quantity, line.unit)
            key = (line.name.lower(), line.modifier or '', base_unit)
            yield key, line, base_qty * multiplier


def aggregate_ingredients(recipes_with_multipliers):
    """
    Group ingredient lines by (lowercase name, modifier, base unit) and sum.

    Args:
        recipes_with_multipliers: iterable of (RecipeRecord, int multiplier)

    Returns:
        List of AggregatedLine, one per group. The result does not depend
        on the order recipes are given in.
    """
    contributions = sorted(_contributions(recipes_with_multipliers), key=itemgetter(0))

    groups = []
    for (_, modifier, base_unit), members in groupby(contributions, key=itemgetter(0)):
        members = list(members)
        groups.append(AggregatedLine(
            # Same name in different casing: pick one deterministically
            name=min(line.name for _, line, _ in members),
            modifier=modifier,
            total_quantity=sum((qty for _, _, qty in members), Decimal(0)),
            base_unit=base_unit,
        ))
    return groups


def _display_order(group):
    return (group.name.lower(), group.modifier.lower(), group.base_unit)


def format_grocery_line(group):
    """Format one group as '- <qty> <unit> <name>[ (<modifier>)]'."""
    quantity, unit = from_base(group.total_quantity, group.base_unit)
    if quantity < TRACE_THRESHOLD:
        return f"- {group.display_name} (trace amount)"
    return f"- {format_display_quantity(quantity)} {display_label(unit)} {group.display_name}"


def render_grocery_list(groups, recipe_count):
    """Render grouped ingredients as the plain-text grocery report."""
    ordered = sorted(groups, key=_display_order)

    lines = [
        f"Grocery List for {recipe_count} {_plural('Recipe', recipe_count)}",
        REPORT_SEPARATOR,
        '',
    ]
    lines.extend(format_grocery_line(group) for group in ordered)
    lines.extend([
        '',
        REPORT_SEPARATOR,
        f"Total: {len(ordered)} {_plural('ingredient', len(ordered))} "
        f"from {recipe_count} {_plural('recipe', recipe_count)}",
    ])
    return '\n'.join(lines)


def _check_multiplier(recipe_id, multiplier):
    if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier < 1:
        raise ValueError(f"Multiplier for recipe {recipe_id} must be a positive integer, got {multiplier!r}")


def generate_grocery_list(selections, repository):
    """
    Generate a grocery list report from selected recipes.

    Args:
        selections: mapping of recipe id -> positive integer multiplier
        repository: object with fetch_by_id(recipe_id) -> RecipeRecord or None

    Returns:
        The report text. An empty selection or a selection where no id
        resolves returns an explanatory sentence instead.

    Raises:
        ValueError: if a multiplier is not a positive integer
    """
    if not selections:
        return NO_RECIPES_SELECTED

    for recipe_id, multiplier in selections.items():
        _check_multiplier(recipe_id, multiplier)

    resolved = []
    for recipe_id, multiplier in selections.items():
        recipe = repository.fetch_by_id(recipe_id)
        if recipe is None:
            logger.debug("Skipping unknown recipe id %s", recipe_id)
            continue
        resolved.append((recipe, multiplier))

    if not resolved:
        return NO_VALID_RECIPES

    groups = aggregate_ingredients(resolved)
    logger.info("Grocery list: %d ingredient(s) from %d recipe(s)", len(groups), len(resolved))
    return render_grocery_list(groups, len(resolved))
