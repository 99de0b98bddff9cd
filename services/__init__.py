"""
Services Package

Business logic modules for the recipe application.
"""

from .parsing import (
    format_decimal,
    format_display_quantity,
    normalize_fractions,
    parse_ingredient_line,
    parse_quantity,
    split_modifier,
)

from .units import (
    base_unit_for,
    display_label,
    from_base,
    resolve_alias,
    to_base,
)

from .codec import (
    RecipeParseError,
    decode_recipes,
    encode_recipe,
    encode_recipes,
)

from .grocery import (
    aggregate_ingredients,
    generate_grocery_list,
    render_grocery_list,
)

from .repository import SqlRecipeRepository

__all__ = [
    # Parsing
    'format_decimal',
    'format_display_quantity',
    'normalize_fractions',
    'parse_ingredient_line',
    'parse_quantity',
    'split_modifier',
    # Units
    'base_unit_for',
    'display_label',
    'from_base',
    'resolve_alias',
    'to_base',
    # Codec
    'RecipeParseError',
    'decode_recipes',
    'encode_recipe',
    'encode_recipes',
    # Grocery list
    'aggregate_ingredients',
    'generate_grocery_list',
    'render_grocery_list',
    # Persistence
    'SqlRecipeRepository',
]
