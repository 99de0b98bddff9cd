"""
Unit Constants and Conversion Tables

Contains the closed unit catalog: every unit the recipe format understands,
tagged with its dimension, its conversion factor to the dimension's base
unit, the alias tokens that name it, and its short display label.
"""

from decimal import Decimal
from enum import Enum


# Base unit tags as stored on recipe ingredient lines
BASE_WEIGHT_UNIT = 'g'
BASE_VOLUME_UNIT = 'ml'
BASE_COUNT_UNIT = 'pieces'


class Dimension(Enum):
    """Measurement dimension. Units never convert across dimensions."""
    WEIGHT = BASE_WEIGHT_UNIT
    VOLUME = BASE_VOLUME_UNIT
    COUNT = BASE_COUNT_UNIT

    @property
    def base_tag(self):
        return self.value


class Unit(Enum):
    """
    One member per supported unit.

    Each value is (dimension, factor to base, aliases, display label).
    Aliases are matched lowercase with inner whitespace collapsed.
    """
    # Weight: base = grams
    GRAMS = (Dimension.WEIGHT, '1', ('g', 'gram', 'grams'), 'g')
    KILOGRAMS = (Dimension.WEIGHT, '1000', ('kg', 'kilogram', 'kilograms'), 'kg')
    OUNCES = (Dimension.WEIGHT, '28.3495', ('oz', 'ounce', 'ounces'), 'oz')
    POUNDS = (Dimension.WEIGHT, '453.592', ('lb', 'lbs', 'pound', 'pounds'), 'lb')
    # Volume: base = milliliters
    MILLILITERS = (Dimension.VOLUME, '1', ('ml', 'milliliter', 'milliliters'), 'ml')
    LITERS = (Dimension.VOLUME, '1000', ('l', 'liter', 'liters'), 'L')
    CUPS = (Dimension.VOLUME, '236.588', ('cup', 'cups'), 'cup(s)')
    TABLESPOONS = (Dimension.VOLUME, '14.7868', ('tbsp', 'tablespoon', 'tablespoons'), 'tbsp')
    TEASPOONS = (Dimension.VOLUME, '4.92892', ('tsp', 'teaspoon', 'teaspoons'), 'tsp')
    FLUID_OUNCES = (Dimension.VOLUME, '29.5735', ('fl oz', 'floz', 'fluidounce', 'fluidounces'), 'fl oz')
    # Count: base = pieces
    PIECES = (Dimension.COUNT, '1', ('piece', 'pieces', 'pcs', 'pc'), 'piece(s)')

    def __init__(self, dimension, factor, aliases, label):
        self.dimension = dimension
        self.factor = Decimal(factor)
        self.aliases = aliases
        self.label = label

    @property
    def is_base(self):
        return self.factor == 1


# Base unit of each dimension
BASE_UNITS = {
    Dimension.WEIGHT: Unit.GRAMS,
    Dimension.VOLUME: Unit.MILLILITERS,
    Dimension.COUNT: Unit.PIECES,
}

# Base tag -> base unit (tags are what recipe ingredient rows store)
BASE_UNIT_TAGS = {dimension.base_tag: unit for dimension, unit in BASE_UNITS.items()}

# Display switches to the larger unit at or above this many base units
DISPLAY_SCALE_UP = {
    Dimension.WEIGHT: (Decimal('1000'), Unit.KILOGRAMS),
    Dimension.VOLUME: (Decimal('1000'), Unit.LITERS),
}
