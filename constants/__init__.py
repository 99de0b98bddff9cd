"""
Constants Package

Unit catalog, text format delimiters and validation limits.
"""

from .units import (
    BASE_WEIGHT_UNIT,
    BASE_VOLUME_UNIT,
    BASE_COUNT_UNIT,
    BASE_UNITS,
    BASE_UNIT_TAGS,
    DISPLAY_SCALE_UP,
    Dimension,
    Unit,
)

from .formats import (
    RECIPE_DELIMITER,
    INGREDIENTS_DELIMITER,
    INSTRUCTIONS_DELIMITER,
    NOTES_DELIMITER,
    END_RECIPE_DELIMITER,
    ALL_DELIMITERS,
    DATE_FORMATS,
    EXPORT_DATE_FORMAT,
    NO_RECIPES_SELECTED,
    NO_VALID_RECIPES,
    REPORT_SEPARATOR,
)

from .validation import (
    MAX_LENGTHS,
    MIN_COOKING_TIME,
    MIN_SERVINGS,
    MAX_COOKING_TIME,
    MAX_SERVINGS,
    MAX_QUANTITY,
    MIN_MULTIPLIER,
    MAX_MULTIPLIER,
)
