"""
Validation Constants

Contains limits and whitelist values for validating imported recipe data
and uploads.
"""

# Maximum field lengths
MAX_LENGTHS = {
    'ingredient_name': 200,
    'recipe_name': 200,
    'modifier': 100,
    'tags': 500,
    'instructions': 50000,
    'notes': 20000,
    'ingredient_text': 500,
}

# Smallest valid values for required numeric recipe fields
MIN_COOKING_TIME = 1
MIN_SERVINGS = 1

# Grocery list multiplier bounds (form input is clamped to these)
MIN_MULTIPLIER = 1
MAX_MULTIPLIER = 100

# Largest accepted values for the required numeric recipe fields
MAX_COOKING_TIME = 2147483647
MAX_SERVINGS = 2147483647

# Largest quantity read from an ingredient line, before unit conversion
MAX_QUANTITY = 1000000
