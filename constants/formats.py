"""
Recipe Text Format Constants

Section delimiters and metadata keys of the plain-text recipe format.
"""

RECIPE_DELIMITER = '===== RECIPE ====='
INGREDIENTS_DELIMITER = '===== INGREDIENTS ====='
INSTRUCTIONS_DELIMITER = '===== INSTRUCTIONS ====='
NOTES_DELIMITER = '===== NOTES ====='
END_RECIPE_DELIMITER = '===== END RECIPE ====='

ALL_DELIMITERS = (
    RECIPE_DELIMITER,
    INGREDIENTS_DELIMITER,
    INSTRUCTIONS_DELIMITER,
    NOTES_DELIMITER,
    END_RECIPE_DELIMITER,
)

# Recognized metadata keys (lowercase)
KEY_NAME = 'name'
KEY_COOKING_TIME = 'cooking time'
KEY_SERVINGS = 'servings'
KEY_TAGS = 'tags'
KEY_CREATED = 'created'
KEY_MODIFIED = 'modified'

# Formats tried in order when reading Created/Modified values
DATE_FORMATS = (
    '%Y-%m-%d %H:%M',
    '%m/%d/%Y',
    '%d %B %Y',
    '%B %d, %Y',
)

# Format written on export
EXPORT_DATE_FORMAT = '%Y-%m-%d'

# Aggregator report texts
NO_RECIPES_SELECTED = 'No recipes selected.'
NO_VALID_RECIPES = 'No valid recipes found.'
REPORT_SEPARATOR = '----------------------------'
