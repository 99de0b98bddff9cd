"""
Recipe Text Codec

Reads and writes the plain-text recipe format:

    ===== RECIPE =====
    Name: Pancakes
    Cooking Time: 20 minutes
    Servings: 4
    Tags: Breakfast,Vegetarian
    Created: 2024-01-15
    Modified: 2024-01-20

    ===== INGREDIENTS =====
    250g flour
    1 1/2 cups milk
    2 eggs
    1 tomato (diced)

    ===== INSTRUCTIONS =====
    Mix everything and fry.

    ===== NOTES =====
    Optional.

    ===== END RECIPE =====

A document may hold any number of recipes. Each block is parsed on its
own, so one bad recipe only costs that recipe: the caller gets back the
recipes that parsed plus one error string per block that did not.
"""

import logging
import re
from dataclasses import replace
from datetime import datetime
from enum import Enum

from constants import (
    ALL_DELIMITERS,
    DATE_FORMATS,
    END_RECIPE_DELIMITER,
    EXPORT_DATE_FORMAT,
    INGREDIENTS_DELIMITER,
    INSTRUCTIONS_DELIMITER,
    BASE_COUNT_UNIT,
    MAX_COOKING_TIME,
    MAX_LENGTHS,
    MAX_SERVINGS,
    MIN_COOKING_TIME,
    MIN_SERVINGS,
    NOTES_DELIMITER,
    RECIPE_DELIMITER,
)
from constants.formats import (
    KEY_COOKING_TIME,
    KEY_CREATED,
    KEY_MODIFIED,
    KEY_NAME,
    KEY_SERVINGS,
    KEY_TAGS,
)
from models.records import RecipeRecord
from utils.sanitizer import sanitize_ingredient_text, sanitize_line, sanitize_multiline
from .parsing import format_decimal, parse_ingredient_line
from .units import base_unit_for, to_base

logger = logging.getLogger(__name__)

EMPTY_FILE_MESSAGE = 'File is empty'
NO_BLOCKS_MESSAGE = (
    'No valid recipe blocks found. '
    'Make sure recipes are properly formatted with delimiters.'
)


class RecipeParseError(ValueError):
    """A recipe block is missing a required field or has an invalid one."""
    pass


class Section(Enum):
    """Scanner state while reading one recipe block, in document order."""
    METADATA = 0
    INGREDIENTS = 1
    INSTRUCTIONS = 2
    NOTES = 3


# Delimiter line -> section it opens
SECTION_TRANSITIONS = {
    INGREDIENTS_DELIMITER: Section.INGREDIENTS,
    INSTRUCTIONS_DELIMITER: Section.INSTRUCTIONS,
    NOTES_DELIMITER: Section.NOTES,
}


def next_section(current, line):
    """
    Return the section a line switches to, or None if it is content.

    Only forward moves count; a delimiter for the current or an earlier
    section is kept as ordinary text.
    """
    target = SECTION_TRANSITIONS.get(line.strip())
    if target is None or target.value <= current.value:
        return None
    return target


def split_sections(block):
    """Scan a block into {Section: trimmed text}."""
    sections = {}
    current = Section.METADATA
    buffer = []

    for line in block.splitlines():
        target = next_section(current, line)
        if target is not None:
            sections[current] = '\n'.join(buffer).strip()
            current, buffer = target, []
        elif current is Section.METADATA and line.strip() == RECIPE_DELIMITER:
            continue
        else:
            buffer.append(line)

    sections[current] = '\n'.join(buffer).strip()
    return sections


# ============================================
# DECODE
# ============================================

def parse_cooking_time(value):
    """Minutes from '25 minutes', '25 min' or '25'; 0 when there are no digits."""
    match = re.search(r'\d+', value)
    if not match:
        return 0
    try:
        return int(match.group(0))
    except ValueError:
        # beyond the interpreter's int-from-string digit limit
        return 0


def parse_date(value):
    """Parse a Created/Modified value, or return None if no format fits."""
    value = value.strip()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_metadata(text):
    """Read 'Key: value' lines into a dict of recipe fields with defaults."""
    now = datetime.now()
    fields = {
        'name': '',
        'cooking_time': 0,
        'servings': 0,
        'tags': '',
        'created': now,
        'modified': now,
    }

    for line in text.splitlines():
        if ':' not in line:
            continue
        key, value = line.split(':', 1)
        key = key.strip().lower()
        value = value.strip()

        if key == KEY_NAME:
            fields['name'] = sanitize_line(value)
        elif key == KEY_COOKING_TIME:
            fields['cooking_time'] = parse_cooking_time(value)
        elif key == KEY_SERVINGS:
            try:
                fields['servings'] = int(value)
            except ValueError:
                logger.debug("Ignoring unparseable servings value %r", value)
        elif key == KEY_TAGS:
            fields['tags'] = sanitize_line(value)
        elif key in (KEY_CREATED, KEY_MODIFIED):
            parsed = parse_date(value)
            if parsed is not None:
                fields[key] = parsed
            else:
                logger.debug("Ignoring unparseable %s date %r", key, value)

    return fields


def parse_ingredients(text):
    """Parse the INGREDIENTS section into base-unit IngredientLines."""
    entries = []
    for raw_line in text.splitlines():
        line = sanitize_ingredient_text(raw_line)
        if not line:
            continue
        entry = parse_ingredient_line(line)
        if entry.quantity == 0 and entry.base_unit == BASE_COUNT_UNIT:
            # "0pieces <name>" is how a line without a quantity is exported
            entry = replace(entry, quantity=None)
        if entry.quantity is None:
            entries.append(replace(entry, unit=base_unit_for(entry.base_unit)))
        else:
            quantity, base_tag = to_base(entry.quantity, entry.unit)
            entries.append(replace(entry, quantity=quantity, unit=base_unit_for(base_tag)))
    return tuple(entries)


def _validate(fields, instructions):
    if not fields['name']:
        raise RecipeParseError('Missing required field: Name')
    if len(fields['name']) > MAX_LENGTHS['recipe_name']:
        raise RecipeParseError(
            f"Invalid field: Name (cannot exceed {MAX_LENGTHS['recipe_name']} characters)"
        )
    if fields['cooking_time'] < MIN_COOKING_TIME:
        raise RecipeParseError(
            'Missing or invalid required field: Cooking Time (must be at least 1 minute)'
        )
    if fields['cooking_time'] > MAX_COOKING_TIME:
        raise RecipeParseError(
            f"Invalid field: Cooking Time (cannot exceed {MAX_COOKING_TIME} minutes)"
        )
    if fields['servings'] < MIN_SERVINGS:
        raise RecipeParseError(
            'Missing or invalid required field: Servings (must be at least 1)'
        )
    if fields['servings'] > MAX_SERVINGS:
        raise RecipeParseError(
            f"Invalid field: Servings (cannot exceed {MAX_SERVINGS})"
        )
    if not instructions:
        raise RecipeParseError('Missing required field: Instructions')


def parse_recipe_block(block):
    """
    Parse one recipe block into a RecipeRecord.

    Raises:
        RecipeParseError: if a required field is missing or invalid
    """
    sections = split_sections(block)
    fields = parse_metadata(sections.get(Section.METADATA, ''))
    ingredients = parse_ingredients(sections.get(Section.INGREDIENTS, ''))
    instructions = sanitize_multiline(sections.get(Section.INSTRUCTIONS, ''))
    notes = sanitize_multiline(sections.get(Section.NOTES, ''), max_length=MAX_LENGTHS['notes'])

    _validate(fields, instructions)

    return RecipeRecord(
        name=fields['name'],
        cooking_time=fields['cooking_time'],
        servings=fields['servings'],
        instructions=instructions,
        ingredients=ingredients,
        tags=fields['tags'],
        notes=notes,
        created=fields['created'],
        modified=fields['modified'],
    )


def _has_delimiters(text):
    return any(line.strip() in ALL_DELIMITERS for line in text.splitlines())


def decode_recipes(text):
    """
    Parse a document containing one or more recipes.

    Returns:
        (records, errors): the recipes that parsed, and one message per
        block that did not, formatted 'Recipe #<n>: <reason>'
    """
    if not text or not text.strip():
        return [], [EMPTY_FILE_MESSAGE]

    if not _has_delimiters(text):
        return [], [NO_BLOCKS_MESSAGE]

    records = []
    errors = []
    blocks = [block for block in text.split(END_RECIPE_DELIMITER) if block.strip()]

    for number, block in enumerate(blocks, start=1):
        try:
            records.append(parse_recipe_block(block))
        except RecipeParseError as e:
            logger.warning("Skipping recipe block #%d: %s", number, e)
            errors.append(f"Recipe #{number}: {e}")

    if not records and not errors:
        errors.append(NO_BLOCKS_MESSAGE)

    logger.info("Decoded %d recipe(s), %d error(s)", len(records), len(errors))
    return records, errors


# ============================================
# ENCODE
# ============================================

def format_ingredient_line(line):
    """Write an ingredient as '<qty><base unit> <name>[ (<modifier>)]'."""
    name = f"{line.name} ({line.modifier})" if line.modifier else line.name
    if line.quantity is None:
        # A bare name must not read back as a quantity: "7 spice blend"
        if parse_ingredient_line(name).quantity is not None:
            return f"0{BASE_COUNT_UNIT} {name}"
        return name
    quantity, base_tag = to_base(line.quantity, line.unit)
    return f"{format_decimal(quantity)}{base_tag} {name}"


def _ingredient_order(line):
    return (line.name.lower(), (line.modifier or '').lower())


def encode_recipe(record):
    """Export a single recipe to the text format."""
    lines = [
        RECIPE_DELIMITER,
        f"Name: {record.name}",
        f"Cooking Time: {record.cooking_time} minutes",
        f"Servings: {record.servings}",
    ]
    if record.tags.strip():
        lines.append(f"Tags: {record.tags}")
    lines.append(f"Created: {record.created.strftime(EXPORT_DATE_FORMAT)}")
    lines.append(f"Modified: {record.modified.strftime(EXPORT_DATE_FORMAT)}")
    lines.append('')

    lines.append(INGREDIENTS_DELIMITER)
    lines.extend(format_ingredient_line(line) for line in sorted(record.ingredients, key=_ingredient_order))
    lines.append('')

    lines.append(INSTRUCTIONS_DELIMITER)
    lines.append(record.instructions)
    lines.append('')

    if record.notes.strip():
        lines.append(NOTES_DELIMITER)
        lines.append(record.notes)
        lines.append('')

    lines.append(END_RECIPE_DELIMITER)
    return '\n'.join(lines) + '\n'


def encode_recipes(records):
    """Export several recipes, sorted by name, separated by a blank line."""
    ordered = sorted(records, key=lambda r: (r.name.lower(), r.name))
    return '\n'.join(encode_recipe(record) for record in ordered)
