from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from constants import NOTES_DELIMITER, Unit
from models.records import IngredientLine, RecipeRecord
from services.codec import (
    EMPTY_FILE_MESSAGE,
    NO_BLOCKS_MESSAGE,
    Section,
    decode_recipes,
    encode_recipe,
    encode_recipes,
    format_ingredient_line,
    next_section,
    parse_cooking_time,
    parse_date,
    split_sections,
)

PANCAKES = """===== RECIPE =====
Name: Pancakes
Cooking Time: 20 minutes
Servings: 4
Tags: Breakfast,Vegetarian
Created: 2024-01-15
Modified: 2024-01-20

===== INGREDIENTS =====
250g flour
2cups milk
3 eggs
1/2 tsp salt
1 1/4 cups sugar
1 apple (diced)

===== INSTRUCTIONS =====
Mix the flour and milk together.
Add the eggs one at a time.

===== NOTES =====
Best served warm.

===== END RECIPE =====
"""

NO_SERVINGS = """===== RECIPE =====
Name: Toast
Cooking Time: 5 min

===== INGREDIENTS =====
2 slices bread

===== INSTRUCTIONS =====
Toast the bread.

===== END RECIPE =====
"""


def block(**overrides):
    fields = {
        'name': 'Soup',
        'time': '30',
        'servings': '2',
        'instructions': 'Simmer.',
    }
    fields.update(overrides)
    return (
        "===== RECIPE =====\n"
        f"Name: {fields['name']}\n"
        f"Cooking Time: {fields['time']}\n"
        f"Servings: {fields['servings']}\n"
        "===== INGREDIENTS =====\n"
        "1 l water\n"
        "===== INSTRUCTIONS =====\n"
        f"{fields['instructions']}\n"
        "===== END RECIPE =====\n"
    )


def ingredient_tuples(record):
    return sorted(
        (line.name, line.quantity, line.base_unit, line.modifier or '')
        for line in record.ingredients
    )


def test_decode_single_recipe():
    records, errors = decode_recipes(PANCAKES)
    assert errors == []
    assert len(records) == 1

    recipe = records[0]
    assert recipe.name == 'Pancakes'
    assert recipe.cooking_time == 20
    assert recipe.servings == 4
    assert recipe.tags == 'Breakfast,Vegetarian'
    assert recipe.tag_list == ['Breakfast', 'Vegetarian']
    assert recipe.created == datetime(2024, 1, 15)
    assert recipe.modified == datetime(2024, 1, 20)
    assert recipe.instructions == 'Mix the flour and milk together.\nAdd the eggs one at a time.'
    assert recipe.notes == 'Best served warm.'


def test_decode_converts_ingredients_to_base_units():
    records, _ = decode_recipes(PANCAKES)
    by_name = {line.name: line for line in records[0].ingredients}

    assert by_name['flour'].quantity == Decimal('250')
    assert by_name['flour'].unit is Unit.GRAMS
    assert by_name['milk'].quantity == Decimal('473.176')
    assert by_name['milk'].unit is Unit.MILLILITERS
    assert by_name['eggs'].quantity == Decimal('3')
    assert by_name['eggs'].unit is Unit.PIECES
    assert by_name['salt'].quantity == Decimal('2.46446')
    assert by_name['sugar'].quantity == Decimal('295.735')
    assert by_name['apple'].modifier == 'diced'


def test_decode_keeps_ingredient_order():
    records, _ = decode_recipes(PANCAKES)
    assert [line.name for line in records[0].ingredients] == [
        'flour', 'milk', 'eggs', 'salt', 'sugar', 'apple',
    ]


def test_one_bad_block_does_not_stop_the_others():
    records, errors = decode_recipes(PANCAKES + '\n' + NO_SERVINGS)
    assert [r.name for r in records] == ['Pancakes']
    assert len(errors) == 1
    assert errors[0].startswith('Recipe #2: ')
    assert 'Servings' in errors[0]


def test_errors_are_numbered_per_block():
    text = block(name='') + block() + block(instructions='')
    records, errors = decode_recipes(text)
    assert len(records) == 1
    assert errors[0].startswith('Recipe #1: ') and 'Name' in errors[0]
    assert errors[1].startswith('Recipe #3: ') and 'Instructions' in errors[1]


def test_empty_document():
    assert decode_recipes('') == ([], [EMPTY_FILE_MESSAGE])
    assert decode_recipes('   \n\n ') == ([], [EMPTY_FILE_MESSAGE])


def test_document_without_delimiters():
    records, errors = decode_recipes('Name: Pancakes\nServings: 4\n')
    assert records == []
    assert errors == [NO_BLOCKS_MESSAGE]


def test_only_end_delimiters():
    records, errors = decode_recipes('===== END RECIPE =====\n\n===== END RECIPE =====\n')
    assert records == []
    assert errors == [NO_BLOCKS_MESSAGE]


def test_missing_end_delimiter_still_parses_last_block():
    records, errors = decode_recipes(block().replace('===== END RECIPE =====\n', ''))
    assert errors == []
    assert records[0].name == 'Soup'


@pytest.mark.parametrize('value, minutes', [
    ('25 minutes', 25),
    ('25 min', 25),
    ('25', 25),
    ('about 1 hour 10', 1),
    ('quick', 0),
])
def test_parse_cooking_time(value, minutes):
    assert parse_cooking_time(value) == minutes


def test_cooking_time_without_digits_fails_block():
    records, errors = decode_recipes(block(time='a while'))
    assert records == []
    assert 'Cooking Time' in errors[0]


def test_unparseable_servings_fails_block():
    records, errors = decode_recipes(block(servings='four'))
    assert records == []
    assert 'Servings' in errors[0]


def test_zero_servings_fails_block():
    _, errors = decode_recipes(block(servings='0'))
    assert 'Servings' in errors[0]


def test_name_too_long_fails_block():
    _, errors = decode_recipes(block(name='x' * 201))
    assert 'Name' in errors[0]


def test_metadata_keys_are_case_insensitive_and_unknown_keys_ignored():
    text = block().replace('Name: Soup', 'NAME: Soup\nAuthor: Someone\nno colon here')
    records, errors = decode_recipes(text)
    assert errors == []
    assert records[0].name == 'Soup'


@pytest.mark.parametrize('value, expected', [
    ('2024-01-15', datetime(2024, 1, 15)),
    ('2024-01-15T08:30:00', datetime(2024, 1, 15, 8, 30)),
    ('2024-01-15 08:30', datetime(2024, 1, 15, 8, 30)),
    ('01/15/2024', datetime(2024, 1, 15)),
    ('15 January 2024', datetime(2024, 1, 15)),
    ('January 15, 2024', datetime(2024, 1, 15)),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


def test_bad_date_keeps_current_time():
    before = datetime.now() - timedelta(seconds=1)
    text = block().replace('Servings: 2', 'Servings: 2\nCreated: sometime last year')
    records, errors = decode_recipes(text)
    assert errors == []
    assert records[0].created >= before


def test_next_section_only_moves_forward():
    assert next_section(Section.METADATA, '===== INGREDIENTS =====') is Section.INGREDIENTS
    assert next_section(Section.METADATA, '  ===== NOTES =====  ') is Section.NOTES
    assert next_section(Section.NOTES, '===== INGREDIENTS =====') is None
    assert next_section(Section.INGREDIENTS, '===== INGREDIENTS =====') is None
    assert next_section(Section.METADATA, '==== INGREDIENTS ====') is None


def test_backward_delimiter_is_content():
    sections = split_sections(
        "Name: X\n"
        "===== INSTRUCTIONS =====\n"
        "Stir.\n"
        "===== INGREDIENTS =====\n"
        "more text\n"
    )
    assert sections[Section.INSTRUCTIONS] == 'Stir.\n===== INGREDIENTS =====\nmore text'
    assert Section.INGREDIENTS not in sections


def test_recipe_delimiter_is_dropped_from_metadata():
    sections = split_sections("===== RECIPE =====\nName: X\n===== INSTRUCTIONS =====\nGo.")
    assert sections[Section.METADATA] == 'Name: X'
    assert sections[Section.INSTRUCTIONS] == 'Go.'


def make_record(**overrides):
    fields = dict(
        name='Bread',
        cooking_time=45,
        servings=8,
        instructions='Knead.\nBake.',
        ingredients=(
            IngredientLine('salt', Decimal('0.5') * Unit.TEASPOONS.factor, Unit.MILLILITERS),
            IngredientLine('flour', Decimal('250'), Unit.GRAMS),
            IngredientLine('water', Decimal('300'), Unit.MILLILITERS),
            IngredientLine('onion', Decimal('1'), Unit.PIECES, 'sliced'),
            IngredientLine('pepper'),
        ),
        tags='Baking, Weekend',
        notes='Let it cool.',
        created=datetime(2024, 3, 1),
        modified=datetime(2024, 3, 2),
    )
    fields.update(overrides)
    return RecipeRecord(**fields)


def test_round_trip():
    record = make_record()
    records, errors = decode_recipes(encode_recipe(record))
    assert errors == []
    decoded = records[0]

    assert decoded.name == record.name
    assert decoded.cooking_time == record.cooking_time
    assert decoded.servings == record.servings
    assert decoded.tags == record.tags
    assert decoded.instructions == record.instructions
    assert decoded.notes == record.notes
    assert decoded.created == record.created
    assert ingredient_tuples(decoded) == ingredient_tuples(record)


def test_flour_and_salt_survive_export_and_import():
    records, _ = decode_recipes(
        "===== RECIPE =====\nName: Dough\nCooking Time: 10\nServings: 1\n"
        "===== INGREDIENTS =====\n250g flour\n1/2 tsp salt\n"
        "===== INSTRUCTIONS =====\nMix.\n===== END RECIPE =====\n"
    )
    reimported, errors = decode_recipes(encode_recipes(records))
    assert errors == []
    by_name = {line.name: line for line in reimported[0].ingredients}
    assert by_name['flour'].quantity == Decimal('250')
    assert by_name['flour'].base_unit == 'g'
    assert abs(by_name['salt'].quantity - Decimal('2.46446')) < Decimal('0.00001')
    assert by_name['salt'].base_unit == 'ml'


def test_encode_layout():
    text = encode_recipe(make_record())
    lines = text.splitlines()
    assert lines[0] == '===== RECIPE ====='
    assert lines[1] == 'Name: Bread'
    assert lines[2] == 'Cooking Time: 45 minutes'
    assert lines[3] == 'Servings: 8'
    assert lines[4] == 'Tags: Baking, Weekend'
    assert lines[5] == 'Created: 2024-03-01'
    assert lines[6] == 'Modified: 2024-03-02'
    assert lines[-1] == '===== END RECIPE ====='


def test_encode_sorts_ingredients_by_name():
    text = encode_recipe(make_record())
    start = text.index('===== INGREDIENTS =====')
    end = text.index('===== INSTRUCTIONS =====')
    assert text[start:end].splitlines()[1:-1] == [
        '250g flour',
        '1pieces onion (sliced)',
        'pepper',
        '2.46446ml salt',
        '300ml water',
    ]


def test_encode_omits_empty_notes_and_tags():
    text = encode_recipe(make_record(notes='', tags=''))
    assert NOTES_DELIMITER not in text
    assert 'Tags:' not in text


def test_format_ingredient_line_converts_to_base():
    assert format_ingredient_line(IngredientLine('milk', Decimal('1'), Unit.LITERS)) == '1000ml milk'
    assert format_ingredient_line(IngredientLine('eggs', Decimal('2'))) == '2pieces eggs'


def test_encode_recipes_is_sorted_and_stable():
    apple = make_record(name='Apple Pie')
    zucchini = make_record(name='Zucchini Bread')
    text = encode_recipes([zucchini, apple])
    assert text == encode_recipes([apple, zucchini])
    assert text.index('Name: Apple Pie') < text.index('Name: Zucchini Bread')
    assert '===== END RECIPE =====\n\n===== RECIPE =====' in text

    records, errors = decode_recipes(text)
    assert errors == []
    assert [r.name for r in records] == ['Apple Pie', 'Zucchini Bread']


def test_cooking_time_above_limit_fails_only_that_block():
    text = block(name='Big', time='99999999999999999999') + block(name='Fine')
    records, errors = decode_recipes(text)
    assert [r.name for r in records] == ['Fine']
    assert len(errors) == 1
    assert errors[0].startswith('Recipe #1: ')
    assert 'Cooking Time' in errors[0]


def test_servings_above_limit_fails_block():
    records, errors = decode_recipes(block(servings='99999999999999999999'))
    assert records == []
    assert 'Servings' in errors[0]


def test_cooking_time_with_thousands_of_digits():
    _, errors = decode_recipes(block(time='9' * 5000))
    assert 'Cooking Time' in errors[0]


def test_names_starting_with_digits_round_trip():
    record = make_record(ingredients=(
        IngredientLine('7 spice blend'),
        IngredientLine('1/2 moon pies', modifier='small'),
        IngredientLine('5 grain flour', Decimal('100'), Unit.GRAMS),
    ))
    text = encode_recipe(record)
    assert '0pieces 7 spice blend\n' in text
    assert '0pieces 1/2 moon pies (small)\n' in text
    assert '100g 5 grain flour\n' in text

    records, errors = decode_recipes(text)
    assert errors == []
    assert ingredient_tuples(records[0]) == ingredient_tuples(record)


def test_zero_count_reads_as_no_quantity():
    text = block().replace('1 l water', '0 eggs\n0g salt')
    line_by_name = {line.name: line for line in decode_recipes(text)[0][0].ingredients}
    assert line_by_name['eggs'].quantity is None
    assert line_by_name['salt'].quantity == 0
    assert line_by_name['salt'].base_unit == 'g'


def test_dates_are_exported_without_time_of_day():
    record = make_record(created=datetime(2024, 3, 1, 13, 45), modified=datetime(2024, 3, 2, 8, 5))
    text = encode_recipe(record)
    assert 'Created: 2024-03-01\n' in text

    decoded = decode_recipes(text)[0][0]
    assert decoded.created == datetime(2024, 3, 1)
    assert decoded.modified == datetime(2024, 3, 2)
