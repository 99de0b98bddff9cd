"""
Parsing Service

Functions for parsing quantities and free-text ingredient lines.

Ingredient lines are typed by people, so the line parser never rejects
input: it tries a fixed sequence of patterns and, when none match, keeps
the whole line as the ingredient name.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

from constants import MAX_QUANTITY, Unit
from models.records import IngredientLine
from .units import resolve_alias

# Unicode vulgar fractions rewritten as ASCII fractions before parsing
UNICODE_FRACTIONS = {
    '\u00bd': '1/2',
    '\u2153': '1/3',
    '\u2154': '2/3',
    '\u00bc': '1/4',
    '\u00be': '3/4',
    '\u2155': '1/5',
    '\u2156': '2/5',
    '\u2157': '3/5',
    '\u2158': '4/5',
    '\u2159': '1/6',
    '\u215a': '5/6',
    '\u215b': '1/8',
    '\u215c': '3/8',
    '\u215d': '5/8',
    '\u215e': '7/8',
}

_SIMPLE_FRACTION = re.compile(r'^(\d+)\s*/\s*(\d+)$')
_MIXED_FRACTION = re.compile(r'^(\d+)\s+(\d+)\s*/\s*(\d+)$')

# quantity, two-word unit (e.g. "fl oz"), name
_QTY_TWO_WORD_UNIT_NAME = re.compile(r'^([\d\s/.]+)\s*([a-zA-Z\-]+\s+[a-zA-Z\-]+)\s+(.+)$')
# quantity, unit, name: "250g flour", "2 cups milk"
_QTY_UNIT_NAME = re.compile(r'^([\d\s/.]+)\s*([a-zA-Z\-]+)\s+(.+)$')
# quantity, name: "3 eggs"
_QTY_NAME = re.compile(r'^([\d\s/.]+)\s+(.+)$')
# trailing "(diced)" on a name
_MODIFIER_SUFFIX = re.compile(r'^(.*?\S)\s*\(([^()]*)\)$')

_TWO_PLACES = Decimal('0.01')


def normalize_fractions(text):
    """Replace Unicode fraction characters with ASCII fractions."""
    # First, normalize all whitespace (including non-breaking spaces) to regular spaces
    text = re.sub(r'[\s\u00a0\u2000-\u200b]+', ' ', text)

    for char, fraction in UNICODE_FRACTIONS.items():
        if char in text:
            # A digit before the fraction makes a mixed fraction: "1 1/2"
            text = re.sub(r'(\d)\s*' + re.escape(char), r'\1 ' + fraction, text)
            text = text.replace(char, fraction)
    return text


def parse_quantity(token):
    """
    Parse a quantity token into an exact Decimal.

    Handles '3/4', '1 1/2' and plain decimals like '2.5'. Returns None
    when the token is none of those; a zero denominator is not a match,
    and neither is anything above MAX_QUANTITY.
    """
    value = _read_quantity(token)
    if value is None or value > MAX_QUANTITY:
        return None
    return value


def _read_quantity(token):
    if token is None:
        return None
    token = token.strip()
    if not token:
        return None

    # Check for simple fraction like "1/2"
    frac_match = _SIMPLE_FRACTION.match(token)
    if frac_match:
        num, denom = (Decimal(g) for g in frac_match.groups())
        if denom != 0:
            return num / denom

    # Check for mixed fraction like "1 1/2"
    mixed_match = _MIXED_FRACTION.match(token)
    if mixed_match:
        whole, num, denom = (Decimal(g) for g in mixed_match.groups())
        if denom != 0:
            return whole + num / denom

    # Otherwise it's a whole number or decimal
    try:
        value = Decimal(token)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def split_modifier(name):
    """Split 'tomato (diced)' into ('tomato', 'diced'); no suffix gives (name, None)."""
    name = name.strip()
    match = _MODIFIER_SUFFIX.match(name)
    if not match:
        return name, None
    modifier = match.group(2).strip()
    return match.group(1).strip(), modifier or None


def _entry(name, quantity, unit):
    name, modifier = split_modifier(name)
    return IngredientLine(name=name, quantity=quantity, unit=unit, modifier=modifier)


def _match_quantity_and_unit(pattern, line):
    match = pattern.match(line)
    if not match:
        return None
    quantity = parse_quantity(match.group(1))
    unit = resolve_alias(match.group(2))
    if quantity is None or unit is None:
        return None
    return _entry(match.group(3), quantity, unit)


def _with_two_word_unit(line):
    return _match_quantity_and_unit(_QTY_TWO_WORD_UNIT_NAME, line)


def _with_unit(line):
    return _match_quantity_and_unit(_QTY_UNIT_NAME, line)


def _without_unit(line):
    match = _QTY_NAME.match(line)
    if not match:
        return None
    quantity = parse_quantity(match.group(1))
    if quantity is None:
        return None
    # Default to pieces when no unit is specified
    return _entry(match.group(2), quantity, Unit.PIECES)


def _name_only(line):
    return _entry(line, None, Unit.PIECES)


# Tried in order; the first non-None result wins. _name_only always matches.
LINE_ATTEMPTS = (_with_two_word_unit, _with_unit, _without_unit, _name_only)


def parse_ingredient_line(line):
    """Parse ingredient text like '2 cups flour' into an IngredientLine."""
    line = normalize_fractions(line or '').strip()
    return next(entry for entry in (attempt(line) for attempt in LINE_ATTEMPTS) if entry is not None)


def format_decimal(value):
    """Write a Decimal without exponent or trailing zeros: 250, 2.46446."""
    text = format(value.normalize(), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text or '0'


def format_display_quantity(value):
    """Round half-up to two places and strip trailing zeros: '1.5', '250'."""
    with localcontext() as ctx:
        # room for every integer digit, a carry and the two decimal places
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return format_decimal(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
