"""
Unit Registry Service

Alias resolution and base-unit conversion over the closed unit catalog.
The alias table is built once at import and is read-only afterwards.
"""

import re
from decimal import Decimal
from types import MappingProxyType

from constants import BASE_UNIT_TAGS, DISPLAY_SCALE_UP, Unit


def _normalize_token(token):
    return re.sub(r'\s+', ' ', token.strip().lower())


def _build_alias_table():
    """Map every alias to its unit, refusing any alias claimed twice."""
    table = {}
    for unit in Unit:
        for alias in unit.aliases:
            key = _normalize_token(alias)
            if key in table and table[key] is not unit:
                raise ValueError(f"Alias '{alias}' is claimed by both {table[key].name} and {unit.name}")
            table[key] = unit
    return MappingProxyType(table)


UNIT_ALIASES = _build_alias_table()


def resolve_alias(token):
    """Resolve a unit token like 'TBSP' or ' cups ' to its Unit, or None."""
    if not token:
        return None
    return UNIT_ALIASES.get(_normalize_token(token))


def base_unit_for(base_tag):
    """Return the base Unit for a stored tag; unknown tags count as pieces."""
    return BASE_UNIT_TAGS.get(base_tag, Unit.PIECES)


def to_base(quantity, unit):
    """
    Convert a quantity to its dimension's base unit.

    Returns (quantity, base_tag). A missing unit is treated as pieces.
    """
    unit = unit or Unit.PIECES
    quantity = Decimal(quantity)
    if unit.is_base:
        return quantity, unit.dimension.base_tag
    return quantity * unit.factor, unit.dimension.base_tag


def from_base(quantity, base_tag):
    """
    Pick a display unit for a base quantity.

    Weight and volume switch to kg / L at 1000 base units; count always
    stays in pieces. Only used for rendering, never stored.
    """
    quantity = Decimal(quantity)
    base = base_unit_for(base_tag)
    scale_up = DISPLAY_SCALE_UP.get(base.dimension)
    if scale_up:
        threshold, larger = scale_up
        if quantity >= threshold:
            return quantity / larger.factor, larger
    return quantity, base


def display_label(unit):
    """Short label for a unit, e.g. 'g', 'tbsp', 'piece(s)'."""
    return unit.label
