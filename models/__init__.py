"""
Models Package

Exports the database models, the db instance, and the plain record types
used by the text codec and grocery list.
"""

from .base import db

from .ingredient import Ingredient
from .recipe import Recipe, RecipeIngredient
from .records import IngredientLine, RecipeRecord, AggregatedLine

__all__ = [
    'db',
    'Ingredient',
    'Recipe',
    'RecipeIngredient',
    'IngredientLine',
    'RecipeRecord',
    'AggregatedLine',
]
