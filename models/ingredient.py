"""
Ingredient Model

Ingredients are shared between recipes and matched by name,
case-insensitively.
"""

from .base import db


class Ingredient(db.Model):
    """Named ingredient shared by every recipe that uses it."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False, index=True)
