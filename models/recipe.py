"""
Recipe Models

Contains the Recipe and RecipeIngredient models for storing recipes and
their ingredient lines.
"""

from datetime import datetime

from .base import db


class Recipe(db.Model):
    """Recipe with metadata, optional image and ingredient lines."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    instructions = db.Column(db.Text, nullable=False, default='')
    cooking_time = db.Column(db.Integer, nullable=False)  # minutes
    servings = db.Column(db.Integer, nullable=False)
    tags = db.Column(db.String(500), default='')  # comma-separated, authored order
    notes = db.Column(db.Text, default='')
    created_date = db.Column(db.DateTime, default=datetime.now)
    modified_date = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)
    # Optional image stored as BLOB
    image_data = db.Column(db.LargeBinary, nullable=True)
    image_content_type = db.Column(db.String(50), nullable=True)
    ingredients = db.relationship('RecipeIngredient', backref='recipe', lazy=True, cascade='all, delete-orphan')


class RecipeIngredient(db.Model):
    """Ingredient line of a recipe. Quantity is stored in the base unit."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    quantity = db.Column(db.Numeric(18, 6), nullable=True)
    unit = db.Column(db.String(10), nullable=False, default='pieces')  # 'g', 'ml' or 'pieces'
    modifier = db.Column(db.String(100), nullable=True)  # e.g. 'diced'
    ingredient = db.relationship('Ingredient')
