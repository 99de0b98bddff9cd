"""
Recipe Repository

Loads and stores recipes through SQLAlchemy and hands them to the rest of
the application as RecipeRecord values. The grocery list only needs
fetch_by_id; import/export, editing and the recipe list use the rest.
"""

import logging
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from models import Ingredient, Recipe, RecipeIngredient, db
from models.records import IngredientLine, RecipeRecord
from .units import base_unit_for, to_base

logger = logging.getLogger(__name__)


def to_record(recipe):
    """Convert a Recipe row (with ingredients loaded) to a RecipeRecord."""
    lines = tuple(
        IngredientLine(
            name=ri.ingredient.name,
            quantity=ri.quantity,
            unit=base_unit_for(ri.unit),
            modifier=ri.modifier,
        )
        for ri in recipe.ingredients
        if ri.ingredient  # Skip if ingredient was deleted
    )
    return RecipeRecord(
        id=recipe.id,
        name=recipe.name,
        cooking_time=recipe.cooking_time,
        servings=recipe.servings,
        instructions=recipe.instructions or '',
        ingredients=lines,
        tags=recipe.tags or '',
        notes=recipe.notes or '',
        created=recipe.created_date,
        modified=recipe.modified_date,
        has_image=recipe.image_data is not None,
    )


def _has_any_tag(record, wanted):
    return any(tag.lower() in wanted for tag in record.tag_list)


class SqlRecipeRepository:
    """Recipe storage backed by the Flask-SQLAlchemy session."""

    def __init__(self, session=None):
        self.session = session or db.session

    def _with_ingredients(self):
        return joinedload(Recipe.ingredients).joinedload(RecipeIngredient.ingredient)

    def fetch_by_id(self, recipe_id):
        """Return the recipe as a RecipeRecord, or None if it does not exist."""
        try:
            recipe_id = int(recipe_id)
        except (ValueError, TypeError):
            return None
        recipe = self.session.get(Recipe, recipe_id, options=[self._with_ingredients()])
        if recipe is None:
            return None
        return to_record(recipe)

    def list_all(self):
        """All recipes as RecipeRecords, ordered by name."""
        recipes = (
            self.session.query(Recipe)
            .options(self._with_ingredients())
            .order_by(Recipe.name)
            .all()
        )
        return [to_record(recipe) for recipe in recipes]

    # ============================================
    # SEARCH / FILTER
    # ============================================

    def filter(self, search=None, min_cooking_time=None, max_cooking_time=None,
               tags=None, min_servings=None, max_servings=None, ingredient_ids=None):
        """
        Recipes matching every given criterion, most recently modified first.

        Args:
            search: text found (case-insensitive) in the name, the tags or
                any ingredient name
            min_cooking_time / max_cooking_time: inclusive minutes bounds
            tags: a recipe matches when it carries any of these tags
                (whole tags, case-insensitive)
            min_servings / max_servings: inclusive bounds
            ingredient_ids: a recipe matches only when it uses all of them

        Criteria left as None (or empty) are not applied.
        """
        query = self.session.query(Recipe).options(self._with_ingredients())

        if search and search.strip():
            term = search.strip()
            query = query.filter(or_(
                Recipe.name.icontains(term, autoescape=True),
                Recipe.tags.icontains(term, autoescape=True),
                Recipe.ingredients.any(RecipeIngredient.ingredient.has(
                    Ingredient.name.icontains(term, autoescape=True)
                )),
            ))
        if min_cooking_time is not None:
            query = query.filter(Recipe.cooking_time >= min_cooking_time)
        if max_cooking_time is not None:
            query = query.filter(Recipe.cooking_time <= max_cooking_time)
        if min_servings is not None:
            query = query.filter(Recipe.servings >= min_servings)
        if max_servings is not None:
            query = query.filter(Recipe.servings <= max_servings)
        for ingredient_id in ingredient_ids or ():
            query = query.filter(Recipe.ingredients.any(RecipeIngredient.ingredient_id == ingredient_id))

        recipes = query.order_by(Recipe.modified_date.desc(), Recipe.name).all()
        records = [to_record(recipe) for recipe in recipes]

        # Tags are a free-text column, so whole-tag matching happens here
        wanted = {tag.strip().lower() for tag in tags or () if tag.strip()}
        if wanted:
            records = [record for record in records if _has_any_tag(record, wanted)]
        return records

    def search(self, term):
        """Recipes whose name, tags or ingredients contain term; all recipes when blank."""
        return self.filter(search=term)

    def list_tags(self):
        """Every distinct tag in use, case-insensitively de-duplicated and sorted."""
        seen = {}
        for (tags,) in self.session.query(Recipe.tags).order_by(Recipe.id):
            for tag in (tags or '').split(','):
                tag = tag.strip()
                if tag:
                    seen.setdefault(tag.lower(), tag)
        return sorted(seen.values())

    # ============================================
    # WRITE
    # ============================================

    def find_or_create_ingredient(self, name):
        """Look up an ingredient by name (case-insensitive), creating it if missing."""
        ingredient = (
            self.session.query(Ingredient)
            .filter(db.func.lower(Ingredient.name) == name.lower())
            .first()
        )
        if ingredient is None:
            ingredient = Ingredient(name=name)
            self.session.add(ingredient)
        return ingredient

    def _ingredient_rows(self, record):
        """RecipeIngredient rows for a record; quantities converted to base units."""
        rows = []
        for line in record.ingredients:
            name = line.name.strip()
            if not name:
                continue
            quantity = None
            if line.quantity is not None:
                quantity, _ = to_base(line.quantity, line.unit)
            modifier = line.modifier.strip() if line.modifier and line.modifier.strip() else None
            rows.append(RecipeIngredient(
                ingredient=self.find_or_create_ingredient(name),
                quantity=quantity,
                unit=line.base_unit,
                modifier=modifier,
            ))
        return rows

    def save(self, record):
        """
        Store a RecipeRecord as a new recipe.

        Lines without a name are dropped. The caller commits the session.

        Returns:
            The new recipe's id
        """
        recipe = Recipe(
            name=record.name,
            instructions=record.instructions,
            cooking_time=record.cooking_time,
            servings=record.servings,
            tags=record.tags,
            notes=record.notes,
            created_date=record.created,
            modified_date=record.modified,
        )
        recipe.ingredients.extend(self._ingredient_rows(record))

        self.session.add(recipe)
        self.session.flush()
        logger.info("Saved recipe %r with %d ingredient(s)", recipe.name, len(recipe.ingredients))
        return recipe.id

    def update(self, recipe_id, record, remove_image=False):
        """
        Replace a stored recipe's fields and ingredient lines with record's.

        The created date and the image are kept (unless remove_image);
        the modified date becomes now. The caller commits the session.

        Returns:
            The recipe id, or None if no such recipe exists
        """
        recipe = self.session.get(Recipe, recipe_id, options=[self._with_ingredients()])
        if recipe is None:
            return None

        recipe.name = record.name
        recipe.instructions = record.instructions
        recipe.cooking_time = record.cooking_time
        recipe.servings = record.servings
        recipe.tags = record.tags
        recipe.notes = record.notes
        recipe.modified_date = datetime.now()
        if remove_image:
            recipe.image_data = None
            recipe.image_content_type = None

        # delete-orphan cascade removes the old lines
        recipe.ingredients.clear()
        self.session.flush()
        recipe.ingredients.extend(self._ingredient_rows(record))

        self.session.flush()
        logger.info("Updated recipe %r with %d ingredient(s)", recipe.name, len(recipe.ingredients))
        return recipe.id
