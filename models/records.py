"""
Recipe Records

Plain value objects passed between the text codec, the grocery aggregator
and the recipe repository. They hold no database state; the repository
converts between these and the SQLAlchemy models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from constants.units import Unit


@dataclass(frozen=True)
class IngredientLine:
    """One ingredient entry: name, optional quantity/unit, optional modifier."""
    name: str
    quantity: Optional[Decimal] = None
    unit: Optional[Unit] = None
    modifier: Optional[str] = None

    @property
    def base_unit(self) -> str:
        """Base unit tag ('g', 'ml' or 'pieces'). No unit means pieces."""
        unit = self.unit or Unit.PIECES
        return unit.dimension.base_tag


@dataclass(frozen=True)
class RecipeRecord:
    """A recipe as read from text or loaded from the repository."""
    name: str
    cooking_time: int
    servings: int
    instructions: str
    ingredients: Tuple[IngredientLine, ...] = ()
    tags: str = ''
    notes: str = ''
    created: datetime = field(default_factory=datetime.now)
    modified: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None
    has_image: bool = False

    @property
    def tag_list(self):
        """Tags split on commas, authored order kept, blanks dropped."""
        return [tag.strip() for tag in self.tags.split(',') if tag.strip()]


@dataclass(frozen=True)
class AggregatedLine:
    """Grocery list group: total quantity of one ingredient in one base unit."""
    name: str
    modifier: str
    total_quantity: Decimal
    base_unit: str

    @property
    def display_name(self) -> str:
        if self.modifier:
            return f"{self.name} ({self.modifier})"
        return self.name
