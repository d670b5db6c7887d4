"""
Ingredient aggregation for shopping-list generation.

Merges the ingredient lines of several recipes into one deduplicated list.
Lines merge only when both the normalized name and the unit match; amounts
are never converted between units.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger("plateplan.aggregator")

DEFAULT_AISLE = "Other"

# Evaluated top to bottom, first match wins.
AISLE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("milk", "Dairy & Eggs"),
    ("cheese", "Dairy & Eggs"),
    ("yogurt", "Dairy & Eggs"),
    ("cream", "Dairy & Eggs"),
    ("butter", "Dairy & Eggs"),
    ("egg", "Dairy & Eggs"),
    ("chicken", "Meat & Seafood"),
    ("beef", "Meat & Seafood"),
    ("pork", "Meat & Seafood"),
    ("turkey", "Meat & Seafood"),
    ("fish", "Meat & Seafood"),
    ("shrimp", "Meat & Seafood"),
    ("meat", "Meat & Seafood"),
    ("apple", "Produce"),
    ("banana", "Produce"),
    ("orange", "Produce"),
    ("lettuce", "Produce"),
    ("vegetable", "Produce"),
    ("carrot", "Produce"),
    ("tomato", "Produce"),
    ("potato", "Produce"),
    ("onion", "Produce"),
    ("garlic", "Produce"),
    ("fruit", "Produce"),
    ("broccoli", "Produce"),
    ("pepper", "Produce"),
    ("pasta", "Grains"),
    ("rice", "Grains"),
    ("cereal", "Grains"),
    ("flour", "Grains"),
    ("sugar", "Grains"),
    ("grain", "Grains"),
    ("bread", "Grains"),
    ("oil", "Condiments"),
    ("vinegar", "Condiments"),
    ("sauce", "Condiments"),
    ("condiment", "Condiments"),
    ("ketchup", "Condiments"),
    ("mustard", "Condiments"),
    ("mayonnaise", "Condiments"),
    ("dressing", "Condiments"),
    ("cookie", "Snacks"),
    ("candy", "Snacks"),
    ("chocolate", "Snacks"),
    ("snack", "Snacks"),
    ("chip", "Snacks"),
    ("juice", "Beverages"),
    ("soda", "Beverages"),
    ("water", "Beverages"),
    ("drink", "Beverages"),
    ("beverage", "Beverages"),
    ("coffee", "Beverages"),
    ("tea", "Beverages"),
    ("soap", "Household"),
    ("detergent", "Household"),
    ("paper", "Household"),
    ("cleaning", "Household"),
)


@dataclass(frozen=True)
class IngredientLine:
    """One ingredient record as supplied by the recipe provider"""

    name: str
    amount: float = 0.0
    unit: str = ""
    aisle: Optional[str] = None


@dataclass
class RecipeIngredients:
    recipe_id: int
    title: Optional[str] = None
    ingredients: List[IngredientLine] = field(default_factory=list)


@dataclass
class AggregatedItem:
    name: str
    amount: float
    unit: str
    aisle: str
    recipe_ids: List[int] = field(default_factory=list)


def normalize_name(name: str) -> str:
    """Case-fold and trim; inner runs of whitespace collapse to one space."""
    return " ".join((name or "").split()).casefold()


def normalize_unit(unit: Optional[str]) -> str:
    return " ".join((unit or "").split()).casefold()


def merge_key(name: str, unit: Optional[str]) -> Tuple[str, str]:
    return normalize_name(name), normalize_unit(unit)


def guess_aisle(name: str) -> str:
    lowered = normalize_name(name)
    for keyword, aisle in AISLE_KEYWORDS:
        if keyword in lowered:
            return aisle
    return DEFAULT_AISLE


def aggregate_ingredients(recipes: Iterable[RecipeIngredients]) -> List[AggregatedItem]:
    """
    Merge ingredient lines across recipes.

    Lines sharing a merge key have their amounts summed and their recipe ids
    accumulated in first-seen order. Output order and the displayed name
    follow the first occurrence of each key. The aisle is the first provider aisle seen for
    the key, otherwise a keyword guess from the name.

    Args:
        recipes: recipes in plan order; a recipe may appear more than once

    Returns:
        List of merged items
    """
    merged: Dict[Tuple[str, str], AggregatedItem] = {}

    for recipe in recipes:
        for line in recipe.ingredients:
            if not normalize_name(line.name):
                continue
            key = merge_key(line.name, line.unit)
            item = merged.get(key)
            if item is None:
                item = AggregatedItem(
                    name=" ".join(line.name.split()),
                    amount=0.0,
                    unit=(line.unit or "").strip(),
                    aisle=line.aisle or "",
                )
                merged[key] = item
            elif not item.aisle and line.aisle:
                item.aisle = line.aisle

            item.amount += float(line.amount or 0)
            if recipe.recipe_id not in item.recipe_ids:
                item.recipe_ids.append(recipe.recipe_id)

    for item in merged.values():
        if not item.aisle:
            item.aisle = guess_aisle(item.name)

    logger.debug("Aggregated %d distinct ingredient lines", len(merged))
    return list(merged.values())


T = TypeVar("T")


def partition_items(items: Sequence[T]) -> Tuple[List[T], List[T]]:
    """Split items into (active, completed) by their ``purchased`` flag."""
    active: List[T] = []
    completed: List[T] = []
    for item in items:
        (completed if getattr(item, "purchased", False) else active).append(item)
    return active, completed


def group_by_aisle(items: Iterable[T]) -> Dict[str, List[T]]:
    """Group items by aisle, keeping the order in which aisles first appear."""
    grouped: Dict[str, List[T]] = {}
    for item in items:
        aisle = getattr(item, "aisle", None) or DEFAULT_AISLE
        grouped.setdefault(aisle, []).append(item)
    return grouped
