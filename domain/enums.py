"""
Domain enums for PlatePlan application.
Contains all enumeration types used across the domain models.
"""

import enum


class MealType(str, enum.Enum):
    """Meal slots within a day"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class TimeFrame(str, enum.Enum):
    """Length of a generated meal plan"""

    DAY = "day"
    WEEK = "week"


class ItemSource(str, enum.Enum):
    """Who added a shopping list item"""

    USER = "user"
    SYSTEM = "system"
