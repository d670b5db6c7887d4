"""API routes package"""

from . import health, users, recipes, plans, shopping

__all__ = ["health", "users", "recipes", "plans", "shopping"]
