"""Shopping list service"""

import logging
from collections import Counter
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session

from domain.enums import ItemSource
from domain.models import ShoppingList, ShoppingListItem, AppUser
from domain.schemas.shopping_schemas import (
    GenerationWarning,
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
)
from repositories import (
    MealPlanRepository,
    ShoppingListRepository,
    ShoppingListItemRepository,
)
from adapters.spoonacular_adapter import ingredients_of
from services.ingredient_aggregator import (
    IngredientLine,
    RecipeIngredients,
    aggregate_ingredients,
    guess_aisle,
)
from app.exceptions import AppError, NotFoundError

logger = logging.getLogger("plateplan.shopping")

CLEARABLE_ITEM_FIELDS = ("notes",)


class ShoppingService:
    """Business logic for shopping lists and their items."""

    @staticmethod
    def generate_for_plan(
        db: Session,
        provider,
        user: AppUser,
        plan_id: UUID,
        name: Optional[str] = None,
    ) -> Tuple[ShoppingList, List[GenerationWarning]]:
        """
        Build (or rebuild) the shopping list of a meal plan.

        Algorithm:
        1. Load the plan's meals
        2. Fetch each distinct recipe's ingredients from the provider
        3. Merge ingredients across all meal occurrences
        4. Find or create the list linked to the plan
        5. Replace its system items, keeping user-added items

        A recipe whose details cannot be fetched, or that carries no usable
        ingredients, is skipped and reported in the returned warnings.

        Args:
            db: Database session
            provider: recipe provider client
            user: owner of the plan
            plan_id: Meal plan UUID
            name: list name used when the list is created

        Returns:
            (ShoppingList, warnings)

        Raises:
            NotFoundError: If plan not found or doesn't belong to user
        """
        logger.info(f"Generating shopping list for plan {plan_id}, user {user.user_id}")

        plan = MealPlanRepository(db).get_by_id_and_user(plan_id, user.user_id)
        if not plan:
            raise NotFoundError(f"Meal plan {plan_id} not found")

        meals = plan.meals
        occurrences = Counter()
        titles = {}
        for meal in meals:
            if meal.get("recipe_id") is None:
                continue
            rid = int(meal["recipe_id"])
            occurrences[rid] += 1
            titles.setdefault(rid, meal.get("title"))

        logger.info(f"Plan has {len(meals)} meals, {len(occurrences)} distinct recipes")

        # Fetch each recipe once; a meal repeated in the plan counts once per occurrence
        warnings: List[GenerationWarning] = []
        fetched = {}
        for rid in occurrences:
            try:
                recipe = provider.get_recipe_information(rid)
            except AppError as e:
                logger.warning(f"Skipping recipe {rid} in shopping list: {e}")
                warnings.append(
                    GenerationWarning(
                        recipe_id=rid,
                        title=titles.get(rid),
                        message=f"Ingredients unavailable: {e.message}",
                    )
                )
                continue

            if not isinstance(recipe, dict):
                recipe = {}
            title = recipe.get("title") or titles.get(rid)
            records = ingredients_of(recipe)
            if not records:
                logger.warning(f"Recipe {rid} has no ingredient data, skipping")
                warnings.append(
                    GenerationWarning(
                        recipe_id=rid, title=title, message="No ingredients available"
                    )
                )
                continue

            fetched[rid] = RecipeIngredients(
                recipe_id=rid,
                title=title,
                ingredients=[IngredientLine(**rec) for rec in records],
            )

        contributions = []
        for meal in meals:
            if meal.get("recipe_id") is None:
                continue
            recipe = fetched.get(int(meal["recipe_id"]))
            if recipe is not None:
                contributions.append(recipe)

        aggregated = aggregate_ingredients(contributions)
        logger.info(f"Aggregated {len(aggregated)} shopping list lines")

        list_repo = ShoppingListRepository(db)
        item_repo = ShoppingListItemRepository(db)

        shopping_list = list_repo.get_for_plan(plan_id, user.user_id)
        if shopping_list is None:
            shopping_list = ShoppingList(
                user_id=user.user_id,
                plan_id=plan_id,
                name=name or f"Shopping list {plan.start_date.isoformat()}",
                start_date=plan.start_date,
                end_date=plan.end_date,
            )
            db.add(shopping_list)
            db.flush()
        else:
            removed = item_repo.delete_system_items(shopping_list.list_id)
            logger.info(f"Replaced {removed} generated items on list {shopping_list.list_id}")
            shopping_list.start_date = plan.start_date
            shopping_list.end_date = plan.end_date
            if name:
                shopping_list.name = name

        position = item_repo.next_position(shopping_list.list_id)
        item_repo.bulk_create(
            [
                ShoppingListItem(
                    list_id=shopping_list.list_id,
                    name=agg.name,
                    amount=agg.amount,
                    unit=agg.unit,
                    aisle=agg.aisle,
                    recipe_ids=list(agg.recipe_ids),
                    purchased=False,
                    added_by=ItemSource.SYSTEM,
                    position=position + offset,
                )
                for offset, agg in enumerate(aggregated)
            ]
        )

        db.commit()
        db.refresh(shopping_list)
        db.expire(shopping_list, ["items"])

        logger.info(
            f"Shopping list ready: list_id={shopping_list.list_id}, "
            f"items={len(shopping_list.items)}, warnings={len(warnings)}"
        )
        return shopping_list, warnings

    @staticmethod
    def list_for_user(
        db: Session, user_id: UUID, include_archived: bool = False
    ) -> List[ShoppingList]:
        return ShoppingListRepository(db).get_by_user_id(user_id, include_archived)

    @staticmethod
    def get_list(db: Session, user_id: UUID, list_id: UUID) -> ShoppingList:
        shopping_list = ShoppingListRepository(db).get_by_id_and_user(list_id, user_id)
        if not shopping_list:
            raise NotFoundError(f"Shopping list {list_id} not found")
        return shopping_list

    @staticmethod
    def create_list(
        db: Session, user_id: UUID, data: ShoppingListCreate
    ) -> ShoppingList:
        """Create an empty, manually managed list."""
        shopping_list = ShoppingListRepository(db).create(
            ShoppingList(
                user_id=user_id,
                name=data.name,
                start_date=data.start_date,
                end_date=data.end_date,
            )
        )
        logger.info(f"Shopping list created: list_id={shopping_list.list_id}")
        return shopping_list

    @staticmethod
    def update_list(
        db: Session, user_id: UUID, list_id: UUID, data: ShoppingListUpdate
    ) -> ShoppingList:
        shopping_list = ShoppingService.get_list(db, user_id, list_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(shopping_list, key, value)
        return ShoppingListRepository(db).update(shopping_list)

    @staticmethod
    def delete_list(db: Session, user_id: UUID, list_id: UUID) -> None:
        if not ShoppingListRepository(db).delete_by_id_and_user(list_id, user_id):
            raise NotFoundError(f"Shopping list {list_id} not found")
        logger.info(f"Shopping list deleted: list_id={list_id}")

    # ------------------ Items ------------------

    @staticmethod
    def _get_item(
        db: Session, user_id: UUID, list_id: UUID, item_id: UUID
    ) -> ShoppingListItem:
        ShoppingService.get_list(db, user_id, list_id)
        item = ShoppingListItemRepository(db).get_in_list(list_id, item_id)
        if not item:
            raise NotFoundError(f"Item {item_id} not found in shopping list {list_id}")
        return item

    @staticmethod
    def add_item(
        db: Session, user_id: UUID, list_id: UUID, data: ShoppingListItemCreate
    ) -> ShoppingList:
        """Add a user item; the aisle is guessed from the name when omitted."""
        shopping_list = ShoppingService.get_list(db, user_id, list_id)
        item_repo = ShoppingListItemRepository(db)

        item_repo.create(
            ShoppingListItem(
                list_id=list_id,
                name=data.name,
                amount=data.amount,
                unit=data.unit,
                aisle=data.aisle or guess_aisle(data.name),
                recipe_ids=[],
                notes=data.notes,
                purchased=False,
                added_by=ItemSource.USER,
                position=item_repo.next_position(list_id),
            )
        )
        db.expire(shopping_list, ["items"])
        return shopping_list

    @staticmethod
    def update_item(
        db: Session,
        user_id: UUID,
        list_id: UUID,
        item_id: UUID,
        data: ShoppingListItemUpdate,
    ) -> ShoppingListItem:
        item = ShoppingService._get_item(db, user_id, list_id, item_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            # An explicit null clears notes; other fields ignore it
            if value is not None or key in CLEARABLE_ITEM_FIELDS:
                setattr(item, key, value)
        return ShoppingListItemRepository(db).update(item)

    @staticmethod
    def toggle_item(
        db: Session, user_id: UUID, list_id: UUID, item_id: UUID
    ) -> ShoppingListItem:
        item = ShoppingService._get_item(db, user_id, list_id, item_id)
        item.purchased = not item.purchased
        return ShoppingListItemRepository(db).update(item)

    @staticmethod
    def delete_item(db: Session, user_id: UUID, list_id: UUID, item_id: UUID) -> None:
        item = ShoppingService._get_item(db, user_id, list_id, item_id)
        ShoppingListItemRepository(db).remove(item)
        logger.info(f"Shopping list item deleted: item_id={item_id}")

    @staticmethod
    def clear_completed(db: Session, user_id: UUID, list_id: UUID) -> ShoppingList:
        shopping_list = ShoppingService.get_list(db, user_id, list_id)
        removed = ShoppingListItemRepository(db).delete_purchased(list_id)
        db.expire(shopping_list, ["items"])
        logger.info(f"Cleared {removed} purchased items from list {list_id}")
        return shopping_list
