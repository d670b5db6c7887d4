"""Spoonacular adapter for recipe search and recipe details.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

import httpx

from adapters.recipe_cache import RecipeCache
from app.exceptions import NotFoundError, RecipeProviderError
from domain.schemas.recipe_schemas import RecipeSearchParams

logger = logging.getLogger("plateplan.spoonacular")

# RecipeSearchParams field -> complexSearch query parameter
_RANGE_PARAMS = {
    "max_ready_time": "maxReadyTime",
    "min_calories": "minCalories",
    "max_calories": "maxCalories",
    "min_protein": "minProtein",
    "max_protein": "maxProtein",
    "min_carbs": "minCarbs",
    "max_carbs": "maxCarbs",
    "min_fat": "minFat",
    "max_fat": "maxFat",
}


def summarize(recipe: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a provider payload to the summary fields shown in lists."""
    return {
        "id": recipe.get("id"),
        "title": recipe.get("title"),
        "image": recipe.get("image"),
        "readyInMinutes": recipe.get("readyInMinutes"),
        "servings": recipe.get("servings"),
    }


def _amount(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def ingredients_of(recipe: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Extract ``{name, amount, unit, aisle}`` records from a detail payload.

    Entries that are not objects or have no name are dropped.
    """
    entries = recipe.get("extendedIngredients")
    records = []
    for ing in entries if isinstance(entries, list) else []:
        if not isinstance(ing, dict):
            continue
        name = ing.get("name") or ing.get("nameClean") or ing.get("originalName")
        if not name:
            continue
        records.append(
            {
                "name": name,
                "amount": _amount(ing.get("amount")),
                "unit": ing.get("unit") or "",
                "aisle": ing.get("aisle") or None,
            }
        )
    return records


def nutrient_amount(recipe: Dict[str, Any], *names: str) -> Optional[float]:
    """Amount of the first nutrient matching one of ``names`` (case-insensitive)."""
    wanted = {n.lower() for n in names}
    for nutrient in (recipe.get("nutrition") or {}).get("nutrients") or []:
        if (nutrient.get("name") or "").lower() in wanted:
            return float(nutrient.get("amount") or 0)
    return None


class SpoonacularAdapter:
    """Thin client over the Spoonacular REST API.

    Recipe detail lookups go through the injected ``RecipeCache``; searches
    always hit the provider.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.spoonacular.com",
        timeout: float = 15.0,
        cache: Optional[RecipeCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.cache = cache if cache is not None else RecipeCache()
        self._client = httpx.Client(
            base_url=base_url, timeout=timeout, transport=transport
        )

    def close(self):
        self._client.close()
        logger.info("Spoonacular client closed")

    # ------------------ HTTP ------------------
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if not self.api_key:
            raise RecipeProviderError(
                "Recipe provider is not configured", http_status=503
            )

        query = {"apiKey": self.api_key}
        query.update({k: v for k, v in (params or {}).items() if v is not None})

        try:
            response = self._client.get(path, params=query)
        except httpx.TransportError as exc:
            logger.error("Spoonacular request to %s failed: %s", path, exc)
            raise RecipeProviderError(
                "Recipe service is unavailable", http_status=503
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Spoonacular request to %s failed: %s", path, exc)
            raise RecipeProviderError(
                "Error communicating with recipe service", http_status=502
            ) from exc

        if response.status_code >= 400:
            self._raise_for_status(path, response)

        try:
            return response.json()
        except ValueError as exc:
            logger.error(
                "Spoonacular %s returned a non-JSON body: %s", path, response.text[:200]
            )
            raise RecipeProviderError(
                "Recipe service returned an unreadable response", http_status=502
            ) from exc

    @staticmethod
    def _expect(path: str, payload: Any, kind: type) -> Any:
        if not isinstance(payload, kind):
            logger.error(
                "Spoonacular %s returned %s, expected %s",
                path,
                type(payload).__name__,
                kind.__name__,
            )
            raise RecipeProviderError(
                "Recipe service returned an unexpected response", http_status=502
            )
        return payload

    @staticmethod
    def _raise_for_status(path: str, response: httpx.Response):
        code = response.status_code
        logger.warning("Spoonacular %s returned %d: %s", path, code, response.text[:200])

        if code == 404:
            raise NotFoundError("Recipe not found")
        if code == 402:
            raise RecipeProviderError(
                "Recipe service daily quota exceeded",
                http_status=429,
                code="RECIPE_PROVIDER_QUOTA",
            )
        if code == 401:
            raise RecipeProviderError(
                "Recipe service rejected the configured API key", http_status=502
            )
        raise RecipeProviderError(
            "Error communicating with recipe service",
            http_status=502,
            details={"upstream_status": code},
        )

    # ------------------ Search ------------------
    def search_recipes(self, params: RecipeSearchParams) -> Dict[str, Any]:
        """Run a complexSearch; returns ``{"results": [...], "totalResults": n}``."""
        query: Dict[str, Any] = {
            "addRecipeInformation": "true",
            "addRecipeNutrition": "true",
            "number": params.number,
            "query": params.query or None,
        }
        if params.diet and params.diet != "any":
            query["diet"] = params.diet
        if params.cuisines:
            query["cuisine"] = ",".join(params.cuisines)
        if params.exclude_ingredients:
            query["excludeIngredients"] = ",".join(params.exclude_ingredients)
        for field_name, param in _RANGE_PARAMS.items():
            value = getattr(params, field_name)
            if value is not None:
                query[param] = value

        path = "/recipes/complexSearch"
        data = self._expect(path, self._get(path, query), dict)
        results = data.get("results") or []
        logger.info("Recipe search returned %d results", len(results))
        return {
            "results": results,
            "totalResults": data.get("totalResults", len(results)),
        }

    # ------------------ Details ------------------
    def get_recipe_information(
        self, recipe_id: int, use_cache: bool = True
    ) -> Dict[str, Any]:
        """Fetch full recipe details, including nutrition and ingredients."""
        if use_cache:
            cached = self.cache.get(recipe_id)
            if cached is not None:
                logger.debug("Recipe cache hit: %s", recipe_id)
                return cached

        path = f"/recipes/{int(recipe_id)}/information"
        recipe = self._expect(path, self._get(path, {"includeNutrition": "true"}), dict)
        self.cache.set(recipe_id, recipe)
        return recipe

    def get_recipe_information_bulk(
        self, recipe_ids: Sequence[int]
    ) -> List[Dict[str, Any]]:
        """Fetch several recipes at once; unknown ids are silently absent."""
        ids = list(dict.fromkeys(int(r) for r in recipe_ids))
        if not ids:
            return []

        found = self.cache.get_many(ids)
        missing = [rid for rid in ids if rid not in found]
        if missing:
            path = "/recipes/informationBulk"
            fetched = self._get(
                path,
                {"ids": ",".join(str(r) for r in missing), "includeNutrition": "true"},
            )
            fetched = [r for r in self._expect(path, fetched, list) if isinstance(r, dict)]
            self.cache.set_many(fetched)
            for recipe in fetched:
                if recipe.get("id") is None:
                    continue
                found[int(recipe["id"])] = recipe

        return [found[rid] for rid in ids if rid in found]
