"""
Restaurants API - Restaurant Service
=====================================

What:  The store operations behind each route, plus the representation mapper.
Why:   Keeps SQLAlchemy out of the route handlers and gives every store
       failure a single exit: StoreError, which the global handler turns
       into a generic 500.
Who:   Called by restaurants_api.routes.restaurants; tested with mock sessions.

Operations (one store call each):
    list_restaurants   → SELECT ... LIMIT 10
    get_restaurant     → SELECT ... WHERE id = :id   (missing → RestaurantNotFoundError)
    create_restaurant  → INSERT, commit
    update_restaurant  → UPDATE ... SET <partial fields> WHERE id = :id, commit
    delete_restaurant  → DELETE ... WHERE id = :id, commit

Design Decision:
    RestaurantService is stateless; it receives the session for each call.
    Update and delete on an id that does not exist are not errors: they touch
    zero rows and the route still answers 204.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from restaurants_api.exceptions import RestaurantNotFoundError, StoreError
from restaurants_api.models.restaurant import Restaurant
from restaurants_api.schemas.restaurant import RestaurantResponse

logger = logging.getLogger(__name__)

# The collection is large; listing is capped instead of paginated
LIST_LIMIT = 10


def to_representation(restaurant: Restaurant) -> RestaurantResponse:
    """Project a stored restaurant onto its public API shape. Pure; never mutates."""
    return RestaurantResponse(
        id=restaurant.id,
        name=restaurant.name,
        borough=restaurant.borough,
        cuisine=restaurant.cuisine,
        address=restaurant.address,
        grades=restaurant.grades,
    )


class RestaurantService:
    """
    Business logic layer for restaurant operations.

    Error Handling Strategy:
        Any exception from the session is logged and re-raised as StoreError
        with the original exception type in its context. RestaurantNotFoundError
        is already a StoreError and propagates as-is.
    """

    async def list_restaurants(
        self, db: AsyncSession, limit: int = LIST_LIMIT
    ) -> List[RestaurantResponse]:
        try:
            result = await db.execute(select(Restaurant).limit(limit))
            restaurants = list(result.scalars().all())
        except Exception as e:
            logger.error("Store error listing restaurants: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not list restaurants",
                context={"error_type": type(e).__name__},
            )
        return [to_representation(restaurant) for restaurant in restaurants]

    async def get_restaurant(self, db: AsyncSession, restaurant_id: str) -> RestaurantResponse:
        """
        Retrieve a single restaurant by id.

        Raises:
            RestaurantNotFoundError: no restaurant has this id (→ 500)
            StoreError: query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Restaurant).where(Restaurant.id == restaurant_id)
            )
            restaurant = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Store error fetching restaurant %s: %s", restaurant_id, str(e))
            raise StoreError(
                message="Could not retrieve the restaurant",
                context={"restaurant_id": restaurant_id, "error_type": type(e).__name__},
            )

        if restaurant is None:
            raise RestaurantNotFoundError(restaurant_id)
        return to_representation(restaurant)

    async def create_restaurant(
        self,
        db: AsyncSession,
        name: Any,
        borough: Any,
        cuisine: Any,
        grades: Optional[List[Any]] = None,
        address: Optional[Any] = None,
    ) -> RestaurantResponse:
        """
        Insert a restaurant and return its representation.

        The id is generated by the model default at flush time; `grades`
        defaults to an empty list when omitted.
        """
        restaurant = Restaurant(
            name=name,
            borough=borough,
            cuisine=cuisine,
            grades=grades if grades is not None else [],
            address=address,
        )
        try:
            db.add(restaurant)
            await db.flush()  # Assigns the id
            # Mapped before commit: a row that cannot be represented is rolled back
            representation = to_representation(restaurant)
            await db.commit()
        except Exception as e:
            logger.error("Store error creating restaurant: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not create the restaurant",
                context={"error_type": type(e).__name__},
            )

        logger.info("Restaurant %s created", restaurant.id)
        return representation

    async def update_restaurant(
        self, db: AsyncSession, restaurant_id: str, fields: Dict[str, Any]
    ) -> None:
        """
        Apply a merge-patch: only the keys in `fields` are written.

        An empty `fields` dict performs no write.
        """
        if not fields:
            logger.info("Update of restaurant %s had no updatable fields", restaurant_id)
            return

        try:
            result = await db.execute(
                update(Restaurant)
                .where(Restaurant.id == restaurant_id)
                .values(**fields)
            )
            await db.commit()
        except Exception as e:
            logger.error("Store error updating restaurant %s: %s", restaurant_id, str(e))
            raise StoreError(
                message="Could not update the restaurant",
                context={"restaurant_id": restaurant_id, "error_type": type(e).__name__},
            )

        logger.info(
            "Restaurant %s updated (%s), %d row(s) matched",
            restaurant_id, ", ".join(sorted(fields)), result.rowcount,
        )

    async def delete_restaurant(self, db: AsyncSession, restaurant_id: str) -> None:
        try:
            result = await db.execute(
                delete(Restaurant).where(Restaurant.id == restaurant_id)
            )
            await db.commit()
        except Exception as e:
            logger.error("Store error deleting restaurant %s: %s", restaurant_id, str(e))
            raise StoreError(
                message="Could not delete the restaurant",
                context={"restaurant_id": restaurant_id, "error_type": type(e).__name__},
            )

        logger.info("Restaurant %s deleted, %d row(s) matched", restaurant_id, result.rowcount)


# ── Singleton Instance ────────────────────────────────────────────────────
restaurant_service = RestaurantService()
