"""
Restaurants API - Restaurant Route Handlers
============================================

What:  The five CRUD endpoints under /restaurants.
How:   Each handler reads the JSON body where needed, runs its validator,
       makes one RestaurantService call, and picks the status code.
       Errors are raised, not returned: the handlers registered in main.py
       map ValidationError → 400 and StoreError → 500.

Endpoints:
    GET    /restaurants        → 200 {"restaurants": [...]} (max 10)
    GET    /restaurants/{id}   → 200 representation
    POST   /restaurants        → 201 representation
    PUT    /restaurants/{id}   → 204
    DELETE /restaurants/{id}   → 204
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from restaurants_api.database import get_db_session
from restaurants_api.schemas.restaurant import (
    ErrorResponse,
    RestaurantListResponse,
    RestaurantResponse,
)
from restaurants_api.services.restaurant_service import restaurant_service
from restaurants_api.validators import (
    coerce_fields,
    ensure_ids_match,
    read_json_body,
    require_fields,
    updatable_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])

_SERVER_ERROR = {500: {"description": "Store failure", "model": ErrorResponse}}


@router.get(
    "",
    response_model=RestaurantListResponse,
    responses=_SERVER_ERROR,
    summary="List up to 10 restaurants",
)
async def list_restaurants(
    db: AsyncSession = Depends(get_db_session),
) -> RestaurantListResponse:
    restaurants = await restaurant_service.list_restaurants(db)
    return RestaurantListResponse(restaurants=restaurants)


@router.get(
    "/{restaurant_id}",
    response_model=RestaurantResponse,
    responses={500: {"description": "Store failure or unknown id", "model": ErrorResponse}},
    summary="Get a single restaurant by ID",
)
async def get_restaurant(
    restaurant_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> RestaurantResponse:
    """
    Unknown ids answer 500, not 404: the lookup miss is reported by the
    service as a store failure.
    """
    return await restaurant_service.get_restaurant(db, restaurant_id)


@router.post(
    "",
    status_code=201,
    response_model=RestaurantResponse,
    responses={
        400: {"description": "Missing required field (text/plain)"},
        **_SERVER_ERROR,
    },
    summary="Create a restaurant",
)
async def create_restaurant(
    body: Dict[str, Any] = Depends(read_json_body),
    db: AsyncSession = Depends(get_db_session),
) -> RestaurantResponse:
    """
    Requires `name`, `borough` and `cuisine` keys; `grades` and `address`
    are optional. Any `id` in the body is ignored. Scalar values are
    stored as strings; uncastable values answer 400 before any write.
    """
    require_fields(body)
    fields = coerce_fields(body)
    return await restaurant_service.create_restaurant(
        db,
        name=fields["name"],
        borough=fields["borough"],
        cuisine=fields["cuisine"],
        grades=fields.get("grades"),
        address=fields.get("address"),
    )


@router.put(
    "/{restaurant_id}",
    status_code=204,
    response_class=Response,
    responses={400: {"description": "Path and body ids differ, or a value cannot be cast", "model": ErrorResponse}, **_SERVER_ERROR},
    summary="Update some fields of a restaurant",
)
async def update_restaurant(
    restaurant_id: str,
    body: Dict[str, Any] = Depends(read_json_body),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Merge-patch update of name, borough, cuisine and address. Fields not
    sent are left untouched; other keys in the body are ignored.
    """
    ensure_ids_match(restaurant_id, body.get("id"))
    fields = coerce_fields(updatable_fields(body))
    await restaurant_service.update_restaurant(db, restaurant_id, fields)
    return Response(status_code=204)


@router.delete(
    "/{restaurant_id}",
    status_code=204,
    response_class=Response,
    responses=_SERVER_ERROR,
    summary="Delete a restaurant",
)
async def delete_restaurant(
    restaurant_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await restaurant_service.delete_restaurant(db, restaurant_id)
    return Response(status_code=204)
