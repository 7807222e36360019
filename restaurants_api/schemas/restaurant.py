"""
Restaurants API - Pydantic Response Schemas
============================================

What:  Pydantic models defining what the API returns.
Why:   Schemas are separate from the ORM model so the public representation
       is an explicit projection: only the fields listed here leave the
       service, regardless of what the stored document carries.

Request bodies are deliberately NOT modelled here. Create and update
payloads are read as plain JSON objects and checked for key presence by
`restaurants_api.validators`, without type coercion.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class RestaurantResponse(BaseModel):
    """
    What:  The API representation of one restaurant.
    Who:   Returned by GET /restaurants/{id} and POST /restaurants.
    """
    id: str = Field(description="Store-assigned restaurant identifier")
    name: Optional[str] = Field(default=None, description="Restaurant name")
    borough: Optional[str] = Field(default=None, description="Borough the restaurant is in")
    cuisine: Optional[str] = Field(default=None, description="Cuisine served")
    address: Optional[Any] = Field(default=None, description="Structured address (opaque)")
    grades: Optional[List[Any]] = Field(default=None, description="Inspection grades, oldest first")

    model_config = {"from_attributes": True}


class RestaurantListResponse(BaseModel):
    """
    What:  Wrapper for GET /restaurants.
    Why a fixed cap: the collection holds tens of thousands of documents,
    so at most 10 are returned. There is no cursor.
    """
    restaurants: List[RestaurantResponse] = Field(description="Up to 10 restaurants")


class ErrorResponse(BaseModel):
    """
    Error body for JSON error responses (400 id mismatch, 404, 500).

    Example:
        {"message": "Internal server error"}
    """
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
