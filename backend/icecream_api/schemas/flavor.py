"""
Acme Ice Cream API: Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the JSON contract of /api/flavors.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate the OpenAPI document.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FlavorResponse(BaseModel):
    """
    What:  A persisted flavor row.
    Who:   Returned by list, create and update endpoints.
    """
    id: int = Field(description="Server-assigned flavor identifier")
    name: str = Field(description="Flavor name")
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Creation timestamp (not refreshed on update)",
    )

    model_config = {"from_attributes": True}


class FlavorWrite(BaseModel):
    """
    What:  Body of POST /api/flavors and PUT /api/flavors/{id}.

    `name` is optional at the schema level so that a missing or empty name
    reaches the handler and gets the API's own 400 message instead of a
    framework-generated error.
    """
    name: Optional[str] = Field(default=None, description="Flavor name (required, non-empty)")


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every endpoint.

    Example:
        {"error": "Flavor not found"}
    """
    error: str = Field(description="Human-readable error description")
