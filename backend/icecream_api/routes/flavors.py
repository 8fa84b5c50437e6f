"""
Acme Ice Cream API: Flavor Route Handlers
==========================================

What:  GET/POST /api/flavors and PUT/DELETE /api/flavors/{flavor_id}.
How:   Each handler checks its input, calls exactly one FlavorService
       operation and maps the outcome to a status code. Failures are raised
       as application exceptions and rendered by the global handlers.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from icecream_api.database import get_db_session
from icecream_api.exceptions import NotFoundError, ValidationError
from icecream_api.schemas.flavor import ErrorResponse, FlavorResponse, FlavorWrite
from icecream_api.services.flavor_service import flavor_service


router = APIRouter(prefix="/api", tags=["Flavors"])

# flavors.id is a 32-bit SERIAL; ids outside its range are rejected as
# malformed (400) instead of reaching the driver.
FLAVOR_ID_MIN = -(2**31)
FLAVOR_ID_MAX = 2**31 - 1


def _require_name(payload: Optional[FlavorWrite]) -> str:
    """Returns the body's name or raises ValidationError when missing/empty."""
    name = payload.name if payload is not None else None
    if not name:
        raise ValidationError(message="Name is required", field="name")
    return name


@router.get(
    "/flavors",
    response_model=List[FlavorResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all flavors",
)
async def list_flavors(
    db: AsyncSession = Depends(get_db_session),
) -> List[FlavorResponse]:
    flavors = await flavor_service.list_flavors(db)
    return [FlavorResponse.model_validate(flavor) for flavor in flavors]


@router.post(
    "/flavors",
    response_model=FlavorResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing name", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a flavor",
)
async def create_flavor(
    payload: Optional[FlavorWrite] = None,
    db: AsyncSession = Depends(get_db_session),
) -> FlavorResponse:
    """
    Create a flavor from `{"name": ...}`.

    The name check runs before the session is used, so a rejected request
    never reaches the database.
    """
    name = _require_name(payload)
    flavor = await flavor_service.create_flavor(db, name)
    return FlavorResponse.model_validate(flavor)


@router.put(
    "/flavors/{flavor_id}",
    response_model=FlavorResponse,
    responses={
        400: {"description": "Missing name", "model": ErrorResponse},
        404: {"description": "Flavor not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Rename a flavor",
)
async def update_flavor(
    flavor_id: int = Path(ge=FLAVOR_ID_MIN, le=FLAVOR_ID_MAX, description="Flavor id"),
    payload: Optional[FlavorWrite] = None,
    db: AsyncSession = Depends(get_db_session),
) -> FlavorResponse:
    name = _require_name(payload)
    flavor = await flavor_service.update_flavor(db, flavor_id, name)
    if flavor is None:
        raise NotFoundError(resource="Flavor", resource_id=flavor_id)
    return FlavorResponse.model_validate(flavor)


@router.delete(
    "/flavors/{flavor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Flavor not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a flavor",
)
async def delete_flavor(
    flavor_id: int = Path(ge=FLAVOR_ID_MIN, le=FLAVOR_ID_MAX, description="Flavor id"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    deleted = await flavor_service.delete_flavor(db, flavor_id)
    if deleted is None:
        raise NotFoundError(resource="Flavor", resource_id=flavor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
