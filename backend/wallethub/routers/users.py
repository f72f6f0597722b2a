"""User account API endpoints."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..exceptions import UserNotFoundError
from ..schemas.user import (
    DeviceUserCreate,
    UserCreate,
    UserUpdate,
    UserFilter,
    UserResponse,
    UserWithWallets,
    UserWithSessions,
    UserWithRelations,
    UserDetails,
    UserListResponse,
)
from ..services.users import UsersService

router = APIRouter(prefix="/api/users", tags=["users"])


def get_users_service(db: AsyncSession = Depends(get_db)) -> UsersService:
    """Dependency to build a UsersService bound to the request session."""
    return UsersService(db, logger=logging.getLogger("wallethub.services.users"))


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(user: UserCreate, service: UsersService = Depends(get_users_service)):
    """Create a new user."""
    try:
        return await service.create(user)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="User with this device already exists")


@router.post("/device", response_model=UserResponse)
async def find_or_create_device_user(
    request: DeviceUserCreate,
    service: UsersService = Depends(get_users_service),
):
    """Return the user for a device, creating it on first contact.

    The mobile app calls this on every launch; existing users get their
    last-seen timestamp refreshed.
    """
    try:
        return await service.find_or_create_by_device_id(request.device_id)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="User for this device was created concurrently")


@router.get("", response_model=UserListResponse)
async def list_users(
    skip: Optional[int] = Query(None, ge=0),
    take: Optional[int] = Query(None, ge=1, le=100),
    cursor: Optional[str] = None,
    order_by: Optional[str] = Query(None, pattern=r"^[a-z_]+(:(asc|desc))?$"),
    device_id: Optional[str] = None,
    email: Optional[str] = None,
    seen_since: Optional[datetime] = None,
    service: UsersService = Depends(get_users_service),
):
    """List users with their wallets."""
    where = UserFilter(device_id=device_id, email=email, seen_since=seen_since)
    try:
        page = await service.list(
            skip=skip,
            take=take,
            cursor=cursor,
            where=where,
            order_by=order_by,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return UserListResponse(
        data=[UserWithWallets.model_validate(user) for user in page.data],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
    )


@router.get("/device/{device_id}", response_model=UserWithSessions)
async def get_user_by_device(device_id: str, service: UsersService = Depends(get_users_service)):
    """Get a user by device id."""
    user = await service.find_by_device_id(device_id)

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserWithSessions.model_validate(user)


@router.get("/{user_id}", response_model=UserWithRelations)
async def get_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Get a specific user by ID."""
    user = await service.find_by_id(user_id)

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserWithRelations.model_validate(user)


@router.get("/{user_id}/details", response_model=UserDetails)
async def get_user_details(user_id: str, service: UsersService = Depends(get_users_service)):
    """Get a user with recent transactions, live sessions and active push tokens."""
    try:
        user = await service.find_by_id_with_relations(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return UserDetails.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    update: UserUpdate,
    service: UsersService = Depends(get_users_service),
):
    """Update a user."""
    try:
        return await service.update(user_id, update)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.post("/{user_id}/seen", response_model=UserResponse)
async def touch_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Record that a user was just seen."""
    try:
        return await service.update_last_seen(user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Delete a user and everything it owns."""
    try:
        await service.delete(user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    return Response(status_code=204)
