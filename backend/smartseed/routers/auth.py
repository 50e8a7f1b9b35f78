"""Authentication and user directory.

Endpoints:
    POST   /api/auth/login    Email + password login (returns the user, no token)
    GET    /api/users         Users by name, optionally filtered by ?role=
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.models.user import UserRole
from smartseed.schemas.auth import LoginRequest, LoginResponse, UserListResponse, UserOut
from smartseed.services import auth as auth_service

router = APIRouter()
users_router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.authenticate(body.email, body.password, db)
    return LoginResponse(user=UserOut.model_validate(user))


@users_router.get("", response_model=UserListResponse)
async def list_users(
    role: UserRole | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    users = await auth_service.list_users(db, role)
    return UserListResponse(users=[UserOut.model_validate(u) for u in users])
