"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import AuthSession, get_auth_session, get_current_admin
from school_portal.core.database import get_db
from school_portal.core.permissions import menu_for, permissions_for
from school_portal.core.rate_limit import LOGIN_LIMIT, rate_limit
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admin_users.schemas import AdminUserResponse
from school_portal.modules.auth import service
from school_portal.modules.auth.schemas import (
    AccessTokenResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MenuResponse,
    MeUpdate,
    RefreshRequest,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.schemas import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()
menu_router = APIRouter()


def _me(admin: AdminUser) -> MeResponse:
    return MeResponse(
        **AdminUserResponse.model_validate(admin).model_dump(),
        permissions=permissions_for(admin.role),
    )


@router.post("/login", response_model=LoginResponse)
@rate_limit(*LOGIN_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate an admin and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive
        HTTPException 429: Too many attempts from this address
    """
    try:
        admin, access_token, refresh_token = await service.login(
            db, credentials.email, credentials.password
        )
    except PortalServiceError as e:
        raise_http_error(e)

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        admin=AdminUserResponse.model_validate(admin),
    )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> AccessTokenResponse:
    try:
        access_token = await service.refresh(db, body.refresh_token)
    except PortalServiceError as e:
        raise_http_error(e)
    return AccessTokenResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(session: AuthSession = Depends(get_auth_session)) -> MessageResponse:
    """Sign out: the presented access token stops working immediately."""
    await service.logout(session.token_id, session.expires_at)
    logger.info(f"Admin logged out: {session.admin.id}")
    return MessageResponse(message="Berhasil keluar.")


@router.get("/me", response_model=MeResponse)
async def get_me(admin: AdminUser = Depends(get_current_admin)) -> MeResponse:
    return _me(admin)


@router.patch("/me", response_model=MeResponse)
async def update_me(
    data: MeUpdate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
) -> MeResponse:
    updated = await service.update_me(
        db, admin, full_name=data.full_name, avatar_url=data.avatar_url
    )
    return _me(updated)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    data: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
) -> None:
    try:
        await service.change_password(db, admin, data.current_password, data.new_password)
    except PortalServiceError as e:
        raise_http_error(e)


@menu_router.get("/menu", response_model=MenuResponse)
async def get_menu(admin: AdminUser = Depends(get_current_admin)) -> MenuResponse:
    """Back-office navigation entries visible to the signed-in admin's role."""
    return MenuResponse.model_validate({"items": menu_for(admin.role)})
