"""
Authentication router: registration, account setup, login and org switching.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import (
    RequestContext,
    get_db,
    get_request_context,
    get_request_context_allow_inactive,
)
from app.schemas.auth import (
    AuthResponse,
    CompleteSetupRequest,
    LoginRequest,
    RegisterOwnerRequest,
    SetActiveOrganizationRequest,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register-owner", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_owner(
    data: RegisterOwnerRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Sign up a new owner together with their organization.

    Returns a session token scoped to the new organization.
    """
    service = AuthService(db)
    result = await service.register_owner(
        name=data.name,
        email=data.email,
        password=data.password,
        organization_name=data.organization_name,
        industry=data.industry,
        timezone=data.timezone,
        currency=data.currency,
    )
    await db.commit()
    return AuthResponse.from_result(result)


@router.post("/complete-setup/{token}", response_model=AuthResponse)
async def complete_setup(
    token: str,
    data: CompleteSetupRequest,
    db: AsyncSession = Depends(get_db),
):
    """Set a password with the setup token from the provisioning link."""
    service = AuthService(db)
    result = await service.complete_setup(token, data.password)
    await db.commit()
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate with email and password and return a session token."""
    service = AuthService(db)
    result = await service.login(credentials.email, credentials.password)
    await db.commit()
    return AuthResponse.from_result(result)


@router.post("/set-active-organization", response_model=AuthResponse)
async def set_active_organization(
    data: SetActiveOrganizationRequest,
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """Switch the active organization and return a token scoped to it."""
    service = AuthService(db)
    result = await service.switch_active_organization(context.principal, data.organization_id)
    await db.commit()
    return AuthResponse.from_result(result)


@router.get("/me", response_model=AuthResponse)
async def get_me(
    context: RequestContext = Depends(get_request_context_allow_inactive),
    db: AsyncSession = Depends(get_db),
):
    """Profile of the authenticated principal (available before setup completes)."""
    service = AuthService(db)
    result = await service.describe_principal(context.principal, context.organization, context.membership)
    return AuthResponse.from_result(result)
