from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.dependencies import (
    enforce_rate_limit,
    get_admin_auth_service,
    get_current_admin,
)
from app.core.config import get_settings
from app.core.rate_limit import RateLimitRule
from app.infra.db.models import AdminUser
from app.schemas.auth import (
    AdminSessionResponse,
    AdminUserResponse,
    ChangePasswordRequest,
    LoginRequest,
    SetupCredentials,
    SetupResponse,
)
from app.schemas.common import ApiResponse
from app.services.admin_auth_service import AdminAuthService
from app.services.errors import (
    AdminAlreadyExistsError,
    AdminAuthenticationError,
    InvalidPasswordChangeError,
)

router = APIRouter()
settings = get_settings()
login_rule = RateLimitRule(
    limit=settings.login_rate_limit,
    window_seconds=settings.login_rate_window_seconds,
)


def _to_user_response(admin: AdminUser) -> AdminUserResponse:
    return AdminUserResponse.model_validate(admin)


@router.post("/setup", response_model=SetupResponse)
async def setup_admin(
    service: AdminAuthService = Depends(get_admin_auth_service),
) -> SetupResponse:
    try:
        result = await service.setup_initial_admin()
    except AdminAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return SetupResponse(
        message="Admin account created. Store these credentials safely.",
        credentials=SetupCredentials(
            username=result.admin.username,
            password=result.password,
        ),
    )


@router.post("/login", response_model=AdminSessionResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    service: AdminAuthService = Depends(get_admin_auth_service),
) -> AdminSessionResponse:
    await enforce_rate_limit(request, "login", login_rule)
    try:
        result = await service.login(username=payload.username, password=payload.password)
    except AdminAuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    response.set_cookie(
        key=settings.admin_session_cookie_name,
        value=result.session_token,
        max_age=settings.admin_session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )
    return AdminSessionResponse(
        user=_to_user_response(result.admin),
        expires_at=result.expires_at,
    )


@router.post("/logout", response_model=ApiResponse)
async def logout(response: Response) -> ApiResponse:
    response.delete_cookie(
        key=settings.admin_session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )
    return ApiResponse(success=True, message="Logged out")


@router.get("/me", response_model=AdminSessionResponse)
async def me(admin: AdminUser = Depends(get_current_admin)) -> AdminSessionResponse:
    return AdminSessionResponse(user=_to_user_response(admin))


@router.post("/change-password", response_model=ApiResponse)
async def change_password(
    payload: ChangePasswordRequest,
    admin: AdminUser = Depends(get_current_admin),
    service: AdminAuthService = Depends(get_admin_auth_service),
) -> ApiResponse:
    try:
        await service.change_password(
            admin=admin,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except InvalidPasswordChangeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ApiResponse(success=True, message="Password changed")
