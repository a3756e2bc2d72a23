from fastapi import APIRouter, Depends, HTTPException, Request, status

from storefront.config.settings import settings
from storefront.core.dependencies import get_session, require_authenticated, require_guest
from storefront.core.rate_limit import limiter
from storefront.modules.auth.schemas import (
    AuthResponse, AuthResult, LoginRequest, PasswordRequirements, PasswordResetConfirm,
    PasswordResetRequest, PasswordStrengthRequest, RegisterRequest, ResetTokenStatus, SessionStatus
)
from storefront.modules.auth.service import SessionManager
from storefront.modules.auth.validators import password_requirements
from storefront.modules.users.schemas import User

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult, session: SessionManager) -> AuthResponse:
    return AuthResponse(message=result.message, token=result.token, user=session.get_current_user())


@router.post("/register", response_model=AuthResponse, status_code=201, dependencies=[Depends(require_guest)])
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    session: SessionManager = Depends(get_session)
):
    """Register a new customer account and sign it in"""
    result = session.register(
        register_data.email,
        register_data.password,
        register_data.first_name,
        register_data.last_name,
    )
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return _auth_response(result, session)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(require_guest)])
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    session: SessionManager = Depends(get_session)
):
    """Login and get a session token"""
    result = session.login(login_data.email, login_data.password)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.message)
    return _auth_response(result, session)


@router.post("/logout", status_code=200)
async def logout(session: SessionManager = Depends(get_session)):
    """Logout, clearing the session token and the cart"""
    session.logout()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=User)
async def get_current_user(current_user: User = Depends(require_authenticated)):
    """Get the signed-in user"""
    return current_user


@router.get("/session", response_model=SessionStatus)
async def get_session_status(session: SessionManager = Depends(get_session)):
    """Session snapshot for rendering the header; reports a pending logout notice once"""
    return SessionStatus(
        is_authenticated=session.is_authenticated(),
        is_admin=session.is_admin(),
        user=session.get_current_user(),
        logged_out=session.consume_logout_notice(),
    )


@router.post("/password-strength", response_model=PasswordRequirements)
async def password_strength(body: PasswordStrengthRequest):
    return password_requirements(body.password)


@router.post("/password-reset/request", dependencies=[Depends(require_guest)])
@limiter.limit(settings.auth_rate_limit)
async def request_password_reset(
    request: Request,
    body: PasswordResetRequest,
    session: SessionManager = Depends(get_session)
):
    """Start a password reset; the response is the same whether or not the account exists"""
    result = session.request_password_reset(body.email)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return {"message": result.message}


@router.get("/password-reset/validate", response_model=ResetTokenStatus)
async def validate_reset_token(token: str, session: SessionManager = Depends(get_session)):
    email = session.validate_reset_token(token)
    return ResetTokenStatus(valid=email is not None, email=email)


@router.post("/password-reset/confirm", dependencies=[Depends(require_guest)])
@limiter.limit(settings.auth_rate_limit)
async def confirm_password_reset(
    request: Request,
    body: PasswordResetConfirm,
    session: SessionManager = Depends(get_session)
):
    result = session.reset_password(body.token, body.new_password)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return {"message": result.message}
