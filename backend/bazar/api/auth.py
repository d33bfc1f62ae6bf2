"""
Authentication API endpoints for Bazar
- Registration and login (public)
- Current user profile (bearer token)
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bazar.core.auth import AuthenticatedUser, TokenService, get_current_user, get_token_service
from bazar.core.database import get_db
from bazar.domain.user import AuthResponse, LoginRequest, RegisterRequest, User
from bazar.services.auth_service import AuthService

router = APIRouter()


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, tokens)


# Plain `def` handlers: bcrypt and database calls block, so FastAPI runs
# them in its worker thread pool.

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Create an account and return a token for it"""
    token, user = service.register(payload.name, payload.email, payload.password)
    return AuthResponse(token=token, user=user)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange email + password for a bearer token"""
    token, user = service.login(payload.email, payload.password)
    return AuthResponse(token=token, user=user)


@router.get("/me", response_model=User)
def get_current_user_info(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Get current user information"""
    return service.get_user(current_user.id)
