from fastapi import APIRouter, HTTPException, Response, status, Depends
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.auth_schemas import LoginRequest, RegisterRequest, LoginResponse, RegisterResponse, LogoutResponse
from api.schemas.user_schemas import User, UserProfileResponse
from api.utils.auth import (
    authenticate_user,
    clear_auth_cookie,
    create_user,
    get_current_user,
    get_user_by_email,
    set_auth_cookie,
)

auth_routes = APIRouter()


@auth_routes.post("/login")
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)) -> LoginResponse:
    """Authenticate user and set HTTP-only cookie with token."""
    user = authenticate_user(request.email, request.password, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    set_auth_cookie(response, user)
    return LoginResponse(message="Login successful", token_set=True)


@auth_routes.post("/register")
def register(request: RegisterRequest, response: Response, db: Session = Depends(get_db)) -> RegisterResponse:
    """Self-registration always creates a technician; managers are provisioned by import."""
    if get_user_by_email(request.email, db):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    if request.password != request.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match"
        )

    user = create_user(request.email, request.password, db, full_name=request.full_name)
    set_auth_cookie(response, user)
    return RegisterResponse(message="Registration successful")

@auth_routes.post("/logout")
def logout(response: Response) -> LogoutResponse:
    """Clear the authentication cookie."""
    clear_auth_cookie(response)
    return LogoutResponse(message="Logout successful - cookie cleared")

@auth_routes.get("/me", response_model=UserProfileResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)) -> UserProfileResponse:
    """Current user's profile, including role."""
    return UserProfileResponse(
        id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        role=current_user.role,
    )
