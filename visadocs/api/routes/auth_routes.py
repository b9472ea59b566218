"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
GET /auth/usage - Analysis quota usage
"""

from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends
from sqlalchemy import or_, select

from visadocs.db.postgres import get_db_session
from visadocs.core.auth import hash_password, verify_password, create_access_token, get_current_user
from visadocs.core.config import get_settings
from visadocs.models import User
from visadocs.services.email_service import send_welcome_email
from visadocs.services.quota_service import get_usage
from visadocs.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, UsageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

settings = get_settings()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest, background_tasks: BackgroundTasks):
    """
    Register a new student account and return an access token.

    New accounts start with the default analysis quota.
    """
    with get_db_session() as db:
        existing = db.scalar(
            select(User).where(or_(User.email == request.email, User.username == request.username))
        )
        if existing:
            field = "Email" if existing.email == request.email else "Username"
            raise HTTPException(status_code=400, detail=f"{field} already registered")

        user = User(
            password_hash=hash_password(request.password),
            role="user",
            status="active",
            analysis_count=0,
            max_analyses=settings.default_max_analyses,
            **request.model_dump(exclude={"password"})
        )
        db.add(user)
        db.flush()

    background_tasks.add_task(send_welcome_email, user.email, user.first_name)

    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login with username or email and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = db.scalar(
            select(User).where(or_(User.username == request.username, User.email == request.username))
        )

    if not user or not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": str(user.id), "role": user.role})

    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return UserResponse.model_validate(user)


@router.get("/usage", response_model=UsageResponse)
async def usage(user: User = Depends(get_current_user)):
    """How many analyses the current user has used and has left."""
    with get_db_session() as db:
        return UsageResponse(**get_usage(db, user.id))
