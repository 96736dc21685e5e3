"""
Authentication Routes

POST /auth/register - Register new user (email and/or phone)
POST /auth/login - Login with email or phone and get JWT token
GET /auth/me - Get current user info
"""

import structlog
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from app.db.postgres import get_db_session
from app.core.auth import (
    USER_COLUMNS, hash_password, verify_password, create_access_token, get_current_user
)
from app.schemas.schemas import RegisterRequest, LoginRequest, TokenResponse, UserResponse
from app.services.serializers import user_response

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = structlog.get_logger(__name__)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Students start at 0 credits (Beginner). The response already carries
    an access token, so no separate login is needed.
    """
    email = request.email.lower() if request.email else None
    phone = request.phone.strip() if request.phone else None

    with get_db_session() as db:
        # Check email / phone exists
        result = db.execute(
            text("""
                SELECT user_id FROM users
                WHERE (:email IS NOT NULL AND email = :email)
                   OR (:phone IS NOT NULL AND phone = :phone)
            """),
            {"email": email, "phone": phone}
        )
        if result.fetchone():
            raise HTTPException(status_code=400, detail="Account already exists with this email or phone")

        # Create user
        result = db.execute(
            text(f"""
                INSERT INTO users (email, phone, password_hash, role, full_name, university, company)
                VALUES (:email, :phone, :password_hash, :role, :full_name, :university, :company)
                RETURNING {USER_COLUMNS}
            """),
            {
                "email": email,
                "phone": phone,
                "password_hash": hash_password(request.password),
                "role": request.role.value,
                "full_name": request.full_name.strip(),
                "university": request.university,
                "company": request.company
            }
        )
        row = dict(result.fetchone()._mapping)

    logger.info("user_registered", user_id=row["user_id"], role=row["role"])
    token = create_access_token(data={"sub": str(row["user_id"]), "role": row["role"]})
    return TokenResponse(access_token=token, user=user_response(row))


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    if request.email:
        lookup, value = "email", request.email.lower()
        failure = "Invalid email or password"
    else:
        lookup, value = "phone", request.phone.strip()
        failure = "Invalid phone number or password"

    with get_db_session() as db:
        result = db.execute(
            text(f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE {lookup} = :value"),
            {"value": value}
        )
        row = result.fetchone()

    if not row:
        raise HTTPException(status_code=401, detail=failure)

    user = dict(row._mapping)

    if not verify_password(request.password, user["password_hash"]):
        logger.info("login_failed", lookup=lookup)
        raise HTTPException(status_code=401, detail=failure)

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": str(user["user_id"]), "role": user["role"]})

    return TokenResponse(access_token=token, user=user_response(user))


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return user_response(user)
