"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes

The authenticated user is never cached server-side: every request decodes
its bearer token and reloads the user row, so the store stays the single
source of truth for credits and profile fields.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import text

from app.core.config import get_settings
from app.db.postgres import get_db_session

settings = get_settings()

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

# Bearer token extractor
bearer_scheme = HTTPBearer()

USER_COLUMNS = """
    user_id, email, phone, role, full_name, avatar_url, university, company, bio,
    github_url, linkedin_url, leetcode_url, gfg_url, total_credits, is_active, created_at
"""


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def load_user(user_id: int) -> Optional[dict]:
    """Fetch a user row as a dict, or None."""
    with get_db_session() as db:
        result = db.execute(
            text(f"SELECT {USER_COLUMNS} FROM users WHERE user_id = :id"),
            {"id": user_id}
        )
        row = result.fetchone()
    return dict(row._mapping) if row else None


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise credentials_exception

    user = load_user(int(user_id))
    if not user:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return user


async def get_current_student(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require student role."""
    if user["role"] != "student":
        raise HTTPException(status_code=403, detail="Students only")
    return user


async def get_current_recruiter(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require recruiter role."""
    if user["role"] != "recruiter":
        raise HTTPException(status_code=403, detail="Recruiters only")
    return user
