"""
Admin authentication: one shared password, a signed JWT in an http-only cookie.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from dotenv import load_dotenv
from fastapi import HTTPException, Request

load_dotenv()

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = "HS256"
TOKEN_TTL_HOURS = 24
COOKIE_NAME = "admin_token"
SECURE_COOKIES = os.getenv("APP_ENV", "development").strip().lower() == "production"


def verify_password(password: Optional[str]) -> bool:
    # an unset ADMIN_PASSWORD never matches
    return bool(ADMIN_PASSWORD) and password == ADMIN_PASSWORD


def generate_token() -> str:
    expires = datetime.now(timezone.utc) + timedelta(hours=TOKEN_TTL_HOURS)
    return jwt.encode({"admin": True, "exp": expires}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: Optional[str]) -> bool:
    if not token:
        return False
    try:
        jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return True
    except jwt.InvalidTokenError:
        return False


def get_auth_token(request: Request) -> Optional[str]:
    return request.cookies.get(COOKIE_NAME)


def is_authenticated(request: Request) -> bool:
    return verify_token(get_auth_token(request))


def require_admin(request: Request) -> None:
    """FastAPI Depends: 401 unless the admin cookie carries a valid token."""
    if not is_authenticated(request):
        raise HTTPException(401, "Unauthorized")


def set_auth_cookie(response, token: str) -> None:
    response.set_cookie(
        COOKIE_NAME, token,
        httponly=True,
        secure=SECURE_COOKIES,
        samesite="lax",
        max_age=TOKEN_TTL_HOURS * 60 * 60,
    )


def clear_auth_cookie(response) -> None:
    response.delete_cookie(COOKIE_NAME)
