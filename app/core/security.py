# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.core.config import settings
from app.core.exceptions import (
    AccountDeactivatedException,
    InvalidTokenException,
    MissingTokenException,
    TokenExpiredException,
)
from app.models.user import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extraction; a missing or non-Bearer header yields None so the
# gate can answer with its own message instead of FastAPI's default
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        Whether the password matches
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Generate password hash

    Args:
        password: Plain text password

    Returns:
        Password hash
    """
    return pwd_context.hash(password)


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[int] = None
) -> str:
    """
    Create access token

    Args:
        data: Token claims; "sub" must hold the user id as a string
        expires_delta: Expiration time (minutes)

    Returns:
        Access token
    """
    to_encode = data.copy()
    minutes = expires_delta if expires_delta else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode.update({"exp": datetime.now(timezone.utc) + timedelta(minutes=minutes)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email})


def verify_token(token: str, verify_exp: bool = True) -> Dict[str, Any]:
    """
    Verify token

    Args:
        token: Authentication token
        verify_exp: Reject tokens past their "exp" claim

    Returns:
        {"user_id": int, "email": str | None}

    Raises:
        TokenExpiredException: Signature is valid but the token has expired
        InvalidTokenException: Bad signature, malformed token or missing subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": verify_exp},
        )
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError:
        raise InvalidTokenException()

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise InvalidTokenException()
    return {"user_id": user_id, "email": payload.get("email")}


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user or fail with 401"""
    if not token:
        raise MissingTokenException()

    token_data = verify_token(token)
    user = db.get(User, token_data["user_id"])
    if user is None:
        raise InvalidTokenException()
    if not user.is_active:
        raise AccountDeactivatedException()
    return user


def authenticate_user(db: Session, email: str, password: str) -> Union[User, None]:
    """
    Authenticate user with email and password

    Args:
        db: Database session
        email: Login email
        password: Password

    Returns:
        User object if the credentials match, None otherwise

    Raises:
        AccountDeactivatedException: Credentials match a deactivated account
    """
    if not email or not password:
        return None

    user = db.scalar(select(User).where(User.email == email))
    if not user or not verify_password(password, user.password_hash):
        return None
    if not user.is_active:
        raise AccountDeactivatedException()
    return user


def get_username_from_request(request) -> str:
    """
    Extract the user id from the Authorization header for request logging

    Args:
        request: FastAPI Request object

    Returns:
        "user:<id>" or 'anonymous' if the header is missing or invalid
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return "anonymous"

    try:
        token = auth_header.split(" ")[1]
        return f"user:{verify_token(token)['user_id']}"
    except Exception:
        return "anonymous"
