# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.core import security
from app.core.exceptions import (
    AccountDeactivatedException,
    InvalidTokenException,
    MissingTokenException,
)
from app.models.user import User
from app.schemas.common import DataResponse
from app.schemas.user import AuthData, TokenData, UserLogin, UserRegister, UserResponse
from app.services.user import user_service

router = APIRouter()


def _auth_payload(user: User) -> AuthData:
    return AuthData(
        user=UserResponse.model_validate(user),
        token=security.create_user_token(user),
    )


@router.post(
    "/register",
    response_model=DataResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def register(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new account and sign it in
    """
    user = user_service.register(db=db, obj_in=user_in)
    return DataResponse(message="User registered successfully", data=_auth_payload(user))


@router.post("/login", response_model=DataResponse[AuthData])
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Exchange email and password for an access token
    """
    user = user_service.login(
        db=db, email=credentials.email, password=credentials.password
    )
    return DataResponse(message="Login successful", data=_auth_payload(user))


@router.post("/verify", response_model=DataResponse[UserResponse])
def verify(current_user: User = Depends(security.get_current_user)):
    """
    Check the bearer token and return the profile it belongs to
    """
    return DataResponse(
        message="Token is valid", data=UserResponse.model_validate(current_user)
    )


@router.post("/refresh", response_model=DataResponse[TokenData])
def refresh(
    token: str = Depends(security.oauth2_scheme), db: Session = Depends(get_db)
):
    """
    Issue a fresh token for a correctly signed one, even if it has expired
    """
    if not token:
        raise MissingTokenException()

    token_data = security.verify_token(token, verify_exp=False)
    user = db.get(User, token_data["user_id"])
    if user is None:
        raise InvalidTokenException()
    if not user.is_active:
        raise AccountDeactivatedException()

    return DataResponse(
        message="Token refreshed successfully",
        data=TokenData(token=security.create_user_token(user)),
    )
