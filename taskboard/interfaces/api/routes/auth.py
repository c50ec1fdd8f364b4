"""Endpoints relacionados con registro y autenticación."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from taskboard.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    register_user,
)
from taskboard.config import get_settings
from taskboard.domain.entities import User
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.security import create_access_token, password_signature
from taskboard.interfaces.api.dependencies import get_current_user
from taskboard.interfaces.api.schemas import SignupRequest, SignupResponse, Token, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Registra una cuenta nueva que queda pendiente de aprobación."""

    try:
        user = register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            confirm_password=payload.confirm_password,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return SignupResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        approved=user.approved,
        message="Account created. An administrator must approve it before you can sign in.",
    )


# Nota: se conserva la firma esperada por OAuth2PasswordRequestForm.
@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Autentica al usuario por correo electrónico y devuelve un token JWT."""

    user, auth_status = authenticate_user(db, form_data.username, form_data.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.PENDING_APPROVAL:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account pending approval",
        )

    settings = get_settings()
    access_token = create_access_token(
        data={
            "sub": user.email,
            "uid": user.id,
            "role": user.role,
            "pwd_sig": password_signature(user.password, user.approved),
        },
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    logger.info("User %s signed in", user.id)
    return {"access_token": access_token, "token_type": "bearer", "role": user.role}


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)):
    """Devuelve la información del usuario autenticado."""

    return UserRead.model_validate(current_user)
