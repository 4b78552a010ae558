"""
auth.py
-------
Guest sign-in, account registration, login, token verification and logout.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server.database import User
from birddash.server.dependencies import auth_limit, get_current_user, get_db, get_settings_dep
from birddash.server.schemas import GuestRequest, LoginRequest, RegisterRequest
from birddash.server.security import (
    clear_token_cookie, create_token, generate_guest_id, hash_password, set_token_cookie,
    verify_password,
)


router = APIRouter(prefix="/api/auth", tags=["auth"])


def _issue_token(response: Response, user: User, settings) -> str:
    token = create_token(user, settings.jwt_secret, settings.jwt_expires_in)
    set_token_cookie(response, token, settings.jwt_expires_in, secure=settings.is_production)
    return token


def _created_at(user: User):
    return user.created_at.isoformat() if user.created_at else None


@router.post("/guest", status_code=201, dependencies=[Depends(auth_limit)])
def create_guest(body: GuestRequest, response: Response, db=Depends(get_db),
                 settings=Depends(get_settings_dep)):
    if db.query(User).filter(User.username == body.username).first() is not None:
        raise HTTPException(status_code=409, detail="Username already taken")

    user = User(username=body.username, is_guest=True, guest_id=generate_guest_id())
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username already taken")
    db.refresh(user)

    token = _issue_token(response, user, settings)
    DebugLogger.action(f"Guest '{user.username}' created (id {user.id})", category="auth")
    return {
        "message": "Guest user created successfully",
        "user": {"id": user.id, "username": user.username, "is_guest": True},
        "token": token,
    }


@router.post("/register", status_code=201, dependencies=[Depends(auth_limit)])
def register(body: RegisterRequest, response: Response, db=Depends(get_db),
             settings=Depends(get_settings_dep)):
    email = str(body.email).lower()
    clash = db.query(User).filter(or_(User.username == body.username, User.email == email)).first()
    if clash is not None:
        raise HTTPException(status_code=409, detail="Username or email already exists")

    user = User(username=body.username, email=email,
                password_hash=hash_password(body.password), is_guest=False)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username or email already exists")
    db.refresh(user)

    token = _issue_token(response, user, settings)
    DebugLogger.action(f"Registered '{user.username}' (id {user.id})", category="auth")
    return {
        "message": "Account created successfully",
        "user": {"id": user.id, "username": user.username, "email": user.email, "is_guest": False},
        "token": token,
    }


@router.post("/login", dependencies=[Depends(auth_limit)])
def login(body: LoginRequest, response: Response, db=Depends(get_db),
          settings=Depends(get_settings_dep)):
    user = (db.query(User)
            .filter(User.username == body.username, User.is_guest.is_(False))
            .first())
    # Same message for unknown users and bad passwords
    if user is None or not verify_password(body.password, user.password_hash):
        DebugLogger.action(f"Failed login for '{body.username}'", category="auth")
        raise HTTPException(status_code=401, detail="Invalid username or password")

    user.updated_at = datetime.utcnow()
    db.commit()

    token = _issue_token(response, user, settings)
    DebugLogger.action(f"'{user.username}' logged in", category="auth")
    return {
        "message": "Login successful",
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "is_guest": False,
            "created_at": _created_at(user),
        },
        "token": token,
    }


@router.get("/verify")
def verify(user: User = Depends(get_current_user)):
    return {
        "valid": True,
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "is_guest": bool(user.is_guest),
            "created_at": _created_at(user),
            "total_games_played": user.total_games_played or 0,
            "best_score": user.best_score or 0,
        },
    }


@router.post("/logout")
def logout(response: Response, settings=Depends(get_settings_dep)):
    clear_token_cookie(response, secure=settings.is_production)
    return {"message": "Logged out successfully"}
