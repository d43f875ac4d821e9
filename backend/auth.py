"""
Authentication utilities: bcrypt password hashing and HS256 bearer tokens
"""
import os
import jwt
import bcrypt
import logging
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from errors import Conflict, Forbidden, NotFound, ValidationFailed
from journal_store import JournalStore
from models import User, UserCreate
import uuid

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "growlog-secret"
JWT_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(days=7)

security = HTTPBearer()

def jwt_secret() -> str:
    return os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))

def create_access_token(user: User) -> str:
    payload = {
        'user_id': str(user.id),
        'role': user.role,
        'exp': datetime.now(timezone.utc) + TOKEN_LIFETIME
    }
    return jwt.encode(payload, jwt_secret(), algorithm=JWT_ALGORITHM)

def signup(store: JournalStore, user_data: UserCreate) -> User:
    """Register a regular user; self-assigned admin roles are refused"""
    if user_data.role and user_data.role.upper() == "ADMIN":
        raise Forbidden("Role assignment is not allowed")

    if store.get_user_by_email(user_data.email):
        raise Conflict("Email already registered")

    if store.get_user_by_nickname(user_data.nickname):
        raise Conflict("Nickname already taken")

    user = store.insert_user({
        "email": user_data.email,
        "nickname": user_data.nickname,
        "password_hash": hash_password(user_data.password),
        "role": "USER",
    })
    logger.info(f"User {user.id} signed up")
    return user

def login(store: JournalStore, email: str, password: str) -> str:
    user = store.get_user_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return create_access_token(user)

def update_profile(store: JournalStore, user_id: uuid.UUID, nickname: str) -> User:
    nickname = (nickname or "").strip()
    if not nickname:
        raise ValidationFailed("Nickname is required")

    user = store.get_user(user_id)
    if not user:
        raise NotFound("User not found")

    holder = store.get_user_by_nickname(nickname)
    if holder and holder.id != user_id:
        raise Conflict("Nickname already taken")

    return store.update_user(user_id, {"nickname": nickname})

def change_password(store: JournalStore, user_id: uuid.UUID, current_password: str, new_password: str) -> None:
    if not current_password or not new_password:
        raise ValidationFailed("Both current and new password are required")
    if current_password == new_password:
        raise ValidationFailed("New password must differ from the current one")

    user = store.get_user(user_id)
    if not user:
        raise NotFound("User not found")
    if not verify_password(current_password, user.password_hash):
        raise ValidationFailed("Current password is incorrect")

    store.update_user(user_id, {"password_hash": hash_password(new_password)})
    logger.info(f"User {user_id} changed password")

def delete_account(store: JournalStore, user_id: uuid.UUID) -> None:
    """Remove the user and, through the store, everything they recorded"""
    if not store.get_user(user_id):
        raise NotFound("User not found")
    store.delete_user(user_id)
    logger.info(f"User {user_id} deleted their account")

def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> uuid.UUID:
    """
    Extract user ID from a bearer token issued by login
    """
    payload = decode_token(credentials.credentials)

    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: no user ID found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID format",
            headers={"WWW-Authenticate": "Bearer"},
        )

async def require_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user_id: uuid.UUID = Depends(get_current_user),
) -> uuid.UUID:
    """Only tokens carrying the ADMIN role claim pass"""
    if decode_token(credentials.credentials).get("role") != "ADMIN":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user_id
