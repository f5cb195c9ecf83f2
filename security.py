from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt
from passlib.context import CryptContext

from config import get_settings
from database import ACCOUNT, get_db
from errors import AuthError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# Utility helpers
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(data: dict, settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthError("Invalid or expired token")
    if not payload.get("id"):
        raise AuthError("Invalid token")
    return payload


# Auth dependencies
def get_current_user(
    authorization: Optional[str] = Header(None),
    settings=Depends(get_settings),
    db=Depends(get_db),
) -> dict:
    if not authorization:
        raise AuthError("Unauthorized: No token provided")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("Invalid authorization header")
    claims = decode_access_token(parts[1], settings)
    if db[ACCOUNT].find_one({"uid": claims["id"]}, {"_id": 1}) is None:
        raise AuthError("User not found")
    return claims
