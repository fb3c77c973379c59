import jwt
from jwt import InvalidTokenError, ExpiredSignatureError
from datetime import datetime, timedelta, timezone
from app.core.config import settings
from app.core.errors import Unauthorized
from fastapi import Request

def create_access_token(data: dict, expires_min: int | None = None):
    to_encode = data.copy()
    minutes = expires_min if expires_min is not None else settings.ACCESS_TOKEN_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm = settings.JWT_ALGO)

def create_refresh_token(data: dict, expires_days: int | None = None):
    to_encode = data.copy()
    days = expires_days if expires_days is not None else settings.REFRESH_TOKEN_DAYS
    expire = datetime.now(timezone.utc) + timedelta(days=days)
    to_encode.update({"exp" : expire, "type": "refresh"})

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm = settings.JWT_ALGO)

def user_claims(user) -> dict:
    return {
        "sub": user.email,
        "name": user.name,
        "role": user.role,
        "company": user.company_name,
        "pwd_at": user.password_changed_at,
    }

def decode_token(token : str):
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms = [settings.JWT_ALGO]
        )

        return payload
    except ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except InvalidTokenError:
        raise Unauthorized("Invalid Token")

def get_token_from_cookie(request : Request) -> str | None:
    token = request.cookies.get("access_token")
    if not token:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1]

    if not token:
        return None

    return token.strip()
