from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from b2b_pricing.core.config import settings
from b2b_pricing.schemas.user import TokenData

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# Password hashing
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(data: dict, expire: datetime, token_type: str) -> str:
    payload = dict(data)
    payload.update({"exp": expire, "type": token_type})
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.utcnow() + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    return _encode(data, expire, "access")


def create_refresh_token(data: dict, expires_days: Optional[int] = None) -> str:
    expire = datetime.utcnow() + timedelta(
        days=expires_days or settings.REFRESH_TOKEN_EXPIRE_DAYS
    )
    return _encode(data, expire, "refresh")


def _decode(token: str, token_type: str) -> TokenData:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return TokenData()
    # a refresh token must not pass as an access token, nor the reverse
    if payload.get("type") != token_type:
        return TokenData()
    return TokenData(username=payload.get("sub"), role=payload.get("role"))


def decode_access_token(token: str) -> TokenData:
    return _decode(token, "access")


def decode_refresh_token(token: str) -> TokenData:
    return _decode(token, "refresh")
