from __future__ import annotations
from quotify_api.core.config import settings
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from passlib.context import CryptContext
from typing import Optional

import jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from quotify_api.models.auth import TokenData
from quotify_api.models.user import User


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

AGENT_SCOPE = "agent"


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> Optional[User]:
    res = await session.execute(select(User).where(User.email == email.lower()))
    user = res.scalar_one_or_none()
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    if user.disabled:
        return None
    return user


def create_access_token(
    sub: str,
    expires_delta: Optional[timedelta] = None,
    scope: Optional[str] = None,
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": sub, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    if scope:
        payload["scope"] = scope
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=401, detail="Missing or invalid Authorization header"
        )
    return authorization.split(" ", 1)[1].strip()


def decode_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        return TokenData(sub=payload["sub"], exp=payload["exp"], scope=payload.get("scope"))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
