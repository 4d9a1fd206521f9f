import jwt
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fastapi import Depends, HTTPException
from pydantic import BaseModel
from typing import Annotated, Optional

from helpers import settings
from helpers.errors import AuthError

security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    user_id: str
    email: str


def _jwt_key() -> str:
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET environment variable is not set")
    return settings.JWT_SECRET


def generate_user_token(payload: dict):
    claims = {"aud": settings.JWT_AUDIENCE, **payload}
    return jwt.encode(claims, _jwt_key(), algorithm='HS256')


def verify_token(token: str) -> AuthenticatedUser:
    try:
        claims = jwt.decode(
            token,
            _jwt_key(),
            algorithms=['HS256'],
            audience=settings.JWT_AUDIENCE,
        )
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}") from e

    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        raise AuthError("Token is missing the subject or email claim")
    return AuthenticatedUser(user_id=str(user_id), email=email)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthenticatedUser:
    if credentials is None:
        raise HTTPException(status_code=401, detail="No token provided")
    try:
        return verify_token(credentials.credentials)
    except AuthError:
        raise HTTPException(status_code=401, detail="Invalid token")
