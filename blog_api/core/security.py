"""Security utilities for JWT authentication and password hashing."""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from blog_api.config import settings
from blog_api.core.exceptions import UnauthorizedException


# New hashes use PBKDF2; bcrypt hashes from imported accounts still verify
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password for storage in `users.password_hash`."""
    try:
        return pwd_context.hash(password)
    except ValueError:
        fallback_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
        return fallback_ctx.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login password. Unknown hash formats never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    username: str,
    roles: List[str],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        user_id: Subject of the token
        username: Username at issue time
        roles: Role names held at issue time
        expires_delta: Custom lifetime. If None, uses ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT token

    Raises:
        ValueError: If SECRET_KEY is not configured
    """
    if not settings.SECRET_KEY:
        raise ValueError("SECRET_KEY environment variable is not set")

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        # jose requires a string subject
        "sub": str(user_id),
        "username": username,
        "roles": list(roles),
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT token.

    Raises:
        UnauthorizedException: If token is invalid, badly signed or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException("Invalid token") from e


def get_token_subject(token: str) -> Optional[int]:
    """Extract the user id from a token, or None if the token is unusable."""
    try:
        payload = decode_token(token)
    except UnauthorizedException:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
