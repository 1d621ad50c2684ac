"""
Security utilities for authentication.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
import hashlib
import uuid

from app.core.config import settings
from app.core.errors import AuthenticationError

MIN_PASSWORD_LENGTH = 6

# Using ident="2b" for maximum compatibility with bcrypt 4.x
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
    bcrypt__rounds=settings.jwt.password_hash_rounds
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Bcrypt hashed password

    Returns:
        bool: True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Generate bcrypt password hash.

    Args:
        password: Plain text password

    Returns:
        str: Bcrypt hashed password
    """
    return pwd_context.hash(password)


def validate_password_strength(password: str) -> Tuple[bool, Optional[str]]:
    """
    Validate password meets the minimum length requirement.

    Args:
        password: Password to validate

    Returns:
        tuple: (is_valid, error_message)
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return True, None


def _encode(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": token_type,
        "jti": str(uuid.uuid4())
    })
    return jwt.encode(to_encode, settings.jwt.jwt_secret, algorithm=settings.jwt.jwt_algorithm)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional custom expiration time

    Returns:
        str: Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt.jwt_expiration_minutes)
    return _encode(data, "access", expires_delta)


def create_api_key(user_id: str) -> str:
    """
    Create a long-lived API key for programmatic access.

    Only the SHA-256 hash of the returned key is stored, so issuing a new key
    revokes the previous one.
    """
    return _encode(
        {"sub": user_id},
        "api_key",
        timedelta(days=settings.jwt.api_key_expiration_days),
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate JWT token.

    Args:
        token: JWT token to decode

    Returns:
        dict: Decoded token payload

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.jwt.jwt_secret, algorithms=[settings.jwt.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("Not authorized to access this route")


def hash_token(token: str) -> str:
    """
    Hash a token for storage using SHA-256.

    Args:
        token: Token to hash

    Returns:
        str: SHA-256 hash of token
    """
    return hashlib.sha256(token.encode()).hexdigest()
