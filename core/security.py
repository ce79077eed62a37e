from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from utils.logger import logger

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def get_password_hash(password: str, rounds: int = 10) -> str:
    """Hash a password with a fresh bcrypt salt."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.warning(f"Stored password hash could not be read: {e}")
        return False


def create_access_token(
    subject: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = 0,
) -> str:
    """Sign a JWT whose ``sub`` claim is the account id.

    With ``expires_minutes`` set to 0 no ``exp`` claim is added.
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {"sub": subject, "iat": now}
    if expires_minutes > 0:
        payload["exp"] = now + timedelta(minutes=expires_minutes)
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """Verify signature (and expiry when present) and return the claims.

    Raises ``jwt.PyJWTError`` on any verification failure.
    """
    return jwt.decode(
        token,
        secret_key,
        algorithms=[algorithm],
        options={"require": ["sub"]},
    )
