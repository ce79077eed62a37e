from typing import Optional

import jwt
from fastapi.concurrency import run_in_threadpool

from core.config import Settings, settings
from core.exceptions import (
    AccountNotFoundError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    UnauthenticatedError,
    UsernameTakenError,
    ValidationError,
)
from core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from services.store import AccountStore, DuplicateError, StorageError
from utils.logger import logger


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an ``Authorization`` header value.

    ``Bearer <token>`` yields ``<token>``; any other non-empty value is
    returned as-is and left for signature verification to reject.
    """
    if not authorization or not authorization.strip():
        return None
    parts = authorization.strip().split(None, 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip() or None
    return authorization.strip()


class AuthService:
    """Authentication service for account registration and bearer tokens."""

    def __init__(self, accounts: AccountStore, config: Settings = settings):
        self.accounts = accounts
        self.config = config

    async def register(self, username: Optional[str], password: Optional[str]) -> dict:
        """Create a new account with a bcrypt-hashed password."""
        if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
            raise ValidationError("username and password are required")

        try:
            if await self.accounts.find_account_by_username(username):
                raise UsernameTakenError()

            hashed = await run_in_threadpool(
                get_password_hash, password, self.config.BCRYPT_ROUNDS
            )
            account = await self.accounts.create_account(username, hashed)
        except DuplicateError:
            # Lost a race with a concurrent registration of the same name
            raise UsernameTakenError()
        except StorageError as e:
            logger.error(f"Registration error: {e}")
            raise InternalError("Failed to register user")

        logger.info(f"Registered user: {account.id}")
        return {"message": "User registered"}

    async def login(self, username: Optional[str], password: Optional[str]) -> str:
        """Verify credentials and issue a signed access token."""
        if not isinstance(username, str) or not isinstance(password, str):
            raise ValidationError("username and password are required")

        try:
            account = await self.accounts.find_account_by_username(username)
        except StorageError as e:
            logger.error(f"Login lookup error: {e}")
            raise InternalError("Failed to log in")

        if account is None:
            raise AccountNotFoundError()

        valid = await run_in_threadpool(verify_password, password, account.hashed_password)
        if not valid:
            logger.warning(f"Invalid password for user: {account.id}")
            raise InvalidCredentialsError()

        token = create_access_token(
            account.id,
            self.config.SECRET_KEY,
            algorithm=self.config.ALGORITHM,
            expires_minutes=self.config.ACCESS_TOKEN_EXPIRE_MINUTES,
        )
        logger.info(f"User logged in: {account.id}")
        return token

    def authenticate(self, token: Optional[str]) -> str:
        """Return the account id embedded in a valid token."""
        if not token:
            raise UnauthenticatedError()

        try:
            payload = decode_access_token(token, self.config.SECRET_KEY, self.config.ALGORITHM)
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected token: {e}")
            raise InvalidTokenError()

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        return user_id
