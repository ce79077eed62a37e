from typing import Optional

from fastapi import Depends, Header

from core.exceptions import InternalError
from services.auth_service import AuthService, extract_bearer_token
from services.ledger_service import LedgerService

# Global service instances (will be set by main.py)
auth_service: Optional[AuthService] = None
ledger_service: Optional[LedgerService] = None


def get_auth_service() -> AuthService:
    if auth_service is None:
        raise InternalError("Service not initialised")
    return auth_service


def get_ledger_service() -> LedgerService:
    if ledger_service is None:
        raise InternalError("Service not initialised")
    return ledger_service


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> str:
    """Resolve the caller's account id from the ``Authorization`` header."""
    return auth.authenticate(extract_bearer_token(authorization))


def set_services(auth: Optional[AuthService], ledger: Optional[LedgerService]):
    """Set the global service instances."""
    global auth_service, ledger_service
    auth_service = auth
    ledger_service = ledger
