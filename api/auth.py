from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional
from core.dependencies import get_auth_service
from services.auth_service import AuthService

router = APIRouter()

# Pydantic models
class UserCredentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

class TokenResponse(BaseModel):
    token: str

@router.post("/register", response_model=MessageResponse)
async def register(
    credentials: UserCredentials,
    auth: AuthService = Depends(get_auth_service)
):
    """Register a new account."""
    return await auth.register(credentials.username, credentials.password)

@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserCredentials,
    auth: AuthService = Depends(get_auth_service)
):
    """Exchange a username and password for a bearer token."""
    token = await auth.login(credentials.username, credentials.password)
    return TokenResponse(token=token)
