# =============================================================================
# app/routers/users.py - Registration/Login Endpoints
# =============================================================================
# Demo endpoints: credentials are checked for presence and echoed back.
# There is no user database and no authentication.
# =============================================================================

from fastapi import APIRouter

from core.models.envelope import Envelope
from core.models.user import User, UserCredentials
from core.services.user_service import validate_credentials

router = APIRouter()


@router.post("/register", response_model=Envelope[User])
def register(request: UserCredentials):
    """Register a user (validation only, nothing is stored)."""
    user = validate_credentials(request.username, request.password)
    return Envelope(code=200, message="Registration successful", data=user)


@router.post("/login", response_model=Envelope[User])
def login(request: UserCredentials):
    """Log a user in (validation only, no credential check)."""
    user = validate_credentials(request.username, request.password)
    return Envelope(code=200, message="Login successful", data=user)
