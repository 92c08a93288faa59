# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# Models for the registration/login demo endpoints. Credentials are
# validated for presence only; nothing is stored or authenticated.
# =============================================================================

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """
    Request body for POST /register and POST /login.

    Example:
        {
            "username": "alice",
            "password": "s3cret"
        }
    """
    username: str = Field(default="", description="Username (required)")
    password: str = Field(default="", description="Password (required)")


class User(BaseModel):
    """User echoed back after register/login. The password is never returned."""
    username: str
