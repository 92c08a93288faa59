# =============================================================================
# core/services/user_service.py - Registration/Login Demo
# =============================================================================
# Checks that credentials are present. No user is stored and no password is
# verified; register and login both echo the user back.
# =============================================================================

from app.exceptions import ValidationError
from core.models.user import User

MISSING_CREDENTIALS_MESSAGE = "Invalid parameters: username and password are required"


def validate_credentials(username: str, password: str) -> User:
    """
    Build a User from non-empty credentials.

    Raises:
        ValidationError: If username or password is empty
    """
    missing = [
        name for name, value in (("username", username), ("password", password))
        if not value
    ]
    if missing:
        raise ValidationError(MISSING_CREDENTIALS_MESSAGE, fields=missing)
    return User(username=username)
