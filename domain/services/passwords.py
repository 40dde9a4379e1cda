"""Form checks shared by owner registration and invitation acceptance"""

from config import settings
from domain.errors import ValidationFailed
from infrastructure.identity.provider import MAX_PASSWORD_BYTES


def check_new_password(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise ValidationFailed("Passwords do not match")
    if len(password) < settings.min_password_length:
        raise ValidationFailed(f"Password must be at least {settings.min_password_length} characters")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationFailed(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def require_text(value: str, label: str) -> str:
    """Strip a required form field; blank after stripping is rejected."""
    value = (value or "").strip()
    if not value:
        raise ValidationFailed(f"{label} is required")
    return value
