"""
Registration and reset field validation.

Each validator returns the user-facing message for the first rule the value
breaks, or None when the value is acceptable.
"""
import re
from typing import Optional

from storefront.modules.auth.schemas import PasswordRequirements

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NAME_RE = re.compile(r"[a-zA-Z\s]+")
SPECIAL_CHARS = "!@#$%^&*"
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email or not email.strip():
        return "Email is required"
    if not EMAIL_RE.fullmatch(email):
        return "Please enter a valid email address"
    return None


def validate_password(password: Optional[str]) -> Optional[str]:
    if not password or not password.strip():
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    if not any(c in SPECIAL_CHARS for c in password):
        return f"Password must contain at least one special character ({SPECIAL_CHARS})"
    return None


def validate_name(name: Optional[str], field_name: str) -> Optional[str]:
    if not name or not name.strip():
        return f"{field_name} is required"
    if len(name.strip()) < MIN_NAME_LENGTH:
        return f"{field_name} must be at least {MIN_NAME_LENGTH} characters long"
    if not NAME_RE.fullmatch(name):
        return f"{field_name} can only contain letters"
    return None


def password_requirements(password: str) -> PasswordRequirements:
    """Per-rule checklist, used to render live feedback while a password is typed."""
    password = password or ""
    return PasswordRequirements(
        min_length=len(password) >= MIN_PASSWORD_LENGTH,
        has_uppercase=bool(re.search(r"[A-Z]", password)),
        has_lowercase=bool(re.search(r"[a-z]", password)),
        has_number=bool(re.search(r"[0-9]", password)),
        has_special=any(c in SPECIAL_CHARS for c in password),
    )
