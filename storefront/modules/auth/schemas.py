from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from storefront.modules.users.schemas import Role, User


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str


class AuthResult(BaseModel):
    success: bool
    message: str
    token: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: User


class TokenPayload(BaseModel):
    """Payload segment of a session token. Field names on the wire are camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    email: str
    role: Role
    iat: int
    exp: int


class SessionStatus(BaseModel):
    is_authenticated: bool
    is_admin: bool
    user: Optional[User] = None
    logged_out: bool = False


class PasswordStrengthRequest(BaseModel):
    password: str


class PasswordRequirements(BaseModel):
    min_length: bool
    has_uppercase: bool
    has_lowercase: bool
    has_number: bool
    has_special: bool

    @property
    def satisfied(self) -> bool:
        return all([self.min_length, self.has_uppercase, self.has_lowercase, self.has_number, self.has_special])


class PasswordResetRequest(BaseModel):
    email: str


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str


class ResetTokenStatus(BaseModel):
    valid: bool
    email: Optional[str] = None
