from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

Role = Literal["user", "admin"]


class User(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: Role = "user"
    created_at: datetime
    is_active: bool = True
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None
