from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import AdminRole


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=80)
    password: str = Field(min_length=1, max_length=128)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=6, max_length=128)


class AdminUserResponse(BaseModel):
    id: int
    username: str
    email: str | None
    role: AdminRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminSessionResponse(BaseModel):
    success: bool = True
    user: AdminUserResponse
    expires_at: datetime | None = None


class SetupCredentials(BaseModel):
    username: str
    password: str


class SetupResponse(BaseModel):
    success: bool = True
    message: str
    credentials: SetupCredentials
