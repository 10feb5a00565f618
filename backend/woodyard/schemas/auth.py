"""Auth schemas"""
from pydantic import BaseModel, Field, field_validator


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    username: str
    role: str
    display_name: str | None
    phone: str | None = None
    email: str | None = None
    is_active: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def role_to_str(cls, v: object) -> str:
        if hasattr(v, "value"):
            return str(v.value)
        return str(v)

    model_config = {"from_attributes": True}
