from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from utils.validations import is_valid_name, normalize_whitespace, validate_length_range


class CreateAclRole(BaseModel):
    role_name: str = Field(..., title="Role Name", description="The name of the role.")
    description: Optional[str] = Field(
        None, title="Description", description="Free text shown in the role listing."
    )
    selected_roles: List[str] = Field(
        default_factory=list,
        title="Selected Roles",
        description="Role paths such as 'payment.viewer'.",
    )

    @field_validator("role_name", mode="before")
    @classmethod
    def validate_role_name(cls, value: Any) -> str:
        if value is None:
            raise ValueError("Role name is required.")

        value = normalize_whitespace(str(value))

        if not value:
            raise ValueError("Role name cannot be empty.")

        if not is_valid_name(value):
            raise ValueError(
                "Role name must contain only letters, digits, spaces, underscores or hyphens."
            )

        if not validate_length_range(value, 3, 100):
            raise ValueError("Role name must be between 3 and 100 characters long.")

        return value


class UpdateAclRolePrivileges(BaseModel):
    selected_roles: List[str] = Field(
        ...,
        title="Selected Roles",
        description="The complete new selection of role paths.",
    )


class AclRoleDetails(BaseModel):
    role_id: str
    role_name: str
    description: Optional[str] = None
    privileges: List[str] = Field(
        default_factory=list, description="Stored role paths and privilege strings."
    )
    selected_roles: List[str] = Field(
        default_factory=list, description="Role paths recognised by the mapping table."
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdminUserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    acl_role_id: Optional[str] = None
    admin: bool = False

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, value: Any) -> str:
        value = normalize_whitespace(str(value or ""))
        if not value:
            raise ValueError("Username cannot be empty.")
        return value


class AdminUserDetails(BaseModel):
    user_id: str
    username: str
    email: str
    admin: bool
    acl_role_id: Optional[str] = None
    is_active: bool


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class AdminLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    message: str


class VerifyPasswordRequest(BaseModel):
    password: str


class VerifyPasswordResponse(BaseModel):
    verification_token: str
    expires_in: int
