from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ROLE_PATH_SEPARATOR = "."


class RoleDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    privileges: List[str] = Field(
        default_factory=list,
        title="Privileges",
        description="Low-level privilege strings granted by the role, in order.",
    )
    dependencies: List[str] = Field(
        default_factory=list,
        title="Dependencies",
        description="Other role paths ('key.role') this role requires.",
    )

    @field_validator("privileges", mode="after")
    @classmethod
    def validate_privileges(cls, value: List[str]) -> List[str]:
        for privilege in value:
            if not privilege or not privilege.strip():
                raise ValueError("Privilege strings cannot be empty.")
        # keep definition order, drop repeats
        return list(dict.fromkeys(value))

    @field_validator("dependencies", mode="after")
    @classmethod
    def validate_dependencies(cls, value: List[str]) -> List[str]:
        for dependency in value:
            key, _, role = dependency.partition(ROLE_PATH_SEPARATOR)
            if not key or not role:
                raise ValueError(
                    f"Dependency '{dependency}' must be a role path like 'key.role'."
                )
        return list(dict.fromkeys(value))


class PrivilegeMappingEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(
        ...,
        title="Category",
        description="Grouping in the admin panel, e.g. 'permissions' or 'additional_permissions'.",
    )
    parent: Optional[str] = Field(
        None, title="Parent", description="Key of the parent mapping entry."
    )
    key: str = Field(..., title="Key", description="Unique identifier of the entry.")
    roles: Dict[str, RoleDefinition] = Field(
        default_factory=dict,
        title="Roles",
        description="Role name to role definition.",
    )

    @field_validator("key", mode="before")
    @classmethod
    def validate_key(cls, value: str) -> str:
        if value is None or not str(value).strip():
            raise ValueError("Mapping key is required.")
        value = str(value).strip()
        if ROLE_PATH_SEPARATOR in value:
            raise ValueError(f"Mapping key '{value}' cannot contain '{ROLE_PATH_SEPARATOR}'.")
        return value

    @field_validator("roles", mode="after")
    @classmethod
    def validate_roles(cls, value: Dict[str, RoleDefinition]) -> Dict[str, RoleDefinition]:
        for role_name in value:
            if not role_name or ROLE_PATH_SEPARATOR in role_name:
                raise ValueError(f"Invalid role name '{role_name}'.")
        return value

    def role_paths(self) -> List[str]:
        return [f"{self.key}{ROLE_PATH_SEPARATOR}{role}" for role in self.roles]


class PrivilegeMappingResponse(BaseModel):
    entries: List[PrivilegeMappingEntry]


class RequiredPrivilegesResponse(BaseModel):
    required_privileges: List[str]


class EffectivePrivilegesResponse(BaseModel):
    user_id: str
    admin: bool
    selected_roles: List[str]
    privileges: List[str]
