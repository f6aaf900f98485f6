from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from utils.validations import contains_xss, normalize_whitespace, validate_length_range


def _clean_text(field_name: str, value: Any) -> str:
    value = normalize_whitespace(str(value))
    if contains_xss(value):
        raise ValueError(f"{field_name} contains potentially malicious content.")
    return value


class PaymentMethodCreate(BaseModel):
    name: str = Field(..., title="Name", description="Name shown at checkout.")
    description: Optional[str] = Field(None, title="Description")
    position: int = Field(1, ge=0, title="Position")
    active: bool = Field(True, title="Active")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any) -> str:
        if value is None:
            raise ValueError("Payment method name is required.")
        value = _clean_text("Name", value)
        if not validate_length_range(value, 1, 255):
            raise ValueError("Payment method name must be between 1 and 255 characters.")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, value: Any) -> Optional[str]:
        if value is None:
            return value
        return _clean_text("Description", value)


class PaymentMethodUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    position: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any) -> Optional[str]:
        if value is None:
            return value
        value = _clean_text("Name", value)
        if not value:
            raise ValueError("Payment method name cannot be empty.")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, value: Any) -> Optional[str]:
        if value is None:
            return value
        return _clean_text("Description", value)


class PaymentMethodDetails(BaseModel):
    payment_method_id: str
    name: str
    description: Optional[str] = None
    position: int
    active: bool
