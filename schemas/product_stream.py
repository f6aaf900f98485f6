from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from utils.validations import normalize_whitespace

# Filters combining nested queries
COMPOSITE_FILTER_TYPES = {"multi", "not"}
LEAF_FILTER_TYPES = {"equals", "equalsAny", "contains", "range", "prefix", "suffix"}
FILTER_TYPES = COMPOSITE_FILTER_TYPES | LEAF_FILTER_TYPES


class ProductStreamFilterInput(BaseModel):
    type: str = Field(..., description="Filter type, e.g. 'multi' or 'equals'.")
    field: Optional[str] = Field(None, description="Product field the filter targets.")
    operator: Optional[str] = Field(None, description="'AND'/'OR' for multi filters.")
    value: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    position: Optional[int] = Field(None, ge=0)
    custom_fields: Optional[Dict[str, Any]] = None
    queries: List["ProductStreamFilterInput"] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            raise ValueError("Filter type is required.")
        value = str(value).strip()
        if value not in FILTER_TYPES:
            raise ValueError(f"Unsupported filter type '{value}'.")
        return value

    @model_validator(mode="after")
    def validate_shape(self) -> "ProductStreamFilterInput":
        if self.type in LEAF_FILTER_TYPES:
            if not self.field:
                raise ValueError(f"'{self.type}' filters need a field.")
            if self.queries:
                raise ValueError(f"'{self.type}' filters cannot have nested queries.")
        return self


class ProductStreamCreate(BaseModel):
    name: str
    description: Optional[str] = None
    filters: List[ProductStreamFilterInput] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any) -> str:
        value = normalize_whitespace(str(value or ""))
        if not value:
            raise ValueError("Product stream name is required.")
        return value


class ProductStreamFilterNode(BaseModel):
    id: str
    parent_id: Optional[str] = None
    type: str
    field: Optional[str] = None
    operator: Optional[str] = None
    value: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    position: int
    custom_fields: Optional[Dict[str, Any]] = None
    queries: List["ProductStreamFilterNode"] = Field(default_factory=list)


class ProductStreamDetails(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    invalid: bool = False
    filters: List[ProductStreamFilterNode] = Field(default_factory=list)
