"""Component Schemas - Pydantic models for list, item and list-item requests.

Invariants:
    - name: 1-64 chars, stripped, non-blank
    - description: at most 2048 chars, stripped, non-blank when present
    - quantity: int >= 0
    - Patch models: only fields explicitly set (model_fields_set) are applied

Design Decisions:
    - Typed partial updates over string-keyed maps: unknown or mistyped fields fail
      at the boundary instead of inside the service
    - Explicit None on a patch clears an optional field; omission leaves it untouched
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from loremlist.core.domain_types import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH


def _strip_name(v: str | None) -> str:
    if v is None:
        raise ValueError("name cannot be null")
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


def _strip_description(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("description cannot be empty or whitespace")
    return v


class _ComponentFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("name", check_fields=False)
    @classmethod
    def strip_name(cls, v: str | None) -> str:
        return _strip_name(v)

    @field_validator("description", check_fields=False)
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return _strip_description(v)

    def changes(self) -> dict:
        """Fields the caller explicitly set, in declaration order."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name in self.model_fields_set
        }


# --- Lists --------------------------------------------------------------------

class ListCreate(_ComponentFields):
    """List creation - validates name and description lengths."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    public: bool = False


class ListPatch(_ComponentFields):
    name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    public: bool | None = None

    @field_validator("public")
    @classmethod
    def public_not_null(cls, v: bool | None) -> bool | None:
        if v is None:
            raise ValueError("public cannot be null")
        return v


# --- Items --------------------------------------------------------------------

class ItemCreate(_ComponentFields):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)


class ItemPatch(_ComponentFields):
    name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)


# --- List items ---------------------------------------------------------------

class ListItemCreate(_ComponentFields):
    """A new item created directly inside a list, with its per-list fields."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    quantity: int = Field(0, ge=0)
    is_suppressed: bool = False


class ListItemPatch(_ComponentFields):
    quantity: int | None = Field(None, ge=0)
    is_suppressed: bool | None = None

    @field_validator("quantity", "is_suppressed")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("value cannot be null")
        return v
