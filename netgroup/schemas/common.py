"""Shared Schema Pieces — camelCase base model, address, pagination.

Invariants:
    - Every API schema inherits ApiModel: camelCase on the wire, snake_case in Python
    - Requests accept either spelling (populate_by_name)
    - Responses built from ORM objects via from_attributes

Design Decisions:
    - Alias generator over per-field aliases: one rule for the whole surface
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# CPF format: 000.000.000-00
CPF_PATTERN = r"^\d{3}\.\d{3}\.\d{3}-\d{2}$"


class Address(ApiModel):
    """Postal address — every field optional; updates merge field by field."""
    street: str | None = Field(None, max_length=255)
    number: str | None = Field(None, max_length=20)
    complement: str | None = Field(None, max_length=100)
    neighborhood: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=2)
    zipcode: str | None = Field(None, max_length=10)


class Pagination(ApiModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
