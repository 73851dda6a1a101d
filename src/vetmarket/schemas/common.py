"""
Shared Pydantic building blocks for request and response schemas.

The public API speaks camelCase JSON while the models use snake_case, so every
schema derives from ``CamelModel``, which generates camelCase aliases and
still accepts field names on input.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


def to_camel(name: str) -> str:
    """
    Convert a snake_case field name to its camelCase wire name.

    Only the first letter of each later word is upper-cased, so
    ``b2b_price`` becomes ``b2bPrice``.
    """
    first, *rest = name.split("_")
    return first + "".join(word[:1].upper() + word[1:] for word in rest)


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )

    def to_api(self, **kwargs: Any) -> Dict[str, Any]:
        """Dump to JSON-compatible camelCase data."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


class ResponseModel(CamelModel):
    """Base for response schemas; enums are emitted as their values."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class PaginationInfo(CamelModel):
    """Pagination metadata returned by list endpoints."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Total number of matching items")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        """Compute the page count for a result set."""
        pages = (total + limit - 1) // limit if total else 0
        return cls(page=page, limit=limit, total=total, pages=pages)
