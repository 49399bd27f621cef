"""Category Schemas."""

from pydantic import Field

from sentinelnav.schemas.base import CamelModel


class CategoryBody(CamelModel):
    """Create and rename share one body: just the name."""
    name: str = Field(max_length=200)


class CategoryResponse(CamelModel):
    id: str
    name: str
