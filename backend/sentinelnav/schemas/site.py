"""Site Schemas — request/response contracts for the /sites endpoints.

Invariants:
    - Wire form is camelCase (iconUrl, lastChecked, categoryId)
    - SiteUpdate fields are all optional: an omitted or null field is left unchanged
    - Blank title/url are rejected by the store rules, not here, so the message
      is the same whichever way a site is written
"""

from pydantic import Field

from sentinelnav.core.domain_types import SiteStatus
from sentinelnav.core.entities import Site
from sentinelnav.schemas.base import CamelModel


class SiteCreate(CamelModel):
    title: str = Field(max_length=500)
    url: str = Field(max_length=2048)
    description: str | None = Field(None, max_length=2000)
    icon_url: str | None = Field(None, max_length=2048)
    category_id: str | None = None


class SiteUpdate(CamelModel):
    title: str | None = Field(None, max_length=500)
    url: str | None = Field(None, max_length=2048)
    description: str | None = Field(None, max_length=2000)
    icon_url: str | None = Field(None, max_length=2048)
    status: SiteStatus | None = None
    last_checked: int | None = Field(None, ge=0)
    latency: int | None = Field(None, ge=0)
    category_id: str | None = None


class SiteImportItem(CamelModel):
    """One entry of a bulk import; incomplete entries are skipped, not rejected."""
    title: str | None = None
    url: str | None = None
    description: str | None = None
    icon_url: str | None = None
    category_id: str | None = None
    category_name: str | None = None


class SiteResponse(CamelModel):
    id: str
    title: str
    url: str
    description: str | None = None
    icon_url: str | None = None
    status: SiteStatus
    last_checked: int
    latency: int | None = None
    category_id: str

    @classmethod
    def from_entity(cls, site: Site) -> "SiteResponse":
        return cls(
            id=site.id,
            title=site.title,
            url=site.url,
            description=site.description,
            icon_url=site.icon_url,
            status=site.status,
            last_checked=site.last_checked,
            latency=site.latency,
            category_id=site.category_id,
        )


class ImportResult(CamelModel):
    message: str
    count: int


class SuccessResponse(CamelModel):
    success: bool
