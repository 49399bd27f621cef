"""Theme Schemas."""

from sentinelnav.core.domain_types import Theme
from sentinelnav.schemas.base import CamelModel


class ThemeBody(CamelModel):
    theme: Theme
