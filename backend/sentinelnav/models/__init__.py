"""ORM Models — SQLAlchemy tables backing the relational store.

Invariants:
    - All models inherit from Base (db/base.py)
    - seq columns carry enumeration order; id columns carry the opaque public ids

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from sentinelnav.models.category import CategoryRecord  # noqa: F401
from sentinelnav.models.site import SiteRecord  # noqa: F401
from sentinelnav.models.app_config import ConfigEntry  # noqa: F401
