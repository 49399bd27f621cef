"""Category ORM — a user-defined grouping of sites.

Invariants:
    - id is the opaque public id; seq orders categories by creation
    - The row with id "default" is seeded by the store and never deleted
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sentinelnav.db.base import Base


class CategoryRecord(Base):
    __tablename__ = "categories"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
