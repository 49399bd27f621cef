"""Config ORM — global key/value settings (currently only the theme)."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sentinelnav.db.base import Base


class ConfigEntry(Base):
    __tablename__ = "config"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
