"""Site ORM — a monitored website row.

Invariants:
    - category_id always references an existing categories.id
    - last_checked is epoch milliseconds, 0 when never checked
    - seq orders sites by creation
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sentinelnav.db.base import Base


class SiteRecord(Base):
    __tablename__ = "websites"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="unknown",
    )
    last_checked: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    latency: Mapped[int | None] = mapped_column(Integer, nullable=True)
    category_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("categories.id"), nullable=False, index=True,
    )
