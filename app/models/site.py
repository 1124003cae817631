"""
Site model - a remote helium storage installation
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Site(Base):
    """Site directory entry. Owned by an external system, read-only here."""

    __tablename__ = "site"

    # Legacy numeric codes are often zero-padded ("007")
    site: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Site {self.site} ({self.name or 'unnamed'})>"
