"""
Reading model - sensor rows reported by sites
"""

from datetime import datetime
from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Reading(Base):
    """Raw sensor row. Values are stored as text and may carry unit suffixes."""

    __tablename__ = "mrtb"

    index: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    siteid: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    # Sensor data
    hepres: Mapped[str | None] = mapped_column(String(32), nullable=True)  # He pressure, psi
    heleve: Mapped[str | None] = mapped_column(String(32), nullable=True)  # He level, %
    actemp: Mapped[str | None] = mapped_column(String(32), nullable=True)  # ambient temp
    achumi: Mapped[str | None] = mapped_column(String(32), nullable=True)  # ambient humidity

    def __repr__(self) -> str:
        return f"<Reading site={self.siteid} date={self.date} hepres={self.hepres}>"
