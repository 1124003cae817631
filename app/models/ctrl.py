"""
CtrlRange model - per-site alert thresholds
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class CtrlRange(Base):
    """Threshold bounds for one site. Site "000" holds the fleet default."""

    __tablename__ = "ctrl"

    site: Mapped[str] = mapped_column(String(20), primary_key=True)

    # He pressure (psi) low/high
    mrplel: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mrpleh: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # He level (%) low/high
    mrlevl: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mrlevh: Mapped[str | None] = mapped_column(String(32), nullable=True)

    def __repr__(self) -> str:
        return f"<CtrlRange {self.site} psi=[{self.mrplel}, {self.mrpleh}] pct=[{self.mrlevl}, {self.mrlevh}]>"
